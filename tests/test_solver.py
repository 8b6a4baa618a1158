import pytest

from perfectplay.solver import (
    pick_best,
    DRAW_SCORE,
    LOSS_SCORE,
    WIN_SCORE,
    best_move,
    evaluate_board,
    minimax,
    score_moves,
)

EMPTY = (0,) * 9


def test_evaluate_board_perspective():
    x_row = [1, 1, 1, 2, 2, 0, 0, 0, 0]
    assert evaluate_board(x_row, 1) == WIN_SCORE
    assert evaluate_board(x_row, 2) == LOSS_SCORE
    assert evaluate_board(EMPTY, 1) == DRAW_SCORE


def test_minimax_terminal_positions():
    draw = [1, 2, 1, 1, 2, 2, 2, 1, 1]
    assert minimax(draw, 0, True, 1) == DRAW_SCORE
    o_win = [2, 2, 2, 1, 1, 0, 1, 0, 0]
    assert minimax(o_win, 0, True, 1) == LOSS_SCORE
    assert minimax(o_win, 0, False, 2) == WIN_SCORE


def test_takes_immediate_win():
    b = (1, 1, 0, 0, 0, 0, 0, 0, 0)
    assert best_move(b, 1) == 2


def test_blocks_when_block_is_not_lowest_index():
    # X threatens 8 on the bottom row; every other O move loses
    b = (0, 0, 0,
         0, 2, 0,
         1, 1, 0)
    scores = score_moves(b, 2)
    assert scores[8] == DRAW_SCORE
    assert all(s == LOSS_SCORE for i, s in enumerate(scores) if s is not None and i != 8)
    assert best_move(b, 2) == 8


def test_depth_does_not_affect_scoring():
    # O can win now at 5, or fork with 2 and win a move later.
    # Both score +10, so the lower index wins the tie.
    b = (1, 1, 0,
         2, 2, 0,
         0, 0, 0)
    scores = score_moves(b, 2)
    assert scores[2] == WIN_SCORE
    assert scores[5] == WIN_SCORE
    assert best_move(b, 2) == 2


def test_corner_reply_to_center_opening():
    b = (0, 0, 0, 0, 1, 0, 0, 0, 0)
    scores = score_moves(b, 2)
    for corner in (0, 2, 6, 8):
        assert scores[corner] == DRAW_SCORE
    for edge in (1, 3, 5, 7):
        assert scores[edge] == LOSS_SCORE
    assert best_move(b, 2) == 0


def test_full_board_returns_none():
    draw = (1, 2, 1, 1, 2, 2, 2, 1, 1)
    assert best_move(draw, 1) is None
    assert score_moves(draw, 1) == (None,) * 9


def test_already_won_board_does_not_crash():
    won = (1, 1, 1, 2, 2, 0, 0, 0, 0)
    assert best_move(won, 2) == 5


def test_input_is_left_untouched():
    b = [1, 0, 0, 0, 2, 0, 0, 0, 0]
    before = list(b)
    best_move(b, 1)
    score_moves(b, 1)
    assert b == before


def test_repeated_calls_agree():
    b = (0, 0, 0, 0, 1, 0, 0, 0, 2)
    assert best_move(b, 1) == best_move(b, 1)
    assert score_moves(b, 1) == score_moves(b, 1)


@pytest.mark.parametrize("bad", [(0,) * 8, (0,) * 10, ()])
def test_rejects_wrong_length(bad):
    with pytest.raises(ValueError):
        best_move(bad, 1)


def test_rejects_unknown_marker():
    with pytest.raises(ValueError):
        best_move(EMPTY, 0)


def test_pick_best_first_maximum():
    assert pick_best((None, 0, 10, None, 10, -10, None, None, None)) == 2
    assert pick_best((None,) * 9) is None
    scores = score_moves((0, 0, 0, 0, 1, 0, 0, 0, 0), 2)
    assert pick_best(scores) == best_move((0, 0, 0, 0, 1, 0, 0, 0, 0), 2)
