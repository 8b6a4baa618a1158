from typing import List

import pytest

from perfectplay.board import WinResult
from perfectplay.session import (
    EngineInvariantViolation,
    GameSession,
    GameState,
    Player,
    SessionCallbacks,
)

EMPTY = (0,) * 9
DRAW_SEQUENCE = [0, 1, 2, 4, 3, 5, 7, 6, 8]


class Recorder:
    def __init__(self) -> None:
        self.boards: List[tuple] = []
        self.statuses: List[tuple] = []
        self.terminals: List[tuple] = []

    def callbacks(self) -> SessionCallbacks:
        return SessionCallbacks(
            on_board_changed=self.boards.append,
            on_status_changed=lambda state, who: self.statuses.append((state, who)),
            on_terminal=lambda state, win: self.terminals.append((state, win)),
        )


def humans() -> List[Player]:
    return [Player("Ann", 1), Player("Bob", 2)]


def human_vs_bot() -> List[Player]:
    return [Player("Ann", 1), Player("Bot", 2, is_automated=True)]


def test_initial_state():
    s = GameSession(humans())
    assert s.state is GameState.PLAYING
    assert s.active_index == 0
    assert s.board == EMPTY
    assert s.win_result is None


def test_player_marker_validation():
    with pytest.raises(ValueError):
        Player("Nobody", 0)
    with pytest.raises(ValueError):
        GameSession([Player("A", 2), Player("B", 1)])
    with pytest.raises(ValueError):
        GameSession([Player("A", 1)])


def test_turns_alternate():
    s = GameSession(humans())
    assert s.request_move(0)
    assert s.active_index == 1
    assert s.request_move(4)
    assert s.active_index == 0
    assert s.board == (1, 0, 0, 0, 2, 0, 0, 0, 0)
    assert s.move_history == [(0, 0), (1, 4)]


@pytest.mark.parametrize("idx", [-1, 9])
def test_out_of_range_move_is_a_no_op(idx: int):
    rec = Recorder()
    s = GameSession(humans(), callbacks=rec.callbacks())
    assert s.request_move(idx) is False
    assert s.board == EMPTY
    assert s.active_index == 0
    assert rec.boards == [] and rec.statuses == []


def test_occupied_cell_is_a_no_op():
    s = GameSession(humans())
    s.request_move(4)
    before = s.board
    assert s.request_move(4) is False
    assert s.board == before
    assert s.active_index == 1


def test_row_win():
    rec = Recorder()
    s = GameSession(humans(), callbacks=rec.callbacks())
    for idx in (0, 3, 1, 4, 2):
        assert s.request_move(idx)
    assert s.state is GameState.WON
    assert s.win_result == WinResult(winner=1, line=(0, 1, 2))
    assert s.winner == s.players[0]
    assert rec.terminals == [(GameState.WON, WinResult(winner=1, line=(0, 1, 2)))]
    assert rec.statuses[-1] == (GameState.WON, s.players[0])


def test_no_moves_after_win():
    s = GameSession(humans())
    for idx in (0, 3, 1, 4, 2):
        s.request_move(idx)
    before = s.board
    assert s.request_move(8) is False
    assert s.board == before
    assert s.state is GameState.WON


def test_full_board_is_a_draw():
    rec = Recorder()
    s = GameSession(humans(), callbacks=rec.callbacks())
    for idx in DRAW_SEQUENCE:
        assert s.request_move(idx)
    assert s.board == (1, 2, 1, 1, 2, 2, 2, 1, 1)
    assert s.state is GameState.DRAW
    assert s.win_result is None
    assert rec.terminals == [(GameState.DRAW, None)]
    assert rec.statuses[-1] == (GameState.DRAW, None)
    assert s.request_move(0) is False


def test_win_on_ninth_move_is_not_a_draw():
    # the last X fills the board and completes the 0-4-8 diagonal
    rec = Recorder()
    s = GameSession(humans(), callbacks=rec.callbacks())
    for idx in [0, 1, 2, 3, 4, 5, 7, 6, 8]:
        assert s.request_move(idx)
    assert 0 not in s.board
    assert s.state is GameState.WON
    assert s.win_result == WinResult(winner=1, line=(0, 4, 8))
    assert rec.terminals == [(GameState.WON, WinResult(winner=1, line=(0, 4, 8)))]


def test_callbacks_see_complete_transition():
    seen = []
    s = None

    def on_board(board):
        seen.append((board, s.state, s.active_index))

    s = GameSession(humans(), callbacks=SessionCallbacks(on_board_changed=on_board))
    s.request_move(4)
    assert seen == [((0, 0, 0, 0, 1, 0, 0, 0, 0), GameState.PLAYING, 1)]


def test_bot_replies_to_center_with_corner():
    s = GameSession(human_vs_bot())
    s.start()
    assert s.request_move(4)
    assert s.board == (2, 0, 0, 0, 1, 0, 0, 0, 0)
    assert s.active_index == 0


def test_manual_advance_waits_for_automated_move():
    s = GameSession(human_vs_bot(), auto_advance=False)
    s.start()
    s.request_move(4)
    assert s.active_player.is_automated
    # human input is refused while the bot is to move
    assert s.request_move(0) is False
    assert s.automated_move() == 0
    assert s.active_index == 0


def test_automated_move_refused_on_human_turn():
    s = GameSession(human_vs_bot(), auto_advance=False)
    assert s.automated_move() is None
    assert s.board == EMPTY


def test_automated_move_refused_when_terminal():
    s = GameSession(human_vs_bot(), auto_advance=False)
    # X plays the lowest free cell each turn and loses on the 2-4-6 diagonal
    while s.state is GameState.PLAYING:
        if s.active_player.is_automated:
            s.automated_move()
        else:
            s.request_move(s.board.index(0))
    assert s.state is GameState.WON
    assert s.win_result == WinResult(winner=2, line=(2, 4, 6))
    assert s.active_player.is_automated
    before = s.board
    assert s.automated_move() is None
    assert s.board == before


def test_automated_first_player_opens():
    s = GameSession([Player("Bot", 1, is_automated=True), Player("Ann", 2)])
    s.start()
    assert s.board == (1, 0, 0, 0, 0, 0, 0, 0, 0)
    assert s.active_index == 1


def test_automated_move_is_not_reentrant():
    nested = []
    armed = []
    s = None

    def on_board(board):
        if armed and not nested:
            nested.append(s.automated_move())

    s = GameSession(
        [Player("Ann", 1), Player("Bot", 2, is_automated=True)],
        callbacks=SessionCallbacks(on_board_changed=on_board),
        auto_advance=False,
    )
    s.request_move(0)
    armed.append(True)
    moved = s.automated_move()
    assert moved == 4
    assert nested == [None]
    assert s.board == (1, 0, 0, 0, 2, 0, 0, 0, 0)


def test_engine_desync_is_loud(monkeypatch):
    import perfectplay.session as S

    s = GameSession(human_vs_bot(), auto_advance=False)
    s.request_move(4)
    monkeypatch.setattr(S, "best_move", lambda board, marker: 4)
    with pytest.raises(EngineInvariantViolation):
        s.automated_move()
    monkeypatch.setattr(S, "best_move", lambda board, marker: None)
    with pytest.raises(EngineInvariantViolation):
        s.automated_move()
    assert s.board == (0, 0, 0, 0, 1, 0, 0, 0, 0)
    # the guard is released after a failure
    monkeypatch.setattr(S, "best_move", lambda board, marker: 0)
    assert s.automated_move() == 0


@pytest.mark.parametrize("moves", [[], [0, 3, 1, 4, 2], DRAW_SEQUENCE, [4, 0]])
def test_reset_from_any_state(moves):
    rec = Recorder()
    s = GameSession(humans(), callbacks=rec.callbacks())
    for idx in moves:
        s.request_move(idx)
    s.reset()
    assert s.board == EMPTY
    assert s.state is GameState.PLAYING
    assert s.active_index == 0
    assert s.win_result is None
    assert s.move_history == []
    assert rec.boards[-1] == EMPTY
    assert rec.statuses[-1] == (GameState.PLAYING, s.players[0])


def test_perfect_self_play_is_a_draw():
    s = GameSession(
        [Player("Bot X", 1, is_automated=True), Player("Bot O", 2, is_automated=True)],
        auto_advance=False,
    )
    s.start()
    while s.state is GameState.PLAYING:
        assert s.automated_move() is not None
    assert s.state is GameState.DRAW
    assert len(s.move_history) == 9
