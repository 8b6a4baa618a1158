"""
Exact perfect-play move selection (plain minimax, no pruning, no memoization).

Scoring is from the perspective of a fixed maximizing marker:
- +10 if the maximizing marker owns a winning line,
- -10 if the opponent does,
- 0 for a full board without a winner.
Depth is carried through the recursion but never enters the score, so a fast
win and a slow win are worth the same.

Tie-break policy: among equally scored moves the lowest cell index wins.

The search runs on a private list copy of the snapshot it is given and
restores every cell it touches, so callers' data is never modified.
"""
import logging
from typing import List, Optional, Sequence, Tuple

from .game_basics import BOARD_SIZE, EMPTY, MARKERS, WIN_PATTERNS, opponent

WIN_SCORE = 10
LOSS_SCORE = -WIN_SCORE
DRAW_SCORE = 0


def _check_input(board: Sequence[int], maximizing_marker: int) -> None:
    if len(board) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(board)}")
    if maximizing_marker not in MARKERS:
        raise ValueError(f"Unknown marker: {maximizing_marker!r}")


def evaluate_board(board: Sequence[int], maximizing_marker: int) -> int:
    for a, b, c in WIN_PATTERNS:
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return WIN_SCORE if v == maximizing_marker else LOSS_SCORE
    return DRAW_SCORE


def minimax(board: List[int], depth: int, is_maximizing: bool, maximizing_marker: int) -> int:
    score = evaluate_board(board, maximizing_marker)
    if score != DRAW_SCORE:
        return score
    if EMPTY not in board:
        return DRAW_SCORE

    if is_maximizing:
        marker = maximizing_marker
        best = LOSS_SCORE - 1
    else:
        marker = opponent(maximizing_marker)
        best = WIN_SCORE + 1
    for i in range(BOARD_SIZE):
        if board[i] != EMPTY:
            continue
        board[i] = marker
        child = minimax(board, depth + 1, not is_maximizing, maximizing_marker)
        board[i] = EMPTY
        if is_maximizing:
            best = max(best, child)
        else:
            best = min(best, child)
    return best


def score_moves(snapshot: Sequence[int], maximizing_marker: int) -> Tuple[Optional[int], ...]:
    """Minimax score of every legal move for `maximizing_marker`; None for occupied cells."""
    _check_input(snapshot, maximizing_marker)
    work = list(snapshot)
    scores: List[Optional[int]] = [None] * BOARD_SIZE
    for i in range(BOARD_SIZE):
        if work[i] != EMPTY:
            continue
        work[i] = maximizing_marker
        scores[i] = minimax(work, 0, False, maximizing_marker)
        work[i] = EMPTY
    return tuple(scores)


def pick_best(scores: Sequence[Optional[int]]) -> Optional[int]:
    """First index holding the highest score; None when every entry is None."""
    best_idx: Optional[int] = None
    best_score: Optional[int] = None
    for i, s in enumerate(scores):
        if s is None:
            continue
        if best_score is None or s > best_score:
            best_idx = i
            best_score = s
    return best_idx


def best_move(snapshot: Sequence[int], maximizing_marker: int) -> Optional[int]:
    """Return the optimal cell for `maximizing_marker`, or None on a full board."""
    scores = score_moves(snapshot, maximizing_marker)
    move = pick_best(scores)
    logging.debug("best_move marker=%d move=%s score=%s", maximizing_marker, move,
                  None if move is None else scores[move])
    return move
