"""
Board: owner of the live 9-cell grid.

Placement never raises on bad input; `place` answers False and leaves the
grid untouched. Snapshots are tuples, so nothing handed out can write back.
"""
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .game_basics import (
    BOARD_SIZE,
    EMPTY,
    MARKERS,
    find_winning_line,
    is_full,
    legal_moves,
    serialize_board,
)


@dataclass(frozen=True)
class WinResult:
    winner: int
    line: Tuple[int, int, int]


class Board:
    def __init__(self) -> None:
        self._cells: List[int] = [EMPTY] * BOARD_SIZE

    def __repr__(self) -> str:
        return f"Board({serialize_board(self._cells)!r})"

    def reset(self) -> Tuple[int, ...]:
        self._cells = [EMPTY] * BOARD_SIZE
        return self.snapshot()

    def snapshot(self) -> Tuple[int, ...]:
        return tuple(self._cells)

    def place(self, index: int, marker: int) -> bool:
        if isinstance(marker, bool) or marker not in MARKERS:
            return False
        if isinstance(index, bool) or not isinstance(index, int):
            return False
        if not 0 <= index < BOARD_SIZE:
            return False
        if self._cells[index] != EMPTY:
            return False
        self._cells[index] = marker
        return True

    def is_full(self) -> bool:
        return is_full(self._cells)

    def check_terminal(self) -> Optional[WinResult]:
        """Return the first winning line in rows, columns, diagonals order, if any."""
        line = find_winning_line(self._cells)
        if line is None:
            return None
        return WinResult(winner=self._cells[line[0]], line=line)

    def available_moves(self) -> List[int]:
        return legal_moves(self._cells)
