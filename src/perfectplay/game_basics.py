"""
Game basics: cell values, win patterns, rules and board strings.

- A board is 9 cells in row-major order: 0=empty, 1=X, 2=O. X always starts.
- WIN_PATTERNS is the single source of truth for winning lines. The board
  and the solver both read it, so gameplay and search can never disagree.
"""
from typing import List, Optional, Sequence, Tuple

EMPTY = 0
MARKER_X = 1
MARKER_O = 2
MARKERS = (MARKER_X, MARKER_O)
BOARD_SIZE = 9

WIN_PATTERNS: Tuple[Tuple[int, int, int], ...] = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),  # rows
    (0, 3, 6), (1, 4, 7), (2, 5, 8),  # columns
    (0, 4, 8), (2, 4, 6),             # diagonals
)

_CELL_CHARS = {
    '0': EMPTY, '.': EMPTY, '-': EMPTY, '_': EMPTY,
    '1': MARKER_X, 'x': MARKER_X,
    '2': MARKER_O, 'o': MARKER_O,
}
_MARKER_SYMBOLS = {EMPTY: ' ', MARKER_X: 'X', MARKER_O: 'O'}


def opponent(marker: int) -> int:
    if marker not in MARKERS:
        raise ValueError(f"Unknown marker: {marker!r}")
    return MARKER_O if marker == MARKER_X else MARKER_X


def marker_symbol(marker: int) -> str:
    return _MARKER_SYMBOLS[marker]


def find_winning_line(board: Sequence[int]) -> Optional[Tuple[int, int, int]]:
    """Return the first pattern (rows, columns, diagonals) holding three equal markers."""
    for pattern in WIN_PATTERNS:
        a, b, c = pattern
        v = board[a]
        if v != EMPTY and v == board[b] and v == board[c]:
            return pattern
    return None


def get_winner(board: Sequence[int]) -> int:
    line = find_winning_line(board)
    return board[line[0]] if line is not None else EMPTY


def is_full(board: Sequence[int]) -> bool:
    return EMPTY not in board


def legal_moves(board: Sequence[int]) -> List[int]:
    return [i for i, v in enumerate(board) if v == EMPTY]


def side_to_move(board: Sequence[int]) -> int:
    x = sum(1 for v in board if v == MARKER_X)
    o = sum(1 for v in board if v == MARKER_O)
    return MARKER_X if x == o else MARKER_O


def serialize_board(board: Sequence[int]) -> str:
    return ''.join(str(cell) for cell in board)


def parse_board(raw: str) -> Tuple[int, ...]:
    """Parse a 9-character board string.

    Accepts digits 0/1/2 as well as '.', '-', '_' for empty cells and x/o in
    any case for the markers.
    """
    text = raw.strip()
    if len(text) != BOARD_SIZE:
        raise ValueError(f"Board must have {BOARD_SIZE} cells, got {len(text)}: {raw!r}")
    cells = []
    for ch in text.lower():
        if ch not in _CELL_CHARS:
            raise ValueError(f"Invalid cell character {ch!r} in board {raw!r}")
        cells.append(_CELL_CHARS[ch])
    return tuple(cells)


def render_board(board: Sequence[int]) -> str:
    """Three-line text grid; empty cells show their 1-based number."""
    rows = []
    for r in range(3):
        cells = []
        for c in range(3):
            i = r * 3 + c
            cells.append(marker_symbol(board[i]) if board[i] != EMPTY else str(i + 1))
        rows.append(' ' + ' | '.join(cells))
    return '\n---+---+---\n'.join(rows)
