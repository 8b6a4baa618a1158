"""
Game session: turn order and Playing/Won/Draw transitions over one Board.

A session owns its Board. Human moves arrive through `request_move`; the
automated side moves through `automated_move`, which asks the solver for the
best cell on a snapshot and applies it. Presentation code observes the game
only through the callbacks handed in at construction.

Refused requests (wrong state, wrong turn, occupied or out-of-range cell)
change nothing and fire no callbacks.
"""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, Sequence, Tuple

from .board import Board, WinResult
from .game_basics import MARKER_O, MARKER_X, MARKERS, marker_symbol, serialize_board
from .solver import best_move


class GameState(Enum):
    PLAYING = "playing"
    WON = "won"
    DRAW = "draw"


class EngineInvariantViolation(AssertionError):
    """The solver proposed a move the board refused; solver and board disagree."""


@dataclass(frozen=True)
class Player:
    name: str
    marker: int
    is_automated: bool = False

    def __post_init__(self) -> None:
        if self.marker not in MARKERS:
            raise ValueError(f"Player marker must be one of {MARKERS}, got {self.marker!r}")

    @property
    def symbol(self) -> str:
        return marker_symbol(self.marker)


@dataclass
class SessionCallbacks:
    on_board_changed: Optional[Callable[[Tuple[int, ...]], None]] = None
    on_status_changed: Optional[Callable[[GameState, Optional[Player]], None]] = None
    on_terminal: Optional[Callable[[GameState, Optional[WinResult]], None]] = None


class GameSession:
    def __init__(
        self,
        players: Sequence[Player],
        callbacks: Optional[SessionCallbacks] = None,
        auto_advance: bool = True,
    ) -> None:
        players = tuple(players)
        if len(players) != 2:
            raise ValueError(f"A session needs exactly two players, got {len(players)}")
        if (players[0].marker, players[1].marker) != (MARKER_X, MARKER_O):
            raise ValueError("Player 0 must hold X and player 1 must hold O")
        self._players: Tuple[Player, Player] = players  # type: ignore[assignment]
        self._callbacks = callbacks or SessionCallbacks()
        self._auto_advance = auto_advance
        self._board = Board()
        self._active = 0
        self._state = GameState.PLAYING
        self._win: Optional[WinResult] = None
        self._history: List[Tuple[int, int]] = []
        self._searching = False

    # read model

    @property
    def players(self) -> Tuple[Player, Player]:
        return self._players

    @property
    def board(self) -> Tuple[int, ...]:
        return self._board.snapshot()

    @property
    def state(self) -> GameState:
        return self._state

    @property
    def active_index(self) -> int:
        return self._active

    @property
    def active_player(self) -> Player:
        return self._players[self._active]

    @property
    def win_result(self) -> Optional[WinResult]:
        return self._win

    @property
    def winner(self) -> Optional[Player]:
        if self._win is None:
            return None
        return self._players[0] if self._win.winner == MARKER_X else self._players[1]

    @property
    def move_history(self) -> List[Tuple[int, int]]:
        return list(self._history)

    # transitions

    def start(self) -> None:
        """Reset, then let an automated first player open the game."""
        self.reset()
        if self.active_player.is_automated and self._auto_advance:
            self.automated_move()

    def reset(self) -> None:
        self._board.reset()
        self._active = 0
        self._state = GameState.PLAYING
        self._win = None
        self._history = []
        logging.debug("session reset")
        self._emit_board()
        self._emit_status()

    def request_move(self, index: int) -> bool:
        if self._state is not GameState.PLAYING:
            logging.debug("move %s refused: game is %s", index, self._state.value)
            return False
        if self.active_player.is_automated:
            logging.debug("move %s refused: %s is automated", index, self.active_player.name)
            return False
        if not self._board.place(index, self.active_player.marker):
            logging.debug("move %s refused by board %s", index, serialize_board(self.board))
            return False
        self._after_placement(index)
        if (
            self._state is GameState.PLAYING
            and self.active_player.is_automated
            and self._auto_advance
        ):
            self.automated_move()
        return True

    def automated_move(self) -> Optional[int]:
        if self._searching:
            logging.warning("automated_move refused: search already running")
            return None
        if self._state is not GameState.PLAYING or not self.active_player.is_automated:
            logging.debug("automated_move refused: state=%s active=%s",
                          self._state.value, self.active_player.name)
            return None
        self._searching = True
        try:
            player = self.active_player
            snapshot = self._board.snapshot()
            move = best_move(snapshot, player.marker)
            if move is None or not self._board.place(move, player.marker):
                raise EngineInvariantViolation(
                    f"engine chose {move!r} for {player.symbol} on board {serialize_board(snapshot)}"
                )
            self._after_placement(move)
        finally:
            self._searching = False
        return move

    def _after_placement(self, index: int) -> None:
        # callbacks fire only after the whole transition is applied
        self._history.append((self._active, index))
        logging.debug("%s placed %s at %d", self.active_player.name, self.active_player.symbol, index)
        win = self._board.check_terminal()
        if win is not None:
            self._state = GameState.WON
            self._win = win
        elif self._board.is_full():
            self._state = GameState.DRAW
        else:
            self._active = 1 - self._active
        self._emit_board()
        self._emit_status()
        if self._state is not GameState.PLAYING:
            logging.debug("game over: %s line=%s", self._state.value, win.line if win else None)
            if self._callbacks.on_terminal is not None:
                self._callbacks.on_terminal(self._state, self._win)

    def _emit_board(self) -> None:
        if self._callbacks.on_board_changed is not None:
            self._callbacks.on_board_changed(self._board.snapshot())

    def _emit_status(self) -> None:
        if self._callbacks.on_status_changed is None:
            return
        if self._state is GameState.PLAYING:
            who: Optional[Player] = self.active_player
        elif self._state is GameState.WON:
            who = self.winner
        else:
            who = None
        self._callbacks.on_status_changed(self._state, who)
