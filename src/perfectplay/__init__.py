"""perfectplay package.

Tic-tac-toe rules, a perfect-play minimax opponent, a turn-based game
session, an agent arena, and a simple CLI.

Convenience imports are exposed for common workflows.
"""

from .board import Board, WinResult
from .session import EngineInvariantViolation, GameSession, GameState, Player, SessionCallbacks
from .solver import best_move, score_moves

__all__ = [
    "Board",
    "WinResult",
    "best_move",
    "score_moves",
    "GameSession",
    "GameState",
    "Player",
    "SessionCallbacks",
    "EngineInvariantViolation",
]
