"""
Move-selection policies for simulated play.

- minimax: the perfect-play solver (deterministic).
- random: uniform over legal moves.
- epsilon: random with probability epsilon, otherwise minimax.
"""
from typing import Optional, Sequence

import numpy as np

from .game_basics import legal_moves
from .solver import best_move

AGENT_KINDS = ['minimax', 'random', 'epsilon']


class MinimaxAgent:
    name = 'minimax'
    is_perfect = True

    def choose(self, board: Sequence[int], marker: int) -> Optional[int]:
        return best_move(board, marker)


class RandomAgent:
    name = 'random'
    is_perfect = False

    def __init__(self, seed: Optional[int] = None) -> None:
        self.rng = np.random.default_rng(seed)

    def choose(self, board: Sequence[int], marker: int) -> Optional[int]:
        moves = legal_moves(board)
        if not moves:
            return None
        return int(self.rng.choice(moves))


class EpsilonAgent:
    name = 'epsilon'
    is_perfect = False

    def __init__(self, epsilon: float = 0.1, seed: Optional[int] = None) -> None:
        if not 0.0 <= epsilon <= 1.0:
            raise ValueError(f"Epsilon out of range [0,1]: {epsilon}")
        self.epsilon = epsilon
        self.rng = np.random.default_rng(seed)

    def choose(self, board: Sequence[int], marker: int) -> Optional[int]:
        moves = legal_moves(board)
        if not moves:
            return None
        if self.rng.random() < self.epsilon:
            return int(self.rng.choice(moves))
        return best_move(board, marker)


def make_agent(kind: str, seed: Optional[int] = None, epsilon: float = 0.1):
    if kind == 'minimax':
        return MinimaxAgent()
    elif kind == 'random':
        return RandomAgent(seed)
    elif kind == 'epsilon':
        return EpsilonAgent(epsilon, seed)
    else:
        raise ValueError(f"Unknown agent: {kind}")
