"""
Arena: agent-vs-agent matches played through GameSession.

Minimax agents take their turns through the session's automated path; every
other agent picks a cell that is submitted like a human move. Results can be
exported as CSV (always available) or Parquet (pandas + pyarrow).
"""
from __future__ import annotations

import csv
import importlib.util
import json
import logging
from collections import Counter
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional

from .agents import make_agent
from .game_basics import EMPTY, serialize_board
from .session import EngineInvariantViolation, GameSession, GameState, Player
from .tracking import log_artifact, log_metrics, log_params

EXPORT_FORMATS = {"csv", "parquet", "both"}
_FIELDNAMES = [
    'game', 'agent_x', 'agent_o', 'moves', 'n_moves',
    'outcome', 'winner', 'winning_line', 'final_board',
]


@dataclass
class MatchRecord:
    game: int
    agent_x: str
    agent_o: str
    moves: List[int]
    state: GameState
    winner: int = EMPTY
    line: Optional[tuple] = None
    final_board: str = ""

    def as_row(self) -> Dict[str, Any]:
        return {
            'game': self.game,
            'agent_x': self.agent_x,
            'agent_o': self.agent_o,
            'moves': ' '.join(map(str, self.moves)),
            'n_moves': len(self.moves),
            'outcome': self.state.value,
            'winner': self.winner,
            'winning_line': ' '.join(map(str, self.line)) if self.line else '',
            'final_board': self.final_board,
        }


@dataclass
class ArenaArgs:
    agent_x: str = 'minimax'
    agent_o: str = 'minimax'
    games: int = 1
    epsilon: float = 0.1
    seed: Optional[int] = None
    out: Optional[Path] = None
    format: str = "csv"  # one of: "csv", "parquet", "both"
    cli_argv: List[str] | None = None


def play_match(agent_x, agent_o, game: int = 0) -> MatchRecord:
    agents = (agent_x, agent_o)
    session = GameSession(
        [
            Player(f"{agent_x.name} (X)", 1, is_automated=agent_x.is_perfect),
            Player(f"{agent_o.name} (O)", 2, is_automated=agent_o.is_perfect),
        ],
        auto_advance=False,
    )
    session.start()
    while session.state is GameState.PLAYING:
        if session.active_player.is_automated:
            session.automated_move()
            continue
        agent = agents[session.active_index]
        move = agent.choose(session.board, session.active_player.marker)
        if move is None or not session.request_move(move):
            raise EngineInvariantViolation(
                f"{agent.name} chose {move!r} on board {serialize_board(session.board)}"
            )
    win = session.win_result
    return MatchRecord(
        game=game,
        agent_x=agent_x.name,
        agent_o=agent_o.name,
        moves=[cell for _, cell in session.move_history],
        state=session.state,
        winner=win.winner if win else EMPTY,
        line=win.line if win else None,
        final_board=serialize_board(session.board),
    )


def run_matches(args: ArenaArgs) -> List[MatchRecord]:
    # offset seeds so X and O draw from different streams
    seed_o = None if args.seed is None else args.seed + 1
    agent_x = make_agent(args.agent_x, seed=args.seed, epsilon=args.epsilon)
    agent_o = make_agent(args.agent_o, seed=seed_o, epsilon=args.epsilon)
    records = []
    for g in range(args.games):
        rec = play_match(agent_x, agent_o, game=g)
        logging.debug("game %d: %s moves=%s", g, rec.state.value, rec.moves)
        records.append(rec)
    return records


def summarize(records: List[MatchRecord]) -> Dict[str, int]:
    counts: Counter = Counter()
    for r in records:
        if r.state is GameState.DRAW:
            counts['draws'] += 1
        elif r.winner == 1:
            counts['x_wins'] += 1
        else:
            counts['o_wins'] += 1
    return {
        'games': len(records),
        'x_wins': counts['x_wins'],
        'o_wins': counts['o_wins'],
        'draws': counts['draws'],
    }


def export_records(records: List[MatchRecord], out: Path, fmt: str = "csv") -> List[Path]:
    fmt = (fmt or "csv").lower()
    if fmt not in EXPORT_FORMATS:
        raise ValueError(f"Unknown export format: {fmt}")
    out.mkdir(parents=True, exist_ok=True)
    rows = [r.as_row() for r in records]
    written: List[Path] = []

    if fmt in {"csv", "both"}:
        path = out / 'matches.csv'
        with path.open('w', newline='') as f:
            w = csv.DictWriter(f, fieldnames=_FIELDNAMES)
            w.writeheader()
            for r in rows:
                w.writerow(r)
        written.append(path)
        logging.info("Wrote CSV: %s (%d rows)", path, len(rows))

    if fmt in {"parquet", "both"}:
        have_pandas = importlib.util.find_spec('pandas') is not None
        have_pyarrow = importlib.util.find_spec('pyarrow') is not None
        if have_pandas and have_pyarrow:
            import pandas as pd  # type: ignore

            path = out / 'matches.parquet'
            pd.DataFrame(rows, columns=_FIELDNAMES).to_parquet(path)
            written.append(path)
            logging.info("Wrote Parquet: %s", path)
        else:
            msg = (
                "Parquet dependencies not available (install pandas and pyarrow). "
                "Use pip install .[parquet] to enable parquet support."
            )
            if fmt == "parquet":
                raise RuntimeError(msg)
            logging.warning("%s Proceeding with CSV only.", msg)
    return written


def run_arena(args: ArenaArgs) -> Dict[str, int]:
    if args.games < 1:
        raise ValueError(f"games must be >= 1, got {args.games}")
    log_params({
        'agent_x': args.agent_x,
        'agent_o': args.agent_o,
        'games': args.games,
        'epsilon': args.epsilon,
        'seed': args.seed,
    })
    logging.info("Playing %d game(s): %s (X) vs %s (O)", args.games, args.agent_x, args.agent_o)
    records = run_matches(args)
    summary = summarize(records)
    log_metrics({k: float(v) for k, v in summary.items()})
    if args.out is not None:
        for path in export_records(records, args.out, args.format):
            log_artifact(path)
        manifest = {
            'created_at': datetime.now(timezone.utc).isoformat(),
            'args': {
                'agent_x': args.agent_x,
                'agent_o': args.agent_o,
                'games': args.games,
                'epsilon': args.epsilon,
                'seed': args.seed,
                'format': args.format,
            },
            'cli_argv': args.cli_argv,
            'summary': summary,
        }
        manifest_path = args.out / 'manifest.json'
        manifest_path.write_text(json.dumps(manifest, indent=2, sort_keys=True))
        log_artifact(manifest_path)
    return summary
