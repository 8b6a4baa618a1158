from __future__ import annotations

import argparse
import logging
import sys
import time
from pathlib import Path
from typing import Optional

from . import config
from .agents import AGENT_KINDS
from .arena import ArenaArgs, run_arena
from .game_basics import (
    MARKER_O,
    MARKER_X,
    get_winner,
    is_full,
    marker_symbol,
    parse_board,
    render_board,
    side_to_move,
)
from .board import WinResult
from .session import GameSession, GameState, Player, SessionCallbacks
from .solver import pick_best, score_moves
from .tracking import maybe_mlflow_run


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="perfectplay", description="Tic-tac-toe with a perfect-play opponent")
    sub = p.add_subparsers(dest="cmd")
    p.add_argument("--verbose", "-v", action="store_true", help="Enable verbose logging")
    p.add_argument("--version", action="store_true", help="Print version and exit")
    p.add_argument(
        "--info",
        action="store_true",
        help="Print environment and dependency info and exit",
    )
    p.add_argument("--seed", type=int, default=None, help="Global seed for reproducibility")

    # interactive game
    name_x, name_o = config.player_names()
    p_play = sub.add_parser("play", help="Play in the terminal (cells are numbered 1-9)")
    p_play.add_argument(
        "--mode",
        choices=["pvp", "pve"],
        default="pve",
        help="pvp: two humans; pve: human X against the computer as O (default)",
    )
    p_play.add_argument("--name-x", default=name_x, help=f"Name for X (default: {name_x})")
    p_play.add_argument("--name-o", default=name_o, help=f"Name for O (default: {name_o})")
    p_play.add_argument(
        "--delay",
        type=float,
        default=None,
        help="Seconds to wait before the computer moves (default: PERFECTPLAY_BOT_DELAY or 0.5)",
    )

    # best move for a position
    p_best = sub.add_parser(
        "best-move",
        help="Best move and per-move minimax scores (board: 9 chars of 0/1/2, ./x/o also accepted)",
    )
    p_best.add_argument("--board", required=True, help="Board string, e.g., 100020000")
    p_best.add_argument(
        "--marker",
        choices=["x", "o"],
        default=None,
        help="Side to search for (default: side to move by piece counts)",
    )

    # agent matches
    p_arena = sub.add_parser("arena", help="Play agent-vs-agent matches")
    p_arena.add_argument("--x", dest="agent_x", choices=AGENT_KINDS, default="minimax")
    p_arena.add_argument("--o", dest="agent_o", choices=AGENT_KINDS, default="minimax")
    p_arena.add_argument("--games", type=int, default=1, help="Number of games (default: 1)")
    p_arena.add_argument("--epsilon", type=float, default=0.1, help="Exploration rate for epsilon agents")
    p_arena.add_argument("--out", type=Path, default=None, help="Write match records to this directory")
    p_arena.add_argument(
        "--format",
        choices=["csv", "parquet", "both"],
        default="csv",
        help="Export format: csv (default), parquet, both",
    )
    p_arena.add_argument(
        "--tracking",
        choices=["none", "mlflow"],
        default="none",
        help="Experiment tracking backend",
    )
    p_arena.add_argument(
        "--log-dir",
        type=Path,
        default=None,
        help="Directory for tracking logs (default: PERFECTPLAY_OUT_DIR or ./runs)",
    )

    return p


def _print_info() -> None:
    import importlib.util
    import platform

    print(f"python={sys.version.split()[0]} platform={platform.platform()}")
    for pkg in ["numpy", "pandas", "pyarrow", "mlflow"]:
        spec = importlib.util.find_spec(pkg)
        if spec is None:
            print(f"{pkg}=<not installed>")
        else:
            mod = __import__(pkg)
            ver = getattr(mod, "__version__", "?")
            print(f"{pkg}={ver}")


def _status_line(state: GameState, who: Optional[Player]) -> str:
    if state is GameState.PLAYING:
        return f"{who.name}'s turn ({who.symbol})"
    if state is GameState.WON:
        return f"{who.name} wins!"
    return "Game ended in a draw!"


def _show_winning_line(state: GameState, win: Optional[WinResult]) -> None:
    if win is not None:
        print("Winning line: " + " ".join(str(i + 1) for i in win.line))


def _play(ns: argparse.Namespace) -> int:
    delay = ns.delay if ns.delay is not None else config.bot_delay()
    if delay < 0:
        logging.error("Delay must be >= 0: %s", delay)
        return 2
    callbacks = SessionCallbacks(
        on_board_changed=lambda board: print("\n" + render_board(board) + "\n"),
        on_status_changed=lambda state, who: print(_status_line(state, who)),
        on_terminal=_show_winning_line,
    )
    session = GameSession(
        [
            Player(ns.name_x, MARKER_X),
            Player(ns.name_o, MARKER_O, is_automated=ns.mode == "pve"),
        ],
        callbacks=callbacks,
        auto_advance=False,
    )
    session.start()
    while True:
        if session.state is GameState.PLAYING and session.active_player.is_automated:
            time.sleep(delay)
            session.automated_move()
            continue
        prompt = "cell 1-9, r=restart, q=quit> " if session.state is GameState.PLAYING else "r=restart, q=quit> "
        try:
            raw = input(prompt).strip().lower()
        except EOFError:
            return 0
        if raw in ("q", "quit"):
            return 0
        if raw in ("r", "restart"):
            session.start()
            continue
        if not (raw.isascii() and raw.isdigit()) or not session.request_move(int(raw) - 1):
            print("Move not accepted.")


def _best_move(ns: argparse.Namespace) -> int:
    try:
        board = parse_board(ns.board)
    except ValueError as e:
        logging.error("Invalid board: %s", e)
        return 2
    if get_winner(board) or is_full(board):
        logging.error("Board is already finished.")
        return 2
    if ns.marker is None:
        marker = side_to_move(board)
    else:
        marker = MARKER_X if ns.marker == "x" else MARKER_O
    scores = score_moves(board, marker)
    move = pick_best(scores)
    logging.info(
        "to_move=%s best=%s scores=%s",
        marker_symbol(marker),
        move,
        list(scores),
    )
    return 0


def _arena(ns: argparse.Namespace, argv: list[str] | None) -> int:
    if not 0.0 <= ns.epsilon <= 1.0:
        logging.error("Epsilon out of range [0,1]: %s", ns.epsilon)
        return 2
    if ns.games < 1:
        logging.error("--games must be >= 1: %s", ns.games)
        return 2
    log_dir = ns.log_dir if ns.log_dir is not None else config.out_dir()
    with maybe_mlflow_run(ns.tracking == "mlflow", run_name="arena", log_dir=log_dir):
        summary = run_arena(ArenaArgs(
            agent_x=ns.agent_x,
            agent_o=ns.agent_o,
            games=ns.games,
            epsilon=ns.epsilon,
            seed=ns.seed,
            out=ns.out,
            format=ns.format,
            cli_argv=list(argv) if argv is not None else None,
        ))
    logging.info(
        "games=%d x_wins=%d o_wins=%d draws=%d",
        summary["games"],
        summary["x_wins"],
        summary["o_wins"],
        summary["draws"],
    )
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    ns = parser.parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if getattr(ns, "verbose", False) else logging.INFO,
                        format="[%(levelname)s] %(message)s")

    # Early exits
    if getattr(ns, "version", False):
        try:
            from importlib.metadata import version as _ver

            print(_ver("perfectplay"))
        except Exception:
            print("unknown")
        return 0
    if getattr(ns, "info", False):
        _print_info()
        return 0

    if ns.cmd == "play":
        return _play(ns)
    if ns.cmd == "best-move":
        return _best_move(ns)
    if ns.cmd == "arena":
        return _arena(ns, argv)

    parser.print_help()
    return 0


if __name__ == "__main__":  # pragma: no cover
    raise SystemExit(main())
