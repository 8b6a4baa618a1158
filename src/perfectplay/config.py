"""Environment-first settings for the terminal front end and the arena.

Every value has a default; CLI flags take precedence over the environment.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path

DEFAULT_BOT_DELAY = 0.5
DEFAULT_NAME_X = "Player X"
DEFAULT_NAME_O = "Player O"


def bot_delay() -> float:
    """Seconds the terminal front end pauses before the automated move.

    Reads PERFECTPLAY_BOT_DELAY; unparsable or negative values fall back to
    the default.
    """
    raw = os.getenv("PERFECTPLAY_BOT_DELAY")
    if raw is None or not raw.strip():
        return DEFAULT_BOT_DELAY
    try:
        value = float(raw)
    except ValueError:
        logging.warning("Ignoring PERFECTPLAY_BOT_DELAY=%r (not a number)", raw)
        return DEFAULT_BOT_DELAY
    if value < 0:
        logging.warning("Ignoring PERFECTPLAY_BOT_DELAY=%r (negative)", raw)
        return DEFAULT_BOT_DELAY
    return value


def player_names() -> tuple[str, str]:
    x = os.getenv("PERFECTPLAY_NAME_X") or DEFAULT_NAME_X
    o = os.getenv("PERFECTPLAY_NAME_O") or DEFAULT_NAME_O
    return x, o


def out_dir() -> Path:
    p = os.getenv("PERFECTPLAY_OUT_DIR")
    return Path(p) if p else Path.cwd() / "runs"
