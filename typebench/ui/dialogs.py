"""Interactive dialogs that gather a SessionConfig before a session starts."""

from __future__ import annotations

from typing import Optional, Sequence, Tuple, TypeVar

from prompt_toolkit.shortcuts import radiolist_dialog

from typebench.core.config import (
    DEFAULT_TIME,
    DEFAULT_WORD_COUNT,
    TIME_OPTIONS,
    WORD_COUNT_OPTIONS,
    Difficulty,
    Mode,
    SessionConfig,
)
from typebench.ui.colors import build_style

T = TypeVar("T")

TITLE = "typebench"


def _choose(text: str, values: Sequence[Tuple[T, str]], default: T) -> Optional[T]:
    return radiolist_dialog(
        title=TITLE,
        text=text,
        values=list(values),
        default=default,
        style=build_style(),
    ).run()


def prompt_config() -> Optional[SessionConfig]:
    """Ask for mode, time limit or word count, and difficulty. None if cancelled."""
    mode = _choose("Pick a game type:", [(m, m.label) for m in Mode], Mode.TIME)
    if mode is None:
        return None

    value = 0
    if mode is Mode.TIME:
        value = _choose("Pick a time limit:", [(s, f"{s}s") for s in TIME_OPTIONS], DEFAULT_TIME)
    elif mode is Mode.WORDS:
        value = _choose("Pick a number of words:", [(n, str(n)) for n in WORD_COUNT_OPTIONS], DEFAULT_WORD_COUNT)
    if value is None:
        return None

    difficulty = _choose("Pick a difficulty:", [(d, d.label) for d in Difficulty], Difficulty.MEDIUM)
    if difficulty is None:
        return None
    return SessionConfig(mode, value, difficulty)
