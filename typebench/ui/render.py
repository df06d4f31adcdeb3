"""Turn session snapshots into styled text for the terminal."""

from __future__ import annotations

from typing import List, Tuple

from typebench.core.config import Mode
from typebench.core.session import SessionSnapshot
from typebench.core.tracker import CharacterState

Fragments = List[Tuple[str, str]]

_STATE_CLASSES = {
    CharacterState.PENDING: "class:target.pending",
    CharacterState.CORRECT: "class:target.correct",
    CharacterState.INCORRECT: "class:target.incorrect",
    CharacterState.SKIPPED: "class:target.skipped",
}


def format_clock(seconds: float) -> str:
    """MM:SS, rounded down to the whole second."""
    whole = max(0, int(seconds))
    return f"{whole // 60:02d}:{whole % 60:02d}"


def header_text(snapshot: SessionSnapshot) -> str:
    label = "Time Left" if snapshot.mode is Mode.TIME else "Time Elapsed"
    return f"{label}: {format_clock(snapshot.clock)}"


def stats_text(snapshot: SessionSnapshot) -> str:
    if not snapshot.started:
        return "Gross WPM: - | Net WPM: - | Accuracy: -%"
    return (
        f"Gross WPM: {snapshot.gross_wpm:.0f} | "
        f"Net WPM: {snapshot.net_wpm:.0f} | "
        f"Accuracy: {snapshot.accuracy:.2f}%"
    )


def render_target(snapshot: SessionSnapshot) -> Fragments:
    """One fragment per target character, styled by its state; the cursor is highlighted."""
    fragments: Fragments = []
    show_cursor = not snapshot.finished
    for i, (ch, state) in enumerate(zip(snapshot.target, snapshot.states)):
        if show_cursor and i == snapshot.cursor:
            fragments.append(("class:target.cursor", "_" if ch == " " else ch))
        else:
            fragments.append((_STATE_CLASSES[state], ch))
    return fragments


def result_lines(snapshot: SessionSnapshot) -> List[Tuple[str, str]]:
    """(label, value) pairs for the results screen."""
    lines = [
        ("Gross WPM", f"{snapshot.gross_wpm:.0f}"),
        ("Net WPM", f"{snapshot.net_wpm:.0f}"),
        ("Accuracy", f"{snapshot.accuracy:.2f}%"),
        ("Time Taken", format_clock(snapshot.elapsed)),
    ]
    if snapshot.mode is not Mode.QUOTE:
        lines.append(("Words", str(snapshot.words_completed)))
    return lines


def render_results(snapshot: SessionSnapshot) -> Fragments:
    fragments: Fragments = [("class:results.title", "Game Over!\n\n")]
    width = max(len(label) for label, _ in result_lines(snapshot)) + 2
    for label, value in result_lines(snapshot):
        fragments.append(("", f"{label + ':':<{width}}"))
        fragments.append(("class:results.value", f"{value}\n"))
    fragments.append(("class:hint", "\nPress any key to exit."))
    return fragments
