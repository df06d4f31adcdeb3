from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from typebench.core.tracker import CharacterState, KeystrokeEntry

# Characters per word in the standard WPM convention.
CHARS_PER_WORD = 5.0

# Below this many seconds speeds are reported as 0.
MIN_ELAPSED_SECONDS = 1.0


@dataclass(frozen=True)
class Metrics:
    """Speed and accuracy derived from a keystroke log.

    * **Gross WPM** – (correct + incorrect keystrokes) / 5 / elapsed minutes.
    * **Net WPM** – (correct / 5 − incorrect) / elapsed minutes, floored at 0.
    * **CPM** – correct keystrokes per minute.
    * **Accuracy** – correct / (correct + incorrect) × 100, or 100 when
      nothing has been judged yet.

    Keystrokes later erased with backspace still count: the log is the
    record of what was typed, not of what is left on screen.
    """

    gross_wpm: float
    net_wpm: float
    cpm: float
    accuracy: float
    correct: int
    incorrect: int


def calculate_wpm(correct: int, incorrect: int, elapsed_seconds: float) -> tuple[float, float, float]:
    """Return (gross WPM, net WPM, CPM) for the given counts and elapsed time."""
    if elapsed_seconds < MIN_ELAPSED_SECONDS:
        return 0.0, 0.0, 0.0
    minutes = elapsed_seconds / 60.0
    gross = (correct + incorrect) / CHARS_PER_WORD / minutes
    net = max(0.0, (correct / CHARS_PER_WORD - incorrect) / minutes)
    cpm = correct / minutes
    return gross, net, cpm


def calculate_accuracy(correct: int, incorrect: int) -> float:
    judged = correct + incorrect
    if judged == 0:
        return 100.0
    return correct / judged * 100.0


def calculate_metrics(log: Iterable[KeystrokeEntry], elapsed_seconds: float) -> Metrics:
    """Recompute every metric from scratch from ``log``."""
    correct = 0
    incorrect = 0
    for entry in log:
        if entry.judgment is CharacterState.CORRECT:
            correct += 1
        elif entry.judgment is CharacterState.INCORRECT:
            incorrect += 1
    gross, net, cpm = calculate_wpm(correct, incorrect, elapsed_seconds)
    return Metrics(
        gross_wpm=gross,
        net_wpm=net,
        cpm=cpm,
        accuracy=calculate_accuracy(correct, incorrect),
        correct=correct,
        incorrect=incorrect,
    )
