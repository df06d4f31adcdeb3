from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, Optional, Sequence, Tuple, Union

from typebench.core.config import Mode, SessionConfig
from typebench.core.errors import InputExhausted, InvalidTransition
from typebench.core.metrics import calculate_metrics
from typebench.core.timer import Timer
from typebench.core.tracker import CharacterState, InputTracker

logger = logging.getLogger(__name__)


class Phase(Enum):
    NOT_STARTED = "not_started"
    RUNNING = "running"
    FINISHED = "finished"


_ALLOWED_TRANSITIONS = {
    Phase.NOT_STARTED: {Phase.RUNNING, Phase.FINISHED},
    Phase.RUNNING: {Phase.FINISHED},
    Phase.FINISHED: set(),
}


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything a renderer needs to paint one frame, as plain data."""

    phase: Phase
    mode: Mode
    target: str
    states: Tuple[CharacterState, ...]
    cursor: int
    elapsed: float
    remaining: Optional[float]
    gross_wpm: float
    net_wpm: float
    cpm: float
    accuracy: float
    correct_chars: int
    incorrect_chars: int
    words_completed: int

    @property
    def clock(self) -> float:
        """Seconds to display: remaining in time mode, elapsed otherwise."""
        return self.remaining if self.remaining is not None else self.elapsed

    @property
    def started(self) -> bool:
        return self.phase is not Phase.NOT_STARTED

    @property
    def finished(self) -> bool:
        return self.phase is Phase.FINISHED


class TypingSession:
    """Runs one typing test from first keystroke to final result.

    The session owns the timer, the input tracker and the metrics. It moves
    through ``NOT_STARTED -> RUNNING -> FINISHED`` and never leaves
    ``FINISHED``. The completion policy depends on the mode:

      * **Time** – the time limit runs out (or the text runs out first).
      * **Words** – the configured number of words has been typed.
      * **Quote** – the last character of the quote has been judged.

    Everything here is driven by discrete calls from one thread: keystrokes
    through :meth:`apply`, clock polls through :meth:`tick`.
    """

    def __init__(
        self,
        config: SessionConfig,
        target: Union[str, Sequence[str]],
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        text = target if isinstance(target, str) else " ".join(target)
        if config.mode is Mode.WORDS:
            text = " ".join(text.split()[: config.duration_or_count])
        self._config = config
        self._tracker = InputTracker(text, lock_words=config.mode is not Mode.QUOTE)
        self._timer = Timer(clock)
        self._phase = Phase.NOT_STARTED
        self._finish_reason: Optional[str] = None
        if config.mode is Mode.WORDS:
            self._word_goal = min(config.duration_or_count, self._tracker.total_words)
        else:
            self._word_goal = self._tracker.total_words

    @property
    def config(self) -> SessionConfig:
        return self._config

    @property
    def phase(self) -> Phase:
        return self._phase

    @property
    def timer(self) -> Timer:
        return self._timer

    @property
    def tracker(self) -> InputTracker:
        return self._tracker

    @property
    def target(self) -> str:
        return self._tracker.target

    @property
    def finish_reason(self) -> Optional[str]:
        """Why the session finished, or None while it is still live."""
        return self._finish_reason

    @property
    def words_completed(self) -> int:
        return self._tracker.words_completed

    def start(self) -> None:
        """Start the clock without a keystroke (e.g. after a "press any key" prompt)."""
        if self._phase is not Phase.NOT_STARTED:
            raise InvalidTransition(f"Cannot start a session that is {self._phase.value}")
        self._transition(Phase.RUNNING)
        self._timer.start()

    def apply(self, key: str) -> bool:
        """Feed one keystroke (a character or BACKSPACE).

        Returns True when the keystroke was accepted. Keystrokes after the
        session finished, after the text ran out, or that the tracker ignores
        return False.
        """
        if self._phase is Phase.FINISHED:
            logger.debug("Ignoring %r: session already finished", key)
            return False
        if self._phase is Phase.RUNNING and self._time_expired():
            self._finish("time expired")
            return False

        try:
            entry = self._tracker.apply(key, self._timer.elapsed())
        except InputExhausted:
            logger.debug("Ignoring %r: target text exhausted", key)
            return False
        if entry is None:
            return False

        if self._phase is Phase.NOT_STARTED:
            self.start()
        self._check_completion()
        return True

    def tick(self) -> Phase:
        """Poll the completion policy; call this at the timer's tick cadence."""
        if self._phase is Phase.RUNNING:
            self._check_completion()
        return self._phase

    def abort(self) -> None:
        """End the session now, whatever the mode's policy says. Always succeeds."""
        if self._phase is Phase.FINISHED:
            return
        logger.info("Session aborted after %.2fs", self._timer.elapsed())
        self._finish("aborted")

    def snapshot(self) -> SessionSnapshot:
        """Freeze the current state for painting; time-mode elapsed is capped at the duration."""
        elapsed = self._timer.elapsed()
        remaining = None
        duration = self._config.duration
        if duration is not None:
            elapsed = min(elapsed, float(duration))
            remaining = max(0.0, duration - elapsed)

        metrics = calculate_metrics(self._tracker.log, elapsed)
        return SessionSnapshot(
            phase=self._phase,
            mode=self._config.mode,
            target=self._tracker.target,
            states=self._tracker.states,
            cursor=self._tracker.cursor,
            elapsed=elapsed,
            remaining=remaining,
            gross_wpm=metrics.gross_wpm,
            net_wpm=metrics.net_wpm,
            cpm=metrics.cpm,
            accuracy=metrics.accuracy,
            correct_chars=metrics.correct,
            incorrect_chars=metrics.incorrect,
            words_completed=self._tracker.words_completed,
        )

    def _time_expired(self) -> bool:
        duration = self._config.duration
        return duration is not None and self._timer.remaining(duration) == 0

    def _check_completion(self) -> None:
        mode = self._config.mode
        if mode is Mode.TIME:
            if self._time_expired():
                self._finish("time expired")
            elif self._tracker.exhausted:
                self._finish("text exhausted")
        elif mode is Mode.WORDS:
            if self._tracker.words_completed >= self._word_goal:
                self._finish("word count reached")
        elif self._tracker.exhausted:
            self._finish("quote completed")

    def _finish(self, reason: str) -> None:
        self._timer.stop()
        self._tracker.lock()
        self._finish_reason = reason
        self._transition(Phase.FINISHED)

    def _transition(self, phase: Phase) -> None:
        if phase not in _ALLOWED_TRANSITIONS[self._phase]:
            raise InvalidTransition(f"{self._phase.value} -> {phase.value}")
        logger.info("Session %s -> %s (%s)", self._phase.value, phase.value, self._finish_reason or self._config.describe())
        self._phase = phase
