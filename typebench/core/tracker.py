"""Per-keystroke correctness tracking against a target text."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from enum import Enum
from typing import List, Optional, Tuple

from typebench.core.errors import EmptyCorpus, InputExhausted

BACKSPACE = "\b"
SPACE = " "


class CharacterState(Enum):
    PENDING = "pending"
    CORRECT = "correct"
    INCORRECT = "incorrect"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class KeystrokeEntry:
    """One accepted keystroke and the state it left behind.

    ``position`` is the target index that was judged (or erased, for a
    backspace); it is None for a space that skipped the final word.
    """

    key: str
    timestamp: float
    judgment: CharacterState
    position: Optional[int]

    @property
    def is_backspace(self) -> bool:
        return self.key == BACKSPACE


class InputTracker:
    """Judges keystrokes one at a time against ``target``.

    With ``lock_words`` set (time and words mode) a space typed inside a word
    skips the rest of that word, and every position before the start of the
    word being typed is locked against backspace once its separating space
    has been typed. Without it (quote mode) spaces are ordinary characters and
    the whole text stays correctable.
    """

    def __init__(self, target: str, lock_words: bool = True) -> None:
        if not target:
            raise EmptyCorpus("Target text is empty")
        self._target = target
        self._lock_words = lock_words
        self._states: List[CharacterState] = [CharacterState.PENDING] * len(target)
        self._cursor = 0
        self._lock_floor = 0
        self._log: List[KeystrokeEntry] = []
        self._separators = [i for i, ch in enumerate(target) if ch == SPACE]

    @property
    def target(self) -> str:
        return self._target

    @property
    def cursor(self) -> int:
        """Index of the next character to be judged."""
        return self._cursor

    @property
    def states(self) -> Tuple[CharacterState, ...]:
        return tuple(self._states)

    @property
    def log(self) -> Tuple[KeystrokeEntry, ...]:
        return tuple(self._log)

    @property
    def locked_until(self) -> int:
        """Positions below this index can no longer be erased."""
        return self._lock_floor

    @property
    def exhausted(self) -> bool:
        return self._cursor >= len(self._target)

    @property
    def total_words(self) -> int:
        return len(self._separators) + 1

    @property
    def words_completed(self) -> int:
        """Word boundaries crossed, plus the final word once fully judged."""
        crossed = bisect.bisect_left(self._separators, self._cursor)
        return crossed + (1 if self.exhausted else 0)

    def is_locked(self, position: int) -> bool:
        """Whether backspace can no longer reach ``position``."""
        return position < self._lock_floor

    def apply(self, key: str, timestamp: float = 0.0) -> Optional[KeystrokeEntry]:
        """Judge one keystroke.

        Returns the logged entry, or None when the keystroke had no effect (a
        backspace against a locked position, or a space at the start of a
        word). Raises InputExhausted once the target is fully consumed.
        """
        if key == BACKSPACE:
            return self.backspace(timestamp)
        if len(key) != 1:
            raise ValueError(f"Expected a single character, got {key!r}")
        if self.exhausted:
            raise InputExhausted(f"Target text of {len(self._target)} characters already consumed")

        if key == SPACE and self._lock_words and self._target[self._cursor] != SPACE:
            return self._skip_word(timestamp)

        position = self._cursor
        expected = self._target[position]
        judgment = CharacterState.CORRECT if key == expected else CharacterState.INCORRECT
        self._states[position] = judgment
        self._cursor += 1
        if self._lock_words and key == SPACE and expected == SPACE:
            self._lock_floor = self._cursor
        return self._record(key, timestamp, judgment, position)

    def backspace(self, timestamp: float = 0.0) -> Optional[KeystrokeEntry]:
        """Erase the previous judgment unless it is locked. No-op at the start."""
        if self._cursor == 0 or self._cursor <= self._lock_floor:
            return None
        self._cursor -= 1
        self._states[self._cursor] = CharacterState.PENDING
        return self._record(BACKSPACE, timestamp, CharacterState.PENDING, self._cursor)

    def lock(self) -> None:
        """Lock everything judged so far."""
        self._lock_floor = self._cursor

    def _skip_word(self, timestamp: float) -> Optional[KeystrokeEntry]:
        word_start = self._target.rfind(SPACE, 0, self._cursor) + 1
        if self._cursor == word_start:
            return None

        word_end = self._target.find(SPACE, self._cursor)
        if word_end == -1:
            word_end = len(self._target)
        for i in range(self._cursor, word_end):
            self._states[i] = CharacterState.SKIPPED

        if word_end < len(self._target):
            # The space lands on the separator itself.
            self._states[word_end] = CharacterState.CORRECT
            self._cursor = word_end + 1
            self._lock_floor = self._cursor
            return self._record(SPACE, timestamp, CharacterState.CORRECT, word_end)

        self._cursor = word_end
        self._lock_floor = self._cursor
        return self._record(SPACE, timestamp, CharacterState.SKIPPED, None)

    def _record(
        self,
        key: str,
        timestamp: float,
        judgment: CharacterState,
        position: Optional[int],
    ) -> KeystrokeEntry:
        entry = KeystrokeEntry(key=key, timestamp=timestamp, judgment=judgment, position=position)
        self._log.append(entry)
        return entry
