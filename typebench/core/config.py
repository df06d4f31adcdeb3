from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

from typebench.core.errors import ConfigError

TIME_OPTIONS = (15, 30, 60, 120)
WORD_COUNT_OPTIONS = (10, 20, 30, 40, 50)
DEFAULT_TIME = 30
DEFAULT_WORD_COUNT = 20

# Size of the word pool drawn for a time-limited session.
TIME_MODE_WORD_POOL = 300


class Mode(Enum):
    TIME = "time"
    WORDS = "words"
    QUOTE = "quote"

    @classmethod
    def parse(cls, name: str) -> "Mode":
        """Look up a mode by name, ignoring case and surrounding whitespace."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ConfigError(f"Unknown mode: {name!r}") from None

    @property
    def label(self) -> str:
        return self.value.capitalize()


class Difficulty(Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"

    @classmethod
    def parse(cls, name: str) -> "Difficulty":
        """Look up a difficulty by name, ignoring case and surrounding whitespace."""
        try:
            return cls(name.strip().lower())
        except ValueError:
            raise ConfigError(f"Unknown difficulty: {name!r}") from None

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class SessionConfig:
    """Choices for one session, fixed for its whole lifetime.

    ``duration_or_count`` is the time limit in seconds for :attr:`Mode.TIME`,
    the number of words for :attr:`Mode.WORDS`, and is ignored for
    :attr:`Mode.QUOTE`.
    """

    mode: Mode = Mode.TIME
    duration_or_count: int = DEFAULT_TIME
    difficulty: Difficulty = Difficulty.MEDIUM

    def __post_init__(self) -> None:
        if not isinstance(self.mode, Mode):
            raise ConfigError(f"mode must be a Mode, got {self.mode!r}")
        if not isinstance(self.difficulty, Difficulty):
            raise ConfigError(f"difficulty must be a Difficulty, got {self.difficulty!r}")
        if self.mode is Mode.QUOTE:
            return
        value = self.duration_or_count
        if isinstance(value, bool) or not isinstance(value, int):
            raise ConfigError(f"{self._value_name} must be an integer, got {value!r}")
        if value <= 0:
            raise ConfigError(f"{self._value_name} must be positive, got {value}")

    @property
    def _value_name(self) -> str:
        return "duration" if self.mode is Mode.TIME else "word count"

    @classmethod
    def time(cls, seconds: int = DEFAULT_TIME, difficulty: Difficulty = Difficulty.MEDIUM) -> "SessionConfig":
        """A countdown session of ``seconds``."""
        return cls(Mode.TIME, seconds, difficulty)

    @classmethod
    def words(cls, count: int = DEFAULT_WORD_COUNT, difficulty: Difficulty = Difficulty.MEDIUM) -> "SessionConfig":
        """A session that ends after ``count`` words."""
        return cls(Mode.WORDS, count, difficulty)

    @classmethod
    def quote(cls, difficulty: Difficulty = Difficulty.MEDIUM) -> "SessionConfig":
        """A session that ends when one quote is typed."""
        return cls(Mode.QUOTE, 0, difficulty)

    @property
    def duration(self) -> int | None:
        """Time limit in seconds, or None outside time mode."""
        return self.duration_or_count if self.mode is Mode.TIME else None

    @property
    def word_count(self) -> int | None:
        """Number of words to type, or None outside words mode."""
        return self.duration_or_count if self.mode is Mode.WORDS else None

    def describe(self) -> str:
        if self.mode is Mode.TIME:
            detail = f"{self.duration_or_count}s"
        elif self.mode is Mode.WORDS:
            detail = f"{self.duration_or_count} words"
        else:
            detail = "quote"
        return f"{self.mode.label} ({detail}, {self.difficulty.label})"
