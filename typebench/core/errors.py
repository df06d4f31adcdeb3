"""Error types raised by the typing session engine."""


class TypingError(Exception):
    """Base class for all typebench errors."""


class ConfigError(TypingError, ValueError):
    """A session configuration is invalid (e.g. zero duration or word count)."""


class EmptyCorpus(TypingError, LookupError):
    """The corpus has no eligible text for the requested mode and difficulty."""


class InputExhausted(TypingError):
    """A keystroke arrived after the whole target text was consumed."""


class AlreadyStarted(TypingError, RuntimeError):
    """The timer was started a second time."""


class InvalidTransition(TypingError, RuntimeError):
    """A session was asked to move to a phase it cannot reach."""
