from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, List, Optional, Sequence

import yaml
from wordfreq import top_n_list

from typebench.core.config import TIME_MODE_WORD_POOL, Difficulty, Mode, SessionConfig
from typebench.core.errors import EmptyCorpus

logger = logging.getLogger(__name__)

WORD_LIST_SIZE = 15000

# Longest word (or quote, in characters) allowed per difficulty; None means no limit.
WORD_LENGTH_LIMITS = {Difficulty.EASY: 5, Difficulty.MEDIUM: 8, Difficulty.HARD: None}
QUOTE_LENGTH_LIMITS = {Difficulty.EASY: 100, Difficulty.MEDIUM: 200, Difficulty.HARD: None}

QUOTES_PATH = Path(__file__).resolve().parent.parent / "data" / "quotes.yaml"


@dataclass(frozen=True)
class Quote:
    text: str
    source: str


def load_words(size: int = WORD_LIST_SIZE) -> List[str]:
    """Most frequent English words, alphabetic only."""
    return [w for w in top_n_list("en", size) if w.isalpha()]


def load_quotes(path: Path = QUOTES_PATH) -> List[Quote]:
    if not path.exists():
        raise FileNotFoundError(f"Quotes file not found: {path}")
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if not isinstance(raw, list):
        raise ValueError(f"{path.name}: expected a YAML list of quotes")

    quotes: List[Quote] = []
    for i, item in enumerate(raw):
        if not isinstance(item, dict):
            raise ValueError(f"{path.name}: entry {i} is not a mapping")
        text = item.get("text")
        if not text or not isinstance(text, str) or not text.strip():
            raise ValueError(f"{path.name}: entry {i} has missing or invalid 'text'")
        source = item.get("source") or "Unknown"
        quotes.append(Quote(text=" ".join(text.split()), source=str(source).strip()))
    return quotes


def _filter_with_fallback(items: Sequence, limit: Optional[int], length: Callable, what: str, difficulty: Difficulty) -> list:
    if limit is None:
        return list(items)
    filtered = [item for item in items if length(item) <= limit]
    if not filtered and items:
        logger.warning("No %s found for difficulty %s, falling back to all available %s", what, difficulty.label, what)
        return list(items)
    return filtered


class CorpusProvider:
    """Supplies target text for a session.

    Word and quote pools are loaded lazily on first use unless passed in.
    """

    def __init__(
        self,
        words: Optional[Sequence[str]] = None,
        quotes: Optional[Sequence[Quote]] = None,
        rng: Optional[random.Random] = None,
    ) -> None:
        self._words = list(words) if words is not None else None
        self._quotes = list(quotes) if quotes is not None else None
        self._rng = rng or random.Random()

    @property
    def words(self) -> List[str]:
        if self._words is None:
            self._words = load_words()
            logger.info("Loaded %d words", len(self._words))
        return self._words

    @property
    def quotes(self) -> List[Quote]:
        if self._quotes is None:
            self._quotes = load_quotes()
            logger.info("Loaded %d quotes", len(self._quotes))
        return self._quotes

    def words_for(self, difficulty: Difficulty, count: int) -> List[str]:
        """Up to ``count`` distinct words allowed by ``difficulty``, in random order."""
        pool = _filter_with_fallback(self.words, WORD_LENGTH_LIMITS[difficulty], len, "words", difficulty)
        if not pool or count <= 0:
            raise EmptyCorpus(f"No words available for difficulty {difficulty.label}")
        return self._rng.sample(pool, min(count, len(pool)))

    def quote_for(self, difficulty: Difficulty) -> Quote:
        pool = _filter_with_fallback(
            self.quotes, QUOTE_LENGTH_LIMITS[difficulty], lambda q: len(q.text), "quotes", difficulty
        )
        if not pool:
            raise EmptyCorpus(f"No quotes available for difficulty {difficulty.label}")
        return self._rng.choice(pool)

    def target_for(self, config: SessionConfig) -> str:
        if config.mode is Mode.QUOTE:
            return self.quote_for(config.difficulty).text
        count = TIME_MODE_WORD_POOL if config.mode is Mode.TIME else config.duration_or_count
        return " ".join(self.words_for(config.difficulty, count))
