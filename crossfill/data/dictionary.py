"""Dictionary loading and pattern-constrained candidate retrieval."""

from __future__ import annotations

import random
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Tuple, Union

from ..core.constants import DEFAULT_ENCODING, MAX_WORD_IDS, UNKNOWN_LETTER
from ..core.exceptions import DictionaryCapacityError, DictionaryLoadError
from ..core.models import DictionaryEntry
from ..utils.distance import edit_distance as _edit_distance
from ..utils.logger import get_logger
from .config import resolve_dictionary_path
from .index import MatchView, PatternIndex
from .normalization import canonicalize, decode_legacy


LOGGER = get_logger(__name__)

RawText = Union[bytes, str]


@dataclass
class DictionaryConfig:
    """Configuration for dictionary loading and lookup."""

    path: Path | str | None = None
    encoding: str = DEFAULT_ENCODING
    unknown: str = UNKNOWN_LETTER
    max_words: int = MAX_WORD_IDS
    shuffle_on_load: bool = True
    strict: bool = False
    rng: Optional[random.Random] = None

    @classmethod
    def from_ini(cls, config_path: Path | str | None = None, **overrides) -> "DictionaryConfig":
        """Build a config whose path comes from an INI file (see :mod:`.config`)."""

        return cls(path=resolve_dictionary_path(config_path), **overrides)


def iter_records(data: bytes) -> Iterator[Tuple[bytes, bytes]]:
    """Yield ``(word, explanation)`` pairs from tab-separated dictionary bytes."""

    for line in data.split(b"\n"):
        line = line.rstrip(b"\r")
        if not line.strip():
            continue
        word, _, explanation = line.partition(b"\t")
        yield word, explanation


class WordDictionary:
    """Loads a ``word<TAB>explanation`` file and answers pattern queries.

    Canonical keys are unique: the first entry seen for a key wins and later
    entries with the same key are dropped without consuming a word id.
    """

    def __init__(self, config: Optional[DictionaryConfig] = None) -> None:
        self.config = config or DictionaryConfig()
        self._rng = self.config.rng or random.Random()
        self._index = PatternIndex(
            encoding=self.config.encoding,
            unknown=self.config.unknown,
            max_words=self.config.max_words,
        )
        self._entries: Dict[str, DictionaryEntry] = {}
        self._lock = threading.RLock()
        self.load_error: Optional[str] = None
        if self.config.path is not None:
            self.load(self.config.path)

    def __len__(self) -> int:
        return len(self._index)

    def __contains__(self, word: object) -> bool:
        return isinstance(word, (str, bytes)) and self.contains(word)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    def load(self, path: Path | str | None = None) -> int:
        """Replace the current contents with the file at ``path``.

        Returns the number of words loaded. An unreadable file leaves the
        dictionary empty and records the reason in :attr:`load_error`; in
        strict mode it raises :class:`DictionaryLoadError` instead.
        """

        if path is None:
            path = self.config.path
        if path is None:
            raise DictionaryLoadError("No dictionary path configured")
        source = Path(path)

        with self._lock:
            self.reset()
            try:
                data = source.read_bytes()
            except OSError as exc:
                self.load_error = f"Could not open dictionary file {source}: {exc}"
                LOGGER.error("Could not open dictionary file %s: %s", source, exc)
                if self.config.strict:
                    raise DictionaryLoadError(self.load_error) from exc
                return 0

            self.extend(iter_records(data), shuffle=False)
            LOGGER.info("Loaded %s words from %s", len(self), source)
            if self.config.shuffle_on_load:
                self.shuffle()
            return len(self)

    def extend(self, records: Iterable[Tuple[RawText, RawText]], *, shuffle: bool = False) -> int:
        """Add ``(word, explanation)`` records and return how many were new.

        ``bytes`` fields are raw legacy text and are remapped; ``str`` fields
        are taken as already decoded.
        """

        added = 0
        with self._lock:
            try:
                for raw_word, raw_explanation in records:
                    if self._add(raw_word, raw_explanation):
                        added += 1
            except DictionaryCapacityError:
                LOGGER.error("Dictionary capacity of %s words exceeded", self.config.max_words)
                self.reset()
                raise
            if shuffle:
                self.shuffle()
        return added

    def _add(self, raw_word: RawText, raw_explanation: RawText) -> bool:
        key = canonicalize(raw_word, self.config.encoding)
        if not key or key in self._entries:
            return False
        self._index.add(key)
        self._entries[key] = DictionaryEntry(
            key=key,
            surface=self._decode(raw_word),
            explanation=self._decode(raw_explanation).strip(),
        )
        return True

    def _decode(self, raw: RawText) -> str:
        if isinstance(raw, str):
            return raw
        return decode_legacy(raw, self.config.encoding)

    def reset(self) -> None:
        """Drop every word, index bucket and cached query result."""

        with self._lock:
            self._index.clear()
            self._entries.clear()
            self.load_error = None

    def shuffle(self) -> None:
        """Randomly reorder every bucket and cached result; membership is unchanged."""

        self._index.shuffle(self._rng)

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    def find_matches(self, pattern: str) -> MatchView:
        """Return the words agreeing with ``pattern``'s known letters.

        Unknown positions use :attr:`DictionaryConfig.unknown` (``?`` by
        default). Results are cached per pattern until :meth:`reset`.
        """

        return self._index.find(pattern)

    def sanitize(self, text: RawText) -> str:
        return canonicalize(text, self.config.encoding)

    def contains(self, word: RawText) -> bool:
        return self.sanitize(word) in self._entries

    def entry(self, key: str) -> Optional[DictionaryEntry]:
        return self._entries.get(key)

    def get_surface_form(self, key: str) -> str:
        entry = self._entries.get(key)
        return entry.surface if entry else ""

    def get_explanation(self, key: str) -> str:
        entry = self._entries.get(key)
        return entry.explanation if entry else ""

    def word(self, word_id: int) -> str:
        return self._index.word(word_id)

    def count(self, length: int) -> int:
        return self._index.count(length)

    @property
    def cache_size(self) -> int:
        return self._index.cache_size

    @staticmethod
    def edit_distance(a: str, b: str) -> int:
        return _edit_distance(a, b)

    def suggest(self, word: RawText, max_distance: int = 2, limit: int = 10) -> List[str]:
        """Return loaded words within ``max_distance`` edits of ``word``, closest first."""

        target = self.sanitize(word)
        if not target:
            return []

        scored: List[Tuple[int, str]] = []
        low = max(1, len(target) - max_distance)
        for length in range(low, len(target) + max_distance + 1):
            for candidate in self._index.find(self.config.unknown * length):
                distance = _edit_distance(target, candidate)
                if distance <= max_distance:
                    scored.append((distance, candidate))

        scored.sort()
        return [candidate for _, candidate in scored[:limit]]
