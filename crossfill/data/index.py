"""Pattern-constrained word index with a per-pattern results cache."""

from __future__ import annotations

import random
import threading
from collections import defaultdict
from typing import Callable, Dict, Iterator, List, Optional, Sequence

from ..core.constants import (
    DEFAULT_ENCODING,
    KEY_BITS_PER_LETTER,
    MAX_FAST_LENGTH,
    MAX_WORD_IDS,
    UNKNOWN_LETTER,
)
from ..core.exceptions import DictionaryCapacityError
from ..utils.logger import get_logger
from .normalization import is_letter_code, upper_code


LOGGER = get_logger(__name__)

FULL_MASK = (1 << MAX_FAST_LENGTH) - 1


def pack_key(codes: Sequence[int], mask: int = FULL_MASK) -> int:
    """Pack the letter codes selected by ``mask`` into one integer key.

    Byte ``i`` of the key holds ``codes[i]`` when bit ``i`` of the mask is set
    and the code is non-zero. Only the first six positions take part.
    """

    key = 0
    for position in range(min(len(codes), MAX_FAST_LENGTH)):
        if mask >> position & 1 and codes[position]:
            key |= codes[position] << (KEY_BITS_PER_LETTER * position)
    return key


def subset_keys(codes: Sequence[int]) -> List[int]:
    """Return the key of every subset of the word's first six positions."""

    arity = min(len(codes), MAX_FAST_LENGTH)
    return [pack_key(codes, mask) for mask in range(1 << arity)]


class MatchView:
    """Read-only, restartable view over a cached list of word ids.

    The id list is borrowed from the index cache and is never copied; words
    are resolved through the index's word table only when iterated.
    """

    __slots__ = ("_ids", "_resolve")

    def __init__(self, ids: List[int], resolve: Callable[[int], str]) -> None:
        self._ids = ids
        self._resolve = resolve

    def __len__(self) -> int:
        return len(self._ids)

    def __bool__(self) -> bool:
        return bool(self._ids)

    def __iter__(self) -> Iterator[str]:
        resolve = self._resolve
        for word_id in self._ids:
            yield resolve(word_id)

    def __getitem__(self, position: int) -> str:
        if isinstance(position, slice):
            raise TypeError("MatchView does not support slicing; iterate or use word_ids()")
        return self._resolve(self._ids[position])

    def __contains__(self, word: object) -> bool:
        return any(candidate == word for candidate in self)

    def __repr__(self) -> str:
        return f"MatchView(count={len(self._ids)})"

    def word_ids(self) -> Iterator[int]:
        return iter(self._ids)

    def first(self) -> Optional[str]:
        if not self._ids:
            return None
        return self._resolve(self._ids[0])


class PatternIndex:
    """Word table plus bucket index keyed by ``(length, packed known letters)``.

    Every word is registered under the key of each subset of its first six
    positions, so a query on a word of at most six letters is a single lookup.
    Longer words are narrowed by their first six positions and then checked
    letter by letter.
    """

    def __init__(
        self,
        *,
        encoding: str = DEFAULT_ENCODING,
        unknown: str = UNKNOWN_LETTER,
        max_words: int = MAX_WORD_IDS,
    ) -> None:
        if max_words > MAX_WORD_IDS:
            raise DictionaryCapacityError(
                f"max_words={max_words} exceeds the {MAX_WORD_IDS} available word ids"
            )
        self.encoding = encoding
        self.unknown = unknown
        self.max_words = max_words
        self._words: List[str] = []
        self._codes: List[bytes] = []
        self._buckets: Dict[int, Dict[int, List[int]]] = defaultdict(lambda: defaultdict(list))
        self._cache: Dict[str, List[int]] = {}
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._words)

    @property
    def cache_size(self) -> int:
        return len(self._cache)

    # ------------------------------------------------------------------
    # Building
    # ------------------------------------------------------------------
    def add(self, key: str) -> int:
        """Append a canonical key to the word table and index it."""

        with self._lock:
            word_id = len(self._words)
            if word_id >= self.max_words:
                raise DictionaryCapacityError(
                    f"Dictionary exceeds capacity of {self.max_words} words"
                )
            codes = key.encode(self.encoding)
            self._words.append(key)
            self._codes.append(codes)
            length_buckets = self._buckets[len(codes)]
            for packed in subset_keys(codes):
                length_buckets[packed].append(word_id)
            return word_id

    def clear(self) -> None:
        with self._lock:
            self._words.clear()
            self._codes.clear()
            self._buckets.clear()
            self._cache.clear()

    def shuffle(self, rng: Optional[random.Random] = None) -> None:
        """Permute every bucket and every cached result list in place."""

        rng = rng or random.Random()
        with self._lock:
            for length_buckets in self._buckets.values():
                for bucket in length_buckets.values():
                    rng.shuffle(bucket)
            for cached in self._cache.values():
                rng.shuffle(cached)

    # ------------------------------------------------------------------
    # Lookup
    # ------------------------------------------------------------------
    def word(self, word_id: int) -> str:
        return self._words[word_id]

    def count(self, length: int) -> int:
        """Number of indexed words of exactly ``length`` letters."""

        length_buckets = self._buckets.get(length)
        if not length_buckets:
            return 0
        return len(length_buckets.get(0, ()))

    def find(self, pattern: str) -> MatchView:
        """Return every word agreeing with ``pattern`` on its known letters."""

        cached = self._cache.get(pattern)
        if cached is not None:
            return MatchView(cached, self.word)

        codes = self._pattern_codes(pattern)
        if codes is None:
            matches: List[int] = []
        else:
            length_buckets = self._buckets.get(len(codes), {})
            bucket = length_buckets.get(pack_key(codes), [])
            if len(codes) <= MAX_FAST_LENGTH:
                matches = list(bucket)
            else:
                known = [(position, code) for position, code in enumerate(codes) if code]
                matches = [
                    word_id
                    for word_id in bucket
                    if all(self._codes[word_id][position] == code for position, code in known)
                ]

        with self._lock:
            matches = self._cache.setdefault(pattern, matches)
        LOGGER.debug("Pattern %r computed: %s matches", pattern, len(matches))
        return MatchView(matches, self.word)

    def _pattern_codes(self, pattern: str) -> Optional[List[int]]:
        """Translate a pattern into letter codes, 0 for unknown positions.

        Returns ``None`` when a position holds something that is not a letter
        of the alphabet, which no word can match.
        """

        codes: List[int] = []
        for char in pattern:
            if char == self.unknown:
                codes.append(0)
                continue
            try:
                encoded = char.encode(self.encoding)
            except UnicodeEncodeError:
                return None
            if len(encoded) != 1 or not is_letter_code(encoded[0]):
                return None
            codes.append(upper_code(encoded[0]))
        return codes


__all__ = ["FULL_MASK", "MatchView", "PatternIndex", "pack_key", "subset_keys"]
