"""Byte-level normalization of legacy Cyrillic dictionary text.

Dictionary and grid files come from DOS tooling: Cyrillic letters in the
``0x80..0xBF`` range are shifted by ``0x40`` into the Windows-1251 letter
block ``0xC0..0xFF``. The supported alphabet is that block plus ASCII letters.
"""

from __future__ import annotations

from typing import Union

from ..core.constants import DEFAULT_ENCODING

LEGACY_RANGE_START = 0x80
LEGACY_RANGE_END = 0xC0
LEGACY_OFFSET = 0x40

CYRILLIC_UPPER_A = 0xC0
CYRILLIC_LOWER_A = 0xE0
CASE_OFFSET = 0x20


def remap_legacy_byte(value: int) -> int:
    if LEGACY_RANGE_START <= value < LEGACY_RANGE_END:
        return value + LEGACY_OFFSET
    return value


def is_letter_code(value: int) -> bool:
    return (
        0x41 <= value <= 0x5A
        or 0x61 <= value <= 0x7A
        or value >= CYRILLIC_UPPER_A
    )


def upper_code(value: int) -> int:
    if 0x61 <= value <= 0x7A or value >= CYRILLIC_LOWER_A:
        return value - CASE_OFFSET
    return value


def to_canonical_letter(value: int) -> int:
    """Map a raw byte to its uppercase code. Non-letters pass through."""

    return upper_code(remap_legacy_byte(value))


def is_alphabetic(value: int) -> bool:
    """Return whether ``value`` is a letter once legacy bytes are remapped."""

    return is_letter_code(remap_legacy_byte(value))


_REMAP_TABLE = bytes(remap_legacy_byte(value) for value in range(256))
_UPPER_TABLE = bytes(upper_code(value) for value in range(256))
_NON_ALPHABETIC = bytes(value for value in range(256) if not is_alphabetic(value))
_NON_LETTER_CODES = bytes(value for value in range(256) if not is_letter_code(value))


def remap_legacy(data: bytes) -> bytes:
    return data.translate(_REMAP_TABLE)


def strip_non_alphabetic(data: bytes) -> bytes:
    """Drop every non-alphabetic byte, keeping the order of the rest."""

    return data.translate(None, _NON_ALPHABETIC)


def decode_legacy(data: bytes, encoding: str = DEFAULT_ENCODING) -> str:
    """Remap legacy bytes and decode them into text."""

    return remap_legacy(data).decode(encoding, errors="replace")


def canonicalize(raw: Union[bytes, str], encoding: str = DEFAULT_ENCODING) -> str:
    """Return the uppercase, letters-only key for ``raw``.

    ``bytes`` are treated as raw file content and remapped first; ``str`` is
    already decoded text, so it is only encoded back before filtering.
    """

    if isinstance(raw, str):
        data = raw.encode(encoding, errors="ignore")
    else:
        data = remap_legacy(bytes(raw))
    return data.translate(None, _NON_LETTER_CODES).translate(_UPPER_TABLE).decode(encoding)


__all__ = [
    "canonicalize",
    "decode_legacy",
    "is_alphabetic",
    "is_letter_code",
    "remap_legacy",
    "remap_legacy_byte",
    "strip_non_alphabetic",
    "to_canonical_letter",
    "upper_code",
]
