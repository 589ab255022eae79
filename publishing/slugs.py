"""
Slug derivation for articles, categories and heading anchors.

Two slugifiers live here and they are deliberately not interchangeable:

- ``create_slug`` produces URL slugs. Output is restricted to ``[a-z0-9-]``.
- ``heading_slug`` produces in-page anchor ids. It keeps any Unicode word
  character, so CJK headings get readable anchors.

Uniqueness is not a property of either function. ``unique_slug`` takes an
existence check from the persistence layer and disambiguates on collision.
"""

from __future__ import annotations

import logging
import re
import time
import unicodedata
from typing import Callable

logger = logging.getLogger(__name__)

# Explicit transliteration table. This is not a general transliterator:
# characters outside the table are left alone and usually stripped later.
PINYIN_TABLE = {
    "测": "ce",
    "试": "shi",
    "文": "wen",
    "章": "zhang",
}

_WHITESPACE_RE = re.compile(r"\s+")
_SLUG_DISALLOWED_RE = re.compile(r"[^a-z0-9-]")
_HEADING_DISALLOWED_RE = re.compile(r"[^\w-]")
_HYPHEN_RUN_RE = re.compile(r"-{2,}")
_VALID_SLUG_RE = re.compile(r"^[a-z0-9]+(?:-[a-z0-9]+)*$")

_BASE36_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"

# Room for "-<n>" when two suffixes collide
COUNTER_RESERVE = 4


class InvalidSlugError(ValueError):
    """Raised when a title yields no usable slug and no fallback is allowed."""


def transliterate(text: str) -> str:
    return "".join(PINYIN_TABLE.get(char, char) for char in text)


def _fold_diacritics(text: str) -> str:
    # Same folding django.utils.text.slugify applies: "é" -> "e".
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(char for char in decomposed if not unicodedata.combining(char))


def create_slug(title: str) -> str:
    """
    Derive a URL slug from a human title.

    Returns an empty string when nothing survives normalization. Callers must
    treat that as invalid input.
    """
    text = _fold_diacritics(transliterate(title or ""))
    text = text.strip().lower()
    text = _WHITESPACE_RE.sub("-", text)
    text = _SLUG_DISALLOWED_RE.sub("", text)
    text = _HYPHEN_RUN_RE.sub("-", text)
    return text.strip("-")


def is_valid_slug(value: str) -> bool:
    return bool(value) and bool(_VALID_SLUG_RE.match(value))


def truncate_slug(slug: str, max_length: int) -> str:
    """Cut ``slug`` to ``max_length`` without leaving a trailing hyphen."""
    return slug[:max_length].rstrip("-")


def heading_slug(text: str) -> str:
    """Anchor id for a heading. Keeps CJK and other non-Latin word characters."""
    value = (text or "").strip().lower()
    value = _WHITESPACE_RE.sub("-", value)
    value = _HEADING_DISALLOWED_RE.sub("", value)
    return _HYPHEN_RUN_RE.sub("-", value)


class HeadingSlugger:
    """
    Hands out unique heading ids for one document.

    Repeated headings get ``-2``, ``-3``... appended. Headings whose text
    slugifies to nothing fall back to ``section-<n>`` where ``n`` is the
    1-based position of the heading in the document.
    """

    def __init__(self):
        self._counts: dict[str, int] = {}
        self._used: set[str] = set()
        self._position = 0

    def slug(self, text: str) -> str:
        self._position += 1
        base = heading_slug(text) or f"section-{self._position}"

        count = self._counts.get(base, 0)
        candidate = base if count == 0 else f"{base}-{count + 1}"
        while candidate in self._used:
            count += 1
            candidate = f"{base}-{count + 1}"

        self._counts[base] = count + 1
        self._used.add(candidate)
        return candidate


def to_base36(number: int) -> str:
    if number < 0:
        raise ValueError("base36 encoding expects a non-negative integer")
    if number == 0:
        return "0"
    digits = []
    while number:
        number, remainder = divmod(number, 36)
        digits.append(_BASE36_DIGITS[remainder])
    return "".join(reversed(digits))


def timestamp_suffix() -> str:
    """Short, time-derived disambiguator: milliseconds since epoch in base 36."""
    return to_base36(time.time_ns() // 1_000_000)


def unique_slug(
    base: str,
    exists: Callable[[str], bool],
    *,
    suffix: Callable[[], str] = timestamp_suffix,
    max_length: int | None = None,
) -> str:
    """
    Return ``base`` if it is free, otherwise ``base-<suffix>``.

    ``exists`` is the persistence-facing lookup and must already exclude the
    record being updated. Suffixes are retried until one is free; two suffixes
    produced within the same millisecond are separated with a counter.

    With ``max_length`` the result never exceeds it: the base is cut first,
    and cut again on collision to leave room for the suffix and a counter.
    """
    if max_length is not None:
        base = truncate_slug(base, max_length)
    if not base:
        raise InvalidSlugError("Cannot make an empty slug unique")

    if not exists(base):
        return base

    tail = suffix()
    stem = base
    if max_length is not None:
        stem = truncate_slug(base, max_length - len(tail) - 1 - COUNTER_RESERVE)
        if not stem:
            raise InvalidSlugError(f"max_length {max_length} leaves no room for a suffix")
    candidate = f"{stem}-{tail}"
    counter = 2
    while exists(candidate):
        candidate = f"{stem}-{tail}-{counter}"
        counter += 1

    logger.info(f"Slug '{base}' already taken, using '{candidate}'")
    return candidate
