"""Canonical tag slugs shared by tag inputs, stores and channel routing."""

from __future__ import annotations

import re
from typing import Iterable, List

MAX_TAGS = 4

# Unicode space separators, line breaks and BOM; unlike str.isspace() this
# leaves out \x1c-\x1f and \x85, which are dropped as non-slug characters
_WS_CLASS = r"[\t\n\x0b\x0c\r \xa0\u1680\u2000-\u200a\u2028\u2029\u202f\u205f\u3000\ufeff]"
_EDGE_WHITESPACE = re.compile(rf"\A{_WS_CLASS}+|{_WS_CLASS}+\Z")
_WHITESPACE = re.compile(rf"{_WS_CLASS}+")
_NOT_SLUG_CHAR = re.compile(r"[^a-z0-9-]")
_HYPHEN_RUN = re.compile(r"-+")


def normalize_tag(value: str) -> str:
    """Reduce one free-text label to its canonical slug (may be empty)."""
    text = _EDGE_WHITESPACE.sub("", value or "").lower()
    text = _WHITESPACE.sub("-", text)
    text = _NOT_SLUG_CHAR.sub("", text)
    text = _HYPHEN_RUN.sub("-", text)
    return text.strip("-")


def normalize_tag_slug(value: str) -> str:
    """Same as :func:`normalize_tag`, tolerating the ``#tag`` form users type."""
    text = value or ""
    if text.startswith("#"):
        text = text[1:]
    return normalize_tag(text)


def normalize_tags(raw_tags: Iterable[str]) -> List[str]:
    """Canonicalize, dedupe (first seen wins) and cap a batch of tags."""
    seen: set[str] = set()
    result: List[str] = []
    for tag in raw_tags or []:
        slug = normalize_tag(tag)
        if not slug or slug in seen:
            continue
        seen.add(slug)
        result.append(slug)
    return result[:MAX_TAGS]
