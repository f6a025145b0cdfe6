"""Map blueprint tags to a single primary channel.

Each normalized tag is matched against every curated channel: equal to the
channel's ``tag_slug`` is an *exact* match, membership in its ``aliases`` is an
*alias* match. The winner is the smallest ``(kind, priority, slug)`` key, so
the same tag set always lands in the same channel whatever the order of the
tags or of the catalog. Nothing here raises: unmatched input goes to
``general``.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Tuple

from channels_catalog import (
    GENERAL_SLUG,
    ChannelCatalog,
    ChannelCatalogEntry,
    channels_catalog,
)
from tagging import normalize_tag_slug

MATCH_EXACT = "exact"
MATCH_ALIAS = "alias"
_KIND_RANK = {MATCH_EXACT: 0, MATCH_ALIAS: 1}

CHANNEL_LABEL_PREFIX = "b/"


@dataclass(frozen=True)
class ChannelMatch:
    slug: str
    priority: int
    kind: str
    tag: str

    def sort_key(self) -> Tuple[int, int, str, str]:
        # tag only orders candidates of the same channel; it never changes the winner
        return (_KIND_RANK[self.kind], self.priority, self.slug, self.tag)


def fallback_channel_slug(catalog: ChannelCatalog) -> str:
    for entry in catalog:
        if entry.slug == GENERAL_SLUG:
            return entry.slug
    return GENERAL_SLUG


def _normalized_input(tag_slugs: Iterable[str]) -> List[str]:
    # canonical, non-empty, unique
    return list(dict.fromkeys(t for t in (normalize_tag_slug(tag) for tag in tag_slugs) if t))


def _match(entry: ChannelCatalogEntry, tag: str) -> Optional[ChannelMatch]:
    if tag == entry.tag_slug:
        return ChannelMatch(entry.slug, entry.priority, MATCH_EXACT, tag)
    if tag in entry.aliases:
        return ChannelMatch(entry.slug, entry.priority, MATCH_ALIAS, tag)
    return None


def channel_matches(
    tag_slugs: Iterable[str], catalog: Optional[ChannelCatalog] = None
) -> List[ChannelMatch]:
    """All (channel, tag) candidates, best first."""
    catalog = channels_catalog() if catalog is None else catalog
    tags = _normalized_input(tag_slugs or [])
    matches: List[ChannelMatch] = []
    for entry in catalog:
        if entry.slug == GENERAL_SLUG:
            continue
        for tag in tags:
            match = _match(entry, tag)
            if match is not None:
                matches.append(match)
    matches.sort(key=ChannelMatch.sort_key)
    return matches


def resolve_channel_matches(
    tag_slugs: Iterable[str], catalog: Optional[ChannelCatalog] = None
) -> Tuple[str, List[ChannelMatch]]:
    """The primary channel slug together with every candidate behind it."""
    catalog = channels_catalog() if catalog is None else catalog
    matches = channel_matches(tag_slugs, catalog)
    if not matches:
        return fallback_channel_slug(catalog), matches
    return matches[0].slug, matches


def resolve_primary_channel(
    tag_slugs: Iterable[str], catalog: Optional[ChannelCatalog] = None
) -> str:
    """Return the slug of the channel a blueprint with these tags belongs to."""
    slug, _ = resolve_channel_matches(tag_slugs, catalog)
    return slug


def channel_label(slug: str) -> str:
    return f"{CHANNEL_LABEL_PREFIX}{slug}"


def channel_label_for_tags(
    tag_slugs: Iterable[str], catalog: Optional[ChannelCatalog] = None
) -> str:
    return channel_label(resolve_primary_channel(tag_slugs, catalog))


class ChannelIndex:
    """Pre-indexed resolver for large catalogs; same answers as the linear scan."""

    def __init__(self, catalog: Optional[ChannelCatalog] = None) -> None:
        self._catalog: Tuple[ChannelCatalogEntry, ...] = tuple(
            channels_catalog() if catalog is None else catalog
        )
        self._fallback = fallback_channel_slug(self._catalog)
        self._by_tag: Dict[str, List[ChannelCatalogEntry]] = {}
        for entry in self._catalog:
            if entry.slug == GENERAL_SLUG:
                continue
            for tag in dict.fromkeys((entry.tag_slug, *entry.aliases)):
                self._by_tag.setdefault(tag, []).append(entry)

    def matches(self, tag_slugs: Iterable[str]) -> List[ChannelMatch]:
        matches: List[ChannelMatch] = []
        for tag in _normalized_input(tag_slugs or []):
            for entry in self._by_tag.get(tag, ()):
                match = _match(entry, tag)
                if match is not None:
                    matches.append(match)
        matches.sort(key=ChannelMatch.sort_key)
        return matches

    def resolve(self, tag_slugs: Iterable[str]) -> str:
        matches = self.matches(tag_slugs)
        return matches[0].slug if matches else self._fallback
