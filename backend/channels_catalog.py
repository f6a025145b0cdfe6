"""Static catalog of curated blueprint channels."""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from functools import lru_cache
from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from typing_extensions import TypedDict

from tagging import normalize_tag

logger = logging.getLogger(__name__)

GENERAL_SLUG = "general"
CHANNEL_STATUSES = ("active", "paused")

CATALOG_PATH = Path(__file__).parent / "catalog_data" / "channels_catalog.json"


class CatalogError(ValueError):
    """Raised when catalog data is malformed (a configuration defect)."""


class RawChannelEntry(TypedDict, total=False):
    slug: str
    name: str
    description: str
    status: str
    tag_slug: str
    is_join_enabled: bool
    aliases: list[str]
    icon: str
    priority: int


@dataclass(frozen=True)
class ChannelCatalogEntry:
    slug: str
    name: str
    description: str
    status: str
    tag_slug: str
    is_join_enabled: bool
    aliases: Tuple[str, ...] = ()
    icon: str = "hash"
    priority: int = 999

    @classmethod
    def from_raw(cls, raw: RawChannelEntry) -> "ChannelCatalogEntry":
        if not isinstance(raw, dict):
            raise CatalogError(f"Invalid channel entry {raw!r}: expected an object")
        try:
            slug = raw["slug"]
            tag_slug = raw["tag_slug"]
        except KeyError as exc:
            raise CatalogError(f"Invalid channel entry {raw!r}: missing {exc}") from exc

        aliases = raw.get("aliases", [])
        is_join_enabled = raw.get("is_join_enabled", False)
        priority = raw.get("priority", 999)
        text_fields = {
            "slug": slug,
            "tag_slug": tag_slug,
            "name": raw.get("name", slug),
            "description": raw.get("description", ""),
            "status": raw.get("status", "active"),
            "icon": raw.get("icon", "hash"),
        }
        for field, value in text_fields.items():
            if not isinstance(value, str):
                raise CatalogError(f"Channel {slug!r}: {field} must be a string, got {value!r}")
        if not isinstance(aliases, list) or not all(isinstance(alias, str) for alias in aliases):
            raise CatalogError(f"Channel {slug!r}: aliases must be a list of strings, got {aliases!r}")
        if not isinstance(is_join_enabled, bool):
            raise CatalogError(f"Channel {slug!r}: is_join_enabled must be a boolean, got {is_join_enabled!r}")
        # bool is an int subclass
        if isinstance(priority, bool) or not isinstance(priority, int):
            raise CatalogError(f"Channel {slug!r}: priority must be an integer, got {priority!r}")

        return cls(
            slug=slug,
            name=text_fields["name"] or slug,
            description=text_fields["description"],
            status=text_fields["status"],
            tag_slug=tag_slug,
            is_join_enabled=is_join_enabled,
            aliases=tuple(aliases),
            icon=text_fields["icon"],
            priority=priority,
        )


ChannelCatalog = Sequence[ChannelCatalogEntry]


def parse_catalog(raw_entries: Iterable[RawChannelEntry]) -> Tuple[ChannelCatalogEntry, ...]:
    """Build an immutable catalog from decoded JSON entries, keeping their order."""
    return tuple(ChannelCatalogEntry.from_raw(raw) for raw in raw_entries)


@lru_cache(maxsize=8)
def load_catalog(path: Optional[str] = None) -> Tuple[ChannelCatalogEntry, ...]:
    """Read and validate a catalog file; the result is cached per path."""
    catalog_path = Path(path) if path else CATALOG_PATH
    try:
        with catalog_path.open("r", encoding="utf-8") as fp:
            data = json.load(fp)
    except (OSError, json.JSONDecodeError) as exc:
        raise CatalogError(f"Cannot read channel catalog {catalog_path}: {exc}") from exc
    if not isinstance(data, list):
        raise CatalogError(f"Channel catalog {catalog_path} must be a JSON list")

    catalog = parse_catalog(data)
    validate_catalog(catalog)
    logger.info("[CATALOG] loaded %d channels from %s", len(catalog), catalog_path)
    return catalog


def channels_catalog() -> Tuple[ChannelCatalogEntry, ...]:
    """The catalog bundled with the backend."""
    return load_catalog(None)


def validate_catalog(catalog: ChannelCatalog) -> None:
    """Startup check for catalog defects; lookups and routing never call this."""
    seen: set[str] = set()
    for entry in catalog:
        if entry.slug in seen:
            raise CatalogError(f"Duplicate channel slug: {entry.slug}")
        seen.add(entry.slug)

        for value in (entry.slug, entry.tag_slug, *entry.aliases):
            if not value or normalize_tag(value) != value:
                raise CatalogError(
                    f"Channel {entry.slug!r} has non-canonical tag value {value!r}"
                )
        if entry.status not in CHANNEL_STATUSES:
            raise CatalogError(f"Channel {entry.slug!r} has unknown status {entry.status!r}")

    if GENERAL_SLUG not in seen:
        raise CatalogError(f"Channel catalog must define the {GENERAL_SLUG!r} channel")


def _catalog(catalog: Optional[ChannelCatalog]) -> ChannelCatalog:
    return channels_catalog() if catalog is None else catalog


def get_channel_by_slug(
    slug: str, catalog: Optional[ChannelCatalog] = None
) -> Optional[ChannelCatalogEntry]:
    for entry in _catalog(catalog):
        if entry.slug == slug:
            return entry
    return None


def is_curated_channel_slug(slug: str, catalog: Optional[ChannelCatalog] = None) -> bool:
    return get_channel_by_slug(slug, catalog) is not None


def resolve_channel_tag_slug(slug: str, catalog: Optional[ChannelCatalog] = None) -> Optional[str]:
    entry = get_channel_by_slug(slug, catalog)
    return entry.tag_slug if entry else None


def get_channel_by_tag_slug(
    tag_slug: str, catalog: Optional[ChannelCatalog] = None
) -> Optional[ChannelCatalogEntry]:
    for entry in _catalog(catalog):
        if entry.tag_slug == tag_slug:
            return entry
    return None


def catalog_tag_slugs(catalog: Optional[ChannelCatalog] = None) -> List[str]:
    """Unique channel tag slugs in catalog order."""
    return list(dict.fromkeys(entry.tag_slug for entry in _catalog(catalog)))
