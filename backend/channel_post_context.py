"""Helpers for posting a blueprint into a channel."""

from __future__ import annotations

from typing import Mapping, Optional
from urllib.parse import parse_qs, urlencode

from channels_catalog import (
    GENERAL_SLUG,
    ChannelCatalog,
    ChannelCatalogEntry,
    get_channel_by_slug,
)

CHANNEL_QUERY_PARAM = "channel"


def is_postable_channel_slug(slug: str, catalog: Optional[ChannelCatalog] = None) -> bool:
    channel = get_channel_by_slug(slug, catalog)
    if channel is None or channel.slug == GENERAL_SLUG:
        return False
    return channel.status == "active" and channel.is_join_enabled


def get_postable_channel(
    slug: str, catalog: Optional[ChannelCatalog] = None
) -> Optional[ChannelCatalogEntry]:
    if not is_postable_channel_slug(slug, catalog):
        return None
    return get_channel_by_slug(slug, catalog)


def channel_slug_from_query(query: str) -> Optional[str]:
    """Pick the ``channel`` parameter out of a query string such as ``?channel=x``."""
    params = parse_qs((query or "").lstrip("?"), keep_blank_values=True)
    values = params.get(CHANNEL_QUERY_PARAM)
    if not values:
        return None
    return values[0].strip() or None


def build_url_with_channel(
    path: str, channel_slug: str, extra: Optional[Mapping[str, str]] = None
) -> str:
    params = dict(extra or {})
    params.pop(CHANNEL_QUERY_PARAM, None)
    params[CHANNEL_QUERY_PARAM] = channel_slug
    return f"{path}?{urlencode(params)}"
