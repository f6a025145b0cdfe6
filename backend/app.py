"""FastAPI application exposing tag normalization and channel routing."""

from __future__ import annotations

import logging
from typing import List, Tuple

from fastapi import FastAPI, HTTPException, Query
from pydantic import BaseModel, Field

import channel_post_context
import recent_tags
from channel_mapping import channel_label, resolve_channel_matches
from channels_catalog import (
    CatalogError,
    ChannelCatalogEntry,
    get_channel_by_slug,
    load_catalog,
)
from config import Settings
from tagging import MAX_TAGS, normalize_tags

settings = Settings.load()
logging.basicConfig(level=settings.log_level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")
logger = logging.getLogger(__name__)

app = FastAPI(title="Blueprint Channels")


def get_catalog() -> Tuple[ChannelCatalogEntry, ...]:
    return load_catalog(settings.channels_catalog_path)


@app.on_event("startup")
async def validate_channel_catalog() -> None:
    """Refuse to start with a broken catalog."""
    try:
        catalog = get_catalog()
    except CatalogError as exc:
        logger.error("[CATALOG] invalid channel catalog: %s", exc)
        raise
    logger.info("[CATALOG] %d channels ready", len(catalog))


class Channel(BaseModel):
    """A catalog channel as clients see it."""

    slug: str = Field(description="Unique channel slug")
    name: str
    description: str = ""
    status: str = Field(description="active or paused")
    tag_slug: str = Field(description="Canonical tag that maps exactly to the channel")
    is_join_enabled: bool
    aliases: List[str] = Field(default_factory=list, description="Tags that map to the channel with lower precedence")
    icon: str
    priority: int = Field(description="Lower value wins ties between alias matches")
    postable: bool = Field(description="Whether blueprints can be posted to the channel")

    @classmethod
    def from_entry(cls, entry: ChannelCatalogEntry, catalog) -> "Channel":
        return cls(
            slug=entry.slug,
            name=entry.name,
            description=entry.description,
            status=entry.status,
            tag_slug=entry.tag_slug,
            is_join_enabled=entry.is_join_enabled,
            aliases=list(entry.aliases),
            icon=entry.icon,
            priority=entry.priority,
            postable=channel_post_context.is_postable_channel_slug(entry.slug, catalog),
        )


class TagsRequest(BaseModel):
    tags: List[str] = Field(
        default_factory=list,
        description="Free-text user tags, normalized by the server",
    )


class TagsResponse(BaseModel):
    tags: List[str] = Field(description=f"Canonical tags (at most {MAX_TAGS})")


class Match(BaseModel):
    slug: str
    priority: int
    kind: str = Field(description="exact or alias")
    tag: str


class ResolveResponse(BaseModel):
    channel: str = Field(description="Primary channel for the tag set")
    label: str = Field(description="Channel label, b/<slug>")
    tags: List[str] = Field(description="Canonical tags of the request")
    matches: List[Match] = Field(default_factory=list, description="Every candidate, best first")


class PostableResponse(BaseModel):
    slug: str
    postable: bool


@app.get(
    "/healthz",
    summary="Service health check",
    description="Plain liveness check with no dependencies",
)
def healthz() -> dict[str, bool]:
    return {"ok": True}


@app.post(
    "/tags/normalize",
    response_model=TagsResponse,
    summary="Normalize tags",
    description=(
        "Trims, lower-cases, turns whitespace into hyphens, "
        f"drops other characters and duplicates. Returns at most {MAX_TAGS} tags; "
        "empty tags are dropped silently."
    ),
)
def normalize(payload: TagsRequest) -> TagsResponse:
    return TagsResponse(tags=normalize_tags(payload.tags))


@app.get(
    "/channels",
    response_model=List[Channel],
    summary="Channel catalog",
    description="Channels ordered by priority. postable=true keeps only channels open for posting.",
)
def list_channels(postable: bool = Query(False)) -> List[Channel]:
    catalog = get_catalog()
    entries = sorted(catalog, key=lambda entry: (entry.priority, entry.slug))
    channels = [Channel.from_entry(entry, catalog) for entry in entries]
    if postable:
        channels = [channel for channel in channels if channel.postable]
    return channels


@app.post(
    "/channels/resolve",
    response_model=ResolveResponse,
    summary="Resolve the primary channel for tags",
    description=(
        "An exact tag_slug match beats an alias match, then lower priority wins, "
        "then the lexically smaller slug. Unmatched tags resolve to general."
    ),
)
def resolve_channel(payload: TagsRequest) -> ResolveResponse:
    catalog = get_catalog()
    channel, matches = resolve_channel_matches(payload.tags, catalog)
    return ResolveResponse(
        channel=channel,
        label=channel_label(channel),
        tags=normalize_tags(payload.tags),
        matches=[Match(slug=m.slug, priority=m.priority, kind=m.kind, tag=m.tag) for m in matches],
    )


@app.get("/channels/{slug}", response_model=Channel, summary="Channel by slug")
def get_channel(slug: str) -> Channel:
    catalog = get_catalog()
    entry = get_channel_by_slug(slug, catalog)
    if entry is None:
        raise HTTPException(status_code=404, detail=f"Unknown channel: {slug}")
    return Channel.from_entry(entry, catalog)


@app.get("/channels/{slug}/postable", response_model=PostableResponse, summary="Whether a channel is open for posting")
def channel_postable(slug: str) -> PostableResponse:
    postable = channel_post_context.is_postable_channel_slug(slug, get_catalog())
    return PostableResponse(slug=slug, postable=postable)


@app.get("/users/{user_id}/recent-tags", response_model=TagsResponse, summary="Recently used tags of a user")
def get_recent_tags(user_id: str) -> TagsResponse:
    return TagsResponse(tags=recent_tags.load_recent_tags(settings.recent_tags_dir, user_id))


@app.post(
    "/users/{user_id}/recent-tags",
    response_model=TagsResponse,
    summary="Record recently used tags",
    description=f"Newest tags first, at most {recent_tags.MAX_RECENT} entries.",
)
def add_recent_tags(user_id: str, payload: TagsRequest) -> TagsResponse:
    return TagsResponse(tags=recent_tags.add_recent_tags(settings.recent_tags_dir, user_id, payload.tags))


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=settings.port, log_level=settings.log_level.lower())
