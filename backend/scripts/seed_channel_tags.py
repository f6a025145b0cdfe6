#!/usr/bin/env python3
"""Make sure every curated channel tag exists in the backend ``tags`` table."""

from __future__ import annotations

import logging
from typing import Iterable, List

import httpx

from channels_catalog import catalog_tag_slugs, load_catalog
from config import Settings

logger = logging.getLogger(__name__)

TAGS_TABLE = "tags"


def rest_headers(service_role_key: str) -> dict[str, str]:
    return {
        "apikey": service_role_key,
        "Authorization": f"Bearer {service_role_key}",
        "Content-Type": "application/json",
    }


def fetch_existing_slugs(client: httpx.Client, slugs: Iterable[str]) -> set[str]:
    slug_list = ",".join(f'"{slug}"' for slug in slugs)
    response = client.get(
        f"/rest/v1/{TAGS_TABLE}",
        params={"select": "slug", "slug": f"in.({slug_list})"},
    )
    response.raise_for_status()
    return {row["slug"] for row in response.json() or [] if row.get("slug")}


def insert_slugs(client: httpx.Client, slugs: List[str]) -> None:
    response = client.post(
        f"/rest/v1/{TAGS_TABLE}",
        json=[{"slug": slug, "created_by": None} for slug in slugs],
        headers={"Prefer": "return=minimal"},
    )
    response.raise_for_status()


def seed_channel_tags(client: httpx.Client, tag_slugs: List[str]) -> List[str]:
    """Insert the missing ``tag_slugs`` and return them."""
    if not tag_slugs:
        raise RuntimeError("No tag slugs found in the channel catalog")

    existing = fetch_existing_slugs(client, tag_slugs)
    missing = [slug for slug in tag_slugs if slug not in existing]
    if not missing:
        logger.info("[SEED] ok - all %d tag slugs already exist", len(tag_slugs))
        return []

    insert_slugs(client, missing)
    logger.info("[SEED] inserted %d missing tag slugs: %s", len(missing), ", ".join(missing))
    return missing


def make_client(settings: Settings, transport: httpx.BaseTransport | None = None) -> httpx.Client:
    if not settings.supabase_url:
        raise RuntimeError("Missing SUPABASE_URL (or VITE_SUPABASE_URL) in environment/.env")
    if not settings.supabase_service_role_key:
        raise RuntimeError("Missing SUPABASE_SERVICE_ROLE_KEY in environment/.env")
    return httpx.Client(
        base_url=settings.supabase_url.rstrip("/"),
        headers=rest_headers(settings.supabase_service_role_key),
        timeout=15,
        transport=transport,
    )


def main() -> None:
    settings = Settings.load()
    logging.basicConfig(level=settings.log_level, format="%(levelname)s %(name)s: %(message)s")
    catalog = load_catalog(settings.channels_catalog_path)
    with make_client(settings) as client:
        seed_channel_tags(client, catalog_tag_slugs(catalog))


if __name__ == "__main__":
    main()
