from __future__ import annotations

import json
from pathlib import Path
from typing import Any, Callable

import pytest

from channels_catalog import ChannelCatalogEntry


def make_entry(slug: str, **overrides: Any) -> ChannelCatalogEntry:
    fields = {
        "slug": slug,
        "name": slug.replace("-", " ").title(),
        "description": "",
        "status": "active",
        "tag_slug": slug,
        "is_join_enabled": True,
        "aliases": (),
        "icon": "hash",
        "priority": 10,
    }
    fields.update(overrides)
    fields["aliases"] = tuple(fields["aliases"])
    return ChannelCatalogEntry(**fields)


@pytest.fixture
def tie_catalog() -> list[ChannelCatalogEntry]:
    """Two channels sharing an alias at the same priority."""
    return [
        make_entry("general", is_join_enabled=False, priority=999),
        make_entry("a-channel", aliases=["shared-alias"]),
        make_entry("b-channel", aliases=["shared-alias"]),
    ]


@pytest.fixture
def write_catalog(tmp_path: Path) -> Callable[[Any], str]:
    def _write(entries: Any, name: str = "catalog.json") -> str:
        path = tmp_path / name
        path.write_text(json.dumps(entries), encoding="utf-8")
        return str(path)

    return _write
