"""Per-user store of recently used tags, kept as small JSON files."""

from __future__ import annotations

import hashlib
import json
import logging
import tempfile
import threading
from pathlib import Path
from typing import Dict, Iterable, List

from tagging import normalize_tags

logger = logging.getLogger(__name__)

MAX_RECENT = 8
KEY_PREFIX = "stacklab-recent-tags"

# one lock per user key, read-merge-write must not interleave within a process
_LOCKS: Dict[str, threading.Lock] = {}
_LOCKS_GUARD = threading.Lock()


def make_key(user_id: str) -> str:
    """File-safe key for a user id."""
    payload = f"{KEY_PREFIX}:{user_id}"
    return hashlib.sha1(payload.encode("utf-8")).hexdigest()


def load_recent_tags(store_dir: str, user_id: str | None) -> List[str]:
    """Return the stored tags for ``user_id``; unreadable data reads as empty."""
    if not user_id:
        return []
    path = _store_path(store_dir, make_key(user_id))
    if not path.exists():
        return []
    try:
        with path.open("r", encoding="utf-8") as fp:
            payload = json.load(fp)
    except (json.JSONDecodeError, OSError) as exc:
        logger.warning("[RECENT] CORRUPT %s: %s", path.name, exc)
        return []

    tags = payload.get("tags") if isinstance(payload, dict) else None
    if not isinstance(tags, list):
        return []
    return [tag for tag in tags if isinstance(tag, str)]


def merge_recent_tags(new_tags: Iterable[str], recent: List[str]) -> List[str]:
    """Newest first, no repeats, at most ``MAX_RECENT`` entries."""
    normalized = normalize_tags(new_tags)
    if not normalized:
        return list(recent)
    merged = normalized + [tag for tag in recent if tag not in normalized]
    return merged[:MAX_RECENT]


def add_recent_tags(store_dir: str, user_id: str | None, tags: Iterable[str]) -> List[str]:
    """Record ``tags`` as just used and return the updated list."""
    if not user_id:
        return []
    key = make_key(user_id)
    with _user_lock(key):
        recent = load_recent_tags(store_dir, user_id)
        merged = merge_recent_tags(tags, recent)
        if merged == recent:
            return merged

        try:
            _write(_store_path(store_dir, key), merged)
        except OSError as exc:
            logger.warning("[RECENT] write failed for %s: %s", user_id, exc)
    return merged


def _user_lock(key: str) -> threading.Lock:
    with _LOCKS_GUARD:
        return _LOCKS.setdefault(key, threading.Lock())


def _write(path: Path, tags: List[str]) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)
    with tempfile.NamedTemporaryFile(
        "w", encoding="utf-8", dir=path.parent, prefix=f"{path.stem}.", suffix=".tmp", delete=False
    ) as fp:
        json.dump({"tags": tags}, fp, ensure_ascii=False)
    tmp_path = Path(fp.name)
    try:
        tmp_path.replace(path)
    except OSError:
        tmp_path.unlink(missing_ok=True)
        raise
    logger.debug("[RECENT] STORE %s (%d tags)", path.name, len(tags))


def _store_path(store_dir: str, key: str) -> Path:
    return Path(store_dir).expanduser().resolve() / f"{key}.json"
