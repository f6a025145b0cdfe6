"""Environment-backed configuration helpers."""

from __future__ import annotations

from pathlib import Path
from dotenv import load_dotenv
import os
from dataclasses import dataclass

# .env next to app.py first
load_dotenv(dotenv_path=Path(__file__).resolve().parent / ".env", override=False)

# then the repo root, when the backend lives in a subdirectory
load_dotenv(dotenv_path=Path(__file__).resolve().parent.parent / ".env", override=False)

@dataclass(slots=True)
class Settings:
    port: int
    log_level: str
    channels_catalog_path: str | None
    recent_tags_dir: str
    supabase_url: str | None
    supabase_service_role_key: str | None

    @classmethod
    def load(cls) -> "Settings":
        return cls(
            port=int(os.getenv("PORT", "8080")),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            channels_catalog_path=os.getenv("CHANNELS_CATALOG_PATH") or None,
            recent_tags_dir=os.getenv("RECENT_TAGS_DIR", "./recent_tags"),
            supabase_url=os.getenv("SUPABASE_URL") or os.getenv("VITE_SUPABASE_URL"),
            supabase_service_role_key=os.getenv("SUPABASE_SERVICE_ROLE_KEY"),
        )

    @property
    def supabase_enabled(self) -> bool:
        return bool(self.supabase_url and self.supabase_service_role_key)
