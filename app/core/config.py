from __future__ import annotations

import os
from functools import lru_cache
from typing import List

from dotenv import find_dotenv, load_dotenv

load_dotenv(find_dotenv(".env") or ".env", override=False)

_DEFAULT_ORIGINS = "http://localhost:5173,http://localhost:3000,http://127.0.0.1:5173,http://127.0.0.1:3000"


def _env_bool(name: str, default: str = "false") -> bool:
    return os.getenv(name, default).strip().lower() in {"1", "true", "yes"}


def _env_csv(name: str, default: str = "") -> List[str]:
    return [part.strip().rstrip("/") for part in os.getenv(name, default).split(",") if part.strip()]


class Settings:
    """EcoLearn settings, read once from the environment (and ``.env``)."""

    def __init__(self) -> None:
        # Remote store; both values are required before Supabase is used at all
        self.supabase_url: str = os.getenv("SUPABASE_URL", "").rstrip("/")
        self.supabase_key: str = os.getenv("SUPABASE_ANON_KEY") or os.getenv("SUPABASE_KEY", "")
        self.remote_timeout_seconds: float = float(os.getenv("REMOTE_TIMEOUT_SECONDS", "5"))

        # Empty directory means an in-memory local store
        self.local_store_dir: str = os.getenv("LOCAL_STORE_DIR", "")

        self.max_activity_logs: int = int(os.getenv("MAX_ACTIVITY_LOGS", "500"))
        self.default_password: str = os.getenv("DEFAULT_PASSWORD", "password123")
        self.poll_interval_seconds: int = int(os.getenv("POLL_INTERVAL_SECONDS", "30"))

        self.app_name: str = os.getenv("APP_NAME", "EcoLearn Backend")
        self.app_version: str = os.getenv("APP_VERSION", "dev")
        self.debug: bool = _env_bool("DEBUG")
        self.allow_origins: List[str] = _env_csv("ALLOW_ORIGINS", _DEFAULT_ORIGINS)

    @property
    def remote_configured(self) -> bool:
        return bool(self.supabase_url and self.supabase_key)


@lru_cache()
def get_settings() -> Settings:
    return Settings()
