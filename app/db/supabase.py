"""Shared Supabase async client for the remote collections.

Only ``Storage`` asks for it, and only when ``remote_configured`` is true.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Optional

from supabase import AsyncClient, create_async_client

from app.common.errors import StorageUnavailable
from app.core.config import get_settings

logger = logging.getLogger("storage.supabase")

_client: Optional[AsyncClient] = None
_lock = asyncio.Lock()


async def get_supabase() -> AsyncClient:
    global _client
    if _client is not None:
        return _client
    settings = get_settings()
    if not settings.remote_configured:
        raise StorageUnavailable("Supabase credentials are not set")
    async with _lock:
        if _client is None:
            _client = await create_async_client(settings.supabase_url, settings.supabase_key)
            logger.info("supabase_client_created url=%s", settings.supabase_url)
    return _client


def reset_client() -> None:
    """Drop the cached client so the next call reconnects with fresh settings."""
    global _client
    _client = None


__all__ = ["get_supabase", "reset_client"]
