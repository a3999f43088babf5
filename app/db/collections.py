"""Collection stores: one interface, local / Supabase / fallback implementations.

Every entity collection is reached through ``CollectionStore``. The
``FallbackCollection`` decorator is the only place that knows a remote store
may be down; business code never branches on configuration.
"""
from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import ValidationError

from app.common.errors import StorageUnavailable
from app.common.schemas import EcoModel
from app.db.local_store import LocalStore, StorageKeys


logger = logging.getLogger("storage.collections")

M = TypeVar("M", bound=EcoModel)


class CollectionStore(Generic[M]):
    """Uniform CRUD over one entity collection."""

    name: str
    model: Type[M]

    async def get_all(self) -> List[M]:
        raise NotImplementedError

    async def get_by_id(self, item_id: str) -> Optional[M]:
        raise NotImplementedError

    async def get_where(self, field: str, value: Any) -> List[M]:
        return [item for item in await self.get_all() if getattr(item, field, None) == value]

    async def upsert(self, item: M) -> M:
        raise NotImplementedError

    async def delete(self, item_id: str) -> bool:
        raise NotImplementedError


def _decode_many(model: Type[M], rows: Any, *, source: str) -> List[M]:
    items: List[M] = []
    for row in rows or []:
        try:
            items.append(model.model_validate(row))
        except ValidationError as exc:
            logger.warning("skip_invalid_record source=%s model=%s error=%s", source, model.__name__, exc)
    return items


class LocalCollection(CollectionStore[M]):
    """List of camelCase blobs under a single local-store key.

    ``default_factory`` seeds the key the first time it is read, mirroring the
    catalog bootstrap for content collections.
    """

    def __init__(
        self,
        store: LocalStore,
        key: str,
        model: Type[M],
        *,
        name: Optional[str] = None,
        default_factory: Optional[Callable[[], List[M]]] = None,
    ) -> None:
        self.store = store
        self.key = key
        self.model = model
        self.name = name or key
        self.default_factory = default_factory

    # Sync API: the local store is always available without awaiting.
    def load(self) -> List[M]:
        if not self.store.has(self.key) and self.default_factory is not None:
            seeded = self.default_factory()
            self.replace_all(seeded)
            return seeded
        return _decode_many(self.model, self.store.get(self.key, []), source=self.key)

    def find(self, item_id: str) -> Optional[M]:
        for item in self.load():
            if item.id == item_id:  # type: ignore[attr-defined]
                return item
        return None

    def replace_all(self, items: List[M]) -> None:
        self.store.set(self.key, [item.to_blob() for item in items])

    def put(self, item: M) -> M:
        items = self.load()
        for idx, existing in enumerate(items):
            if existing.id == item.id:  # type: ignore[attr-defined]
                items[idx] = item
                break
        else:
            items.append(item)
        self.replace_all(items)
        return item

    def remove(self, item_id: str) -> bool:
        items = self.load()
        kept = [item for item in items if item.id != item_id]  # type: ignore[attr-defined]
        if len(kept) == len(items):
            return False
        self.replace_all(kept)
        return True

    # Async API (CollectionStore)
    async def get_all(self) -> List[M]:
        return self.load()

    async def get_by_id(self, item_id: str) -> Optional[M]:
        return self.find(item_id)

    async def upsert(self, item: M) -> M:
        return self.put(item)

    async def delete(self, item_id: str) -> bool:
        return self.remove(item_id)


class SupabaseCollection(CollectionStore[M]):
    """Row-based CRUD over one Supabase (PostgREST) table, snake_case columns."""

    def __init__(
        self,
        table: str,
        model: Type[M],
        client_factory: Callable[[], Awaitable[Any]],
        *,
        order_by: Optional[str] = None,
        descending: bool = True,
    ) -> None:
        self.table = table
        self.name = table
        self.model = model
        self.client_factory = client_factory
        self.order_by = order_by
        self.descending = descending

    async def _client(self):
        return await self.client_factory()

    async def get_all(self) -> List[M]:
        client = await self._client()
        query = client.table(self.table).select("*")
        if self.order_by:
            query = query.order(self.order_by, desc=self.descending)
        resp = await query.execute()
        return _decode_many(self.model, getattr(resp, "data", None), source=self.table)

    async def get_by_id(self, item_id: str) -> Optional[M]:
        client = await self._client()
        resp = await client.table(self.table).select("*").eq("id", item_id).limit(1).execute()
        rows = getattr(resp, "data", None) or []
        return self.model.model_validate(rows[0]) if rows else None

    async def get_where(self, field: str, value: Any) -> List[M]:
        client = await self._client()
        query = client.table(self.table).select("*").eq(field, value)
        if self.order_by:
            query = query.order(self.order_by, desc=self.descending)
        resp = await query.execute()
        return _decode_many(self.model, getattr(resp, "data", None), source=self.table)

    async def upsert(self, item: M) -> M:
        client = await self._client()
        await client.table(self.table).upsert(item.to_row(), on_conflict="id").execute()
        return item

    async def delete(self, item_id: str) -> bool:
        client = await self._client()
        await client.table(self.table).delete().eq("id", item_id).execute()
        return True


class PendingSyncJournal:
    """Ids written locally while the remote store was unreachable.

    Shape: ``{collection: {item_id: "upsert" | "delete"}}``. Replayed by
    ``FallbackCollection.sync_pending``; last write from this device wins.
    """

    def __init__(self, store: LocalStore, key: str = StorageKeys.PENDING_SYNC) -> None:
        self.store = store
        self.key = key

    def _load(self) -> Dict[str, Dict[str, str]]:
        data = self.store.get(self.key, {})
        return data if isinstance(data, dict) else {}

    def entries(self, collection: str) -> Dict[str, str]:
        return dict(self._load().get(collection, {}))

    def mark(self, collection: str, item_id: str, op: str) -> None:
        data = self._load()
        data.setdefault(collection, {})[item_id] = op
        self.store.set(self.key, data)

    def discard(self, collection: str, item_id: str) -> None:
        data = self._load()
        bucket = data.get(collection)
        if not bucket or item_id not in bucket:
            return
        bucket.pop(item_id, None)
        if not bucket:
            data.pop(collection, None)
        self.store.set(self.key, data)

    def total(self) -> int:
        return sum(len(bucket) for bucket in self._load().values())


_MISS = object()


class FallbackCollection(CollectionStore[M]):
    """Try the remote store first, serve from the local store on any failure.

    Remote successes are mirrored locally. Local-only writes are journaled so
    this device's view stays consistent until ``sync_pending`` replays them.
    """

    def __init__(
        self,
        primary: CollectionStore[M],
        secondary: LocalCollection[M],
        journal: PendingSyncJournal,
        *,
        timeout: float = 5.0,
    ) -> None:
        self.primary = primary
        self.secondary = secondary
        self.journal = journal
        self.timeout = timeout
        self.model = secondary.model
        self.name = secondary.name

    async def _remote(self, op: str, call: Callable[[], Awaitable[Any]]) -> Any:
        try:
            return await asyncio.wait_for(call(), timeout=self.timeout)
        except asyncio.TimeoutError:
            logger.warning("remote_timeout collection=%s op=%s timeout=%ss; using local store", self.name, op, self.timeout)
        except Exception as exc:  # noqa: BLE001 - any remote failure falls back
            logger.warning("remote_failed collection=%s op=%s error=%s; using local store", self.name, op, exc)
        return _MISS

    def _mirror(self, op: str, call: Callable[[], Any]) -> None:
        # Remote already holds the data; a failed local copy only costs offline freshness
        try:
            call()
        except StorageUnavailable as exc:
            logger.warning("local_mirror_failed collection=%s op=%s error=%s", self.name, op, exc)

    def _overlay_pending(self, remote_items: List[M]) -> List[M]:
        pending = self.journal.entries(self.name)
        if not pending:
            return remote_items
        local_by_id = {item.id: item for item in self.secondary.load()}  # type: ignore[attr-defined]
        merged: List[M] = []
        seen: set[str] = set()
        for item in remote_items:
            item_id = item.id  # type: ignore[attr-defined]
            seen.add(item_id)
            op = pending.get(item_id)
            if op == "delete":
                continue
            if op == "upsert" and item_id in local_by_id:
                merged.append(local_by_id[item_id])
            else:
                merged.append(item)
        for item_id, op in pending.items():
            if op == "upsert" and item_id not in seen and item_id in local_by_id:
                merged.append(local_by_id[item_id])
        return merged

    async def get_all(self) -> List[M]:
        remote = await self._remote("get_all", self.primary.get_all)
        if remote is _MISS:
            return self.secondary.load()
        merged = self._overlay_pending(remote)
        self._mirror("get_all", lambda: self.secondary.replace_all(merged))
        return merged

    async def get_by_id(self, item_id: str) -> Optional[M]:
        if item_id in self.journal.entries(self.name):
            return self.secondary.find(item_id)
        remote = await self._remote("get_by_id", lambda: self.primary.get_by_id(item_id))
        if remote is _MISS:
            return self.secondary.find(item_id)
        if remote is not None:
            self._mirror("get_by_id", lambda: self.secondary.put(remote))
        return remote

    async def get_where(self, field: str, value: Any) -> List[M]:
        return [item for item in await self.get_all() if getattr(item, field, None) == value]

    async def upsert(self, item: M) -> M:
        remote = await self._remote("upsert", lambda: self.primary.upsert(item))
        item_id = item.id  # type: ignore[attr-defined]
        if remote is _MISS:
            self.secondary.put(item)
            self.journal.mark(self.name, item_id, "upsert")
            return item
        self._mirror("upsert", lambda: self.secondary.put(item))
        self._mirror("upsert", lambda: self.journal.discard(self.name, item_id))
        return item

    async def delete(self, item_id: str) -> bool:
        remote = await self._remote("delete", lambda: self.primary.delete(item_id))
        if remote is _MISS:
            removed = self.secondary.remove(item_id)
            self.journal.mark(self.name, item_id, "delete")
            return removed
        self._mirror("delete", lambda: self.secondary.remove(item_id))
        self._mirror("delete", lambda: self.journal.discard(self.name, item_id))
        return True

    async def sync_pending(self) -> Dict[str, int]:
        """Replay journaled local writes to the remote store; stops at the first failure."""
        synced = 0
        for item_id, op in self.journal.entries(self.name).items():
            if op == "delete":
                result = await self._remote("sync_delete", lambda: self.primary.delete(item_id))
            else:
                item = self.secondary.find(item_id)
                if item is None:
                    self.journal.discard(self.name, item_id)
                    continue
                result = await self._remote("sync_upsert", lambda: self.primary.upsert(item))
            if result is _MISS:
                break
            self.journal.discard(self.name, item_id)
            synced += 1
        remaining = len(self.journal.entries(self.name))
        if synced:
            logger.info("sync_pending collection=%s synced=%d remaining=%d", self.name, synced, remaining)
        return {"synced": synced, "remaining": remaining}


__all__ = [
    "CollectionStore",
    "LocalCollection",
    "SupabaseCollection",
    "FallbackCollection",
    "PendingSyncJournal",
    "StorageUnavailable",
]
