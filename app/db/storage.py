"""Storage facade: every collection the services use, wired once.

Users and submissions go to Supabase when it is configured and fall back to
the local store; everything else is local-only.
"""
from __future__ import annotations

import logging
from functools import lru_cache
from typing import Any, Awaitable, Callable, Dict, List, Optional, Type

from app.common.security import hash_password
from app.common.session import SessionContext
from app.core.config import Settings, get_settings
from app.db.collections import (
    CollectionStore,
    FallbackCollection,
    LocalCollection,
    M,
    PendingSyncJournal,
    SupabaseCollection,
)
from app.db.local_store import LocalStore, StorageKeys
from app.db.seed import SUPER_ADMIN_EMAIL, demo_users, super_admin_account
from app.db.supabase import get_supabase, reset_client
from app.features.accounts.schemas import (
    PLATFORM_SCHOOL_ID,
    PLATFORM_SCHOOL_NAME,
    ActivityLogEntry,
    AdminCode,
    User,
    UserRole,
)
from app.features.content.catalog import default_challenges, default_lessons, default_quizzes
from app.features.content.schemas import Challenge, Lesson, Quiz
from app.features.submissions.schemas import ChallengeSubmission

logger = logging.getLogger("storage")

ClientFactory = Callable[[], Awaitable[Any]]


class Storage:
    def __init__(
        self,
        settings: Optional[Settings] = None,
        *,
        local: Optional[LocalStore] = None,
        client_factory: Optional[ClientFactory] = None,
    ) -> None:
        self.settings = settings or get_settings()
        self.local = local or LocalStore(self.settings.local_store_dir or None)
        self.journal = PendingSyncJournal(self.local)
        self.session = SessionContext(self.local)
        if client_factory is None and self.settings.remote_configured:
            client_factory = get_supabase
        self.remote_enabled = client_factory is not None
        self._fallbacks: List[FallbackCollection] = []

        self.users: CollectionStore[User] = self._shared(
            StorageKeys.USERS, "users", User, client_factory, order_by="created_at"
        )
        self.submissions: CollectionStore[ChallengeSubmission] = self._shared(
            StorageKeys.SUBMISSIONS, "challenge_submissions", ChallengeSubmission, client_factory,
            order_by="submitted_at",
        )
        self.lessons = LocalCollection(self.local, StorageKeys.LESSONS, Lesson, default_factory=default_lessons)
        self.quizzes = LocalCollection(self.local, StorageKeys.QUIZZES, Quiz, default_factory=default_quizzes)
        self.challenges = LocalCollection(
            self.local, StorageKeys.CHALLENGES, Challenge, default_factory=default_challenges
        )
        self.admin_codes = LocalCollection(self.local, StorageKeys.ADMIN_CODES, AdminCode)
        self.activity_logs = LocalCollection(self.local, StorageKeys.ACTIVITY_LOGS, ActivityLogEntry)

        logger.info("storage_ready remote=%s local_dir=%s", self.remote_enabled, self.settings.local_store_dir or "<memory>")

    def _shared(
        self,
        key: str,
        table: str,
        model: Type[M],
        client_factory: Optional[ClientFactory],
        *,
        order_by: Optional[str] = None,
    ) -> CollectionStore[M]:
        local = LocalCollection(self.local, key, model, name=table)
        if client_factory is None:
            return local
        remote = SupabaseCollection(table, model, client_factory, order_by=order_by)
        fallback = FallbackCollection(remote, local, self.journal, timeout=self.settings.remote_timeout_seconds)
        self._fallbacks.append(fallback)
        return fallback

    async def initialize(self) -> Dict[str, int]:
        """First-run bootstrap; safe to call on every start."""
        users = await self.users.get_all()
        migrated = await self._migrate_passwords(users)

        for content in (self.lessons, self.quizzes, self.challenges):
            content.load()

        seeded = 0
        if not users:
            for user in demo_users(self.settings.default_password):
                await self.users.upsert(user)
                seeded += 1
            logger.info("seed_demo_users count=%d", seeded)
        else:
            if not any(u.email.lower() == SUPER_ADMIN_EMAIL for u in users):
                await self.users.upsert(super_admin_account(self.settings.default_password))
                seeded += 1
                logger.info("seed_super_admin email=%s", SUPER_ADMIN_EMAIL)
            await self._normalise_super_admins(users)
        return {"migrated": migrated, "seeded": seeded}

    async def _migrate_passwords(self, users: List[User]) -> int:
        count = 0
        default_hash = hash_password(self.settings.default_password)
        for user in users:
            if user.password:
                continue
            user.password = default_hash
            await self.users.upsert(user)
            count += 1
        if count:
            logger.info("migrate_passwords count=%d", count)
        return count

    async def _normalise_super_admins(self, users: List[User]) -> None:
        for user in users:
            if user.role is not UserRole.super_admin:
                continue
            if user.school_id == PLATFORM_SCHOOL_ID and user.school_name == PLATFORM_SCHOOL_NAME:
                continue
            user.school_id = PLATFORM_SCHOOL_ID
            user.school_name = PLATFORM_SCHOOL_NAME
            await self.users.upsert(user)
            logger.info("normalise_super_admin user_id=%s", user.id)

    def pending_sync_count(self) -> int:
        return self.journal.total()

    async def sync_pending(self) -> Dict[str, Dict[str, int]]:
        """Replay local-only writes to Supabase; no-op when it is not configured."""
        return {fb.name: await fb.sync_pending() for fb in self._fallbacks}


@lru_cache()
def get_storage() -> Storage:
    return Storage()


def reset_storage() -> None:
    get_storage.cache_clear()
    reset_client()
