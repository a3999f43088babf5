"""Append-only moderation log, newest first, capped."""
from __future__ import annotations

import logging
from typing import List, Optional

from app.common.utils import limit_results, new_id
from app.db.storage import Storage
from app.features.accounts.schemas import ActivityLogEntry, User

logger = logging.getLogger("accounts.activity")


class ActivityAction:
    APPROVE_TEACHER = "approve_teacher"
    DISABLE_USER = "disable_user"
    ACTIVATE_USER = "activate_user"
    DELETE_USER = "delete_user"
    GENERATE_ADMIN_CODE = "generate_admin_code"


class ActivityLog:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self.max_entries = storage.settings.max_activity_logs

    def record(
        self,
        actor: User,
        action: str,
        *,
        target: Optional[User] = None,
        details: Optional[str] = None,
    ) -> ActivityLogEntry:
        entry = ActivityLogEntry(
            id=new_id("log"),
            action=action,
            actor_id=actor.id,
            actor_name=actor.name,
            actor_role=actor.role,
            target_user_id=target.id if target else None,
            target_user_name=target.name if target else None,
            details=details,
        )
        entries = self.storage.activity_logs.load()
        entries.insert(0, entry)
        # oldest evicted first
        self.storage.activity_logs.replace_all(entries[: self.max_entries])
        logger.info(
            "activity action=%s actor_id=%s target_id=%s",
            action,
            actor.id,
            entry.target_user_id,
        )
        return entry

    def recent(self, limit: Optional[int] = None) -> List[ActivityLogEntry]:
        return limit_results(self.storage.activity_logs.load(), limit)
