"""Logged-in user for this device.

Always held in the local store, whichever backend serves entity data. It is a
cache of identity, not a source of truth: ``refresh`` re-reads the user.
"""
from __future__ import annotations

import logging
from typing import Optional

from pydantic import ValidationError

from app.db.local_store import LocalStore, StorageKeys
from app.features.accounts.schemas import User

logger = logging.getLogger("session")


class SessionContext:
    def __init__(self, store: LocalStore, key: str = StorageKeys.CURRENT_USER) -> None:
        self.store = store
        self.key = key

    def start(self, user: User) -> User:
        self.store.set(self.key, user.to_blob())
        logger.info("session_start user_id=%s role=%s", user.id, user.role.value)
        return user

    def current(self) -> Optional[User]:
        blob = self.store.get(self.key)
        if not blob:
            return None
        try:
            return User.model_validate(blob)
        except ValidationError as exc:
            logger.warning("session_corrupt error=%s; clearing", exc)
            self.store.remove(self.key)
            return None

    def refresh(self, user: User) -> None:
        """Replace the cached copy when ``user`` is the one logged in."""
        active = self.current()
        if active is not None and active.id == user.id:
            self.store.set(self.key, user.to_blob())

    def end(self) -> None:
        active = self.current()
        self.store.remove(self.key)
        if active is not None:
            logger.info("session_end user_id=%s", active.id)

    def clear_if(self, user_id: str) -> bool:
        active = self.current()
        if active is None or active.id != user_id:
            return False
        self.end()
        return True
