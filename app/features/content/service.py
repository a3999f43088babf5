"""Lessons, quizzes and challenges: read by everyone, edited by teachers."""
from __future__ import annotations

import logging
from typing import Dict, List

from app.common.errors import NotFound, PolicyViolation
from app.db.collections import LocalCollection
from app.db.storage import Storage
from app.features.accounts.schemas import ContentKind, User, UserRole
from app.features.content.schemas import Challenge, Lesson, Quiz

logger = logging.getLogger("content.service")

ContentItem = Lesson | Quiz | Challenge

EDITOR_ROLES = frozenset({UserRole.teacher})


class ContentService:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage
        self._collections: Dict[ContentKind, LocalCollection] = {
            ContentKind.lesson: storage.lessons,
            ContentKind.quiz: storage.quizzes,
            ContentKind.challenge: storage.challenges,
        }

    def _collection(self, kind: ContentKind) -> LocalCollection:
        return self._collections[kind]

    @staticmethod
    def _ensure_editor(actor: User) -> None:
        if actor.role not in EDITOR_ROLES:
            raise PolicyViolation("Only teachers can edit content")

    def list(self, kind: ContentKind) -> List[ContentItem]:
        return self._collection(kind).load()

    def get(self, kind: ContentKind, item_id: str) -> ContentItem:
        item = self._collection(kind).find(item_id)
        if item is None:
            raise NotFound(f"{kind.value.capitalize()} not found")
        return item

    def save(self, actor: User, kind: ContentKind, item: ContentItem) -> ContentItem:
        """Create or overwrite in place; there is no versioning."""
        self._ensure_editor(actor)
        collection = self._collection(kind)
        if not isinstance(item, collection.model):
            raise TypeError(f"expected {collection.model.__name__}, got {type(item).__name__}")
        collection.put(item)
        logger.info("content_saved kind=%s id=%s actor_id=%s", kind.value, item.id, actor.id)
        return item

    def delete(self, actor: User, kind: ContentKind, item_id: str) -> None:
        self._ensure_editor(actor)
        if not self._collection(kind).remove(item_id):
            raise NotFound(f"{kind.value.capitalize()} not found")
        logger.info("content_deleted kind=%s id=%s actor_id=%s", kind.value, item_id, actor.id)
