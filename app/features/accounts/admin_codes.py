"""Single-use 5-digit codes that authorise one admin account per school."""
from __future__ import annotations

import logging
import secrets
from typing import List, Optional

from app.common.errors import Conflict, ValidationFailed
from app.common.schemas import utcnow
from app.common.utils import new_id, slugify
from app.db.storage import Storage
from app.features.accounts.schemas import AdminCode

logger = logging.getLogger("accounts.admin_codes")

CODE_MIN = 10000
CODE_MAX = 99999


def school_id_for(school_name: str) -> str:
    return f"school-{slugify(school_name)}"


class AdminCodeRegistry:
    def __init__(self, storage: Storage) -> None:
        self.storage = storage

    def list(self) -> List[AdminCode]:
        return self.storage.admin_codes.load()

    def _new_code(self, taken: set[str]) -> str:
        if len(taken) > CODE_MAX - CODE_MIN:
            raise Conflict("No admin codes left to issue")
        while True:
            code = str(secrets.randbelow(CODE_MAX - CODE_MIN + 1) + CODE_MIN)
            if code not in taken:
                return code

    def generate(self, school_name: str) -> AdminCode:
        """Return the school's unused code, or issue a new one."""
        name = (school_name or "").strip()
        if not name:
            raise ValidationFailed("Please enter a school name")
        school_id = school_id_for(name)
        codes = self.list()
        for existing in codes:
            if existing.is_used:
                continue
            if existing.school_id == school_id or existing.school_name.lower() == name.lower():
                return existing
        created = AdminCode(
            id=new_id("admin-code"),
            code=self._new_code({c.code for c in codes}),
            school_id=school_id,
            school_name=name,
        )
        self.storage.admin_codes.put(created)
        logger.info("admin_code_issued school_id=%s", school_id)
        return created

    def find(self, code: str) -> Optional[AdminCode]:
        code = (code or "").strip()
        for item in self.list():
            if item.code == code:
                return item
        return None

    def mark_used(self, admin_code: AdminCode) -> AdminCode:
        if admin_code.is_used:
            raise Conflict(
                "This admin code has already been used. Only one admin account is allowed per school."
            )
        admin_code.is_used = True
        admin_code.used_at = utcnow()
        self.storage.admin_codes.put(admin_code)
        logger.info("admin_code_used school_id=%s", admin_code.school_id)
        return admin_code
