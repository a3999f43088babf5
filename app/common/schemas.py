from __future__ import annotations
from pydantic import AfterValidator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel
from typing import Annotated, Optional, Dict, Any
from datetime import datetime, timezone


def _ensure_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


# Naive timestamps from older local records are read as UTC so ordering never mixes kinds
UtcDateTime = Annotated[datetime, AfterValidator(_ensure_utc)]


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class EcoModel(BaseModel):
    """Base for persisted records.

    Python/Supabase use snake_case names; the local JSON store keeps the
    camelCase shape (``by_alias=True``). Either form validates.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    def to_row(self) -> Dict[str, Any]:
        return self.model_dump(mode="json")

    def to_blob(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)

# STATUS SCHEMAS

class StatusResponse(BaseModel):
    """Generic status response"""
    status: str
    message: str
    data: Optional[Dict[str, Any]] = None

class ClientConfigResponse(EcoModel):
    """Settings a polling client needs"""
    remote_configured: bool
    poll_interval_seconds: int
