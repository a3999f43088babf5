import re
import secrets
from datetime import datetime, timezone
from typing import Any, List

_NON_SLUG = re.compile(r"\s+")


def epoch_millis() -> int:
    """Current UTC time in milliseconds"""
    return int(datetime.now(timezone.utc).timestamp() * 1000)


def new_id(prefix: str) -> str:
    """Record id of the form ``<prefix>-<millis>-<random>``"""
    return f"{prefix}-{epoch_millis()}-{secrets.token_hex(4)}"


def slugify(name: str) -> str:
    """Lower-case, whitespace runs become dashes"""
    return _NON_SLUG.sub("-", name.strip().lower())


def limit_results(items: List[Any], limit: int | None) -> List[Any]:
    if limit is None or limit <= 0:
        return items
    return items[:limit]

