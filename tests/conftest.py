import os
import sys

import pytest

# Ensure repo root on sys.path for imports like `app...`
ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), os.pardir))
if ROOT not in sys.path:
    sys.path.insert(0, ROOT)

# Tests never talk to a real project
for _name in ("SUPABASE_URL", "SUPABASE_ANON_KEY", "SUPABASE_KEY"):
    os.environ[_name] = ""
os.environ["LOCAL_STORE_DIR"] = ""

from app.core.config import Settings  # noqa: E402
from app.db.local_store import LocalStore  # noqa: E402
from app.db.storage import Storage  # noqa: E402
from app.features.accounts.schemas import User, UserRole  # noqa: E402
from fakesupabase import FakeAsyncSupabase  # noqa: E402


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def settings():
    s = Settings()
    s.remote_timeout_seconds = 0.05
    s.max_activity_logs = 500
    return s


@pytest.fixture
def storage(settings):
    """Local-only storage, in memory."""
    return Storage(settings, local=LocalStore())


@pytest.fixture
def fake_supabase():
    return FakeAsyncSupabase()


@pytest.fixture
def remote_storage(settings, fake_supabase):
    """Storage backed by the fake Supabase client, falling back to memory."""

    async def factory():
        return fake_supabase

    return Storage(settings, local=LocalStore(), client_factory=factory)


@pytest.fixture
def make_user():
    def _make(user_id="u-1", role=UserRole.student, school_id="school-1", **extra):
        data = {
            "id": user_id,
            "name": extra.pop("name", f"User {user_id}"),
            "email": extra.pop("email", f"{user_id}@example.com"),
            "role": role,
            "school_id": school_id,
            "school_name": extra.pop("school_name", "Green Valley High School"),
            "class_grade": "10th Grade" if role is UserRole.student else None,
        }
        data.update(extra)
        return User(**data)

    return _make
