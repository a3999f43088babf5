import pytest

from app.db.local_store import LocalStore, StorageKeys
from app.features.accounts.schemas import UserRole
from app.features.submissions.schemas import ChallengeSubmission

pytestmark = pytest.mark.anyio("asyncio")


def test_local_store_file_roundtrip(tmp_path):
    store = LocalStore(tmp_path)
    store.set("eco_users", [{"id": "u-1"}])
    assert LocalStore(tmp_path).get("eco_users") == [{"id": "u-1"}]
    store.remove("eco_users")
    assert store.get("eco_users", []) == []


def test_local_store_corrupt_blob_reads_as_default(tmp_path):
    (tmp_path / "eco_users.json").write_text("{not json", encoding="utf-8")
    assert LocalStore(tmp_path).get("eco_users", []) == []


async def test_local_user_blob_is_camel_case(storage, make_user):
    await storage.users.upsert(make_user("u-1", eco_points=120))
    blob = storage.local.get(StorageKeys.USERS)[0]
    assert blob["ecoPoints"] == 120
    assert blob["schoolId"] == "school-1"
    again = await storage.users.get_by_id("u-1")
    assert again.eco_points == 120
    assert again.level == 2


async def test_save_succeeds_when_remote_unreachable(remote_storage, fake_supabase, make_user):
    fake_supabase.fail = ConnectionError("network down")

    await remote_storage.users.upsert(make_user("u-1"))
    users = await remote_storage.users.get_all()

    assert [u.id for u in users] == ["u-1"]
    assert remote_storage.pending_sync_count() == 1


async def test_remote_timeout_falls_back(remote_storage, fake_supabase, make_user):
    fake_supabase.hang = True
    saved = await remote_storage.users.upsert(make_user("u-2"))
    assert saved.id == "u-2"
    assert (await remote_storage.users.get_by_id("u-2")).id == "u-2"


async def test_remote_write_is_mirrored_locally(remote_storage, fake_supabase, make_user):
    await remote_storage.users.upsert(make_user("u-1", eco_points=50))

    assert fake_supabase.tables["users"][0]["eco_points"] == 50
    assert remote_storage.local.get(StorageKeys.USERS)[0]["id"] == "u-1"
    assert remote_storage.pending_sync_count() == 0

    fake_supabase.fail = RuntimeError("schema cache")
    assert [u.id for u in await remote_storage.users.get_all()] == ["u-1"]


async def test_pending_local_write_wins_over_stale_remote(remote_storage, fake_supabase, make_user):
    await remote_storage.users.upsert(make_user("u-1", eco_points=10))

    fake_supabase.fail = ConnectionError("down")
    await remote_storage.users.upsert(make_user("u-1", eco_points=300))
    fake_supabase.fail = None

    users = await remote_storage.users.get_all()
    assert users[0].eco_points == 300
    assert (await remote_storage.users.get_by_id("u-1")).eco_points == 300


async def test_sync_pending_replays_local_writes(remote_storage, fake_supabase, make_user):
    await remote_storage.users.upsert(make_user("u-keep"))
    fake_supabase.fail = ConnectionError("down")
    await remote_storage.users.upsert(make_user("u-new"))
    await remote_storage.users.delete("u-keep")

    stalled = await remote_storage.sync_pending()
    assert stalled["users"]["synced"] == 0
    assert stalled["users"]["remaining"] == 2

    fake_supabase.fail = None
    result = await remote_storage.sync_pending()

    assert result["users"] == {"synced": 2, "remaining": 0}
    assert [row["id"] for row in fake_supabase.tables["users"]] == ["u-new"]
    assert remote_storage.pending_sync_count() == 0


async def test_submissions_filter_by_user(remote_storage, make_user):
    for idx, user_id in enumerate(["a", "b", "a"]):
        await remote_storage.submissions.upsert(
            ChallengeSubmission(
                id=f"s-{idx}",
                challenge_id="challenge-1",
                user_id=user_id,
                user_name=user_id,
                description="done",
            )
        )
    mine = await remote_storage.submissions.get_where("user_id", "a")
    assert sorted(s.id for s in mine) == ["s-0", "s-2"]


async def test_invalid_remote_rows_are_skipped(remote_storage, fake_supabase):
    fake_supabase.tables["users"] = [
        {"id": "ok", "name": "Ok", "email": "ok@x.com", "role": UserRole.student.value},
        {"id": "bad", "role": "wizard"},
    ]
    users = await remote_storage.users.get_all()
    assert [u.id for u in users] == ["ok"]
