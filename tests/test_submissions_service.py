import pytest

from app.common.errors import Conflict, NotFound, PolicyViolation, ValidationFailed
from app.features.accounts.schemas import UserRole
from app.features.progress.service import ProgressService
from app.features.submissions.schemas import ChallengeDisplayStatus, SubmissionStatus
from app.features.submissions.service import SubmissionsService

pytestmark = pytest.mark.anyio("asyncio")


@pytest.fixture
async def people(storage, make_user):
    student = make_user("stu", name="Rahul Kumar")
    teacher = make_user("tea", role=UserRole.teacher)
    for user in (student, teacher):
        await storage.users.upsert(user)
    return student, teacher


async def _submit(service, student, challenge_id="challenge-5"):
    return await service.create(student, challenge_id, "Did it", "https://files.example/proof.jpg")


async def test_create_validates_input(storage, people):
    student, _ = people
    service = SubmissionsService(storage)

    with pytest.raises(ValidationFailed, match="describe"):
        await service.create(student, "challenge-1", "   ", "https://files.example/p.jpg")
    with pytest.raises(ValidationFailed, match="proof"):
        await service.create(student, "challenge-1", "Planted a neem tree", None)
    with pytest.raises(NotFound):
        await service.create(student, "challenge-404", "x", "y")
    assert await storage.submissions.get_all() == []


async def test_create_snapshots_user(storage, people):
    student, _ = people
    submission = await _submit(SubmissionsService(storage), student)
    assert submission.status is SubmissionStatus.pending
    assert submission.user_name == "Rahul Kumar"
    assert submission.school_id == "school-1"
    assert submission.id.startswith("submission-")


async def test_first_approval_runs_cascade(storage, people):
    student, teacher = people
    service = SubmissionsService(storage)
    submission = await _submit(service, student, "challenge-1")

    result = await service.approve(submission.id, teacher)

    assert result.submission.status is SubmissionStatus.approved
    assert result.submission.verified_by == "tea"
    assert result.submission.verified_at is not None
    assert result.points_awarded == 100
    assert result.badges_awarded == ["first-challenge", "tree-planter"]
    saved = await storage.users.get_by_id("stu")
    assert saved.completed_challenges == ["challenge-1"]
    assert saved.eco_points == 100


async def test_approving_twice_is_a_no_op(storage, people):
    student, teacher = people
    service = SubmissionsService(storage)
    submission = await _submit(service, student)

    await service.approve(submission.id, teacher)
    again = await service.approve(submission.id, teacher)

    assert again.completed is False
    assert again.points_awarded == 0
    saved = await storage.users.get_by_id("stu")
    assert saved.eco_points == 100
    assert saved.badges == ["first-challenge"]


async def test_fifth_challenge_grants_challenge_hero(storage, make_user):
    student = make_user(
        "stu", completed_challenges=["challenge-1", "challenge-2", "challenge-3", "challenge-4"]
    )
    teacher = make_user("tea", role=UserRole.teacher)
    await storage.users.upsert(student)
    service = SubmissionsService(storage)
    submission = await _submit(service, student, "challenge-6")

    result = await service.approve(submission.id, teacher)

    assert result.badges_awarded == ["challenge-hero"]
    assert result.points_awarded == 250


async def test_reject_has_no_side_effects_and_is_terminal(storage, people):
    student, teacher = people
    service = SubmissionsService(storage)
    submission = await _submit(service, student)

    rejected = await service.reject(submission.id, teacher)
    assert rejected.submission.status is SubmissionStatus.rejected
    assert rejected.submission.verified_by == "tea"
    assert (await storage.users.get_by_id("stu")).eco_points == 0

    with pytest.raises(PolicyViolation):
        await service.approve(submission.id, teacher)
    with pytest.raises(PolicyViolation):
        await service.reject(submission.id, teacher)


async def test_resubmission_after_rejection_drives_status(storage, people):
    student, teacher = people
    service = SubmissionsService(storage)
    assert (await service.status_for("stu", "challenge-5")).status is ChallengeDisplayStatus.not_attempted

    first = await _submit(service, student)
    with pytest.raises(Conflict):
        await _submit(service, student)
    await service.reject(first.id, teacher)
    assert (await service.status_for("stu", "challenge-5")).status is ChallengeDisplayStatus.rejected

    second = await _submit(service, student)
    status = await service.status_for("stu", "challenge-5")
    assert status.status is ChallengeDisplayStatus.pending
    assert status.submission_id == second.id


async def test_only_reviewers_of_the_school_may_review(storage, people, make_user):
    student, _ = people
    service = SubmissionsService(storage)
    submission = await _submit(service, student)

    with pytest.raises(PolicyViolation):
        await service.approve(submission.id, student)
    with pytest.raises(PolicyViolation):
        await service.approve(submission.id, make_user("other", role=UserRole.teacher, school_id="school-9"))
    result = await service.approve(submission.id, make_user("root", role=UserRole.super_admin, school_id="x"))
    assert result.submission.status is SubmissionStatus.approved


async def test_cascade_failure_keeps_status(storage, people, monkeypatch):
    student, teacher = people
    progress = ProgressService(storage)
    service = SubmissionsService(storage, progress)
    submission = await _submit(service, student)

    async def broken(user_id, challenge_id):
        raise NotFound("User not found")

    monkeypatch.setattr(progress, "complete_challenge", broken)
    result = await service.approve(submission.id, teacher)
    assert result.submission.status is SubmissionStatus.approved
    assert result.points_awarded == 0

    monkeypatch.undo()
    rerun = await service.approve(submission.id, teacher)
    assert rerun.completed is True
    assert rerun.points_awarded == 100


async def test_review_queue_lists_school_newest_first(storage, people, make_user):
    student, teacher = people
    other = make_user("far", school_id="school-2")
    await storage.users.upsert(other)
    service = SubmissionsService(storage)
    a = await _submit(service, student, "challenge-5")
    b = await _submit(service, student, "challenge-7")
    await _submit(service, other, "challenge-5")

    queue = await service.list_for_school("school-1", SubmissionStatus.pending)
    assert [s.id for s in queue] == [b.id, a.id]
