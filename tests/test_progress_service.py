import pytest

from app.common.errors import NotFound
from app.features.accounts.schemas import UserRole
from app.features.progress.service import ProgressService

pytestmark = pytest.mark.anyio("asyncio")


def _answers(storage, quiz_id, correct):
    quiz = storage.quizzes.find(quiz_id)
    return [q.correct_answer if i < correct else (q.correct_answer + 1) % 4 for i, q in enumerate(quiz.questions)]


async def test_rahul_completes_second_lesson(storage, make_user):
    await storage.users.upsert(
        make_user("rahul", name="Rahul Kumar", eco_points=450, completed_lessons=["lesson-1"], badges=["first-lesson"])
    )
    progress = ProgressService(storage)

    result = await progress.complete_lesson("rahul", "lesson-2")

    assert result.completed is True
    assert result.points_awarded == 50
    assert result.badges_awarded == []
    saved = await storage.users.get_by_id("rahul")
    assert saved.eco_points == 500
    assert saved.level == 3
    assert saved.completed_lessons == ["lesson-1", "lesson-2"]


async def test_fifth_lesson_grants_lesson_master(storage, make_user):
    await storage.users.upsert(
        make_user("rahul", eco_points=450, completed_lessons=["lesson-1", "lesson-2", "lesson-3", "lesson-4"])
    )
    result = await ProgressService(storage).complete_lesson("rahul", "lesson-5")
    assert result.badges_awarded == ["lesson-master"]
    assert result.user.eco_points == 525


async def test_first_lesson_badge_and_repeat_completion(storage, make_user):
    await storage.users.upsert(make_user("u-1"))
    progress = ProgressService(storage)

    first = await progress.complete_lesson("u-1", "lesson-1")
    again = await progress.complete_lesson("u-1", "lesson-1")

    assert first.badges_awarded == ["first-lesson"]
    assert again.completed is False
    assert again.points_awarded == 0
    saved = await storage.users.get_by_id("u-1")
    assert saved.eco_points == 50
    assert saved.completed_lessons == ["lesson-1"]


async def test_quiz_fail_then_pass(storage, make_user):
    await storage.users.upsert(make_user("u-1"))
    progress = ProgressService(storage)

    failed = await progress.submit_quiz("u-1", "quiz-1", _answers(storage, "quiz-1", 3))
    assert failed.score == 60
    assert failed.passed is False
    assert failed.completed is False
    assert (await storage.users.get_by_id("u-1")).completed_quizzes == []

    passed = await progress.submit_quiz("u-1", "quiz-1", _answers(storage, "quiz-1", 4))
    assert passed.score == 80
    assert passed.passed is True
    assert passed.points_awarded == 30

    repeat = await progress.submit_quiz("u-1", "quiz-1", _answers(storage, "quiz-1", 5))
    assert repeat.passed is True
    assert repeat.points_awarded == 0
    saved = await storage.users.get_by_id("u-1")
    assert saved.eco_points == 30
    assert saved.completed_quizzes == ["quiz-1"]


async def test_third_quiz_at_80_grants_quiz_master(storage, make_user):
    await storage.users.upsert(make_user("u-1", completed_quizzes=["quiz-1", "quiz-2"]))
    result = await ProgressService(storage).submit_quiz("u-1", "quiz-3", _answers(storage, "quiz-3", 4))
    assert result.badges_awarded == ["quiz-master"]


async def test_unknown_content_is_reported(storage, make_user):
    await storage.users.upsert(make_user("u-1"))
    with pytest.raises(NotFound):
        await ProgressService(storage).complete_lesson("u-1", "lesson-99")


async def test_grants_on_missing_user_are_silent(storage):
    progress = ProgressService(storage)
    assert await progress.award_points("ghost", 10) is None
    assert await progress.grant_badge("ghost", "top-10") is None


async def test_session_snapshot_follows_progress(storage, make_user):
    user = make_user("u-1")
    await storage.users.upsert(user)
    storage.session.start(user)

    await ProgressService(storage).complete_lesson("u-1", "lesson-1")

    assert storage.session.current().eco_points == 50


async def test_get_progress(storage, make_user):
    await storage.users.upsert(make_user("u-1", eco_points=450, badges=["first-lesson", "unknown"]))
    summary = await ProgressService(storage).get_progress("u-1")
    assert summary.level_name == "Eco Enthusiast"
    assert summary.points_to_next_level == 150
    assert summary.next_level.level == 4
    assert [b.id for b in summary.badges] == ["first-lesson"]


async def test_leaderboard_ranks_students_only(storage, make_user):
    await storage.users.upsert(make_user("a", eco_points=100))
    await storage.users.upsert(make_user("b", eco_points=700, badges=["first-lesson"]))
    await storage.users.upsert(make_user("c", eco_points=400, school_id="school-2"))
    await storage.users.upsert(make_user("t", role=UserRole.teacher, eco_points=9999))

    board = await ProgressService(storage).leaderboard()
    assert [(e.rank, e.user_id) for e in board] == [(1, "b"), (2, "c"), (3, "a")]
    assert board[0].badge_count == 1

    local = await ProgressService(storage).leaderboard(school_id="school-1")
    assert [e.user_id for e in local] == ["b", "a"]
