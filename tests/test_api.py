import anyio
import pytest
from fastapi.testclient import TestClient

from app.common.deps import get_store
from app.db.local_store import LocalStore
from app.db.storage import Storage
from app.features.accounts.schemas import AccountStatus
from app.main import app


@pytest.fixture
def api_storage(settings):
    storage = Storage(settings, local=LocalStore())
    anyio.run(storage.initialize)
    return storage


@pytest.fixture
def client(api_storage):
    app.dependency_overrides[get_store] = lambda: api_storage
    yield TestClient(app)
    app.dependency_overrides.clear()


def _login(client, email, password="password123"):
    response = client.post("/auth/login", json={"email": email, "password": password})
    assert response.status_code == 200, response.text
    return response.json()


def test_meta_endpoints(client):
    assert client.get("/").json()["status"] == "ok"
    health = client.get("/healthz")
    assert health.status_code == 200
    assert health.json()["components"]["remote_store"] == "not-configured"
    assert "X-Request-Id" in health.headers
    config = client.get("/config").json()
    assert config["remoteConfigured"] is False
    assert config["pollIntervalSeconds"] == 30


def test_protected_routes_need_login(client):
    response = client.get("/auth/me")
    assert response.status_code == 401
    assert response.json()["detail"]["error_code"] == "E_AUTH"


def test_login_errors_are_structured(client):
    response = client.post("/auth/login", json={"email": "rahul@student.com", "password": "nope"})
    assert response.status_code == 401
    assert response.json()["detail"] == {"error_code": "E_AUTH", "message": "Invalid email or password"}


def test_student_flow(client):
    body = _login(client, "rahul@student.com")
    assert body["redirectTo"] == "/student-dashboard"
    assert "password" not in body["user"]

    lessons = client.get("/content/lessons").json()
    assert [l["id"] for l in lessons][:2] == ["lesson-1", "lesson-2"]

    done = client.post("/progress/lessons/lesson-3/complete").json()
    assert done["completed"] is True
    assert done["user"]["ecoPoints"] == 500
    assert done["user"]["level"] == 3

    me = client.get("/progress/me").json()
    assert me["levelName"] == "Eco Enthusiast"
    assert me["pointsToNextLevel"] == 100

    board = client.get("/progress/leaderboard").json()
    assert board[0]["userName"] == "Rahul Kumar"
    assert board[0]["rank"] == 1


def test_quiz_submission(client):
    _login(client, "rahul@student.com")
    quiz = client.get("/content/quizzes/quiz-2").json()
    answers = [q["correctAnswer"] for q in quiz["questions"]]
    result = client.post("/progress/quizzes/quiz-2/submit", json={"answers": answers}).json()
    assert result["score"] == 100
    assert result["pointsAwarded"] == 30


def test_submission_review_flow(client):
    _login(client, "rahul@student.com")
    created = client.post(
        "/submissions",
        json={"challengeId": "challenge-2", "description": "A week without plastic", "photoUrl": "https://f/p.jpg"},
    )
    assert created.status_code == 201, created.text
    submission_id = created.json()["id"]
    status = client.get("/submissions/status/challenge-2").json()
    assert status["status"] == "pending"

    missing = client.post("/submissions", json={"challengeId": "challenge-3", "description": ""})
    assert missing.status_code == 422
    assert missing.json()["detail"]["error_code"] == "E_VALIDATION"

    _login(client, "rajesh@admin.com")
    queue = client.get("/submissions/queue").json()
    assert [s["id"] for s in queue] == [submission_id]

    review = client.post(f"/submissions/{submission_id}/approve").json()
    assert review["pointsAwarded"] == 150
    assert review["badgesAwarded"] == ["plastic-warrior"]


def test_pending_teacher_is_blocked(client):
    body = _login(client, "priya@teacher.com")
    assert body["pendingApproval"] is True
    assert body["redirectTo"] == "/pending-approval"

    assert client.get("/submissions/queue").status_code == 403
    gate = client.get("/auth/gate", params={"destination": "/teacher-dashboard"}).json()
    assert gate["redirectTo"] == "/pending-approval"


def test_admin_moderation(client):
    _login(client, "rajesh@admin.com")
    users = client.get("/admin/users").json()
    priya = next(u for u in users if u["email"] == "priya@teacher.com")

    approved = client.post(f"/admin/users/{priya['id']}/approve")
    assert approved.json()["status"] == "active"

    students = client.get("/admin/users", params={"role": "student"}).json()
    assert {u["role"] for u in students} == {"student"}

    assert client.get("/admin/activity").status_code == 403


def test_super_admin_codes_and_guard(client):
    _login(client, "superadmin@ecolearn.com")
    code = client.post("/admin/admin-codes", json={"schoolName": "Lake View School"}).json()
    assert len(code["code"]) == 5
    again = client.post("/admin/admin-codes", json={"schoolName": "Lake View School"}).json()
    assert again["code"] == code["code"]

    me = client.get("/auth/me").json()
    blocked = client.put(f"/admin/users/{me['id']}/status", json={"status": "disabled"})
    assert blocked.status_code == 403
    assert blocked.json()["detail"]["error_code"] == "E_SUPER_ADMIN_PROTECTED"

    activity = client.get("/admin/activity").json()
    assert activity[0]["action"] == "generate_admin_code"

    sync = client.post("/admin/sync").json()
    assert sync["data"]["collections"] == {}


def test_teacher_edits_content(client, api_storage):
    teacher = anyio.run(api_storage.users.get_by_id, "demo-teacher-1")
    teacher.status = AccountStatus.active
    anyio.run(api_storage.users.upsert, teacher)

    _login(client, "priya@teacher.com")
    lesson = {
        "id": "lesson-6",
        "title": "Soil Health",
        "topic": "Agriculture",
        "duration": 10,
        "difficulty": "beginner",
        "ecoPoints": 40,
    }
    assert client.post("/content/lessons", json=lesson).status_code == 201
    lesson["title"] = "Healthy Soil"
    assert client.put("/content/lessons/lesson-6", json=lesson).json()["title"] == "Healthy Soil"
    assert client.delete("/content/lessons/lesson-6").status_code == 200
    assert client.get("/content/lessons/lesson-6").status_code == 404

    _login(client, "rahul@student.com")
    assert client.post("/content/lessons", json=lesson).status_code == 403


def test_profile_routes(client):
    _login(client, "rahul@student.com")

    updated = client.put(
        "/auth/me", json={"name": "Rahul K", "schoolName": "Green Valley High School", "classGrade": "11th Grade"}
    )
    assert updated.status_code == 200, updated.text
    assert updated.json()["classGrade"] == "11th Grade"
    assert client.get("/auth/me").json()["name"] == "Rahul K"

    avatar = client.put("/auth/me/avatar", json={"avatarUrl": "https://files.example/me.png"})
    assert avatar.json()["avatarUrl"] == "https://files.example/me.png"
    assert client.put("/auth/me/avatar", json={"avatarUrl": None}).json()["avatarUrl"] is None

    wrong = client.put(
        "/auth/me/password",
        json={"currentPassword": "nope", "newPassword": "fresh-pw", "confirmPassword": "fresh-pw"},
    )
    assert wrong.status_code == 422
    assert wrong.json()["detail"]["error_code"] == "E_BAD_PASSWORD"
    changed = client.put(
        "/auth/me/password",
        json={"currentPassword": "password123", "newPassword": "fresh-pw", "confirmPassword": "fresh-pw"},
    )
    assert changed.status_code == 200
    _login(client, "rahul@student.com", "fresh-pw")


def test_pending_teacher_cannot_edit_profile(client):
    _login(client, "priya@teacher.com")
    response = client.put("/auth/me", json={"name": "Priya", "schoolName": "Green Valley High School"})
    assert response.status_code == 403
    assert response.json()["detail"]["error_code"] == "E_PENDING"


def test_second_admin_for_demo_school_is_rejected(client):
    _login(client, "superadmin@ecolearn.com")
    code = client.post("/admin/admin-codes", json={"schoolName": "Green Valley High School"}).json()
    response = client.post(
        "/auth/register",
        json={
            "name": "Second Admin",
            "email": "second@admin.com",
            "password": "secret1",
            "confirmPassword": "secret1",
            "role": "admin",
            "schoolName": "Green Valley High School",
            "adminCode": code["code"],
        },
    )
    assert response.status_code == 409
    assert response.json()["detail"]["error_code"] == "E_CONFLICT"
