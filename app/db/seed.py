"""Demo accounts seeded into an empty user store."""
from __future__ import annotations

from typing import List

from app.common.security import hash_password
from app.features.accounts.schemas import (
    PLATFORM_SCHOOL_ID,
    PLATFORM_SCHOOL_NAME,
    AccountStatus,
    User,
    UserRole,
)

SUPER_ADMIN_EMAIL = "superadmin@ecolearn.com"
SUPER_ADMIN_ID = "demo-super-admin-1"

DEMO_SCHOOL_ID = "school-1"
DEMO_SCHOOL_NAME = "Green Valley High School"


def super_admin_account(default_password: str) -> User:
    return User(
        id=SUPER_ADMIN_ID,
        name="EcoLearn Super Admin",
        email=SUPER_ADMIN_EMAIL,
        password=hash_password(default_password),
        role=UserRole.super_admin,
        school_id=PLATFORM_SCHOOL_ID,
        school_name=PLATFORM_SCHOOL_NAME,
        status=AccountStatus.active,
    )


def demo_users(default_password: str) -> List[User]:
    """One account per role, all sharing ``default_password``."""
    hashed = hash_password(default_password)
    return [
        super_admin_account(default_password),
        User(
            id="demo-student-1",
            name="Rahul Kumar",
            email="rahul@student.com",
            password=hashed,
            role=UserRole.student,
            school_id=DEMO_SCHOOL_ID,
            school_name=DEMO_SCHOOL_NAME,
            class_grade="10th Grade",
            eco_points=450,
            badges=["first-lesson", "quiz-master"],
            completed_lessons=["lesson-1", "lesson-2"],
            completed_quizzes=["quiz-1"],
            completed_challenges=["challenge-1"],
        ),
        User(
            id="demo-teacher-1",
            name="Dr. Priya Sharma",
            email="priya@teacher.com",
            password=hashed,
            role=UserRole.teacher,
            school_id=DEMO_SCHOOL_ID,
            school_name=DEMO_SCHOOL_NAME,
            status=AccountStatus.pending,
        ),
        User(
            id="demo-admin-1",
            name="Principal Rajesh Verma",
            email="rajesh@admin.com",
            password=hashed,
            role=UserRole.admin,
            school_id=DEMO_SCHOOL_ID,
            school_name=DEMO_SCHOOL_NAME,
        ),
    ]
