"""Static badge catalog (read-only reference data)."""
from __future__ import annotations

from typing import Dict, List, Optional

from app.common.schemas import EcoModel


class Badge(EcoModel):
    id: str
    name: str
    description: str
    icon: str
    requirement: str
    category: str


FIRST_LESSON = "first-lesson"
LESSON_MASTER = "lesson-master"
QUIZ_MASTER = "quiz-master"
FIRST_CHALLENGE = "first-challenge"
CHALLENGE_HERO = "challenge-hero"

BADGES: List[Badge] = [
    Badge(id=FIRST_LESSON, name="First Steps", description="Complete your first environmental lesson",
          icon="🌱", requirement="Complete 1 lesson", category="Learning"),
    Badge(id=LESSON_MASTER, name="Knowledge Seeker", description="Complete 5 environmental lessons",
          icon="📚", requirement="Complete 5 lessons", category="Learning"),
    Badge(id=QUIZ_MASTER, name="Quiz Champion", description="Pass 3 quizzes with 80% or higher",
          icon="🏆", requirement="Pass 3 quizzes with 80%+", category="Assessment"),
    Badge(id=FIRST_CHALLENGE, name="Action Taker", description="Complete your first real-world challenge",
          icon="⚡", requirement="Complete 1 challenge", category="Action"),
    Badge(id=CHALLENGE_HERO, name="Eco Warrior", description="Complete 5 environmental challenges",
          icon="🦸", requirement="Complete 5 challenges", category="Action"),
    Badge(id="tree-planter", name="Tree Planter", description="Plant and document a tree",
          icon="🌳", requirement="Complete tree planting challenge", category="Special"),
    Badge(id="plastic-warrior", name="Plastic Warrior", description="Complete plastic-free week challenge",
          icon="♻️", requirement="Complete plastic-free challenge", category="Special"),
    Badge(id="water-guardian", name="Water Guardian", description="Complete water conservation audit",
          icon="💧", requirement="Complete water audit challenge", category="Special"),
    Badge(id="community-leader", name="Community Leader", description="Organize a community clean-up drive",
          icon="👥", requirement="Complete community clean-up", category="Leadership"),
    Badge(id="top-10", name="Top 10 Achiever", description="Reach top 10 in school leaderboard",
          icon="🥇", requirement="Rank in top 10", category="Achievement"),
]

# One challenge <-> one thematic badge, granted on that challenge's first approval
CHALLENGE_BADGES: Dict[str, str] = {
    "challenge-1": "tree-planter",
    "challenge-2": "plastic-warrior",
    "challenge-3": "water-guardian",
    "challenge-4": "community-leader",
}

_BY_ID = {badge.id: badge for badge in BADGES}


def get_badge(badge_id: str) -> Optional[Badge]:
    return _BY_ID.get(badge_id)


def resolve_badges(badge_ids: List[str]) -> List[Badge]:
    """Catalog entries for the ids a user holds; unknown ids are skipped."""
    found = (get_badge(b) for b in badge_ids)
    return [badge for badge in found if badge is not None]
