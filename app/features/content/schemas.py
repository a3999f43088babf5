"""Pydantic models for lessons, quizzes and challenges."""

from __future__ import annotations

from enum import Enum
from typing import List

from pydantic import Field, field_validator

from app.common.schemas import EcoModel


class LessonDifficulty(str, Enum):
    beginner = "beginner"
    intermediate = "intermediate"
    advanced = "advanced"


class ChallengeDifficulty(str, Enum):
    easy = "easy"
    medium = "medium"
    hard = "hard"


class Lesson(EcoModel):
    id: str
    title: str
    topic: str
    description: str = ""
    content: str = ""
    image_url: str = ""
    duration: int = Field(0, ge=0)
    difficulty: LessonDifficulty = LessonDifficulty.beginner
    eco_points: int = Field(0, ge=0)


class Question(EcoModel):
    id: str
    question: str
    options: List[str]
    correct_answer: int
    explanation: str = ""

    @field_validator("options")
    @classmethod
    def _four_options(cls, value: List[str]) -> List[str]:
        if len(value) != 4:
            raise ValueError("a question needs exactly 4 options")
        return value

    @field_validator("correct_answer")
    @classmethod
    def _answer_in_range(cls, value: int) -> int:
        if not 0 <= value <= 3:
            raise ValueError("correct_answer must index one of the 4 options")
        return value


class Quiz(EcoModel):
    id: str
    lesson_id: str = ""
    title: str
    description: str = ""
    questions: List[Question] = Field(..., min_length=1)
    passing_score: int = Field(70, ge=0, le=100)
    eco_points: int = Field(0, ge=0)


class Challenge(EcoModel):
    id: str
    title: str
    description: str = ""
    category: str = ""
    difficulty: ChallengeDifficulty = ChallengeDifficulty.easy
    eco_points: int = Field(0, ge=0)
    duration: int = Field(0, ge=0)
    instructions: List[str] = Field(..., min_length=1)
    verification_required: bool = True
    image_url: str = ""
