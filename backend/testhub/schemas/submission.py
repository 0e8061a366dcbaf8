"""Pydantic schemas for solution submission and grading."""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import Field

from testhub.schemas.common import CamelModel


class AnswerIn(CamelModel):
    """One raw answer from the learner."""

    question_id: UUID = Field(..., description="Closed or open question ID")
    # Range is checked against the question's options by the grading engine
    selected_option_index: int = Field(..., description="0-based option index")


class SubmissionCreate(CamelModel):
    """Request to grade and store a learner's answers."""

    test_id: UUID
    user_id: UUID
    answers: list[AnswerIn] = Field(default_factory=list)
    started_at: datetime | None = Field(
        None, description="When the learner opened the test (defaults to submit time)"
    )


class GradeResultOut(CamelModel):
    """Grading result returned to the caller."""

    solution_id: UUID
    score: int = Field(..., ge=0, le=100, description="Percent of closed questions answered correctly")
    correct_answers: str = Field(..., description='"correct/total" over closed questions')
    total_points: int
    earned_points: int
    has_open_answers: bool
    status: Literal["GRADED", "PENDING_REVIEW"]


class UserAnswerOut(CamelModel):
    """Stored answer."""

    id: UUID
    question_id: UUID
    selected_option_index: int
    correct_option_index: int
    is_correct: bool
    points_earned: int | None


class UserSolutionOut(CamelModel):
    """Stored solution with its answers."""

    id: UUID
    user_id: UUID
    test_id: UUID
    started_at: datetime
    submitted_at: datetime
    completed_at: datetime
    score: int
    correct_count: int
    total_closed: int
    total_points: int
    earned_points: int
    has_open_answers: bool
    answers: list[UserAnswerOut]
