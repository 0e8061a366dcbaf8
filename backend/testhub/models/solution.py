"""Graded submissions."""

import uuid

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    SmallInteger,
    Uuid,
)
from sqlalchemy.orm import relationship

from testhub.common.clock import utc_now
from testhub.db.base import Base


class UserSolution(Base):
    """One graded submission of a test. Written once, never updated."""

    __tablename__ = "user_solutions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)
    test_id = Column(Uuid(as_uuid=True), ForeignKey("tests.id"), nullable=False)

    started_at = Column(DateTime, nullable=False, default=utc_now)
    submitted_at = Column(DateTime, nullable=False, default=utc_now)
    completed_at = Column(DateTime, nullable=False, default=utc_now)

    # Scoring (computed at submit)
    score = Column(SmallInteger, nullable=False)  # 0..100
    correct_count = Column(Integer, nullable=False, default=0)
    total_closed = Column(Integer, nullable=False, default=0)
    total_points = Column(Integer, nullable=False, default=0)
    earned_points = Column(Integer, nullable=False, default=0)
    has_open_answers = Column(Boolean, nullable=False, default=False)

    user = relationship("User", back_populates="solutions")
    test = relationship("Test")
    answers = relationship(
        "UserAnswer",
        back_populates="solution",
        order_by="UserAnswer.position",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        Index("ix_user_solutions_user_submitted", "user_id", "submitted_at"),
        CheckConstraint("score BETWEEN 0 AND 100", name="ck_user_solutions_score_range"),
    )


class UserAnswer(Base):
    """A graded answer to a closed question."""

    __tablename__ = "user_answers"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_solution_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("user_solutions.id", ondelete="CASCADE"),
        nullable=False,
    )
    question_id = Column(Uuid(as_uuid=True), ForeignKey("closed_questions.id"), nullable=False)
    position = Column(Integer, nullable=False, default=0)  # order within the submission

    selected_option_index = Column(SmallInteger, nullable=False)
    correct_option_index = Column(SmallInteger, nullable=False)
    is_correct = Column(Boolean, nullable=False)
    points_earned = Column(Integer, nullable=True)

    solution = relationship("UserSolution", back_populates="answers")

    __table_args__ = (Index("ix_user_answers_solution_id", "user_solution_id"),)

    @property
    def index_pair(self) -> tuple[int, int]:
        """(selected, correct) option indices."""
        return (self.selected_option_index, self.correct_option_index)
