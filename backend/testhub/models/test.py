"""Test catalog models: tests, closed questions with options, open questions.

Authoring these rows is done elsewhere; the grading engine only reads them.
"""

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import relationship

from testhub.common.clock import utc_now
from testhub.db.base import Base


class Test(Base):
    """A quiz made of closed and open questions."""

    __tablename__ = "tests"
    __test__ = False  # not a pytest test class

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, nullable=False, default=True)
    is_premium = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)

    closed_questions = relationship(
        "ClosedQuestion",
        back_populates="test",
        order_by="ClosedQuestion.position",
        cascade="all, delete-orphan",
    )
    open_questions = relationship(
        "OpenQuestion",
        back_populates="test",
        order_by="OpenQuestion.created_at",
        cascade="all, delete-orphan",
    )


class ClosedQuestion(Base):
    """Multiple-choice question with exactly one correct option."""

    __tablename__ = "closed_questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tests.id", ondelete="CASCADE"),
        nullable=False,
    )
    text = Column(String(1000), nullable=False)
    points = Column(Integer, nullable=False, default=1)
    position = Column(Integer, nullable=False, default=0)

    test = relationship("Test", back_populates="closed_questions")
    # Option order is authoritative for index-based answer matching
    options = relationship(
        "AnswerOption",
        back_populates="question",
        order_by="AnswerOption.order_index",
        cascade="all, delete-orphan",
    )

    __table_args__ = (Index("ix_closed_questions_test_id", "test_id"),)


class AnswerOption(Base):
    """One option of a closed question."""

    __tablename__ = "answer_options"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    question_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("closed_questions.id", ondelete="CASCADE"),
        nullable=False,
    )
    text = Column(String(1000), nullable=False)
    order_index = Column(Integer, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)

    question = relationship("ClosedQuestion", back_populates="options")

    __table_args__ = (
        UniqueConstraint("question_id", "order_index", name="uq_answer_option_order"),
    )


class OpenQuestion(Base):
    """Free-text question. Graded by a person, never by the engine."""

    __tablename__ = "open_questions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    test_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("tests.id", ondelete="CASCADE"),
        nullable=False,
    )
    text = Column(Text, nullable=False)
    points = Column(Integer, nullable=False, default=1)
    correct_answer = Column(Text, nullable=False)
    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, onupdate=utc_now, nullable=True)

    test = relationship("Test", back_populates="open_questions")

    __table_args__ = (Index("ix_open_questions_test_id", "test_id"),)
