"""Test seed helpers for creating test data."""

import uuid
from dataclasses import dataclass
from typing import Any

from sqlalchemy.orm import Session

from testhub.models.test import AnswerOption, ClosedQuestion, OpenQuestion, Test
from testhub.models.user import User, UserRole


def create_test_user(
    db: Session,
    email: str | None = None,
    role: UserRole = UserRole.USER,
    is_active: bool = True,
    **kwargs: Any,
) -> User:
    """
    Create a user with deterministic defaults.

    Args:
        db: Database session
        email: User email (defaults to a unique role-based address)
        role: User role
        is_active: Whether the account is active
        **kwargs: Additional user attributes
    """
    user_id = kwargs.pop("id", uuid.uuid4())
    if email is None:
        email = f"test_{role.value.lower()}_{user_id.hex[:8]}@test.example.com"

    user = User(
        id=user_id,
        email=email,
        role=role.value,
        is_active=is_active,
        full_name=kwargs.pop("full_name", f"Test {role.value}"),
        **kwargs,
    )
    db.add(user)
    db.flush()
    return user


def create_test_admin(db: Session, **kwargs: Any) -> User:
    """Create an admin user."""
    return create_test_user(db, role=UserRole.ADMIN, **kwargs)


@dataclass
class SeededTest:
    """A test plus handles to its questions, in creation order."""

    test: Test
    closed: list[ClosedQuestion]
    open: list[OpenQuestion]


def create_quiz(
    db: Session,
    closed: list[tuple[int | None, int]] | None = None,
    points: list[int] | None = None,
    open_count: int = 0,
    title: str = "Sample test",
) -> SeededTest:
    """
    Create a test with closed and open questions.

    Args:
        db: Database session
        closed: One ``(correct_index, option_count)`` per closed question;
            ``correct_index=None`` creates a question with no correct option
        points: Points per closed question (defaults to 1 each)
        open_count: Number of open questions
        title: Test title
    """
    closed = closed or []
    points = points or [1] * len(closed)

    test = Test(id=uuid.uuid4(), title=title, description="Seeded for tests")
    db.add(test)
    db.flush()

    closed_questions = []
    for position, ((correct_index, option_count), question_points) in enumerate(
        zip(closed, points)
    ):
        question = ClosedQuestion(
            id=uuid.uuid4(),
            test_id=test.id,
            text=f"Closed question {position + 1}",
            points=question_points,
            position=position,
        )
        # Insert options in reverse to prove grading orders by order_index
        for order_index in reversed(range(option_count)):
            question.options.append(
                AnswerOption(
                    id=uuid.uuid4(),
                    text=f"Option {order_index}",
                    order_index=order_index,
                    is_correct=order_index == correct_index,
                )
            )
        db.add(question)
        closed_questions.append(question)

    open_questions = []
    for i in range(open_count):
        question = OpenQuestion(
            id=uuid.uuid4(),
            test_id=test.id,
            text=f"Open question {i + 1}",
            points=2,
            correct_answer="Reference answer",
        )
        db.add(question)
        open_questions.append(question)

    db.flush()
    return SeededTest(test=test, closed=closed_questions, open=open_questions)
