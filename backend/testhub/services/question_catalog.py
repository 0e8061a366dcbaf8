"""Read-only access to tests, their questions, and users."""

from dataclasses import dataclass, field
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from testhub.core.app_exceptions import NotFoundError
from testhub.models.test import ClosedQuestion, OpenQuestion, Test
from testhub.models.user import User


@dataclass(frozen=True)
class ClosedQuestionView:
    """A closed question as the grader sees it."""

    id: UUID
    points: int
    option_count: int
    # None when no option is flagged correct
    correct_index: int | None


@dataclass(frozen=True)
class TestCatalog:
    """Questions of one test, as currently configured."""

    __test__ = False  # not a pytest test class

    test_id: UUID
    closed: dict[UUID, ClosedQuestionView] = field(default_factory=dict)
    open_ids: frozenset[UUID] = field(default_factory=frozenset)

    @property
    def total_closed(self) -> int:
        return len(self.closed)

    @property
    def total_points(self) -> int:
        return sum(q.points for q in self.closed.values())


def find_correct_index(question: ClosedQuestion) -> int | None:
    """Position of the first option flagged correct, in ``order_index`` order."""
    ordered = sorted(question.options, key=lambda o: o.order_index)
    for position, option in enumerate(ordered):
        if option.is_correct:
            return position
    return None


def get_user(db: Session, user_id: UUID) -> User:
    """Load a user or raise NotFoundError."""
    user = db.get(User, user_id)
    if user is None:
        raise NotFoundError("User", user_id)
    return user


def load_test_catalog(db: Session, test_id: UUID) -> TestCatalog:
    """
    Load a test's closed and open questions.

    The correct option is recomputed from ``is_correct`` on every call, so a
    question edited after the learner started is graded with its current
    configuration.

    Raises:
        NotFoundError: If the test does not exist
    """
    test = db.get(Test, test_id)
    if test is None:
        raise NotFoundError("Test", test_id)

    closed_stmt = (
        select(ClosedQuestion)
        .where(ClosedQuestion.test_id == test_id)
        .options(selectinload(ClosedQuestion.options))
        .order_by(ClosedQuestion.position)
    )
    closed_questions = db.execute(closed_stmt).scalars().all()

    open_stmt = select(OpenQuestion.id).where(OpenQuestion.test_id == test_id)
    open_ids = frozenset(row[0] for row in db.execute(open_stmt).all())

    closed = {
        q.id: ClosedQuestionView(
            id=q.id,
            points=q.points,
            option_count=len(q.options),
            correct_index=find_correct_index(q),
        )
        for q in closed_questions
    }

    return TestCatalog(test_id=test_id, closed=closed, open_ids=open_ids)
