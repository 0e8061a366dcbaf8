"""Submission grading engine: validate, score, and store a learner's answers."""

from dataclasses import dataclass, field
from datetime import datetime
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session, selectinload

from testhub.common.clock import utc_now
from testhub.core.app_exceptions import NotFoundError, SubmissionValidationError
from testhub.core.logging import get_logger
from testhub.models.solution import UserAnswer, UserSolution
from testhub.schemas.submission import AnswerIn
from testhub.services.question_catalog import TestCatalog, get_user, load_test_catalog

logger = get_logger(__name__)


@dataclass(frozen=True)
class GradedAnswer:
    """Outcome for one closed-question answer."""

    question_id: UUID
    selected_index: int
    correct_index: int
    is_correct: bool
    points_earned: int


@dataclass
class GradingOutcome:
    """Everything the grader computed for one submission."""

    graded: list[GradedAnswer] = field(default_factory=list)
    total_closed: int = 0
    total_points: int = 0
    has_open_answers: bool = False
    dropped_question_ids: list[UUID] = field(default_factory=list)

    @property
    def correct_count(self) -> int:
        return sum(1 for a in self.graded if a.is_correct)

    @property
    def earned_points(self) -> int:
        return sum(a.points_earned for a in self.graded)

    @property
    def score(self) -> int:
        """Percent of the test's closed questions answered correctly.

        Point weights and open questions do not affect it.
        """
        if self.total_closed == 0:
            return 0
        return round(100 * self.correct_count / self.total_closed)

    @property
    def correct_answers(self) -> str:
        return f"{self.correct_count}/{self.total_closed}"


@dataclass(frozen=True)
class GradeResult:
    """Stored solution plus its grading outcome."""

    solution: UserSolution
    outcome: GradingOutcome

    @property
    def status_code(self) -> int:
        # 202 tells the client the open answers still await manual review
        return 202 if self.outcome.has_open_answers else 200


def grade_answers(catalog: TestCatalog, answers: list[AnswerIn]) -> GradingOutcome:
    """
    Grade raw answers against the test's current questions.

    Pure function: nothing is read from or written to the database.

    Raises:
        SubmissionValidationError: If no answers were given, a closed question
            has no correct option, a closed question is answered more than
            once, or a selected index is out of range
    """
    if not answers:
        raise SubmissionValidationError("At least one answer is required")

    for question in catalog.closed.values():
        if question.correct_index is None:
            raise SubmissionValidationError(
                "No correct option configured",
                {"question_id": str(question.id)},
            )

    outcome = GradingOutcome(
        total_closed=catalog.total_closed,
        total_points=catalog.total_points,
    )

    answered: set[UUID] = set()
    for answer in answers:
        question = catalog.closed.get(answer.question_id)
        if question is not None:
            if question.id in answered:
                raise SubmissionValidationError(
                    "Question answered more than once",
                    {"question_id": str(question.id)},
                )
            answered.add(question.id)
            if not 0 <= answer.selected_option_index < question.option_count:
                raise SubmissionValidationError(
                    "Selected option index is out of range",
                    {
                        "question_id": str(answer.question_id),
                        "selected_option_index": answer.selected_option_index,
                        "option_count": question.option_count,
                    },
                )
            is_correct = answer.selected_option_index == question.correct_index
            outcome.graded.append(
                GradedAnswer(
                    question_id=question.id,
                    selected_index=answer.selected_option_index,
                    correct_index=question.correct_index,
                    is_correct=is_correct,
                    points_earned=question.points if is_correct else 0,
                )
            )
        elif answer.question_id in catalog.open_ids:
            outcome.has_open_answers = True
        else:
            outcome.dropped_question_ids.append(answer.question_id)

    return outcome


async def submit_solution(
    db: Session,
    test_id: UUID,
    user_id: UUID,
    answers: list[AnswerIn],
    started_at: datetime | None = None,
) -> GradeResult:
    """
    Grade a submission and store it as one UserSolution with its answers.

    Validation happens before anything is added to the session, so a
    rejected submission leaves no rows behind.

    Args:
        db: Database session
        test_id: Test being submitted
        user_id: Learner submitting
        answers: Raw answers in submission order
        started_at: When the learner started (defaults to now)

    Returns:
        Stored solution and grading outcome

    Raises:
        NotFoundError: If the test or user does not exist
        SubmissionValidationError: If the answers are invalid
    """
    get_user(db, user_id)
    catalog = load_test_catalog(db, test_id)

    outcome = grade_answers(catalog, answers)

    if outcome.dropped_question_ids:
        logger.warning(
            "Dropped answers for unknown questions",
            extra={
                "test_id": str(test_id),
                "user_id": str(user_id),
                "question_ids": [str(q) for q in outcome.dropped_question_ids],
            },
        )

    now = utc_now()
    solution = UserSolution(
        user_id=user_id,
        test_id=test_id,
        started_at=started_at or now,
        submitted_at=now,
        completed_at=now,
        score=outcome.score,
        correct_count=outcome.correct_count,
        total_closed=outcome.total_closed,
        total_points=outcome.total_points,
        earned_points=outcome.earned_points,
        has_open_answers=outcome.has_open_answers,
    )
    solution.answers = [
        UserAnswer(
            question_id=graded.question_id,
            position=position,
            selected_option_index=graded.selected_index,
            correct_option_index=graded.correct_index,
            is_correct=graded.is_correct,
            points_earned=graded.points_earned,
        )
        for position, graded in enumerate(outcome.graded)
    ]

    try:
        db.add(solution)
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(solution)

    logger.info(
        "Solution graded",
        extra={
            "solution_id": str(solution.id),
            "test_id": str(test_id),
            "user_id": str(user_id),
            "score": outcome.score,
            "correct_answers": outcome.correct_answers,
            "has_open_answers": outcome.has_open_answers,
        },
    )

    return GradeResult(solution=solution, outcome=outcome)


async def list_user_solutions(db: Session, user_id: UUID) -> list[UserSolution]:
    """A user's solutions with answers, newest first."""
    get_user(db, user_id)
    stmt = (
        select(UserSolution)
        .where(UserSolution.user_id == user_id)
        .options(selectinload(UserSolution.answers))
        .order_by(UserSolution.submitted_at.desc())
    )
    return list(db.execute(stmt).scalars().all())


async def get_solution(db: Session, solution_id: UUID) -> UserSolution:
    """Load one solution with answers or raise NotFoundError."""
    stmt = (
        select(UserSolution)
        .where(UserSolution.id == solution_id)
        .options(selectinload(UserSolution.answers))
    )
    solution = db.execute(stmt).scalar_one_or_none()
    if solution is None:
        raise NotFoundError("Solution", solution_id)
    return solution
