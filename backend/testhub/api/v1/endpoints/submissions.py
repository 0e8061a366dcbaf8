"""Solution submission and grading endpoints."""

from typing import Annotated
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Response, status
from sqlalchemy.orm import Session

from testhub.core.dependencies import CurrentUser, can_read_user_data
from testhub.db.session import get_db
from testhub.models.user import User
from testhub.schemas.submission import GradeResultOut, SubmissionCreate, UserSolutionOut
from testhub.services.grading import get_solution, list_user_solutions, submit_solution

router = APIRouter()


def _ensure_can_read(current_user: User, owner_id: UUID) -> None:
    if not can_read_user_data(current_user, owner_id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not authorized to access these solutions",
        )


@router.post(
    "/submit",
    response_model=GradeResultOut,
    responses={202: {"model": GradeResultOut, "description": "Open answers await manual review"}},
)
async def submit(
    payload: SubmissionCreate,
    response: Response,
    db: Annotated[Session, Depends(get_db)],
):
    """
    Grade a learner's answers and store the solution.

    Returns 202 instead of 200 when any answer belongs to an open question:
    the score covers closed questions only and the rest awaits review.
    """
    result = await submit_solution(
        db,
        test_id=payload.test_id,
        user_id=payload.user_id,
        answers=payload.answers,
        started_at=payload.started_at,
    )
    response.status_code = result.status_code

    outcome = result.outcome
    return GradeResultOut(
        solution_id=result.solution.id,
        score=outcome.score,
        correct_answers=outcome.correct_answers,
        total_points=outcome.total_points,
        earned_points=outcome.earned_points,
        has_open_answers=outcome.has_open_answers,
        status="PENDING_REVIEW" if outcome.has_open_answers else "GRADED",
    )


@router.get("/solutions/user/{user_id}", response_model=list[UserSolutionOut])
async def get_user_solutions(
    user_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: CurrentUser,
):
    """List a user's solutions, newest first."""
    _ensure_can_read(current_user, user_id)
    return await list_user_solutions(db, user_id)


@router.get("/solutions/{solution_id}", response_model=UserSolutionOut)
async def get_one_solution(
    solution_id: UUID,
    db: Annotated[Session, Depends(get_db)],
    current_user: CurrentUser,
):
    """Get one solution with its answers."""
    solution = await get_solution(db, solution_id)
    _ensure_can_read(current_user, solution.user_id)
    return solution
