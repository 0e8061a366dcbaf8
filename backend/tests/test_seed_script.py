"""Tests for the demo data seed script."""

import pytest

from scripts.seed_demo_data import CLOSED_QUESTIONS, seed_demo_data
from testhub.models.test import Test
from testhub.models.user import User
from testhub.schemas.submission import AnswerIn
from testhub.services.grading import submit_solution


def test_seed_is_idempotent(db):
    user, test = seed_demo_data(db)
    again_user, again_test = seed_demo_data(db)

    assert again_user.id == user.id
    assert again_test.id == test.id
    assert db.query(User).count() == 1
    assert db.query(Test).count() == 1


@pytest.mark.asyncio
async def test_seeded_test_is_gradable(db):
    user, test = seed_demo_data(db)
    answers = [
        AnswerIn(question_id=question.id, selected_option_index=CLOSED_QUESTIONS[i][2])
        for i, question in enumerate(test.closed_questions)
    ]

    result = await submit_solution(db, test.id, user.id, answers)

    assert result.outcome.score == 100
    assert result.outcome.total_points == 5
