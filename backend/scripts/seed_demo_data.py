#!/usr/bin/env python3
"""Script to seed a demo learner and a demo test for local development."""

import sys
from pathlib import Path

# Add parent directory to path to import testhub modules
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlalchemy.orm import Session

from testhub.core.logging import get_logger
from testhub.core.security import create_access_token
from testhub.db.session import session_scope
from testhub.models.test import AnswerOption, ClosedQuestion, OpenQuestion, Test
from testhub.models.user import User, UserRole

logger = get_logger(__name__)

DEMO_EMAIL = "learner@example.com"
DEMO_TEST_TITLE = "Demo: General knowledge"

# (text, options, correct option index, points)
CLOSED_QUESTIONS = [
    ("What is the capital of Azerbaijan?", ["Ganja", "Baku", "Sumgait", "Shaki"], 1, 1),
    ("How many minutes are in two hours?", ["120", "60", "100", "240"], 0, 1),
    ("Which planet is closest to the Sun?", ["Venus", "Earth", "Mercury", "Mars"], 2, 2),
    ("What is 7 x 8?", ["54", "56", "64", "48"], 1, 1),
]

OPEN_QUESTIONS = [
    ("Describe the water cycle in two sentences.", "Evaporation, condensation, precipitation."),
]


def seed_demo_data(db: Session) -> tuple[User, Test]:
    """Create the demo learner and demo test if they do not exist yet.

    Flushes only; the caller owns the transaction.
    """
    user = db.query(User).filter(User.email == DEMO_EMAIL).first()
    if not user:
        user = User(full_name="Demo Learner", email=DEMO_EMAIL, role=UserRole.USER.value)
        db.add(user)
        db.flush()
        logger.info("Created demo learner", extra={"user_id": str(user.id)})

    test = db.query(Test).filter(Test.title == DEMO_TEST_TITLE).first()
    if not test:
        test = Test(title=DEMO_TEST_TITLE, description="Seeded for local development")
        db.add(test)
        db.flush()

        for position, (text, options, correct_index, points) in enumerate(CLOSED_QUESTIONS):
            question = ClosedQuestion(test_id=test.id, text=text, points=points, position=position)
            question.options = [
                AnswerOption(text=option, order_index=i, is_correct=i == correct_index)
                for i, option in enumerate(options)
            ]
            db.add(question)

        for text, answer in OPEN_QUESTIONS:
            db.add(OpenQuestion(test_id=test.id, text=text, correct_answer=answer, points=2))

        db.flush()
        logger.info("Created demo test", extra={"test_id": str(test.id)})

    db.flush()
    return user, test


if __name__ == "__main__":
    print("Seeding demo data...")
    try:
        with session_scope() as db:
            user, test = seed_demo_data(db)
    except Exception as e:
        logger.error("Error seeding demo data", exc_info=True)
        print(f"\n✗ Error seeding demo data: {e}")
        sys.exit(1)

    print("\n✓ Demo data seeded successfully!")
    print(f"  User ID: {user.id}")
    print(f"  Test ID: {test.id}")
    print(f"  Closed questions: {len(CLOSED_QUESTIONS)}, open questions: {len(OPEN_QUESTIONS)}")
    print(f"\nBearer token: {create_access_token(user_id=str(user.id), role=user.role)}")
