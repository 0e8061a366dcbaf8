"""Database models."""

from testhub.models.subscription import PaymentStatus, Subscription
from testhub.models.test import AnswerOption, ClosedQuestion, OpenQuestion, Test
from testhub.models.solution import UserAnswer, UserSolution
from testhub.models.user import User, UserRole

__all__ = [
    "User",
    "UserRole",
    "Test",
    "ClosedQuestion",
    "AnswerOption",
    "OpenQuestion",
    "UserSolution",
    "UserAnswer",
    "Subscription",
    "PaymentStatus",
]
