"""User model."""

import uuid
from enum import Enum

from sqlalchemy import Boolean, Column, DateTime, String, Uuid
from sqlalchemy.orm import relationship

from testhub.common.clock import utc_now
from testhub.db.base import Base


class UserRole(str, Enum):
    """User role enum."""

    USER = "USER"
    ADMIN = "ADMIN"


class User(Base):
    """User model.

    Only the fields the grading and subscription flows need; credentials live
    with the authentication service.
    """

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    full_name = Column(String(255), nullable=True)
    email = Column(String(256), unique=True, nullable=False, index=True)
    role = Column(String(16), nullable=False, default=UserRole.USER.value)
    is_active = Column(Boolean, default=True, nullable=False)

    # Premium flags, written only by a successful subscription payment
    is_premium = Column(Boolean, default=False, nullable=False)
    premium_expiration_date = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, default=utc_now, onupdate=utc_now, nullable=False)

    # Relationships
    solutions = relationship("UserSolution", back_populates="user")
    subscriptions = relationship("Subscription", back_populates="user")
