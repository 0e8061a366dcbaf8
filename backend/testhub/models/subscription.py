"""Premium subscription model."""

import uuid
from enum import Enum

from sqlalchemy import CheckConstraint, Column, DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import relationship

from testhub.common.clock import utc_now
from testhub.db.base import Base


class PaymentStatus(str, Enum):
    """Subscription payment status. SUCCESS and FAILED are terminal."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self is not PaymentStatus.PENDING


class Subscription(Base):
    """A premium purchase, tracked from payment creation to gateway callback."""

    __tablename__ = "subscriptions"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid(as_uuid=True), ForeignKey("users.id"), nullable=False)

    amount = Column(Numeric(10, 2), nullable=False)
    currency = Column(String(3), nullable=False, default="AZN")
    start_date = Column(DateTime, nullable=False, default=utc_now)
    end_date = Column(DateTime, nullable=False)

    # Gateway-assigned, globally unique
    payment_id = Column(String(64), nullable=False, unique=True)
    payment_status = Column(String(16), nullable=False, default=PaymentStatus.PENDING.value)
    payment_error = Column(String(255), nullable=True)

    created_at = Column(DateTime, default=utc_now, nullable=False)
    updated_at = Column(DateTime, nullable=True)

    user = relationship("User", back_populates="subscriptions")

    __table_args__ = (
        CheckConstraint(
            "payment_status IN ('PENDING', 'SUCCESS', 'FAILED')",
            name="ck_subscriptions_payment_status",
        ),
        Index("ix_subscriptions_user_created", "user_id", "created_at"),
        Index("ix_subscriptions_end_date", "end_date"),
    )
