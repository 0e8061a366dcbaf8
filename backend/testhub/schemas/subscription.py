"""Pydantic schemas for premium subscriptions."""

from datetime import datetime
from decimal import Decimal

from pydantic import Field, field_validator

from testhub.core.config import settings
from testhub.models.subscription import PaymentStatus
from testhub.schemas.common import CamelModel


class SubscriptionCreate(CamelModel):
    """Request to start a premium purchase."""

    months: int = Field(..., ge=1, description="Subscription length in months")

    @field_validator("months")
    @classmethod
    def months_within_limit(cls, value: int) -> int:
        if value > settings.SUBSCRIPTION_MAX_MONTHS:
            raise ValueError(f"months must be at most {settings.SUBSCRIPTION_MAX_MONTHS}")
        return value


class PaymentLinkOut(CamelModel):
    """Where to send the user to pay."""

    payment_url: str
    payment_id: str


class SubscriptionSummary(CamelModel):
    """Current subscription as shown to the user."""

    start_date: datetime
    end_date: datetime
    amount: Decimal
    currency: str
    payment_status: PaymentStatus


class SubscriptionStatusOut(CamelModel):
    """Premium status of the current user."""

    is_active: bool
    subscription: SubscriptionSummary | None = None


class CallbackOut(CamelModel):
    """Acknowledgement sent back to the gateway."""

    message: str
