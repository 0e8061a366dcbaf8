"""Premium subscription endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from testhub.core.app_exceptions import raise_app_error
from testhub.core.config import settings
from testhub.core.dependencies import CurrentUser
from testhub.core.logging import get_logger
from testhub.db.session import get_db
from testhub.schemas.subscription import (
    CallbackOut,
    PaymentLinkOut,
    SubscriptionCreate,
    SubscriptionStatusOut,
    SubscriptionSummary,
)
from testhub.services.payments import PaymentGateway, get_payment_gateway
from testhub.services.subscription import (
    create_subscription,
    get_current_subscription,
    is_subscription_active,
    process_payment_callback,
)

logger = get_logger(__name__)

router = APIRouter()


@router.post("/create", response_model=PaymentLinkOut)
def create(
    payload: SubscriptionCreate,
    db: Annotated[Session, Depends(get_db)],
    current_user: CurrentUser,
    gateway: Annotated[PaymentGateway, Depends(get_payment_gateway)],
):
    """Start a premium purchase and return the bank payment page."""
    payment_url, payment_id = create_subscription(db, gateway, current_user.id, payload.months)
    return PaymentLinkOut(payment_url=payment_url, payment_id=payment_id)


@router.post("/callback", response_model=CallbackOut)
def payment_callback(
    db: Annotated[Session, Depends(get_db)],
    order_id: Annotated[str, Query(alias="orderId", min_length=1)],
    payment_status: Annotated[str, Query(alias="status")],
):
    """
    Payment outcome notification from the bank (anonymous).

    A status equal to the configured success code marks the payment as
    successful; anything else marks it failed.
    """
    is_success = payment_status == settings.PAYMENT_CALLBACK_SUCCESS_CODE
    try:
        reconciled = process_payment_callback(db, order_id, is_success)
    except Exception:
        # Any reconciliation failure is reported to the gateway as 400
        logger.error("Payment callback failed", extra={"order_id": order_id}, exc_info=True)
        reconciled = False

    if not reconciled:
        raise_app_error(
            status.HTTP_400_BAD_REQUEST,
            "CALLBACK_NOT_RECONCILED",
            "Payment could not be processed",
            {"order_id": order_id},
        )
    return CallbackOut(message="Payment processed")


@router.get("/status", response_model=SubscriptionStatusOut)
def subscription_status(
    db: Annotated[Session, Depends(get_db)],
    current_user: CurrentUser,
):
    """Premium status and current subscription of the caller."""
    subscription = get_current_subscription(db, current_user.id)
    return SubscriptionStatusOut(
        is_active=is_subscription_active(db, current_user.id),
        subscription=SubscriptionSummary.model_validate(subscription) if subscription else None,
    )
