"""Subscription state manager: purchase, callback reconciliation, status."""

from decimal import Decimal
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.orm import Session

from testhub.common.clock import add_months, utc_now
from testhub.core.config import settings
from testhub.core.logging import get_logger
from testhub.models.subscription import PaymentStatus, Subscription
from testhub.models.user import User
from testhub.services.payments.base import PaymentGateway
from testhub.services.question_catalog import get_user

logger = get_logger(__name__)

PAYMENT_FAILED_MESSAGE = "Payment failed"


def subscription_price(months: int) -> Decimal:
    return settings.SUBSCRIPTION_MONTHLY_PRICE * months


def create_subscription(
    db: Session,
    gateway: PaymentGateway,
    user_id: UUID,
    months: int,
) -> tuple[str, str]:
    """
    Start a premium purchase.

    The gateway is called before anything is written; if it fails, no
    subscription row exists.

    Args:
        db: Database session
        gateway: Configured payment gateway
        user_id: Buyer
        months: Subscription length

    Returns:
        (payment_url, payment_id) for redirecting the buyer

    Raises:
        NotFoundError: If the user does not exist
        GatewayError: If the gateway rejects or cannot be reached
    """
    get_user(db, user_id)

    amount = subscription_price(months)
    description = f"{months} month premium subscription"

    payment_url, payment_id = gateway.create_payment(amount, description)

    now = utc_now()
    subscription = Subscription(
        user_id=user_id,
        amount=amount,
        currency=settings.SUBSCRIPTION_CURRENCY,
        start_date=now,
        end_date=add_months(now, months),
        payment_id=payment_id,
        payment_status=PaymentStatus.PENDING.value,
        created_at=now,
    )
    try:
        db.add(subscription)
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Subscription created",
        extra={
            "user_id": str(user_id),
            "payment_id": payment_id,
            "gateway": gateway.name,
            "months": months,
            "amount": str(amount),
        },
    )
    return payment_url, payment_id


def process_payment_callback(db: Session, payment_id: str, is_success: bool) -> bool:
    """
    Apply a gateway callback to its subscription.

    The outcome is trusted as reported; it is not re-verified with the
    gateway. A subscription that is already SUCCESS or FAILED is left
    untouched, so repeated callbacks never re-apply the premium grant.

    Returns:
        False if no subscription has this payment id, True otherwise
    """
    logger.warning(
        "Payment callback accepted without gateway verification",
        extra={"payment_id": payment_id, "is_success": is_success},
    )

    stmt = select(Subscription).where(Subscription.payment_id == payment_id).with_for_update()
    subscription = db.execute(stmt).scalar_one_or_none()

    if subscription is None:
        logger.error("Subscription not found for payment", extra={"payment_id": payment_id})
        return False

    if PaymentStatus(subscription.payment_status).is_terminal:
        logger.info(
            "Callback ignored for settled subscription",
            extra={"payment_id": payment_id, "payment_status": subscription.payment_status},
        )
        db.rollback()  # release the row lock
        return True

    now = utc_now()
    subscription.payment_status = (
        PaymentStatus.SUCCESS.value if is_success else PaymentStatus.FAILED.value
    )
    subscription.updated_at = now

    if is_success:
        user = db.get(User, subscription.user_id)
        user.is_premium = True
        user.premium_expiration_date = subscription.end_date
    else:
        subscription.payment_error = PAYMENT_FAILED_MESSAGE

    try:
        db.commit()
    except Exception:
        db.rollback()
        raise

    logger.info(
        "Payment callback processed",
        extra={
            "payment_id": payment_id,
            "user_id": str(subscription.user_id),
            "payment_status": subscription.payment_status,
        },
    )
    return True


def is_subscription_active(db: Session, user_id: UUID) -> bool:
    """True iff the user is premium and the premium has not expired."""
    user = db.get(User, user_id)
    if user is None:
        return False
    return bool(
        user.is_premium
        and user.premium_expiration_date is not None
        and user.premium_expiration_date > utc_now()
    )


def get_current_subscription(db: Session, user_id: UUID) -> Subscription | None:
    """Most recently created subscription that has not ended, whatever its payment status."""
    stmt = (
        select(Subscription)
        .where(Subscription.user_id == user_id, Subscription.end_date > utc_now())
        .order_by(Subscription.created_at.desc())
        .limit(1)
    )
    return db.execute(stmt).scalar_one_or_none()
