"""Payment gateway factory."""

from testhub.core.config import Settings, settings
from testhub.core.logging import get_logger
from testhub.services.payments.base import PaymentGateway
from testhub.services.payments.kapital import KapitalPayGateway
from testhub.services.payments.payriff import PayriffGateway

logger = get_logger(__name__)

# Global gateway instance, chosen once from configuration
_payment_gateway: PaymentGateway | None = None


def build_payment_gateway(config: Settings) -> PaymentGateway:
    """Construct the gateway named by ``PAYMENT_GATEWAY``."""
    if config.PAYMENT_GATEWAY == "payriff":
        return PayriffGateway(config.payriff())
    return KapitalPayGateway(config.kapital_pay())


def get_payment_gateway() -> PaymentGateway:
    """
    Get the configured payment gateway (FastAPI dependency).

    Returns:
        PaymentGateway instance
    """
    global _payment_gateway

    if _payment_gateway is None:
        _payment_gateway = build_payment_gateway(settings)
        logger.info("Payment gateway initialized", extra={"gateway": _payment_gateway.name})

    return _payment_gateway
