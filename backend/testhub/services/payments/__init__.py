"""Bank payment gateways."""

from testhub.services.payments.base import GatewayPaymentStatus, PaymentGateway
from testhub.services.payments.service import build_payment_gateway, get_payment_gateway

__all__ = [
    "GatewayPaymentStatus",
    "PaymentGateway",
    "build_payment_gateway",
    "get_payment_gateway",
]
