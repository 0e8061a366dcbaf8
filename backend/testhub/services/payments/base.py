"""Base payment gateway interface."""

from abc import ABC, abstractmethod
from decimal import ROUND_HALF_UP, Decimal
from enum import Enum

import httpx

from testhub.core.app_exceptions import GatewayError, GatewayTimeoutError


class GatewayPaymentStatus(str, Enum):
    """Payment status as reported by a gateway."""

    UNKNOWN = "UNKNOWN"
    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    CANCELLED = "CANCELLED"


def format_amount(amount: Decimal) -> str:
    """Format an amount the way both gateways expect it: ``0.00``."""
    return str(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


class PaymentGateway(ABC):
    """Base interface for bank payment gateways."""

    name: str = "gateway"

    @abstractmethod
    def create_payment(self, amount: Decimal, description: str) -> tuple[str, str]:
        """
        Register a payment with the gateway.

        Args:
            amount: Amount to charge
            description: Text shown to the payer

        Returns:
            (payment_url, payment_id): where to send the payer, and the id the
            gateway will report back in its callback

        Raises:
            GatewayError: On a rejected request or unusable response
            GatewayTimeoutError: If the gateway did not answer in time
        """
        pass

    @abstractmethod
    def verify_payment(self, payment_id: str) -> bool:
        """
        Ask the gateway whether a payment succeeded.

        Raises:
            GatewayError: On a rejected request or unusable response
            GatewayTimeoutError: If the gateway did not answer in time
        """
        pass

    def _post(self, client: httpx.Client, url: str, **kwargs) -> httpx.Response:
        """POST and map transport failures and non-2xx answers to gateway errors."""
        try:
            response = client.post(url, **kwargs)
            response.raise_for_status()
        except httpx.TimeoutException as e:
            raise GatewayTimeoutError(
                f"{self.name} did not answer in time", {"url": url}
            ) from e
        except httpx.HTTPStatusError as e:
            raise GatewayError(
                f"{self.name} returned HTTP {e.response.status_code}",
                {"url": url, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            raise GatewayError(f"{self.name} request failed: {e}", {"url": url}) from e
        return response
