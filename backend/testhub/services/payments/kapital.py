"""Kapital Bank gateway: XML orders over HTTPS."""

import uuid
import xml.etree.ElementTree as ET
from decimal import Decimal

import httpx

from testhub.core.app_exceptions import GatewayError
from testhub.core.config import KapitalPaySettings
from testhub.core.logging import get_logger
from testhub.services.payments.base import PaymentGateway, format_amount

logger = get_logger(__name__)

SUCCESS_STATUS = "00"


def build_order_request(operation: str, language: str, order_fields: list[tuple[str, str]]) -> bytes:
    """Build a ``TKKPG/Request`` document with the given order fields, in order."""
    root = ET.Element("TKKPG")
    request = ET.SubElement(root, "Request")
    ET.SubElement(request, "Operation").text = operation
    ET.SubElement(request, "Language").text = language
    order = ET.SubElement(request, "Order")
    for tag, value in order_fields:
        ET.SubElement(order, tag).text = value
    return ET.tostring(root, encoding="utf-8", xml_declaration=True)


def find_text(document: ET.Element, tag: str) -> str | None:
    """Text of the first element named ``tag`` anywhere in the document."""
    element = next(document.iter(tag), None)
    if element is None or element.text is None:
        return None
    return element.text.strip()


class KapitalPayGateway(PaymentGateway):
    """XML protocol gateway.

    The payment id is generated here and sent as ``OrderID``; the bank echoes
    it back as ``orderId`` on the callback.
    """

    name = "kapital"

    def __init__(self, config: KapitalPaySettings, transport: httpx.BaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _client(self) -> httpx.Client:
        return httpx.Client(timeout=self.config.timeout_seconds, transport=self._transport)

    def _send(self, body: bytes) -> ET.Element:
        with self._client() as client:
            response = self._post(
                client,
                self.config.api_url,
                content=body,
                headers={"Content-Type": "application/xml; charset=utf-8"},
            )
        try:
            return ET.fromstring(response.content)
        except ET.ParseError as e:
            raise GatewayError(f"{self.name} returned malformed XML: {e}") from e

    def create_payment(self, amount: Decimal, description: str) -> tuple[str, str]:
        payment_id = str(uuid.uuid4())
        body = build_order_request(
            "CreateOrder",
            self.config.language,
            [
                ("Merchant", self.config.merchant_id),
                ("OrderID", payment_id),
                ("Amount", format_amount(amount)),
                ("Currency", self.config.currency_code),
                ("Description", description),
                ("ApproveURL", self.config.success_url),
                ("CancelURL", self.config.cancel_url),
                ("DeclineURL", self.config.cancel_url),
            ],
        )

        try:
            document = self._send(body)

            status = find_text(document, "Status")
            if status != SUCCESS_STATUS:
                raise GatewayError(
                    f"Payment creation failed with status: {status}",
                    {"gateway": self.name, "status": status},
                )

            session_id = find_text(document, "SessionID")
            if not session_id:
                raise GatewayError(
                    "Failed to get session ID from Kapital Bank", {"gateway": self.name}
                )
        except GatewayError:
            logger.error(
                "Error creating payment",
                extra={"gateway": self.name, "payment_id": payment_id},
                exc_info=True,
            )
            raise

        payment_url = self.config.payment_page_url.format(session_id=session_id)
        return payment_url, payment_id

    def verify_payment(self, payment_id: str) -> bool:
        body = build_order_request(
            "GetOrderStatus",
            self.config.language,
            [
                ("Merchant", self.config.merchant_id),
                ("OrderID", payment_id),
            ],
        )

        try:
            document = self._send(body)
        except GatewayError:
            logger.error(
                "Error verifying payment",
                extra={"gateway": self.name, "payment_id": payment_id},
                exc_info=True,
            )
            raise

        return find_text(document, "Status") == SUCCESS_STATUS
