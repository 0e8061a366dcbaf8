"""API tests for premium subscription endpoints."""

from decimal import Decimal
from unittest.mock import patch

from testhub.core.app_exceptions import GatewayError, GatewayTimeoutError
from testhub.models.subscription import PaymentStatus, Subscription

CREATE_URL = "/v1/subscription/create"
CALLBACK_URL = "/v1/subscription/callback"
STATUS_URL = "/v1/subscription/status"


class TestCreate:
    """POST /v1/subscription/create"""

    def test_returns_payment_link(self, client, db, auth_headers, gateway, test_user):
        response = client.post(CREATE_URL, json={"months": 3}, headers=auth_headers)

        assert response.status_code == 200
        data = response.json()
        assert data["paymentUrl"] == f"https://pay.example.com/{data['paymentId']}"
        assert gateway.created == [(Decimal("15.00"), "3 month premium subscription")]

        subscription = db.query(Subscription).filter_by(payment_id=data["paymentId"]).one()
        assert subscription.user_id == test_user.id

    def test_requires_authentication(self, client, gateway):
        response = client.post(CREATE_URL, json={"months": 1})

        assert response.status_code == 401
        assert gateway.created == []

    def test_rejects_bad_token(self, client):
        response = client.post(
            CREATE_URL, json={"months": 1}, headers={"Authorization": "Bearer not-a-jwt"}
        )
        assert response.status_code == 401

    def test_rejects_zero_months(self, client, auth_headers, gateway):
        response = client.post(CREATE_URL, json={"months": 0}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json()["error_code"] == "VALIDATION_ERROR"
        assert gateway.created == []

    def test_rejects_months_over_limit(self, client, auth_headers):
        response = client.post(CREATE_URL, json={"months": 13}, headers=auth_headers)
        assert response.status_code == 400

    def test_gateway_error_returns_502(self, client, db, auth_headers, gateway):
        gateway.error = GatewayError("Payment creation failed with status: 30", {"status": "30"})

        response = client.post(CREATE_URL, json={"months": 1}, headers=auth_headers)

        assert response.status_code == 502
        assert response.json()["error_code"] == "GATEWAY_ERROR"
        assert db.query(Subscription).count() == 0

    def test_gateway_timeout_returns_504_retryable(self, client, auth_headers, gateway):
        gateway.error = GatewayTimeoutError()

        response = client.post(CREATE_URL, json={"months": 1}, headers=auth_headers)

        assert response.status_code == 504
        data = response.json()
        assert data["error_code"] == "GATEWAY_TIMEOUT"
        assert data["details"]["retryable"] is True
        assert response.headers["Retry-After"] == "5"


class TestCallback:
    """POST /v1/subscription/callback"""

    def _create(self, client, auth_headers) -> str:
        response = client.post(CREATE_URL, json={"months": 1}, headers=auth_headers)
        assert response.status_code == 200
        return response.json()["paymentId"]

    def test_success_code_marks_paid(self, client, db, auth_headers, test_user):
        payment_id = self._create(client, auth_headers)

        response = client.post(CALLBACK_URL, params={"orderId": payment_id, "status": "00"})

        assert response.status_code == 200
        assert response.json()["message"] == "Payment processed"
        db.refresh(test_user)
        assert test_user.is_premium is True

    def test_other_code_marks_failed(self, client, db, auth_headers, test_user):
        payment_id = self._create(client, auth_headers)

        response = client.post(CALLBACK_URL, params={"orderId": payment_id, "status": "05"})

        assert response.status_code == 200
        subscription = db.query(Subscription).filter_by(payment_id=payment_id).one()
        db.refresh(subscription)
        assert subscription.payment_status == PaymentStatus.FAILED.value
        db.refresh(test_user)
        assert test_user.is_premium is False

    def test_unknown_order_returns_400(self, client):
        response = client.post(CALLBACK_URL, params={"orderId": "missing", "status": "00"})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "CALLBACK_NOT_RECONCILED"
        assert data["details"] == {"order_id": "missing"}

    def test_missing_params_return_400(self, client):
        response = client.post(CALLBACK_URL, params={"status": "00"})
        assert response.status_code == 400

    def test_repeated_callback_returns_200(self, client, auth_headers):
        payment_id = self._create(client, auth_headers)
        params = {"orderId": payment_id, "status": "00"}

        assert client.post(CALLBACK_URL, params=params).status_code == 200
        assert client.post(CALLBACK_URL, params=params).status_code == 200

    def test_reconciliation_error_returns_400(self, client, auth_headers):
        payment_id = self._create(client, auth_headers)

        with patch(
            "testhub.api.v1.endpoints.subscriptions.process_payment_callback",
            side_effect=ValueError("'paid' is not a valid PaymentStatus"),
        ):
            response = client.post(CALLBACK_URL, params={"orderId": payment_id, "status": "00"})

        assert response.status_code == 400
        data = response.json()
        assert data["error_code"] == "CALLBACK_NOT_RECONCILED"
        assert data["details"] == {"order_id": payment_id}


class TestStatus:
    """GET /v1/subscription/status"""

    def test_no_subscription(self, client, auth_headers):
        response = client.get(STATUS_URL, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"isActive": False, "subscription": None}

    def test_pending_subscription_is_not_active(self, client, auth_headers):
        client.post(CREATE_URL, json={"months": 2}, headers=auth_headers)

        data = client.get(STATUS_URL, headers=auth_headers).json()

        assert data["isActive"] is False
        assert data["subscription"]["paymentStatus"] == "PENDING"
        assert Decimal(str(data["subscription"]["amount"])) == Decimal("10.00")
        assert data["subscription"]["currency"] == "AZN"

    def test_paid_subscription_is_active(self, client, auth_headers):
        payment_id = client.post(CREATE_URL, json={"months": 1}, headers=auth_headers).json()[
            "paymentId"
        ]
        client.post(CALLBACK_URL, params={"orderId": payment_id, "status": "00"})

        data = client.get(STATUS_URL, headers=auth_headers).json()

        assert data["isActive"] is True
        assert data["subscription"]["paymentStatus"] == "SUCCESS"

    def test_requires_authentication(self, client):
        assert client.get(STATUS_URL).status_code == 401
