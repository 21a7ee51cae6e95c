import hashlib
import hmac
import types

import pytest
import requests
from django.core.cache import cache

from payments.exceptions import GatewayError, GatewayUnavailable
from payments.services import paystack


@pytest.fixture(autouse=True)
def clear_cache():
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def live(settings):
    settings.PAYSTACK_USE_STUB = False
    settings.PAYSTACK_SECRET_KEY = "sk_test_123"
    settings.PAYSTACK_BASE_URL = "https://api.paystack.test"
    settings.PAYSTACK_TIMEOUT_SECONDS = 15
    return settings


def fake_response(body, status_code=200):
    return types.SimpleNamespace(status_code=status_code, json=lambda: body)


def test_stub_initialize_returns_preview_url_and_verify_echoes_request(settings):
    settings.PAYSTACK_USE_STUB = True
    settings.FRONTEND_URL = "https://app.test"

    transaction = paystack.initialize_transaction(
        reference="TRAVEL-1-abc",
        amount_minor_units=54000,
        email="ama@example.com",
        callback_url="https://app.test/payment/verify?reference=TRAVEL-1-abc",
        metadata={"schema": "booking_intent"},
    )

    assert transaction.reference == "TRAVEL-1-abc"
    assert transaction.access_code.startswith("stub_")
    assert transaction.redirect_url.startswith("https://app.test/payments/preview?")
    assert "reference=TRAVEL-1-abc" in transaction.redirect_url

    verified = paystack.verify_transaction("TRAVEL-1-abc")

    assert verified.is_successful
    assert verified.reference == "TRAVEL-1-abc"
    assert verified.amount_minor_units == 54000
    assert verified.customer_email == "ama@example.com"
    assert verified.metadata == {"schema": "booking_intent"}
    assert verified.paid_at is not None


def test_stub_verify_unknown_reference_is_gateway_error(settings):
    settings.PAYSTACK_USE_STUB = True

    with pytest.raises(GatewayError) as exc:
        paystack.verify_transaction("TRAVEL-missing")

    assert exc.value.message == "Transaction reference not found"


def test_stub_is_used_when_no_secret_key(settings):
    settings.PAYSTACK_USE_STUB = False
    settings.PAYSTACK_SECRET_KEY = ""

    assert paystack._should_use_stub() is True


def test_initialize_calls_paystack_when_configured(monkeypatch, live):
    captured = {}

    def fake_request(method, url, **kwargs):
        captured.update(method=method, url=url, **kwargs)
        return fake_response(
            {
                "status": True,
                "message": "Authorization URL created",
                "data": {
                    "authorization_url": "https://checkout.paystack.com/xyz",
                    "access_code": "xyz",
                    "reference": "TRAVEL-1-abc",
                },
            }
        )

    monkeypatch.setattr(paystack.requests, "request", fake_request)

    transaction = paystack.initialize_transaction(
        reference="TRAVEL-1-abc",
        amount_minor_units=54000,
        email="ama@example.com",
        callback_url="https://app.test/payment/verify?reference=TRAVEL-1-abc",
        metadata={"booking_type": "HOTEL"},
    )

    assert transaction.redirect_url == "https://checkout.paystack.com/xyz"
    assert transaction.access_code == "xyz"
    assert captured["method"] == "POST"
    assert captured["url"] == "https://api.paystack.test/transaction/initialize"
    assert captured["headers"]["Authorization"] == "Bearer sk_test_123"
    assert captured["timeout"] == 15
    assert captured["json"]["amount"] == 54000
    assert captured["json"]["currency"] == "NGN"
    assert captured["json"]["metadata"] == {"booking_type": "HOTEL"}


def test_initialize_rejection_message_is_passed_through(monkeypatch, live):
    monkeypatch.setattr(
        paystack.requests,
        "request",
        lambda *args, **kwargs: fake_response({"status": False, "message": "Invalid key"}, status_code=401),
    )

    with pytest.raises(GatewayError) as exc:
        paystack.initialize_transaction(
            reference="TRAVEL-1-abc",
            amount_minor_units=54000,
            email="ama@example.com",
            callback_url="https://app.test/payment/verify",
            metadata={},
        )

    assert not isinstance(exc.value, GatewayUnavailable)
    assert exc.value.message == "Invalid key"


def test_network_failure_is_gateway_unavailable(monkeypatch, live):
    def boom(*args, **kwargs):
        raise requests.ConnectionError("connection reset")

    monkeypatch.setattr(paystack.requests, "request", boom)

    with pytest.raises(GatewayUnavailable) as exc:
        paystack.verify_transaction("TRAVEL-1-abc")

    assert exc.value.retryable is True


def test_server_error_is_gateway_unavailable(monkeypatch, live):
    monkeypatch.setattr(
        paystack.requests,
        "request",
        lambda *args, **kwargs: fake_response({}, status_code=502),
    )

    with pytest.raises(GatewayUnavailable):
        paystack.verify_transaction("TRAVEL-1-abc")


def test_verify_parses_transaction(monkeypatch, live):
    captured = {}

    def fake_request(method, url, **kwargs):
        captured.update(method=method, url=url)
        return fake_response(
            {
                "status": True,
                "message": "Verification successful",
                "data": {
                    "reference": "TRAVEL-1-abc",
                    "status": "success",
                    "amount": 54000,
                    "currency": "NGN",
                    "channel": "card",
                    "paid_at": "2024-12-10T10:00:00.000Z",
                    "customer": {"email": "ama@example.com"},
                    "metadata": {"booking_type": "HOTEL"},
                },
            }
        )

    monkeypatch.setattr(paystack.requests, "request", fake_request)

    verified = paystack.verify_transaction("TRAVEL-1-abc")

    assert captured["method"] == "GET"
    assert captured["url"] == "https://api.paystack.test/transaction/verify/TRAVEL-1-abc"
    assert verified.is_successful
    assert verified.amount_minor_units == 54000
    assert verified.channel == "card"
    assert verified.customer_email == "ama@example.com"
    assert verified.metadata == {"booking_type": "HOTEL"}
    assert verified.paid_at.year == 2024


def test_abandoned_transaction_is_not_successful(monkeypatch, live):
    monkeypatch.setattr(
        paystack.requests,
        "request",
        lambda *args, **kwargs: fake_response(
            {"status": True, "data": {"reference": "TRAVEL-1-abc", "status": "abandoned", "amount": 54000}}
        ),
    )

    verified = paystack.verify_transaction("TRAVEL-1-abc")

    assert verified.status == "abandoned"
    assert not verified.is_successful


def test_webhook_signature(settings):
    settings.PAYSTACK_SECRET_KEY = "sk_test_123"
    body = b'{"event": "charge.success"}'
    signature = hmac.new(b"sk_test_123", body, hashlib.sha512).hexdigest()

    assert paystack.verify_webhook_signature(body, signature) is True
    assert paystack.verify_webhook_signature(body + b" ", signature) is False
    assert paystack.verify_webhook_signature(body, None) is False

    settings.PAYSTACK_SECRET_KEY = ""
    assert paystack.verify_webhook_signature(body, signature) is False


@pytest.mark.parametrize("amount", [None, "", "abc", "540.50", 540.5, -100, 0, True])
def test_successful_charge_without_readable_amount_is_gateway_error(amount):
    with pytest.raises(GatewayError) as exc:
        paystack.VerifiedTransaction.from_gateway(
            {"reference": "TRAVEL-1-abc", "status": "success", "amount": amount}
        )

    assert "amount" in exc.value.message


@pytest.mark.parametrize("amount, expected", [(54000, 54000), ("54000", 54000), (54000.0, 54000)])
def test_gateway_amount_forms_are_accepted(amount, expected):
    verified = paystack.VerifiedTransaction.from_gateway(
        {"reference": "TRAVEL-1-abc", "status": "success", "amount": amount}
    )

    assert verified.amount_minor_units == expected


def test_failed_charge_without_amount_still_reports_status():
    verified = paystack.VerifiedTransaction.from_gateway({"reference": "TRAVEL-1-abc", "status": "failed"})

    assert verified.status == "failed"
    assert verified.amount_minor_units == 0


def test_non_ascii_signature_is_rejected(settings):
    settings.PAYSTACK_SECRET_KEY = "sk_test_123"

    assert paystack.verify_webhook_signature(b"{}", "é" * 128) is False
