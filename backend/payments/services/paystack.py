from __future__ import annotations

import hashlib
import hmac
import logging
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional
from urllib.parse import quote, urlencode
from uuid import uuid4

import requests
from django.conf import settings
from django.core.cache import cache
from django.utils import timezone
from django.utils.dateparse import parse_datetime

from payments.exceptions import GatewayError, GatewayUnavailable

logger = logging.getLogger(__name__)

STUB_CACHE_PREFIX = "paystack-stub:"
STUB_CACHE_TIMEOUT = 60 * 60 * 24


def _minor_units(value) -> Optional[int]:
    """Parse a gateway amount; None unless it is a positive whole number."""
    if isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value.isdigit():
            return None
    try:
        amount = int(value)
    except (TypeError, ValueError):
        return None
    if amount != value and not isinstance(value, str):
        return None
    return amount if amount > 0 else None


@dataclass
class InitializedTransaction:
    redirect_url: str
    reference: str
    access_code: str


@dataclass
class VerifiedTransaction:
    """The subset of a verify response the reconciliation workflow relies on."""

    reference: str
    status: str
    amount_minor_units: int
    currency: str
    channel: str
    paid_at: Optional[datetime]
    customer_email: str
    metadata: Any
    raw: dict = field(default_factory=dict)

    @property
    def is_successful(self) -> bool:
        return self.status == "success"

    @classmethod
    def from_gateway(cls, data: dict) -> "VerifiedTransaction":
        status = str(data.get("status") or "").lower()
        amount = _minor_units(data.get("amount"))
        if amount is None:
            # a charge we cannot price must never become a booking
            if status == "success":
                raise GatewayError("Payment gateway returned an unreadable amount.")
            amount = 0
        paid_at = None
        if data.get("paid_at"):
            try:
                paid_at = parse_datetime(str(data["paid_at"]))
            except ValueError:
                paid_at = None
        customer = data.get("customer") or {}
        return cls(
            reference=str(data.get("reference") or ""),
            status=status,
            amount_minor_units=amount,
            currency=data.get("currency") or settings.PAYSTACK_CURRENCY,
            channel=data.get("channel") or "",
            paid_at=paid_at,
            customer_email=customer.get("email") or "",
            metadata=data.get("metadata"),
            raw=data,
        )


def _get_secret_key() -> Optional[str]:
    key = getattr(settings, "PAYSTACK_SECRET_KEY", "")
    return key or None


def _should_use_stub() -> bool:
    if getattr(settings, "PAYSTACK_USE_STUB", False):
        return True
    return _get_secret_key() is None


def _request(method: str, path: str, **kwargs) -> dict:
    api_key = _get_secret_key()
    if not api_key:
        raise RuntimeError("Paystack secret key is not configured.")

    url = f"{settings.PAYSTACK_BASE_URL.rstrip('/')}{path}"
    headers = {
        "Authorization": f"Bearer {api_key}",
        "Content-Type": "application/json",
        "Accept": "application/json",
    }
    try:
        response = requests.request(
            method,
            url,
            headers=headers,
            timeout=settings.PAYSTACK_TIMEOUT_SECONDS,
            **kwargs,
        )
    except requests.RequestException as exc:
        logger.warning("Paystack %s %s failed: %s", method, path, exc)
        raise GatewayUnavailable() from exc

    if response.status_code >= 500:
        logger.warning("Paystack %s %s returned HTTP %s", method, path, response.status_code)
        raise GatewayUnavailable(f"Payment gateway returned HTTP {response.status_code}.")

    try:
        body = response.json()
    except ValueError as exc:
        raise GatewayError("Payment gateway returned an unreadable response.") from exc

    if not isinstance(body, dict) or not body.get("status"):
        message = (body.get("message") if isinstance(body, dict) else None) or "Payment gateway request failed."
        logger.warning("Paystack %s %s rejected: %s", method, path, message)
        raise GatewayError(message)

    return body.get("data") or {}


def _stub_initialize(payload: dict) -> InitializedTransaction:
    reference = payload["reference"]
    cache.set(f"{STUB_CACHE_PREFIX}{reference}", payload, STUB_CACHE_TIMEOUT)
    query = urlencode({"reference": reference, "amount": payload["amount"]})
    return InitializedTransaction(
        redirect_url=f"{settings.FRONTEND_URL.rstrip('/')}/payments/preview?{query}",
        reference=reference,
        access_code=f"stub_{uuid4().hex[:12]}",
    )


def _stub_verify(reference: str) -> VerifiedTransaction:
    payload = cache.get(f"{STUB_CACHE_PREFIX}{reference}")
    if payload is None:
        raise GatewayError("Transaction reference not found")
    paid_at = timezone.now()
    raw = {
        "reference": reference,
        "status": "success",
        "amount": payload["amount"],
        "currency": payload["currency"],
        "channel": "card",
        "gateway_response": "Successful",
        "paid_at": paid_at.isoformat(),
        "customer": {"email": payload["email"]},
        "metadata": payload["metadata"],
    }
    return VerifiedTransaction.from_gateway(raw)


def initialize_transaction(
    *,
    reference: str,
    amount_minor_units: int,
    email: str,
    callback_url: str,
    metadata: dict,
    currency: str | None = None,
) -> InitializedTransaction:
    """
    Open a transaction on Paystack (or the local stub) and return the checkout redirect.

    The stub keeps the request in the cache so a later verify call can echo
    it back, which lets local development run the whole flow without keys.
    """

    payload = {
        "reference": reference,
        "amount": amount_minor_units,
        "email": email,
        "currency": currency or settings.PAYSTACK_CURRENCY,
        "callback_url": callback_url,
        "metadata": metadata,
    }
    if _should_use_stub():
        return _stub_initialize(payload)

    data = _request("POST", "/transaction/initialize", json=payload)
    if not data.get("authorization_url"):
        raise GatewayError("Payment gateway did not return a checkout URL.")
    return InitializedTransaction(
        redirect_url=data["authorization_url"],
        reference=data.get("reference") or reference,
        access_code=data.get("access_code") or "",
    )


def verify_transaction(reference: str) -> VerifiedTransaction:
    if _should_use_stub():
        return _stub_verify(reference)

    data = _request("GET", f"/transaction/verify/{quote(reference, safe='')}")
    return VerifiedTransaction.from_gateway(data)


def verify_webhook_signature(payload: bytes, signature: str | None) -> bool:
    """Check the ``x-paystack-signature`` header: HMAC-SHA512 of the raw body."""
    api_key = _get_secret_key()
    if not api_key or not signature:
        return False
    expected = hmac.new(api_key.encode("utf-8"), payload, hashlib.sha512).hexdigest()
    # headers are attacker-controlled and may not be ASCII
    return hmac.compare_digest(expected.encode("ascii"), signature.encode("utf-8", "replace"))
