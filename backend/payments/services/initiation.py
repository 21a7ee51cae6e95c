from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from decimal import Decimal, InvalidOperation
from urllib.parse import urlencode

from django.conf import settings

from bookings.models import Booking
from payments.exceptions import GatewayError, ValidationError
from payments.services import paystack
from payments.services.context import AuthContext
from payments.services.intents import BookingIntent, encode_intent, generate_reference
from payments.services.records import find_target

logger = logging.getLogger(__name__)


@dataclass
class PaymentInitiation:
    redirect_url: str
    reference: str
    access_code: str


def build_callback_url(reference: str) -> str:
    query = urlencode({"reference": reference})
    return f"{settings.FRONTEND_URL.rstrip('/')}/payment/verify?{query}"


def _precondition_errors(intent: BookingIntent) -> list[str]:
    errors: list[str] = []

    if intent.kind not in dict(Booking.TYPES):
        return [f"Invalid booking type {intent.kind!r}."]

    try:
        amount = Decimal(str(intent.total_amount))
    except (InvalidOperation, ValueError):
        amount = None
    if amount is None or not amount.is_finite() or amount <= 0 or intent.amount_minor_units <= 0:
        errors.append("Total amount must be greater than zero.")

    for attr, label in (
        ("customer_name", "Customer name"),
        ("customer_phone", "Customer phone"),
        ("customer_email", "Customer email"),
    ):
        if not (getattr(intent, attr) or "").strip():
            errors.append(f"{label} is required.")

    if not str(intent.target_id or "").strip():
        errors.append("A hotel or attraction must be selected.")

    if intent.is_hotel_stay:
        if not intent.check_in or not intent.check_out:
            errors.append("Check-in and check-out dates are required.")
        elif intent.check_out <= intent.check_in:
            errors.append("Check-out must be after check-in.")
        if not intent.guests or intent.guests < 1:
            errors.append("At least one guest is required.")
        if not intent.rooms or intent.rooms < 1:
            errors.append("At least one room is required.")
    else:
        if not intent.visit_date:
            errors.append("Visit date is required.")
        if not intent.number_of_people or intent.number_of_people < 1:
            errors.append("At least one person is required.")

    return errors


def initiate_payment(intent: BookingIntent, *, auth: AuthContext) -> PaymentInitiation:
    """
    Open a gateway transaction for a booking the user has not paid for yet.

    Nothing is stored locally: the full intent rides along in the gateway
    metadata until reconciliation. Precondition failures raise
    ValidationError before the gateway is contacted; gateway failures are
    passed through as GatewayError and are not retried here.
    """

    if not auth.is_authenticated:
        raise ValidationError("An authenticated user is required to start a payment.")

    errors = _precondition_errors(intent)
    if errors:
        raise ValidationError(" ".join(errors))

    if find_target(intent) is None:
        label = "Hotel" if intent.is_hotel_stay else "Attraction"
        raise ValidationError(f"{label} {intent.target_id} does not exist.")

    intent = replace(
        intent,
        user_id=auth.user_id,
        customer_name=intent.customer_name.strip(),
        customer_phone=intent.customer_phone.strip(),
        customer_email=intent.customer_email.strip(),
    )
    reference = generate_reference()

    try:
        transaction = paystack.initialize_transaction(
            reference=reference,
            amount_minor_units=intent.amount_minor_units,
            email=intent.customer_email,
            callback_url=build_callback_url(reference),
            metadata=encode_intent(intent),
        )
    except GatewayError as exc:
        logger.warning("Payment initialization failed for %s: %s", reference, exc.message)
        raise

    logger.info(
        "Initialized payment %s for user %s: %s %s, %s minor units",
        transaction.reference,
        auth.user_id,
        intent.kind,
        intent.target_id,
        intent.amount_minor_units,
    )
    return PaymentInitiation(
        redirect_url=transaction.redirect_url,
        reference=transaction.reference,
        access_code=transaction.access_code,
    )
