"""
Turn a gateway-verified transaction into exactly one confirmed booking.

The gateway's verify endpoint is the only source of truth for whether a
payment happened; whatever the client reports is ignored. Reconciling the
same reference again (callback redelivery, page reload, client retry)
returns the rows created the first time.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from bookings.models import Booking
from payments.exceptions import (
    CorruptReferenceError,
    PaymentNotSuccessful,
    ReconciliationForbidden,
    StorageConflict,
    ValidationError,
)
from payments.models import Payment
from payments.services import paystack, records
from payments.services.context import AuthContext
from payments.services.intents import decode_intent, from_minor_units

logger = logging.getLogger(__name__)
integrity_logger = logging.getLogger("payments.integrity")

RECORDED = "RECORDED"
ALREADY_RECORDED = "ALREADY_RECORDED"


@dataclass
class ReconciliationResult:
    outcome: str
    booking: Booking
    payment: Payment

    @property
    def created(self) -> bool:
        return self.outcome == RECORDED


def _already_recorded(payment: Payment, auth: AuthContext) -> ReconciliationResult:
    if not auth.can_act_for(payment.booking.user_id):
        raise ReconciliationForbidden()
    return ReconciliationResult(outcome=ALREADY_RECORDED, booking=payment.booking, payment=payment)


def _integrity_alarm(reference: str, error: CorruptReferenceError) -> CorruptReferenceError:
    integrity_logger.error("Reconciliation of %s aborted: %s", reference, error.message)
    return error


def reconcile_payment(reference: str, *, auth: AuthContext) -> ReconciliationResult:
    reference = (reference or "").strip()
    if not reference:
        raise ValidationError("Reference is required.")

    # GatewayError / GatewayUnavailable propagate; retrying is safe
    verification = paystack.verify_transaction(reference)

    if not verification.is_successful:
        logger.info("Payment %s not successful (gateway status %r)", reference, verification.status)
        raise PaymentNotSuccessful(gateway_status=verification.status)

    if verification.reference != reference:
        raise _integrity_alarm(
            reference,
            CorruptReferenceError(f"Gateway answered for reference {verification.reference!r}."),
        )

    existing = records.find_payment_by_reference(reference)
    if existing is not None:
        logger.info("Payment %s already recorded as booking %s", reference, existing.booking_id)
        return _already_recorded(existing, auth)

    try:
        intent = decode_intent(verification.metadata, customer_email=verification.customer_email)
    except CorruptReferenceError as exc:
        raise _integrity_alarm(reference, exc)

    if not auth.can_act_for(intent.user_id):
        logger.warning(
            "User %s tried to reconcile %s which belongs to user %s",
            auth.user_id,
            reference,
            intent.user_id,
        )
        raise ReconciliationForbidden()

    target = records.find_target(intent)
    if target is None:
        raise _integrity_alarm(
            reference,
            CorruptReferenceError(f"Booked {intent.kind.lower()} {intent.target_id} no longer exists."),
        )

    verified_amount = from_minor_units(verification.amount_minor_units)
    if verified_amount != intent.total_amount:
        logger.warning(
            "Payment %s: verified amount %s differs from requested %s; storing the verified amount",
            reference,
            verified_amount,
            intent.total_amount,
        )

    try:
        booking, payment = records.create_booking_and_payment(
            intent=intent,
            verification=verification,
            target=target,
        )
    except StorageConflict as conflict:
        winner = records.find_payment_by_reference(reference)
        if winner is None:
            # the constraint that failed was not the reference index
            raise conflict.__cause__
        logger.info("Payment %s recorded concurrently; returning booking %s", reference, winner.booking_id)
        return _already_recorded(winner, auth)

    logger.info(
        "Recorded payment %s: booking %s for user %s, %s %s",
        reference,
        booking.pk,
        booking.user_id,
        payment.amount,
        payment.currency,
    )
    return ReconciliationResult(outcome=RECORDED, booking=booking, payment=payment)
