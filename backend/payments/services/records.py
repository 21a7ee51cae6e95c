from __future__ import annotations

from django.db import IntegrityError, transaction

from bookings.models import Booking
from catalog.models import Attraction, Hotel
from payments.exceptions import StorageConflict
from payments.models import Payment
from payments.services.intents import BookingIntent, from_minor_units
from payments.services.paystack import VerifiedTransaction


def find_payment_by_reference(reference: str) -> Payment | None:
    return (
        Payment.objects.select_related("booking", "booking__hotel", "booking__attraction")
        .filter(transaction_reference=reference)
        .first()
    )


def create_booking_and_payment(
    *,
    intent: BookingIntent,
    verification: VerifiedTransaction,
    target,
) -> tuple[Booking, Payment]:
    """
    Insert the confirmed booking and its payment as one unit.

    The unique index on ``Payment.transaction_reference`` decides concurrent
    attempts for the same reference: the loser's insert fails, the whole
    block rolls back (booking included) and StorageConflict is raised so the
    caller can return the winner's rows instead.
    """

    amount = from_minor_units(verification.amount_minor_units)
    booking_fields = {
        "user_id": intent.user_id,
        "type": intent.kind,
        "total_price": amount,
        "status": Booking.CONFIRMED,
    }
    if intent.is_hotel_stay:
        booking_fields.update(
            hotel=target,
            check_in=intent.check_in,
            check_out=intent.check_out,
            guests=intent.guests,
            rooms=intent.rooms,
        )
    else:
        booking_fields.update(
            attraction=target,
            visit_date=intent.visit_date,
            number_of_people=intent.number_of_people,
        )

    try:
        with transaction.atomic():
            booking = Booking.objects.create(**booking_fields)
            payment = Payment.objects.create(
                booking=booking,
                amount=amount,
                currency=verification.currency,
                payment_method=verification.channel,
                transaction_reference=verification.reference,
                status=Payment.SUCCESS,
                paid_at=verification.paid_at,
                gateway_payload={
                    "gateway_response": verification.raw,
                    "customer": {
                        "name": intent.customer_name,
                        "phone": intent.customer_phone,
                        "email": verification.customer_email,
                    },
                },
            )
    except IntegrityError as exc:
        raise StorageConflict(verification.reference) from exc

    return booking, payment


def find_target(intent: BookingIntent):
    """Return the hotel or attraction the intent points at, or None."""
    model = Hotel if intent.is_hotel_stay else Attraction
    try:
        return model.objects.filter(pk=intent.target_id).first()
    except (TypeError, ValueError):
        return None
