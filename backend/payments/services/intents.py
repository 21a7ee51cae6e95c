"""
Booking intents and the metadata codec shared by initiation and reconciliation.

No booking row exists while the customer is on the gateway's checkout page,
so everything needed to create one travels inside the transaction metadata
and comes back verbatim from the verify call. The blob is tagged with a
schema name and version so a payload we cannot read is detected instead of
producing a booking with the wrong fields.
"""

from __future__ import annotations

import json
import secrets
import time
from dataclasses import dataclass
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Optional

from rest_framework import serializers

from bookings.models import Booking
from payments.exceptions import CorruptReferenceError

INTENT_SCHEMA = "booking_intent"
INTENT_VERSION = 1
REFERENCE_PREFIX = "TRAVEL"
CENTS = Decimal("0.01")


def generate_reference() -> str:
    # the gateway only accepts alphanumerics, "-", "." and "="
    return f"{REFERENCE_PREFIX}-{int(time.time() * 1000)}-{secrets.token_hex(6)}"


def to_minor_units(amount) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount: int) -> Decimal:
    return (Decimal(int(amount)) / 100).quantize(CENTS)


@dataclass
class BookingIntent:
    kind: str
    target_id: str
    user_id: int
    total_amount: Decimal
    customer_name: str
    customer_phone: str
    customer_email: str
    check_in: Optional[date] = None
    check_out: Optional[date] = None
    visit_date: Optional[date] = None
    guests: Optional[int] = None
    rooms: Optional[int] = None
    number_of_people: Optional[int] = None

    @property
    def is_hotel_stay(self) -> bool:
        return self.kind == Booking.HOTEL

    @property
    def amount_minor_units(self) -> int:
        return to_minor_units(self.total_amount)


def _iso(value: Optional[date]) -> Optional[str]:
    return value.isoformat() if value else None


def encode_intent(intent: BookingIntent) -> dict[str, Any]:
    """Serialize an intent into the gateway metadata field."""
    kind_label = dict(Booking.TYPES).get(intent.kind, intent.kind)
    return {
        "schema": INTENT_SCHEMA,
        "version": INTENT_VERSION,
        "booking_type": intent.kind,
        "hotel_id": intent.target_id if intent.is_hotel_stay else None,
        "attraction_id": None if intent.is_hotel_stay else intent.target_id,
        "check_in": _iso(intent.check_in),
        "check_out": _iso(intent.check_out),
        "visit_date": _iso(intent.visit_date),
        "number_of_guests": intent.guests,
        "number_of_rooms": intent.rooms,
        "number_of_people": intent.number_of_people,
        "total_amount": str(Decimal(str(intent.total_amount)).quantize(CENTS)),
        "user_id": intent.user_id,
        "customer_name": intent.customer_name,
        "customer_phone": intent.customer_phone,
        # shown on the merchant dashboard; ignored when decoding
        "custom_fields": [
            {"display_name": "Booking", "variable_name": "booking_type", "value": kind_label},
            {"display_name": "Customer", "variable_name": "customer_name", "value": intent.customer_name},
            {"display_name": "Phone", "variable_name": "customer_phone", "value": intent.customer_phone},
        ],
    }


class IntentMetadataSerializer(serializers.Serializer):
    schema = serializers.CharField()
    version = serializers.IntegerField()
    booking_type = serializers.ChoiceField(choices=Booking.TYPES)
    hotel_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    attraction_id = serializers.CharField(required=False, allow_null=True, allow_blank=True)
    check_in = serializers.DateField(required=False, allow_null=True)
    check_out = serializers.DateField(required=False, allow_null=True)
    visit_date = serializers.DateField(required=False, allow_null=True)
    number_of_guests = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    number_of_rooms = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    number_of_people = serializers.IntegerField(required=False, allow_null=True, min_value=1)
    total_amount = serializers.DecimalField(max_digits=12, decimal_places=2)
    user_id = serializers.IntegerField()
    customer_name = serializers.CharField(required=False, allow_blank=True, default="")
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="")

    def validate_schema(self, value):
        if value != INTENT_SCHEMA:
            raise serializers.ValidationError("Unknown metadata schema.")
        return value

    def validate_version(self, value):
        if value != INTENT_VERSION:
            raise serializers.ValidationError(f"Unsupported metadata version {value}.")
        return value

    def validate(self, attrs):
        if attrs["booking_type"] == Booking.HOTEL:
            required = ("hotel_id", "check_in", "check_out", "number_of_guests", "number_of_rooms")
        else:
            required = ("attraction_id", "visit_date", "number_of_people")
        missing = {field: "This field is required." for field in required if not attrs.get(field)}
        if missing:
            raise serializers.ValidationError(missing)
        return attrs


def decode_intent(metadata: Any, *, customer_email: str = "") -> BookingIntent:
    """
    Rebuild the intent from the metadata echoed by the gateway.

    Raises CorruptReferenceError when the blob is missing, is not JSON, or
    does not match the current schema.
    """
    if isinstance(metadata, str):
        try:
            metadata = json.loads(metadata)
        except ValueError as exc:
            raise CorruptReferenceError("Booking details for this payment are not valid JSON.") from exc
    if not isinstance(metadata, dict):
        raise CorruptReferenceError("Booking details for this payment are missing.")

    serializer = IntentMetadataSerializer(data=metadata)
    if not serializer.is_valid():
        fields = ", ".join(sorted(serializer.errors))
        raise CorruptReferenceError(f"Booking details for this payment could not be read ({fields}).")

    data = serializer.validated_data
    is_hotel = data["booking_type"] == Booking.HOTEL
    return BookingIntent(
        kind=data["booking_type"],
        target_id=data["hotel_id"] if is_hotel else data["attraction_id"],
        user_id=data["user_id"],
        total_amount=data["total_amount"],
        customer_name=data["customer_name"],
        customer_phone=data["customer_phone"],
        customer_email=customer_email,
        check_in=data.get("check_in") if is_hotel else None,
        check_out=data.get("check_out") if is_hotel else None,
        visit_date=None if is_hotel else data.get("visit_date"),
        guests=data.get("number_of_guests") if is_hotel else None,
        rooms=data.get("number_of_rooms") if is_hotel else None,
        number_of_people=None if is_hotel else data.get("number_of_people"),
    )
