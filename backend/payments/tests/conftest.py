from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
from django.contrib.auth import get_user_model

from bookings.models import Booking
from catalog.models import Attraction, AttractionCategory, Hotel
from payments.exceptions import GatewayError
from payments.services import paystack
from payments.services.intents import BookingIntent

User = get_user_model()


class FakeGateway:
    """Stands in for Paystack: verify echoes back whatever initialize received."""

    def __init__(self):
        self.initialize_calls = []
        self.verify_calls = []
        self.transactions = {}
        self.status = "success"
        self.amount_override = None
        self.metadata_override = None
        self.reference_override = None
        self.initialize_error = None
        self.verify_error = None

    def initialize_transaction(self, **kwargs):
        self.initialize_calls.append(kwargs)
        if self.initialize_error is not None:
            raise self.initialize_error
        self.transactions[kwargs["reference"]] = kwargs
        return paystack.InitializedTransaction(
            redirect_url=f"https://checkout.paystack.test/{kwargs['reference']}",
            reference=kwargs["reference"],
            access_code="ac_test",
        )

    def verify_transaction(self, reference):
        self.verify_calls.append(reference)
        if self.verify_error is not None:
            raise self.verify_error
        request = self.transactions.get(reference)
        if request is None:
            raise GatewayError("Transaction reference not found")

        amount = self.amount_override if self.amount_override is not None else request["amount_minor_units"]
        metadata = self.metadata_override if self.metadata_override is not None else request["metadata"]
        echoed = self.reference_override or reference
        raw = {
            "reference": echoed,
            "status": self.status,
            "amount": amount,
            "channel": "card",
            "metadata": metadata,
        }
        return paystack.VerifiedTransaction(
            reference=echoed,
            status=self.status,
            amount_minor_units=amount,
            currency="NGN",
            channel="card",
            paid_at=datetime(2024, 12, 10, 10, 0, tzinfo=timezone.utc),
            customer_email=request["email"],
            metadata=metadata,
            raw=raw,
        )


@pytest.fixture
def gateway(monkeypatch):
    fake = FakeGateway()
    monkeypatch.setattr(paystack, "initialize_transaction", fake.initialize_transaction)
    monkeypatch.setattr(paystack, "verify_transaction", fake.verify_transaction)
    return fake


@pytest.fixture
def user(db):
    return User.objects.create_user(
        username="ama@example.com",
        email="ama@example.com",
        password="examplepass",
        first_name="Ama",
        last_name="Mensah",
    )


@pytest.fixture
def other_user(db):
    return User.objects.create_user(
        username="kojo@example.com",
        email="kojo@example.com",
        password="examplepass",
    )


@pytest.fixture
def staff_user(db):
    return User.objects.create_user(
        username="desk@example.com",
        email="desk@example.com",
        password="examplepass",
        is_staff=True,
    )


@pytest.fixture
def hotel(db):
    return Hotel.objects.create(
        name="Labadi Beach Hotel",
        location="Accra",
        category=Hotel.RESORT,
        price_per_night=Decimal("180.00"),
        available_rooms=12,
    )


@pytest.fixture
def attraction(db):
    category = AttractionCategory.objects.create(name="Heritage")
    return Attraction.objects.create(
        name="Cape Coast Castle",
        location="Cape Coast",
        category=category,
        price=Decimal("25.00"),
    )


@pytest.fixture
def hotel_intent(user, hotel):
    return BookingIntent(
        kind=Booking.HOTEL,
        target_id=str(hotel.pk),
        user_id=user.pk,
        total_amount=Decimal("540.00"),
        customer_name="Ama Mensah",
        customer_phone="+233200000000",
        customer_email="ama@example.com",
        check_in=date(2025, 1, 10),
        check_out=date(2025, 1, 13),
        guests=2,
        rooms=1,
    )


@pytest.fixture
def attraction_intent(user, attraction):
    return BookingIntent(
        kind=Booking.ATTRACTION,
        target_id=str(attraction.pk),
        user_id=user.pk,
        total_amount=Decimal("75.00"),
        customer_name="Ama Mensah",
        customer_phone="+233200000000",
        customer_email="ama@example.com",
        visit_date=date(2025, 2, 1),
        number_of_people=3,
    )
