from rest_framework import serializers

from bookings.models import Booking
from payments.models import Payment
from payments.services.intents import BookingIntent


class PaymentSerializer(serializers.ModelSerializer):
    class Meta:
        model = Payment
        fields = [
            "id",
            "booking",
            "amount",
            "currency",
            "payment_method",
            "transaction_reference",
            "status",
            "paid_at",
            "created_at",
        ]
        read_only_fields = fields


class PaymentInitializeSerializer(serializers.Serializer):
    """
    Parse the checkout form into a BookingIntent.

    Only types and formats are checked here; business preconditions (amount,
    dates, party size, customer details) belong to the initiation service so
    they hold for every caller.
    """

    type = serializers.ChoiceField(choices=Booking.TYPES)
    hotel_id = serializers.CharField(required=False, allow_blank=True, default="")
    attraction_id = serializers.CharField(required=False, allow_blank=True, default="")
    check_in = serializers.DateField(required=False, allow_null=True, default=None)
    check_out = serializers.DateField(required=False, allow_null=True, default=None)
    visit_date = serializers.DateField(required=False, allow_null=True, default=None)
    number_of_guests = serializers.IntegerField(required=False, allow_null=True, default=None)
    number_of_rooms = serializers.IntegerField(required=False, allow_null=True, default=None)
    number_of_people = serializers.IntegerField(required=False, allow_null=True, default=None)
    total_price = serializers.DecimalField(max_digits=12, decimal_places=2)
    customer_name = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=True)
    customer_phone = serializers.CharField(required=False, allow_blank=True, default="", trim_whitespace=True)
    customer_email = serializers.EmailField(required=False, allow_blank=True, default="")

    def to_intent(self, *, user) -> BookingIntent:
        """Build the intent; blank customer fields fall back to the user's profile."""
        data = self.validated_data
        is_hotel = data["type"] == Booking.HOTEL
        contact = user.checkout_contact()
        return BookingIntent(
            kind=data["type"],
            target_id=data["hotel_id"] if is_hotel else data["attraction_id"],
            user_id=user.pk,
            total_amount=data["total_price"],
            customer_name=data["customer_name"] or contact["customer_name"],
            customer_phone=data["customer_phone"] or contact["customer_phone"],
            customer_email=data["customer_email"] or contact["customer_email"],
            check_in=data["check_in"] if is_hotel else None,
            check_out=data["check_out"] if is_hotel else None,
            visit_date=None if is_hotel else data["visit_date"],
            guests=data["number_of_guests"] if is_hotel else None,
            rooms=data["number_of_rooms"] if is_hotel else None,
            number_of_people=None if is_hotel else data["number_of_people"],
        )


class PaymentVerifySerializer(serializers.Serializer):
    # the gateway appends both ``reference`` and ``trxref`` to the callback URL
    reference = serializers.CharField(required=False, allow_blank=True, default="")
    trxref = serializers.CharField(required=False, allow_blank=True, default="")

    def validate(self, attrs):
        attrs["reference"] = (attrs.get("reference") or attrs.get("trxref") or "").strip()
        return attrs
