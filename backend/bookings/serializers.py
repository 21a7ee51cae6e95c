from rest_framework import serializers

from bookings.models import Booking
from payments.serializers import PaymentSerializer


class BookingSerializer(serializers.ModelSerializer):
    hotel_name = serializers.CharField(source="hotel.name", read_only=True, default=None)
    attraction_name = serializers.CharField(source="attraction.name", read_only=True, default=None)
    nights = serializers.IntegerField(read_only=True)
    payment = serializers.SerializerMethodField()

    class Meta:
        model = Booking
        fields = [
            "id",
            "user",
            "type",
            "status",
            "hotel",
            "hotel_name",
            "attraction",
            "attraction_name",
            "check_in",
            "check_out",
            "nights",
            "visit_date",
            "guests",
            "rooms",
            "number_of_people",
            "total_price",
            "payment",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_payment(self, obj):
        payment = getattr(obj, "payment", None)
        if payment is None:
            return None
        return PaymentSerializer(payment).data
