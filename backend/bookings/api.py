from rest_framework import permissions, viewsets

from bookings.models import Booking
from bookings.serializers import BookingSerializer


class BookingViewSet(viewsets.ReadOnlyModelViewSet):
    """A traveller's own bookings; staff see every booking."""

    serializer_class = BookingSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["status", "type"]
    ordering_fields = ["created_at", "total_price"]

    def get_queryset(self):
        queryset = Booking.objects.select_related("hotel", "attraction", "payment").order_by("-created_at", "-id")
        user = self.request.user
        if user.is_staff:
            return queryset
        return queryset.filter(user=user)
