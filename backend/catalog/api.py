from django.db.models import Avg, Count, Q
from rest_framework import permissions, viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from reviews.serializers import ReviewSerializer
from .models import Attraction, AttractionCategory, Destination, Hotel
from .serializers import (
    AttractionCategorySerializer,
    AttractionSerializer,
    DestinationSerializer,
    HotelSerializer,
)


class CatalogViewSet(viewsets.ReadOnlyModelViewSet):
    """Public, read-only catalog; editing happens in the Django admin."""

    permission_classes = [permissions.AllowAny]


class DestinationViewSet(CatalogViewSet):
    queryset = Destination.objects.all()
    serializer_class = DestinationSerializer


class AttractionCategoryViewSet(CatalogViewSet):
    queryset = AttractionCategory.objects.annotate(attraction_count=Count("attractions")).order_by("name")
    serializer_class = AttractionCategorySerializer


class HotelViewSet(CatalogViewSet):
    serializer_class = HotelSerializer
    filterset_fields = ["category", "destination"]
    ordering_fields = ["name", "price_per_night", "rating"]

    def get_queryset(self):
        visible = Q(reviews__is_visible=True)
        return (
            Hotel.objects.select_related("destination")
            .annotate(
                review_count=Count("reviews", filter=visible),
                review_average=Avg("reviews__rating", filter=visible),
            )
            .order_by("name")
        )

    @action(detail=True, methods=["get"])
    def reviews(self, request, pk=None):
        hotel = self.get_object()
        queryset = hotel.reviews.filter(is_visible=True).select_related("user")
        return Response(ReviewSerializer(queryset, many=True).data)


class AttractionViewSet(CatalogViewSet):
    serializer_class = AttractionSerializer
    filterset_fields = ["category", "destination"]
    ordering_fields = ["name", "price", "rating"]

    def get_queryset(self):
        return Attraction.objects.select_related("category", "destination").order_by("name")
