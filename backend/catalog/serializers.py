from rest_framework import serializers

from .models import Attraction, AttractionCategory, Destination, Hotel


class DestinationSerializer(serializers.ModelSerializer):
    class Meta:
        model = Destination
        fields = ["id", "name", "description", "location", "image_url"]


class AttractionCategorySerializer(serializers.ModelSerializer):
    attraction_count = serializers.IntegerField(read_only=True)

    class Meta:
        model = AttractionCategory
        fields = ["id", "name", "description", "color", "attraction_count"]


class HotelSerializer(serializers.ModelSerializer):
    """Hotel card for the checkout form: ``price_per_night`` is what a stay is priced from."""

    destination_name = serializers.CharField(source="destination.name", read_only=True, default=None)
    review_count = serializers.IntegerField(read_only=True)
    review_average = serializers.DecimalField(max_digits=3, decimal_places=2, read_only=True)

    class Meta:
        model = Hotel
        fields = [
            "id",
            "name",
            "description",
            "location",
            "category",
            "image_url",
            "rating",
            "price_per_night",
            "amenities",
            "available_rooms",
            "destination",
            "destination_name",
            "review_count",
            "review_average",
        ]


class AttractionSerializer(serializers.ModelSerializer):
    destination_name = serializers.CharField(source="destination.name", read_only=True, default=None)
    category_name = serializers.CharField(source="category.name", read_only=True, default=None)

    class Meta:
        model = Attraction
        fields = [
            "id",
            "name",
            "description",
            "location",
            "image_url",
            "rating",
            "price",
            "duration",
            "max_visitors",
            "category",
            "category_name",
            "destination",
            "destination_name",
        ]
