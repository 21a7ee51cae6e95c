from rest_framework import serializers

from .models import Review


class ReviewSerializer(serializers.ModelSerializer):
    user_name = serializers.CharField(source="user.contact_name", read_only=True)
    hotel_name = serializers.CharField(source="hotel.name", read_only=True, default=None)
    attraction_name = serializers.CharField(source="attraction.name", read_only=True, default=None)
    destination_name = serializers.CharField(source="destination.name", read_only=True, default=None)

    class Meta:
        model = Review
        fields = [
            "id",
            "user",
            "user_name",
            "hotel",
            "hotel_name",
            "attraction",
            "attraction_name",
            "destination",
            "destination_name",
            "rating",
            "comment",
            "is_visible",
            "created_at",
        ]
        read_only_fields = ["user", "is_visible", "created_at"]

    def validate(self, attrs):
        chosen = [name for name in Review.TARGET_FIELDS if attrs.get(name) is not None]
        if len(chosen) != 1:
            raise serializers.ValidationError("Review exactly one hotel, attraction or destination.")
        return attrs


class ReviewModerationSerializer(serializers.ModelSerializer):
    """Staff edits: the target and author stay fixed."""

    class Meta:
        model = Review
        fields = ["id", "rating", "comment", "is_visible"]
