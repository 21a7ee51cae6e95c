from rest_framework import permissions, viewsets

from .models import Review
from .serializers import ReviewModerationSerializer, ReviewSerializer


class ReviewViewSet(viewsets.ModelViewSet):
    """
    Travellers write and list their own reviews.

    Staff see every review and moderate them: editing, hiding or deleting.
    """

    serializer_class = ReviewSerializer
    permission_classes = [permissions.IsAuthenticated]
    filterset_fields = ["hotel", "attraction", "destination", "is_visible"]
    ordering_fields = ["created_at", "rating"]
    moderation_actions = {"update", "partial_update", "destroy"}

    def get_permissions(self):
        if self.action in self.moderation_actions:
            return [permissions.IsAuthenticated(), permissions.IsAdminUser()]
        return super().get_permissions()

    def get_queryset(self):
        queryset = Review.objects.select_related("user", "hotel", "attraction", "destination")
        user = self.request.user
        if user.is_staff:
            return queryset
        return queryset.filter(user=user)

    def get_serializer_class(self):
        if self.action in self.moderation_actions:
            return ReviewModerationSerializer
        return super().get_serializer_class()

    def perform_create(self, serializer):
        serializer.save(user=self.request.user)
