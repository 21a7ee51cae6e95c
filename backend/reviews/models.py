from django.conf import settings
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Review(models.Model):
    """A traveller's rating of one hotel, attraction or destination."""

    TARGET_FIELDS = ("hotel", "attraction", "destination")

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="reviews")
    hotel = models.ForeignKey(
        "catalog.Hotel",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews",
    )
    attraction = models.ForeignKey(
        "catalog.Attraction",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews",
    )
    destination = models.ForeignKey(
        "catalog.Destination",
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="reviews",
    )
    rating = models.PositiveSmallIntegerField(validators=[MinValueValidator(1), MaxValueValidator(5)])
    comment = models.TextField(blank=True)
    # staff hide abusive reviews instead of deleting them
    is_visible = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.rating}/5 by {self.user} on {self.target}"

    @property
    def target(self):
        for name in self.TARGET_FIELDS:
            value = getattr(self, name)
            if value is not None:
                return value
        return None
