from django.conf import settings
from django.core.validators import MinValueValidator
from django.db import models


class Booking(models.Model):
    """A hotel stay or attraction visit reserved by a user."""

    HOTEL = "HOTEL"
    ATTRACTION = "ATTRACTION"
    TYPES = [
        (HOTEL, "Hotel stay"),
        (ATTRACTION, "Attraction visit"),
    ]

    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"
    STATUSES = [
        (PENDING, "Pending"),
        (CONFIRMED, "Confirmed"),
        (CANCELLED, "Cancelled"),
        (COMPLETED, "Completed"),
    ]

    user = models.ForeignKey(settings.AUTH_USER_MODEL, on_delete=models.CASCADE, related_name="bookings")
    type = models.CharField(max_length=12, choices=TYPES)
    hotel = models.ForeignKey(
        "catalog.Hotel",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    attraction = models.ForeignKey(
        "catalog.Attraction",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="bookings",
    )
    check_in = models.DateField(null=True, blank=True)
    check_out = models.DateField(null=True, blank=True)
    visit_date = models.DateField(null=True, blank=True)
    guests = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    rooms = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    number_of_people = models.PositiveIntegerField(null=True, blank=True, validators=[MinValueValidator(1)])
    total_price = models.DecimalField(max_digits=12, decimal_places=2)
    status = models.CharField(max_length=12, choices=STATUSES, default=PENDING)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.get_type_display()} #{self.pk} for {self.user} ({self.status})"

    @property
    def target(self):
        return self.hotel if self.type == self.HOTEL else self.attraction

    @property
    def nights(self) -> int | None:
        if self.check_in and self.check_out:
            return (self.check_out - self.check_in).days
        return None
