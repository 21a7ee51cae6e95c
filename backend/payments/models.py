from django.db import models


class Payment(models.Model):
    """Gateway-verified payment backing exactly one booking."""

    PENDING = "PENDING"
    SUCCESS = "SUCCESS"
    FAILED = "FAILED"
    STATUSES = [
        (PENDING, "Pending"),
        (SUCCESS, "Success"),
        (FAILED, "Failed"),
    ]

    booking = models.OneToOneField("bookings.Booking", on_delete=models.CASCADE, related_name="payment")
    amount = models.DecimalField(max_digits=12, decimal_places=2)
    currency = models.CharField(max_length=10, default="NGN")
    payment_method = models.CharField(max_length=50, blank=True)
    # unique index: a reference can only ever back one payment
    transaction_reference = models.CharField(max_length=100, unique=True)
    status = models.CharField(max_length=10, choices=STATUSES, default=PENDING)
    paid_at = models.DateTimeField(null=True, blank=True)
    gateway_payload = models.JSONField(default=dict, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["-created_at", "-id"]

    def __str__(self):
        return f"{self.transaction_reference} {self.amount} {self.currency} ({self.status})"
