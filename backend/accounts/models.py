from django.contrib.auth.models import AbstractUser
from django.db import models


class User(AbstractUser):
    """
    Traveller or staff account. Staff users administer the catalog and see every booking.

    ``username`` always holds the lower-cased email; login goes through it.
    """

    display_name = models.CharField(max_length=120, blank=True)
    phone = models.CharField(max_length=30, blank=True)

    def __str__(self):
        return self.display_name or self.email or self.username

    @property
    def contact_name(self) -> str:
        return self.display_name or self.get_full_name() or self.email

    def checkout_contact(self) -> dict:
        """Customer details pre-filled on the payment form."""
        return {
            "customer_name": self.contact_name,
            "customer_phone": self.phone,
            "customer_email": self.email,
        }
