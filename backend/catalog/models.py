from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models


class Destination(models.Model):
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200, blank=True)
    image_url = models.URLField(blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return self.name


class AttractionCategory(models.Model):
    name = models.CharField(max_length=100, unique=True)
    description = models.TextField(blank=True)
    color = models.CharField(max_length=7, blank=True)

    class Meta:
        ordering = ["name"]
        verbose_name_plural = "attraction categories"

    def __str__(self):
        return self.name


class Hotel(models.Model):
    LUXURY = "LUXURY"
    RESORT = "RESORT"
    BOUTIQUE = "BOUTIQUE"
    BUDGET = "BUDGET"
    ECO_FRIENDLY = "ECO_FRIENDLY"
    CATEGORIES = [
        (LUXURY, "Luxury"),
        (RESORT, "Resort"),
        (BOUTIQUE, "Boutique"),
        (BUDGET, "Budget"),
        (ECO_FRIENDLY, "Eco-friendly"),
    ]

    destination = models.ForeignKey(
        "Destination",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="hotels",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200)
    category = models.CharField(max_length=20, choices=CATEGORIES, default=BOUTIQUE)
    image_url = models.URLField(blank=True)
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    price_per_night = models.DecimalField(max_digits=10, decimal_places=2)
    amenities = models.JSONField(default=list, blank=True)
    available_rooms = models.PositiveIntegerField(default=0)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.location})"


class Attraction(models.Model):
    destination = models.ForeignKey(
        "Destination",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attractions",
    )
    category = models.ForeignKey(
        "AttractionCategory",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="attractions",
    )
    name = models.CharField(max_length=200)
    description = models.TextField(blank=True)
    location = models.CharField(max_length=200)
    image_url = models.URLField(blank=True)
    rating = models.DecimalField(
        max_digits=2,
        decimal_places=1,
        default=0,
        validators=[MinValueValidator(0), MaxValueValidator(5)],
    )
    price = models.DecimalField(max_digits=10, decimal_places=2)
    duration = models.CharField(max_length=50, blank=True)
    max_visitors = models.PositiveIntegerField(null=True, blank=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ["name"]

    def __str__(self):
        return f"{self.name} ({self.location})"
