from decimal import Decimal

from django.conf import settings
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounts.models import User
from catalog.models import Attraction, AttractionCategory, Destination, Hotel


SEED_PASSWORD = "Travel123!"
SUPERUSER_EMAIL = "admin@travel.test"
SUPERUSER_PASSWORD = "AdminTravel123!"

CATEGORIES = [
    ("Historic", "Historical sites, monuments, and heritage locations", "#8B4513"),
    ("Natural", "Natural landscapes, parks, and scenic areas", "#228B22"),
    ("Cultural", "Cultural centers, museums, and traditional sites", "#9932CC"),
    ("Adventure", "Adventure activities and outdoor experiences", "#FF4500"),
]

HOTELS = [
    {
        "name": "Kempinski Hotel Gold Coast City",
        "location": "Accra, Greater Accra",
        "category": Hotel.LUXURY,
        "price_per_night": Decimal("250.00"),
        "amenities": ["WiFi", "Pool", "Spa", "Restaurant", "Gym"],
        "available_rooms": 15,
    },
    {
        "name": "Coconut Grove Beach Resort",
        "location": "Elmina, Central Region",
        "category": Hotel.ECO_FRIENDLY,
        "price_per_night": Decimal("120.00"),
        "amenities": ["WiFi", "Beach Access", "Restaurant", "Bar"],
        "available_rooms": 30,
    },
    {
        "name": "Budget Inn Accra",
        "location": "Accra, Greater Accra",
        "category": Hotel.BUDGET,
        "price_per_night": Decimal("45.00"),
        "amenities": ["WiFi", "Laundry"],
        "available_rooms": 50,
    },
]

ATTRACTIONS = [
    {
        "name": "Cape Coast Castle",
        "location": "Cape Coast, Central Region",
        "category": "Historic",
        "price": Decimal("25.00"),
        "duration": "2-3 hours",
        "max_visitors": 50,
    },
    {
        "name": "Kakum National Park",
        "location": "Cape Coast, Central Region",
        "category": "Natural",
        "price": Decimal("15.00"),
        "duration": "3-4 hours",
        "max_visitors": 100,
    },
    {
        "name": "Mole National Park",
        "location": "Sawla, Savannah Region",
        "category": "Adventure",
        "price": Decimal("35.00"),
        "duration": "Full day",
        "max_visitors": 40,
    },
]


class Command(BaseCommand):
    help = "Populate the local development database with a sample catalog and accounts."

    def handle(self, *args, **options):
        if not settings.DEBUG:
            raise CommandError("Refusing to seed data while DEBUG is False.")

        with transaction.atomic():
            self.stdout.write(self.style.MIGRATE_HEADING("Creating destinations"))
            ghana, _ = Destination.objects.get_or_create(
                name="Ghana",
                defaults={"description": "Castles, rainforest canopies and coastline.", "location": "West Africa"},
            )

            self.stdout.write(self.style.MIGRATE_HEADING("Creating attraction categories"))
            categories = {}
            for name, description, color in CATEGORIES:
                category, _ = AttractionCategory.objects.update_or_create(
                    name=name,
                    defaults={"description": description, "color": color},
                )
                categories[name] = category

            self.stdout.write(self.style.MIGRATE_HEADING("Creating hotels & attractions"))
            for data in HOTELS:
                Hotel.objects.update_or_create(
                    name=data["name"],
                    defaults={**data, "destination": ghana},
                )
            for data in ATTRACTIONS:
                defaults = {**data, "destination": ghana, "category": categories[data["category"]]}
                Attraction.objects.update_or_create(name=data["name"], defaults=defaults)

            self.stdout.write(self.style.MIGRATE_HEADING("Creating users"))
            self._ensure_user(email="traveller@travel.test", first_name="Ama", last_name="Traveller")
            self._ensure_superuser()

        self.stdout.write(self.style.SUCCESS("Development seed data created."))
        self.stdout.write(self.style.NOTICE(f"Sample login accounts use password: {SEED_PASSWORD}"))
        self.stdout.write(self.style.NOTICE(f"Admin superuser {SUPERUSER_EMAIL} password: {SUPERUSER_PASSWORD}"))

    def _ensure_user(self, email: str, first_name: str, last_name: str) -> User:
        user, created = User.objects.get_or_create(
            email=email,
            defaults={
                "username": email,
                "first_name": first_name,
                "last_name": last_name,
                "display_name": f"{first_name} {last_name}",
            },
        )
        if created or not user.has_usable_password():
            user.set_password(SEED_PASSWORD)
            user.save(update_fields=["password"])
        return user

    def _ensure_superuser(self) -> User:
        user, created = User.objects.get_or_create(
            email=SUPERUSER_EMAIL,
            defaults={
                "username": SUPERUSER_EMAIL,
                "first_name": "Admin",
                "last_name": "User",
                "display_name": "Admin User",
                "is_staff": True,
                "is_superuser": True,
            },
        )
        flag_updates = {}
        if not user.is_staff:
            flag_updates["is_staff"] = True
        if not user.is_superuser:
            flag_updates["is_superuser"] = True
        if flag_updates:
            for attr, value in flag_updates.items():
                setattr(user, attr, value)
            user.save(update_fields=list(flag_updates.keys()))
        if created or not user.has_usable_password():
            user.set_password(SUPERUSER_PASSWORD)
            user.save(update_fields=["password"])
        return user
