from django.contrib import admin

from .models import Attraction, AttractionCategory, Destination, Hotel


@admin.register(Destination)
class DestinationAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "created_at")
    search_fields = ("name", "location")


@admin.register(AttractionCategory)
class AttractionCategoryAdmin(admin.ModelAdmin):
    list_display = ("name", "color")


@admin.register(Hotel)
class HotelAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "category", "price_per_night", "available_rooms", "rating")
    list_filter = ("category", "destination")
    search_fields = ("name", "location")


@admin.register(Attraction)
class AttractionAdmin(admin.ModelAdmin):
    list_display = ("name", "location", "category", "price", "rating")
    list_filter = ("category", "destination")
    search_fields = ("name", "location")
