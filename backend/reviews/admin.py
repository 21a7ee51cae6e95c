from django.contrib import admin

from .models import Review


@admin.register(Review)
class ReviewAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "target", "rating", "is_visible", "created_at")
    list_filter = ("is_visible", "rating")
    search_fields = ("user__email", "hotel__name", "attraction__name", "destination__name", "comment")
    list_editable = ("is_visible",)
    list_select_related = ("user", "hotel", "attraction", "destination")
