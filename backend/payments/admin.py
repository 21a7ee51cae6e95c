from django.contrib import admin

from .models import Payment


@admin.register(Payment)
class PaymentAdmin(admin.ModelAdmin):
    list_display = ("transaction_reference", "booking", "amount", "currency", "payment_method", "status", "paid_at")
    list_filter = ("status", "payment_method", "currency")
    search_fields = ("transaction_reference", "booking__user__email")
    readonly_fields = ("gateway_payload", "created_at")
