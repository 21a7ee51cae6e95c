from django.contrib import admin

from payments.models import Payment

from .models import Booking


class PaymentInline(admin.StackedInline):
    model = Payment
    extra = 0
    can_delete = False
    readonly_fields = (
        "amount",
        "currency",
        "payment_method",
        "transaction_reference",
        "status",
        "paid_at",
        "gateway_payload",
        "created_at",
    )


@admin.register(Booking)
class BookingAdmin(admin.ModelAdmin):
    list_display = ("id", "user", "type", "target", "total_price", "status", "created_at")
    list_filter = ("type", "status")
    search_fields = ("user__email", "hotel__name", "attraction__name", "payment__transaction_reference")
    list_select_related = ("user", "hotel", "attraction")
    inlines = [PaymentInline]
