from django.contrib import admin
from django.urls import include, path
from rest_framework.routers import DefaultRouter
from rest_framework_simplejwt.views import TokenRefreshView

from accounts.api import LoginView, MeView, RegisterView
from bookings.api import BookingViewSet
from catalog.api import AttractionCategoryViewSet, AttractionViewSet, DestinationViewSet, HotelViewSet
from payments.api import (
    InitializePaymentView,
    PaystackWebhookView,
    VerifyPaymentView,
)
from reviews.api import ReviewViewSet

router = DefaultRouter()
router.register(r"bookings", BookingViewSet, basename="booking")
router.register(r"destinations", DestinationViewSet, basename="destination")
router.register(r"attraction-categories", AttractionCategoryViewSet, basename="attraction-category")
router.register(r"hotels", HotelViewSet, basename="hotel")
router.register(r"attractions", AttractionViewSet, basename="attraction")
router.register(r"reviews", ReviewViewSet, basename="review")

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/auth/register/", RegisterView.as_view(), name="auth-register"),
    path("api/auth/login/", LoginView.as_view(), name="auth-login"),
    path("api/auth/refresh/", TokenRefreshView.as_view(), name="auth-refresh"),
    path("api/auth/me/", MeView.as_view(), name="auth-me"),
    path(
        "api/payments/initialize/",
        InitializePaymentView.as_view(),
        name="payment-initialize",
    ),
    path(
        "api/payments/verify/",
        VerifyPaymentView.as_view(),
        name="payment-verify",
    ),
    path("api/", include(router.urls)),
    path("api/webhooks/paystack/", PaystackWebhookView.as_view(), name="paystack-webhook"),
]
