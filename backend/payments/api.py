import json
import logging

from rest_framework import status
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.serializers import BookingSerializer
from payments import exceptions
from payments.exceptions import CorruptReferenceError, GatewayUnavailable, PaymentError
from payments.serializers import (
    PaymentInitializeSerializer,
    PaymentSerializer,
    PaymentVerifySerializer,
)
from payments.services import paystack
from payments.services.context import AuthContext
from payments.services.initiation import initiate_payment
from payments.services.reconciliation import reconcile_payment

logger = logging.getLogger(__name__)


def _error_response(exc: PaymentError) -> Response:
    return Response(exc.as_dict(), status=exc.status_code)


class InitializePaymentView(APIView):
    """Start a gateway checkout for a hotel stay or attraction visit."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PaymentInitializeSerializer(data=request.data)
        if not serializer.is_valid():
            error = exceptions.ValidationError("Invalid payment request.")
            return Response(
                {**error.as_dict(), "fields": serializer.errors},
                status=error.status_code,
            )

        auth = AuthContext.from_user(request.user)
        try:
            initiation = initiate_payment(serializer.to_intent(user=request.user), auth=auth)
        except PaymentError as exc:
            return _error_response(exc)

        return Response(
            {
                "authorization_url": initiation.redirect_url,
                "reference": initiation.reference,
                "access_code": initiation.access_code,
            },
            status=status.HTTP_200_OK,
        )


class VerifyPaymentView(APIView):
    """Confirm a returning customer's payment and materialize the booking."""

    permission_classes = [IsAuthenticated]

    def post(self, request, *args, **kwargs):
        serializer = PaymentVerifySerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        try:
            result = reconcile_payment(
                serializer.validated_data["reference"],
                auth=AuthContext.from_user(request.user),
            )
        except PaymentError as exc:
            return _error_response(exc)

        return Response(
            {
                "outcome": result.outcome,
                "booking": BookingSerializer(result.booking).data,
                "payment": PaymentSerializer(result.payment).data,
            },
            status=status.HTTP_200_OK,
        )


class PaystackWebhookView(APIView):
    """
    Receive Paystack events.

    ``charge.success`` runs the same reconciliation as the verify endpoint,
    on behalf of the booking's owner, so a customer who never comes back
    from the checkout page still gets their booking.
    """

    permission_classes: list = []
    authentication_classes: list = []

    def post(self, request, *args, **kwargs):
        payload = request.body
        signature = request.META.get("HTTP_X_PAYSTACK_SIGNATURE")
        if not paystack.verify_webhook_signature(payload, signature):
            logger.warning("Invalid Paystack webhook signature.")
            return Response(status=status.HTTP_400_BAD_REQUEST)

        try:
            event = json.loads(payload)
        except ValueError:
            logger.warning("Invalid payload received on Paystack webhook.")
            return Response(status=status.HTTP_400_BAD_REQUEST)

        if not isinstance(event, dict) or event.get("event") != "charge.success":
            return Response(status=status.HTTP_200_OK)

        reference = (event.get("data") or {}).get("reference") or ""
        try:
            result = reconcile_payment(reference, auth=AuthContext.system())
        except GatewayUnavailable as exc:
            # non-2xx makes Paystack redeliver later
            logger.warning("Could not verify %s from webhook: %s", reference, exc.message)
            return Response(status=status.HTTP_503_SERVICE_UNAVAILABLE)
        except CorruptReferenceError:
            return Response(status=status.HTTP_200_OK)
        except PaymentError as exc:
            logger.info("Ignoring Paystack webhook for %s: %s", reference, exc.message)
            return Response(status=status.HTTP_200_OK)

        logger.info("Webhook reconciled %s: %s booking %s", reference, result.outcome, result.booking.pk)
        return Response(status=status.HTTP_200_OK)
