"""Errors raised by the payment initiation and reconciliation services.

Every error carries a machine-readable ``kind``, the HTTP status the API
layer answers with, and whether the caller may safely try again.
"""


class PaymentError(Exception):
    kind = "payment_error"
    status_code = 400
    retryable = False
    default_message = "Payment could not be processed."

    def __init__(self, message: str | None = None):
        self.message = message or self.default_message
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"error": self.message, "kind": self.kind, "retryable": self.retryable}


class ValidationError(PaymentError):
    """Input rejected before any gateway call."""

    kind = "validation_error"
    default_message = "Invalid payment request."


class GatewayError(PaymentError):
    """The gateway rejected the request or reported an error."""

    kind = "gateway_error"
    status_code = 502
    retryable = True
    default_message = "Payment gateway error."


class GatewayUnavailable(GatewayError):
    """Network failure, timeout or 5xx while talking to the gateway."""

    kind = "gateway_unavailable"
    default_message = "Payment gateway is unavailable. Please try again."


class PaymentNotSuccessful(PaymentError):
    """The gateway verified the reference but the charge did not succeed."""

    kind = "payment_not_successful"
    default_message = "Payment not successful."

    def __init__(self, message: str | None = None, *, gateway_status: str = ""):
        super().__init__(message)
        self.gateway_status = gateway_status

    def as_dict(self) -> dict:
        data = super().as_dict()
        data["gateway_status"] = self.gateway_status
        return data


class CorruptReferenceError(PaymentError):
    """Metadata echoed by the gateway cannot be turned back into a booking."""

    kind = "corrupt_reference"
    status_code = 502
    default_message = "Payment reference data is corrupt."


class ReconciliationForbidden(PaymentError):
    kind = "forbidden"
    status_code = 403
    default_message = "You cannot confirm this payment."


class StorageConflict(PaymentError):
    """Lost the race to insert a payment for this reference."""

    kind = "storage_conflict"
    status_code = 409

    def __init__(self, reference: str):
        super().__init__(f"Payment for reference {reference} already recorded.")
        self.reference = reference
