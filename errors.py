class BookingServiceError(Exception):
    """Base for errors the API layer maps to a JSON response."""

    status_code = 500
    default_message = "Internal server error"

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class ValidationError(BookingServiceError):
    status_code = 400
    default_message = "Invalid request"


class PaymentNotConfirmed(BookingServiceError):
    status_code = 400
    default_message = "Payment not confirmed"


class PaymentGatewayError(BookingServiceError):
    status_code = 500
    default_message = "Payment processing failed"


class NotFound(BookingServiceError):
    status_code = 404
    default_message = "Not found"


class SignatureVerificationError(BookingServiceError):
    status_code = 400
    default_message = "Invalid webhook signature"


class NotificationError(BookingServiceError):
    """Email delivery failed. Logged by callers, never returned to clients."""

    default_message = "Email delivery failed"
