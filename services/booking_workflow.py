"""Booking payment flow.

    create_intent  ->  (client pays)  ->  confirm_booking
                                     or   webhook payment_intent.succeeded

Nothing is stored when an intent is created. A booking is written only once
the gateway reports the intent as succeeded, and both confirmation paths go
through `ensure_booking`, which is idempotent per payment intent.
"""
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
import logging

from errors import NotFound, NotificationError, PaymentNotConfirmed, ValidationError
from models.booking import AUTHORITATIVE_FIELDS, Booking, STATUS_CONFIRMED
from services.payment_gateway import INTENT_SUCCEEDED, PaymentIntent, intent_from_event
from utils.audit import log_event
from utils.ids import new_booking_id

logger = logging.getLogger(__name__)

EVENT_INTENT_SUCCEEDED = "payment_intent.succeeded"
EVENT_INTENT_FAILED = "payment_intent.payment_failed"

# bookingDetails keys mapped onto Booking attributes
DETAIL_KEYS = {"email", "name", "serviceType", "date", "time"}

# bookingDetails key -> intent metadata key
METADATA_KEYS = {
    "email": "customer_email",
    "serviceType": "service_type",
    "name": "customer_name",
    "date": "date",
    "time": "time",
}


@dataclass
class ConfirmationResult:
    booking: Booking
    created: bool
    email_sent: bool


def to_minor_units(amount: Decimal) -> int:
    return int((amount * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def from_minor_units(amount_minor: int) -> Decimal:
    return (Decimal(amount_minor) / 100).quantize(Decimal("0.01"))


def _parse_amount(raw) -> Decimal:
    if raw is None or isinstance(raw, bool):
        raise ValidationError("amount is required")
    try:
        amount = Decimal(str(raw))
    except InvalidOperation:
        raise ValidationError("amount must be a number")
    if not amount.is_finite() or amount <= 0:
        raise ValidationError("amount must be greater than zero")
    try:
        amount_minor = to_minor_units(amount)
    except InvalidOperation:
        raise ValidationError("amount is too large")
    if amount_minor < 1:
        raise ValidationError("amount is too small")
    return amount


def _parse_currency(raw, default: str) -> str:
    currency = raw or default
    if not isinstance(currency, str) or len(currency) != 3 or not currency.isalpha():
        raise ValidationError("currency must be a 3-letter ISO code")
    return currency.lower()


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class BookingWorkflow:
    def __init__(self, gateway, store, notifier, default_currency="usd"):
        self.gateway = gateway
        self.store = store
        self.notifier = notifier
        self.default_currency = default_currency

    # ---------- intent ----------
    def create_intent(self, amount, currency=None, booking_details=None) -> dict:
        details = booking_details if isinstance(booking_details, dict) else {}
        if not _clean(details.get("email")) or not _clean(details.get("serviceType")):
            raise ValidationError("bookingDetails.email and bookingDetails.serviceType are required")

        amount = _parse_amount(amount)
        currency = _parse_currency(currency, self.default_currency)
        booking_id = new_booking_id()

        metadata = {"booking_id": booking_id}
        for detail_key, meta_key in METADATA_KEYS.items():
            value = _clean(details.get(detail_key))
            if value:
                metadata[meta_key] = value

        intent = self.gateway.create_intent(to_minor_units(amount), currency, metadata)

        log_event("PAYMENT_INTENT_CREATED", entity="payment_intent", entity_id=intent.id,
                  metadata={"booking_id": booking_id, "amount_minor": intent.amount})
        return {"clientSecret": intent.client_secret, "bookingId": booking_id}

    # ---------- confirmation ----------
    def confirm_booking(self, payment_intent_id, booking_details=None) -> ConfirmationResult:
        payment_intent_id = _clean(payment_intent_id)
        if not payment_intent_id:
            raise ValidationError("paymentIntentId is required")

        intent = self.gateway.retrieve_intent(payment_intent_id)
        if intent.status != INTENT_SUCCEEDED:
            log_event("BOOKING_CONFIRM_REJECTED", entity="payment_intent", entity_id=intent.id,
                      metadata={"status": intent.status})
            raise PaymentNotConfirmed()

        details = booking_details if isinstance(booking_details, dict) else {}
        return self.ensure_booking(intent, details, source="confirm")

    def ensure_booking(self, intent: PaymentIntent, details: dict, source: str) -> ConfirmationResult:
        """Create the booking for a succeeded intent, or return the one that exists."""
        if intent.status != INTENT_SUCCEEDED:
            raise PaymentNotConfirmed()

        existing = self.store.get_by_payment_intent_id(intent.id)
        if existing is not None:
            log_event("BOOKING_ALREADY_CONFIRMED", entity="booking", entity_id=existing.id,
                      metadata={"payment_intent_id": intent.id, "source": source})
            return ConfirmationResult(existing, created=False, email_sent=False)

        booking, created = self.store.put(self._build_booking(intent, details))
        if not created:
            log_event("BOOKING_ALREADY_CONFIRMED", entity="booking", entity_id=booking.id,
                      metadata={"payment_intent_id": intent.id, "source": source})
            return ConfirmationResult(booking, created=False, email_sent=False)

        log_event("BOOKING_CONFIRMED", entity="booking", entity_id=booking.id,
                  metadata={"payment_intent_id": intent.id, "amount": booking.amount, "source": source})
        return ConfirmationResult(booking, created=True, email_sent=self._notify(booking))

    def _build_booking(self, intent: PaymentIntent, details: dict) -> Booking:
        meta = intent.metadata or {}

        booking_id = _clean(meta.get("booking_id"))
        if not booking_id:
            booking_id = new_booking_id()
            logger.warning("Intent %s carries no booking_id metadata; assigned %s", intent.id, booking_id)

        def pick(detail_key):
            return _clean(details.get(detail_key)) or _clean(meta.get(METADATA_KEYS[detail_key]))

        extra = {
            k: v for k, v in details.items()
            if k not in DETAIL_KEYS and k not in AUTHORITATIVE_FIELDS
        }

        return Booking(
            id=booking_id,
            payment_intent_id=intent.id,
            customer_email=pick("email") or "",
            customer_name=pick("name"),
            service_type=pick("serviceType") or "",
            date=pick("date"),
            time=pick("time"),
            amount=from_minor_units(intent.amount),
            currency=intent.currency,
            status=STATUS_CONFIRMED,
            extra=extra,
        )

    def _notify(self, booking: Booking) -> bool:
        try:
            self.notifier.send_booking_confirmation(booking)
        except NotificationError as exc:
            logger.error("Confirmation email for booking %s failed: %s", booking.id, exc)
            return False
        return True

    # ---------- webhook ----------
    def handle_webhook(self, payload: bytes, sig_header) -> dict:
        event = self.gateway.construct_event(payload, sig_header)
        log_event("WEBHOOK_RECEIVED", entity="event", entity_id=event.id, metadata={"type": event.type})

        if event.type == EVENT_INTENT_SUCCEEDED:
            intent = intent_from_event(event)
            logger.info("Payment succeeded: %s", intent.id)
            if intent.status != INTENT_SUCCEEDED:
                logger.warning("Event %s reports intent %s with status %s; skipped",
                               event.id, intent.id, intent.status)
            else:
                self.ensure_booking(intent, {}, source="webhook")
        elif event.type == EVENT_INTENT_FAILED:
            intent = intent_from_event(event)
            logger.warning("Payment failed: %s", intent.id)
        else:
            logger.info("Unhandled event type %s", event.type)

        return {"received": True}

    # ---------- reads ----------
    def get_booking(self, booking_id) -> Booking:
        booking = self.store.get_by_id(booking_id)
        if booking is None:
            raise NotFound("Booking not found")
        return booking

    def list_bookings(self) -> list:
        return self.store.list_all()
