"""Payment gateway adapter.

The booking workflow only needs three things from the gateway: create an
intent, look one up, and verify a signed webhook delivery. `StripeGateway`
provides them on top of the `stripe` library and normalises the results into
`PaymentIntent` / `WebhookEvent` so the workflow never touches Stripe objects.
"""
from dataclasses import dataclass, field
import logging
from typing import Optional

import stripe

from errors import PaymentGatewayError, SignatureVerificationError

logger = logging.getLogger(__name__)

INTENT_SUCCEEDED = "succeeded"


@dataclass
class PaymentIntent:
    id: str
    status: str
    amount: int  # minor units
    currency: str
    client_secret: Optional[str] = None
    metadata: dict = field(default_factory=dict)


@dataclass
class WebhookEvent:
    id: str
    type: str
    data_object: dict


def _as_dict(obj) -> dict:
    if obj is None:
        return {}
    to_dict = getattr(obj, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    return dict(obj)


def _intent_from_stripe(obj) -> PaymentIntent:
    obj = _as_dict(obj)
    return PaymentIntent(
        id=obj["id"],
        status=obj.get("status"),
        amount=int(obj.get("amount") or 0),
        currency=obj.get("currency") or "usd",
        client_secret=obj.get("client_secret"),
        metadata=_as_dict(obj.get("metadata")),
    )


def intent_from_event(event: WebhookEvent) -> PaymentIntent:
    return _intent_from_stripe(event.data_object)


class StripeGateway:
    def __init__(self, secret_key: str, webhook_secret: str):
        self.secret_key = secret_key
        self.webhook_secret = webhook_secret

    def _configure(self):
        if not self.secret_key:
            raise PaymentGatewayError("Stripe secret key missing (STRIPE_SECRET_KEY)")
        stripe.api_key = self.secret_key

    def create_intent(self, amount_minor: int, currency: str, metadata: dict) -> PaymentIntent:
        self._configure()
        try:
            intent = stripe.PaymentIntent.create(
                amount=amount_minor,
                currency=currency,
                metadata=metadata,
            )
        except stripe.StripeError as exc:
            logger.error("Stripe intent creation failed: %s", exc)
            raise PaymentGatewayError() from exc
        return _intent_from_stripe(intent)

    def retrieve_intent(self, payment_intent_id: str) -> PaymentIntent:
        self._configure()
        try:
            intent = stripe.PaymentIntent.retrieve(payment_intent_id)
        except stripe.StripeError as exc:
            logger.error("Stripe intent lookup failed for %s: %s", payment_intent_id, exc)
            raise PaymentGatewayError() from exc
        return _intent_from_stripe(intent)

    def construct_event(self, payload: bytes, sig_header: str) -> WebhookEvent:
        """Verify `payload` against the signing secret, then parse it."""
        if not self.webhook_secret:
            raise PaymentGatewayError("Webhook secret not configured")
        if not sig_header:
            raise SignatureVerificationError("Missing Stripe-Signature header")
        try:
            event = stripe.Webhook.construct_event(payload, sig_header, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as exc:
            raise SignatureVerificationError(f"Webhook Error: {exc}") from exc

        return WebhookEvent(
            id=event["id"],
            type=event["type"],
            data_object=_as_dict(event["data"]["object"]),
        )
