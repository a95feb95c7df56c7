import itertools
import json

import pytest

from app import create_app
from config import Config
from errors import NotificationError, PaymentGatewayError, SignatureVerificationError
from services.payment_gateway import PaymentIntent, WebhookEvent

VALID_SIGNATURE = "t=1,v1=valid"


class TestingConfig(Config):
    TESTING = True
    STORAGE_BACKEND = "memory"
    SQLALCHEMY_DATABASE_URI = "sqlite://"
    STRIPE_SECRET_KEY = "sk_test_123"
    STRIPE_WEBHOOK_SECRET = "whsec_test"
    SMTP_HOST = None
    SMTP_FROM_EMAIL = None
    CORS_ALLOWED_ORIGINS = "*"


class SqlTestingConfig(TestingConfig):
    STORAGE_BACKEND = "sql"


class FakeGateway:
    """In-process gateway: intents live in a dict, signatures are a fixed string."""

    def __init__(self):
        self.intents = {}
        self.created = []
        self.retrieve_calls = 0
        self.fail = False
        self._ids = itertools.count(1)

    def create_intent(self, amount_minor, currency, metadata):
        if self.fail:
            raise PaymentGatewayError()
        intent_id = f"pi_test_{next(self._ids)}"
        intent = PaymentIntent(
            id=intent_id,
            status="requires_payment_method",
            amount=amount_minor,
            currency=currency,
            client_secret=f"{intent_id}_secret_abc",
            metadata=dict(metadata),
        )
        self.intents[intent_id] = intent
        self.created.append(intent)
        return intent

    def retrieve_intent(self, payment_intent_id):
        self.retrieve_calls += 1
        if self.fail or payment_intent_id not in self.intents:
            raise PaymentGatewayError()
        return self.intents[payment_intent_id]

    def construct_event(self, payload, sig_header):
        if sig_header != VALID_SIGNATURE:
            raise SignatureVerificationError("Webhook Error: bad signature")
        event = json.loads(payload)
        return WebhookEvent(id=event["id"], type=event["type"], data_object=event["data"]["object"])

    # test helpers
    def add_intent(self, intent_id="pi_paid", status="succeeded", amount=5000, currency="usd", metadata=None):
        intent = PaymentIntent(
            id=intent_id,
            status=status,
            amount=amount,
            currency=currency,
            client_secret=f"{intent_id}_secret_abc",
            metadata=dict(metadata or {}),
        )
        self.intents[intent_id] = intent
        return intent

    def succeed(self, intent_id):
        self.intents[intent_id].status = "succeeded"


class FakeNotifier:
    def __init__(self):
        self.bookings = []
        self.contacts = []
        self.fail = False

    def send_booking_confirmation(self, booking):
        if self.fail:
            raise NotificationError("SMTP down")
        self.bookings.append(booking)

    def send_contact_notification(self, submission):
        if self.fail:
            raise NotificationError("SMTP down")
        self.contacts.append(submission)


def event_payload(event_type, intent_id="pi_paid", status="succeeded", amount=5000, metadata=None, event_id="evt_1"):
    return json.dumps({
        "id": event_id,
        "object": "event",
        "type": event_type,
        "data": {"object": {
            "id": intent_id,
            "object": "payment_intent",
            "status": status,
            "amount": amount,
            "currency": "usd",
            "metadata": metadata or {},
        }},
    })


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def app(gateway, notifier):
    return create_app(TestingConfig, gateway=gateway, notifier=notifier)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def workflow(app):
    return app.extensions["booking_workflow"]


DETAILS_FOR_STORE = {
    "customer_email": "a@b.com",
    "service_type": "airport-transfer",
    "customer_name": "Ada",
    "date": "2026-11-02",
    "time": "09:30",
}
