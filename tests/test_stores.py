from decimal import Decimal

import pytest

from app import create_app
from conftest import DETAILS_FOR_STORE, FakeGateway, FakeNotifier, SqlTestingConfig
from models import db
from models.booking import Booking, BookingRecord
from models.contact_submission import ContactSubmission
from storage import InMemoryBookingStore, SqlBookingStore, SqlContactStore


def make_booking(booking_id="b-1", intent_id="pi_1", amount="50.00"):
    return Booking(id=booking_id, payment_intent_id=intent_id, amount=Decimal(amount), **DETAILS_FOR_STORE)


@pytest.fixture
def sql_app():
    return create_app(SqlTestingConfig, gateway=FakeGateway(), notifier=FakeNotifier())


def test_memory_put_is_create_or_fetch():
    store = InMemoryBookingStore()

    first, created = store.put(make_booking())
    again, created_again = store.put(make_booking(booking_id="b-other", amount="1.00"))

    assert created is True
    assert created_again is False
    assert again is first
    assert store.get_by_payment_intent_id("pi_1") is first
    assert store.get_by_id("b-other") is None
    assert store.list_all() == [first]


def test_memory_put_same_id_returns_existing():
    store = InMemoryBookingStore()
    first, _ = store.put(make_booking())

    again, created = store.put(make_booking(intent_id="pi_2"))

    assert created is False
    assert again is first


def test_sql_store_put_and_read(sql_app):
    with sql_app.app_context():
        store = SqlBookingStore()
        stored, created = store.put(make_booking())
        dup, dup_created = store.put(make_booking(booking_id="b-2", amount="9.99"))

        assert created is True
        assert dup_created is False
        assert dup.id == "b-1"
        assert dup.amount == Decimal("50.00")

        fetched = store.get_by_payment_intent_id("pi_1")
        assert fetched.id == "b-1"
        assert fetched.customer_email == "a@b.com"
        assert store.get_by_id("b-1").payment_intent_id == "pi_1"
        assert store.get_by_id("b-2") is None

        store.put(make_booking(booking_id="b-3", intent_id="pi_3"))
        assert [b.id for b in store.list_all()] == ["b-1", "b-3"]


def test_sql_contact_store(sql_app):
    with sql_app.app_context():
        store = SqlContactStore()
        store.add(ContactSubmission(id="c-1", name="Ada", email="a@b.com", message="Hi"))
        items = store.list_all()
        assert [c.id for c in items] == ["c-1"]
        assert items[0].subject == "Contact Form Submission"


def test_sql_backend_through_routes(sql_app):
    gateway = sql_app.extensions["booking_workflow"].gateway
    gateway.add_intent("pi_paid", metadata={"booking_id": "b-sql", "customer_email": "a@b.com",
                                            "service_type": "airport-transfer"})
    client = sql_app.test_client()

    for _ in range(2):
        resp = client.post("/api/book/confirm-booking", json={"paymentIntentId": "pi_paid", "bookingDetails": {}})
        assert resp.status_code == 200
        assert resp.get_json()["bookingId"] == "b-sql"

    bookings = client.get("/api/book").get_json()
    assert len(bookings) == 1
    assert bookings[0]["amount"] == 50.0


def test_sql_put_losing_insert_race_returns_winner(sql_app, monkeypatch):
    original = SqlBookingStore._find_existing
    calls = []

    def find_after_first_call(booking):
        calls.append(booking.id)
        if len(calls) == 1:
            return None
        return original(booking)

    with sql_app.app_context():
        # another writer committed first
        db.session.add(BookingRecord.from_booking(make_booking()))
        db.session.commit()

        monkeypatch.setattr(SqlBookingStore, "_find_existing", staticmethod(find_after_first_call))
        store = SqlBookingStore()

        stored, created = store.put(make_booking(booking_id="b-2", amount="9.99"))

        assert created is False
        assert stored.id == "b-1"
        assert stored.amount == Decimal("50.00")
        assert len(calls) == 2
        assert [b.id for b in store.list_all()] == ["b-1"]
