import threading

from models.booking import Booking
from models.contact_submission import ContactSubmission


class InMemoryBookingStore:
    """Process-local booking store.

    All mutations go through one lock, so create-or-fetch for a payment
    intent is atomic. Readers get copies and never see a half-written entry.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._by_id: dict[str, Booking] = {}
        self._by_intent: dict[str, Booking] = {}
        self._order: list[Booking] = []

    def put(self, booking: Booking) -> tuple[Booking, bool]:
        """Store `booking` unless one already exists for its intent or id.

        Returns (stored_booking, created).
        """
        with self._lock:
            existing = self._by_intent.get(booking.payment_intent_id) or self._by_id.get(booking.id)
            if existing is not None:
                return existing, False
            self._by_id[booking.id] = booking
            self._by_intent[booking.payment_intent_id] = booking
            self._order.append(booking)
            return booking, True

    def get_by_id(self, booking_id: str):
        with self._lock:
            return self._by_id.get(booking_id)

    def get_by_payment_intent_id(self, payment_intent_id: str):
        with self._lock:
            return self._by_intent.get(payment_intent_id)

    def list_all(self) -> list[Booking]:
        with self._lock:
            return list(self._order)


class InMemoryContactStore:
    def __init__(self):
        self._lock = threading.Lock()
        self._items: list[ContactSubmission] = []

    def add(self, submission: ContactSubmission) -> ContactSubmission:
        with self._lock:
            self._items.append(submission)
        return submission

    def list_all(self) -> list[ContactSubmission]:
        with self._lock:
            return list(self._items)
