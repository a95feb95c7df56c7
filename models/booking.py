from dataclasses import dataclass, field
from datetime import datetime, timezone
from decimal import Decimal
from typing import Optional

from models.db import db

STATUS_PENDING = "pending"
STATUS_CONFIRMED = "confirmed"

# Fields the server owns; caller-supplied details never override these.
AUTHORITATIVE_FIELDS = {
    "id", "paymentIntentId", "status", "amount", "currency", "createdAt",
}


@dataclass(frozen=True)
class Booking:
    id: str
    payment_intent_id: str
    customer_email: str
    service_type: str
    amount: Decimal
    currency: str = "usd"
    customer_name: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    status: str = STATUS_CONFIRMED
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    extra: dict = field(default_factory=dict)

    def to_dict(self) -> dict:
        out = {k: v for k, v in self.extra.items() if k not in AUTHORITATIVE_FIELDS}
        out.update({
            "id": self.id,
            "paymentIntentId": self.payment_intent_id,
            "status": self.status,
            "email": self.customer_email,
            "name": self.customer_name,
            "serviceType": self.service_type,
            "date": self.date,
            "time": self.time,
            "amount": float(self.amount),
            "currency": self.currency,
            "createdAt": self.created_at.isoformat(),
        })
        return out


class BookingRecord(db.Model):
    __tablename__ = "bookings"

    pk = db.Column(db.Integer, primary_key=True)
    id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    payment_intent_id = db.Column(db.String(255), nullable=False)

    status = db.Column(db.String(20), nullable=False, default=STATUS_CONFIRMED)
    customer_email = db.Column(db.String(255), nullable=False)
    customer_name = db.Column(db.String(160), nullable=True)
    service_type = db.Column(db.String(120), nullable=False)
    date = db.Column(db.String(40), nullable=True)
    time = db.Column(db.String(40), nullable=True)

    amount = db.Column(db.Numeric(12, 2), nullable=False)
    currency = db.Column(db.String(10), nullable=False, default="usd")
    extra = db.Column(db.JSON, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False)

    __table_args__ = (
        # One booking per payment intent; concurrent confirm/webhook writers race on this
        db.UniqueConstraint("payment_intent_id", name="uq_booking_payment_intent"),
    )

    @classmethod
    def from_booking(cls, booking: Booking) -> "BookingRecord":
        return cls(
            id=booking.id,
            payment_intent_id=booking.payment_intent_id,
            status=booking.status,
            customer_email=booking.customer_email,
            customer_name=booking.customer_name,
            service_type=booking.service_type,
            date=booking.date,
            time=booking.time,
            amount=booking.amount,
            currency=booking.currency,
            extra=dict(booking.extra) or None,
            created_at=booking.created_at.astimezone(timezone.utc).replace(tzinfo=None),
        )

    def to_booking(self) -> Booking:
        return Booking(
            id=self.id,
            payment_intent_id=self.payment_intent_id,
            status=self.status,
            customer_email=self.customer_email,
            customer_name=self.customer_name,
            service_type=self.service_type,
            date=self.date,
            time=self.time,
            amount=Decimal(self.amount),
            currency=self.currency,
            extra=dict(self.extra or {}),
            created_at=self.created_at.replace(tzinfo=timezone.utc),
        )
