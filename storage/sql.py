from sqlalchemy import or_
from sqlalchemy.exc import IntegrityError

from models import db
from models.booking import Booking, BookingRecord
from models.contact_submission import ContactSubmission, ContactSubmissionRecord


class SqlBookingStore:
    """Booking store backed by Flask-SQLAlchemy.

    Uniqueness of payment_intent_id and id is enforced by the table, so two
    writers racing on the same intent end with one row: the loser hits
    IntegrityError, rolls back and returns the winner's row.
    Must be used inside an app context.
    """

    def put(self, booking: Booking) -> tuple[Booking, bool]:
        existing = self._find_existing(booking)
        if existing is not None:
            return existing.to_booking(), False

        db.session.add(BookingRecord.from_booking(booking))
        try:
            db.session.commit()
        except IntegrityError:
            db.session.rollback()
            existing = self._find_existing(booking)
            if existing is None:
                raise
            return existing.to_booking(), False
        return booking, True

    def get_by_id(self, booking_id: str):
        row = BookingRecord.query.filter_by(id=booking_id).first()
        return row.to_booking() if row else None

    def get_by_payment_intent_id(self, payment_intent_id: str):
        row = BookingRecord.query.filter_by(payment_intent_id=payment_intent_id).first()
        return row.to_booking() if row else None

    def list_all(self) -> list[Booking]:
        rows = BookingRecord.query.order_by(BookingRecord.pk.asc()).all()
        return [r.to_booking() for r in rows]

    @staticmethod
    def _find_existing(booking: Booking):
        return (
            BookingRecord.query
            .filter(or_(
                BookingRecord.payment_intent_id == booking.payment_intent_id,
                BookingRecord.id == booking.id,
            ))
            .order_by(BookingRecord.pk.asc())
            .first()
        )


class SqlContactStore:
    def add(self, submission: ContactSubmission) -> ContactSubmission:
        db.session.add(ContactSubmissionRecord.from_submission(submission))
        db.session.commit()
        return submission

    def list_all(self) -> list[ContactSubmission]:
        rows = ContactSubmissionRecord.query.order_by(ContactSubmissionRecord.pk.asc()).all()
        return [r.to_submission() for r in rows]
