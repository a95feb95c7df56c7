from dataclasses import dataclass, field
from datetime import datetime, timezone

from models.db import db

DEFAULT_SUBJECT = "Contact Form Submission"


@dataclass(frozen=True)
class ContactSubmission:
    id: str
    name: str
    email: str
    message: str
    subject: str = DEFAULT_SUBJECT
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "email": self.email,
            "subject": self.subject,
            "message": self.message,
            "createdAt": self.created_at.isoformat(),
        }


class ContactSubmissionRecord(db.Model):
    __tablename__ = "contact_submissions"

    pk = db.Column(db.Integer, primary_key=True)
    id = db.Column(db.String(64), unique=True, nullable=False, index=True)
    name = db.Column(db.String(160), nullable=False)
    email = db.Column(db.String(255), nullable=False)
    subject = db.Column(db.String(160), nullable=False, default=DEFAULT_SUBJECT)
    message = db.Column(db.Text, nullable=False)
    created_at = db.Column(db.DateTime, nullable=False)

    @classmethod
    def from_submission(cls, sub: ContactSubmission) -> "ContactSubmissionRecord":
        return cls(
            id=sub.id,
            name=sub.name,
            email=sub.email,
            subject=sub.subject,
            message=sub.message,
            created_at=sub.created_at.astimezone(timezone.utc).replace(tzinfo=None),
        )

    def to_submission(self) -> ContactSubmission:
        return ContactSubmission(
            id=self.id,
            name=self.name,
            email=self.email,
            subject=self.subject,
            message=self.message,
            created_at=self.created_at.replace(tzinfo=timezone.utc),
        )
