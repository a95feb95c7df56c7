import logging

from errors import NotificationError, ValidationError
from models.contact_submission import DEFAULT_SUBJECT, ContactSubmission
from utils.audit import log_event
from utils.ids import new_contact_id

logger = logging.getLogger(__name__)


def _text(value) -> str:
    if not value:
        return ""
    return str(value).strip()


class ContactIntake:
    def __init__(self, store, notifier):
        self.store = store
        self.notifier = notifier

    def submit(self, name, email, message, subject=None) -> ContactSubmission:
        name = _text(name)
        email = _text(email)
        message = _text(message)
        if not name or not email or not message:
            raise ValidationError("Name, email, and message are required")

        submission = ContactSubmission(
            id=new_contact_id(),
            name=name,
            email=email,
            subject=_text(subject) or DEFAULT_SUBJECT,
            message=message,
        )
        self.store.add(submission)
        log_event("CONTACT_SUBMITTED", entity="contact", entity_id=submission.id)

        try:
            self.notifier.send_contact_notification(submission)
        except NotificationError as exc:
            logger.error("Contact notification failed: %s", exc)

        return submission

    def list_submissions(self) -> list:
        return self.store.list_all()
