from .db import db
from .booking import Booking, BookingRecord
from .contact_submission import ContactSubmission, ContactSubmissionRecord
