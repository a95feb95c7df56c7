import logging

from flask import current_app

from errors import NotificationError
from models.booking import Booking
from models.contact_submission import ContactSubmission
from utils.emailer import send_email

logger = logging.getLogger(__name__)


def _business_name() -> str:
    return current_app.config.get("BUSINESS_NAME") or "MP Drivers"


def render_booking_confirmation(booking: Booking):
    business = _business_name()
    greeting_name = booking.customer_name or booking.customer_email
    subject = f"Booking Confirmation - {business}"

    body_lines = [
        f"Dear {greeting_name},",
        "",
        f"Thank you for your booking with {business}! Here are your booking details:",
        "",
        f"Booking ID: {booking.id}",
        f"Service: {booking.service_type}",
        f"Date: {booking.date or '-'}",
        f"Time: {booking.time or '-'}",
        f"Amount Paid: ${booking.amount:.2f}",
        "",
        "We'll send you a reminder closer to your appointment date.",
        "If you need to make any changes, please contact us.",
        "",
        "Best regards,",
        f"{business} Team",
    ]
    html = f"""
    <div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
      <h2 style="color: #333;">Booking Confirmation</h2>
      <p>Dear {greeting_name},</p>
      <p>Thank you for your booking with {business}! Here are your booking details:</p>
      <div style="background-color: #f5f5f5; padding: 20px; border-radius: 5px; margin: 20px 0;">
        <h3 style="margin-top: 0;">Booking Details</h3>
        <p><strong>Booking ID:</strong> {booking.id}</p>
        <p><strong>Service:</strong> {booking.service_type}</p>
        <p><strong>Date:</strong> {booking.date or '-'}</p>
        <p><strong>Time:</strong> {booking.time or '-'}</p>
        <p><strong>Amount Paid:</strong> ${booking.amount:.2f}</p>
      </div>
      <p>We'll send you a reminder closer to your appointment date.</p>
      <p>If you need to make any changes, please contact us.</p>
      <p>Best regards,<br>{business} Team</p>
    </div>
    """
    return subject, "\n".join(body_lines), html


def render_contact_notification(sub: ContactSubmission):
    subject = f"New Contact Form: {sub.subject}"
    body = "\n".join([
        "New Contact Form Submission",
        "",
        f"Name: {sub.name}",
        f"Email: {sub.email}",
        f"Subject: {sub.subject}",
        "Message:",
        sub.message,
        "",
        f"Submitted: {sub.created_at.isoformat()}",
    ])
    return subject, body


class EmailNotifier:
    """Sends customer and staff emails over SMTP.

    Raises NotificationError when delivery fails; callers decide whether that
    matters (it never fails a booking or a contact submission).
    """

    def send_booking_confirmation(self, booking: Booking):
        subject, body, html = render_booking_confirmation(booking)
        self._send(booking.customer_email, subject, body, html)
        logger.info("Confirmation email sent to: %s", booking.customer_email)

    def send_contact_notification(self, sub: ContactSubmission):
        to_email = (
            current_app.config.get("CONTACT_NOTIFY_EMAIL")
            or current_app.config.get("SMTP_FROM_EMAIL")
        )
        subject, body = render_contact_notification(sub)
        self._send(to_email, subject, body)
        logger.info("Contact notification sent for submission %s", sub.id)

    @staticmethod
    def _send(to_email, subject, body, html=None):
        ok, err = send_email(to_email, subject, body, html=html)
        if not ok:
            raise NotificationError(err)
