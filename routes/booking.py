from flask import Blueprint, request, jsonify

from services import get_booking_workflow

booking_bp = Blueprint("booking", __name__, url_prefix="/api/book")


@booking_bp.post("/create-payment-intent")
def create_payment_intent():
    data = request.get_json(silent=True) or {}
    result = get_booking_workflow().create_intent(
        amount=data.get("amount"),
        currency=data.get("currency"),
        booking_details=data.get("bookingDetails"),
    )
    return jsonify(result), 200


@booking_bp.post("/confirm-booking")
def confirm_booking():
    data = request.get_json(silent=True) or {}
    result = get_booking_workflow().confirm_booking(
        data.get("paymentIntentId"),
        data.get("bookingDetails"),
    )

    if not result.created:
        message = "Booking already confirmed"
    elif result.email_sent:
        message = "Booking confirmed and email sent!"
    else:
        message = "Booking confirmed, but the confirmation email could not be sent"

    return jsonify(
        success=True,
        bookingId=result.booking.id,
        message=message,
        emailSent=result.email_sent,
    ), 200


@booking_bp.get("/<booking_id>")
def get_booking(booking_id: str):
    booking = get_booking_workflow().get_booking(booking_id)
    return jsonify(booking.to_dict()), 200


# Admin listing; unauthenticated for now
@booking_bp.get("")
def list_bookings():
    return jsonify([b.to_dict() for b in get_booking_workflow().list_bookings()]), 200
