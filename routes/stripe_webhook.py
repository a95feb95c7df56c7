from flask import Blueprint, request, jsonify

from services import get_booking_workflow

webhook_bp = Blueprint("webhook", __name__)


@webhook_bp.post("/webhook")
def stripe_webhook():
    # raw bytes: the signature covers the body exactly as sent
    payload = request.get_data()
    sig_header = request.headers.get("Stripe-Signature")

    result = get_booking_workflow().handle_webhook(payload, sig_header)
    return jsonify(result), 200
