from flask import Blueprint, request, jsonify

from services import get_contact_intake

contact_bp = Blueprint("contact", __name__, url_prefix="/api/contact")


@contact_bp.post("")
def submit_contact():
    data = request.get_json(silent=True) or {}
    get_contact_intake().submit(
        name=data.get("name"),
        email=data.get("email"),
        subject=data.get("subject"),
        message=data.get("message"),
    )
    return jsonify(success=True, message="Contact form submitted successfully!"), 200


@contact_bp.get("")
def list_contacts():
    return jsonify([s.to_dict() for s in get_contact_intake().list_submissions()]), 200
