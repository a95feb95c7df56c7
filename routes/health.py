from flask import Blueprint, current_app, jsonify

health_bp = Blueprint("health", __name__)


@health_bp.get("/")
def index():
    business = current_app.config.get("BUSINESS_NAME", "MP Drivers")
    return jsonify(message=f"{business} Backend is running with payments!"), 200


@health_bp.get("/health")
def health():
    return jsonify(status="ok"), 200


@health_bp.post("/api/test")
def api_test():
    return jsonify(message="Server is working!"), 200
