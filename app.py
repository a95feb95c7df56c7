import logging

from flask import Flask, jsonify, request
from flask_cors import CORS
from werkzeug.exceptions import HTTPException

from config import Config
from errors import BookingServiceError
from models import db
from routes import health_bp, booking_bp, contact_bp, webhook_bp
from services.booking_workflow import BookingWorkflow
from services.contact_intake import ContactIntake
from services.notifications import EmailNotifier
from services.payment_gateway import INTENT_SUCCEEDED, StripeGateway
from storage import build_stores

logger = logging.getLogger(__name__)


def create_app(config_object=Config, gateway=None, notifier=None):
    app = Flask(__name__)
    app.config.from_object(config_object)

    logging.basicConfig(
        level=str(app.config.get("LOG_LEVEL") or "INFO").upper(),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    origins = [o.strip() for o in (app.config.get("CORS_ALLOWED_ORIGINS") or "").split(",") if o.strip()]
    CORS(app, origins=origins or [], methods=["GET", "POST", "OPTIONS"], allow_headers=["Content-Type"])

    # Register routes
    app.register_blueprint(health_bp)
    app.register_blueprint(booking_bp)
    app.register_blueprint(contact_bp)
    app.register_blueprint(webhook_bp)

    # Database init (sql storage only)
    if app.config.get("STORAGE_BACKEND", "memory").lower() == "sql":
        db.init_app(app)
        with app.app_context():
            db.create_all()

    booking_store, contact_store = build_stores(app)
    if gateway is None:
        gateway = StripeGateway(
            app.config.get("STRIPE_SECRET_KEY"),
            app.config.get("STRIPE_WEBHOOK_SECRET"),
        )
    if notifier is None:
        notifier = EmailNotifier()

    app.extensions["booking_workflow"] = BookingWorkflow(
        gateway,
        booking_store,
        notifier,
        default_currency=app.config.get("DEFAULT_CURRENCY", "usd"),
    )
    app.extensions["contact_intake"] = ContactIntake(contact_store, notifier)

    @app.errorhandler(BookingServiceError)
    def _service_error(exc):
        if exc.status_code >= 500:
            logger.error("%s %s failed: %s", request.method, request.path, exc.message)
        return jsonify(error=exc.message), exc.status_code

    @app.errorhandler(Exception)
    def _unexpected_error(exc):
        if isinstance(exc, HTTPException):
            return exc
        logger.exception("%s %s - unhandled error", request.method, request.path)
        return jsonify(error="Internal server error"), 500

    @app.after_request
    def add_security_headers(resp):
        resp.headers["X-Content-Type-Options"] = "nosniff"
        resp.headers["X-Frame-Options"] = "DENY"
        resp.headers["Referrer-Policy"] = "no-referrer"
        resp.headers["Permissions-Policy"] = "geolocation=(), microphone=(), camera=()"
        resp.headers["Content-Security-Policy"] = "default-src 'none'; frame-ancestors 'none';"
        return resp

    register_cli(app)

    return app

#-------------------------
import click


def register_cli(app):
    @app.cli.command("list-bookings")
    def list_bookings():
        """Print every stored booking."""
        workflow = app.extensions["booking_workflow"]
        for b in workflow.list_bookings():
            click.echo(f"{b.id}  {b.payment_intent_id}  {b.status}  {b.customer_email}  {b.amount} {b.currency}")

    @app.cli.command("reconcile-intent")
    @click.argument("payment_intent_id")
    def reconcile_intent(payment_intent_id):
        """Create the booking for a paid intent that never got confirmed."""
        workflow = app.extensions["booking_workflow"]
        intent = workflow.gateway.retrieve_intent(payment_intent_id)
        if intent.status != INTENT_SUCCEEDED:
            click.echo(f"Intent {intent.id} is {intent.status}; nothing to do")
            return

        result = workflow.ensure_booking(intent, {}, source="cli")
        if result.created:
            click.echo(f"Booking {result.booking.id} created for {intent.id}")
        else:
            click.echo(f"Booking {result.booking.id} already exists for {intent.id}")

#-------------------------


if __name__ == "__main__":
    app = create_app()
    # Run locally
    app.run(host="127.0.0.1", port=5000)
