from .health import health_bp
from .booking import booking_bp
from .contact import contact_bp
from .stripe_webhook import webhook_bp
