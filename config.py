import os

from dotenv import load_dotenv

BASE_DIR = os.path.abspath(os.path.dirname(__file__))

load_dotenv(os.path.join(BASE_DIR, ".env"))


class Config:
    # Secrets
    SECRET_KEY = os.getenv("SECRET_KEY", "dev-only-change-me")

    BUSINESS_NAME = os.getenv("BUSINESS_NAME", "MP Drivers")

    # Stripe
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET")
    DEFAULT_CURRENCY = os.getenv("DEFAULT_CURRENCY", "usd")

    # Storage: "memory" keeps bookings in process, "sql" uses SQLALCHEMY_DATABASE_URI
    STORAGE_BACKEND = os.getenv("STORAGE_BACKEND", "memory")
    SQLALCHEMY_DATABASE_URI = os.getenv(
        "DATABASE_URL",
        "sqlite:///" + os.path.join(BASE_DIR, "bookings.db")
    )
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Email (SMTP)
    SMTP_HOST = os.getenv("SMTP_HOST")
    SMTP_PORT = int(os.getenv("SMTP_PORT", "587"))
    SMTP_USERNAME = os.getenv("SMTP_USERNAME")
    SMTP_PASSWORD = os.getenv("SMTP_PASSWORD")
    SMTP_FROM_EMAIL = os.getenv("SMTP_FROM_EMAIL")
    SMTP_USE_TLS = os.getenv("SMTP_USE_TLS", "true").lower() == "true"

    # Staff inbox for contact form notifications (falls back to SMTP_FROM_EMAIL)
    CONTACT_NOTIFY_EMAIL = os.getenv("CONTACT_NOTIFY_EMAIL")

    # Comma separated; "*" allows any origin
    CORS_ALLOWED_ORIGINS = os.getenv("CORS_ALLOWED_ORIGINS", "*")

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Basic app settings
    DEBUG = False
