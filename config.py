import os

from dotenv import load_dotenv

# Load env vars
load_dotenv()


class Config:
    DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///magnet_store.db")
    STRIPE_SECRET_KEY = os.getenv("STRIPE_SECRET_KEY", "")
    STRIPE_WEBHOOK_SECRET = os.getenv("STRIPE_WEBHOOK_SECRET", "")
    FRONTEND_URL = os.getenv("FRONTEND_URL", "http://localhost:5000")
    PORT = int(os.getenv("PORT", "5000"))
    CURRENCY = os.getenv("CURRENCY", "usd")


def stripe_key_is_usable(key):
    """False for an unset key or one still holding the .env placeholder."""
    return bool(key) and "replace" not in key
