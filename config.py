"""
Configuration for the print storefront.

Values come from the environment (optionally via a .env file next to this
module). The storefront API is an external service; point
STOREFRONT_API_URL at it.
"""

import os
from pathlib import Path

from dotenv import load_dotenv

# Load .env before the Config class reads os.environ
load_dotenv(override=True)

# Base directory (where this file lives)
BASE_DIR = Path(__file__).resolve().parent


class Config:
    """Default configuration for the Flask application."""

    # Flask settings
    SECRET_KEY = os.environ.get("FLASK_SECRET_KEY", "dev-secret-key")
    SESSION_COOKIE_NAME = "print_storefront_session"
    ENVIRONMENT = os.environ.get("FLASK_ENV", "development")
    DEBUG = os.environ.get("FLASK_DEBUG", "1") == "1"

    # Storefront API (catalog + auth)
    STOREFRONT_API_URL = os.environ.get("STOREFRONT_API_URL", "http://localhost:5000")
    API_TIMEOUT_SECONDS = float(os.environ.get("API_TIMEOUT_SECONDS", "10"))

    # ==========================================================================
    # Delivery estimate (simulated)
    # ==========================================================================
    # DELIVERY_CHECK_DELAY_SECONDS: how long a check "looks up" the pincode
    # DELIVERY_OFFSET_DAYS: estimated date = today + this many calendar days
    # ==========================================================================
    DELIVERY_CHECK_DELAY_SECONDS = float(
        os.environ.get("DELIVERY_CHECK_DELAY_SECONDS", "1.0")
    )
    DELIVERY_OFFSET_DAYS = int(os.environ.get("DELIVERY_OFFSET_DAYS", "4"))
    # DELIVERY_MAX_SESSIONS: browser sessions with a remembered estimate;
    # the least recently used one is dropped beyond this
    DELIVERY_MAX_SESSIONS = int(os.environ.get("DELIVERY_MAX_SESSIONS", "1000"))


class ProductionConfig(Config):
    """Production configuration."""
    DEBUG = False
    TESTING = False
    SESSION_COOKIE_SECURE = True
    SESSION_COOKIE_HTTPONLY = True
    SESSION_COOKIE_SAMESITE = 'Lax'
    PERMANENT_SESSION_LIFETIME = 3600  # 1 hour


class DevelopmentConfig(Config):
    """Development configuration."""
    DEBUG = True
    TESTING = False


class TestingConfig(Config):
    """Testing configuration."""
    DEBUG = False
    TESTING = True
    SECRET_KEY = "test-secret-key"
    STOREFRONT_API_URL = "http://storefront.test"
    DELIVERY_CHECK_DELAY_SECONDS = 0.01
