"""
Print Storefront - Flask Application Entry Point.

This is a slim app factory that:
1. Loads configuration (.env + config classes)
2. Configures thread-aware logging
3. Creates the storefront API client and product loader
4. Creates the delivery service (simulated checks on worker threads)
5. Registers route blueprints, context processors and error handlers

ARCHITECTURE:
    Main Thread
    └── Flask request handling
        ├── ProductLoader -> StorefrontAPIClient -> external REST API
        └── ConfigurationSession (pricing, per request, from session data)

    Delivery Threads (one per check)
    └── Sleep, compute date, publish if still the latest check

Pricing is local and synchronous; the only background work is the
delivery check.
"""

from __future__ import annotations

import atexit
import logging
import os
from typing import Optional

from dotenv import load_dotenv
from flask import Flask, flash, redirect, session, url_for

from logging_config import setup_logging, get_logger
from core.api_client import StorefrontAPIClient
from services.delivery_service import DeliveryService
from services.product_loader import ProductLoader
from models.selection import format_price
from routes import register_blueprints


# Module logger (configured after setup_logging)
logger = get_logger(__name__)


def create_app(
    config_object: str = "config.Config",
    api_client: Optional[StorefrontAPIClient] = None,
) -> Flask:
    """
    Application factory - creates and configures the Flask app.

    Args:
        config_object: Dotted path of the config class to load
        api_client: Pre-built API client (tests pass a mock)

    Returns:
        Configured Flask application
    """
    # .env wins over the shell environment
    load_dotenv(override=True)

    app = Flask(__name__)
    app.config.from_object(config_object)

    # Configure logging
    log_level = logging.DEBUG if app.config.get("DEBUG") else logging.INFO
    enable_file_logging = app.config.get("ENVIRONMENT") == "production"

    root_logger = setup_logging(
        log_level=log_level,
        enable_file_logging=enable_file_logging
    )
    app.logger.handlers = root_logger.handlers
    app.logger.setLevel(log_level)

    logger.info(f"Starting print storefront in {app.config.get('ENVIRONMENT')} mode")

    # =========================================================================
    # SERVICES
    # =========================================================================

    if api_client is None:
        api_client = StorefrontAPIClient(
            base_url=app.config["STOREFRONT_API_URL"],
            timeout_seconds=app.config["API_TIMEOUT_SECONDS"],
            logger=get_logger("core.api_client"),
        )
    app.config["API_CLIENT"] = api_client
    app.config["PRODUCT_LOADER"] = ProductLoader(api_client)
    logger.info(f"Storefront API: {app.config['STOREFRONT_API_URL']}")

    delivery_service = DeliveryService(
        delay_seconds=app.config["DELIVERY_CHECK_DELAY_SECONDS"],
        offset_days=app.config["DELIVERY_OFFSET_DAYS"],
        max_sessions=app.config["DELIVERY_MAX_SESSIONS"],
    )
    app.config["DELIVERY_SERVICE"] = delivery_service

    def cleanup():
        """Cleanup on application shutdown."""
        logger.info("Shutting down...")
        delivery_service.shutdown()
        logger.info("Shutdown complete")

    atexit.register(cleanup)

    register_blueprints(app)

    # =========================================================================
    # CONTEXT PROCESSORS / FILTERS
    # =========================================================================

    @app.context_processor
    def inject_user():
        """Signed-in user (or None) for the navigation bar."""
        return {"current_user": session.get("user")}

    app.add_template_filter(format_price, "price")

    # =========================================================================
    # ERROR HANDLERS
    # =========================================================================

    @app.errorhandler(404)
    def handle_not_found(e):
        flash("Page not found.", "warning")
        return redirect(url_for("main.index"))

    @app.errorhandler(500)
    def handle_server_error(e):
        logger.error(f"500 error: {e}", exc_info=True)
        flash("An unexpected error occurred. Please try again.", "error")
        return redirect(url_for("main.index"))

    logger.info("Application initialized successfully")
    return app


if __name__ == "__main__":
    app = create_app()
    debug_mode = os.environ.get("FLASK_DEBUG", "1") == "1"
    app.run(debug=debug_mode)
