"""
Flask route blueprints for the print storefront.

This module contains all route handlers organized by functionality:
- main: Home page, admin upload area, health check
- catalog: Category and product listings
- product: Product configurator page and configure endpoint
- delivery: Delivery estimate check and polling (AJAX)
- auth: Login and logout

Each blueprint is registered with the Flask app in create_app().
"""

from .main import main_bp
from .catalog import catalog_bp
from .product import product_bp
from .delivery import delivery_bp
from .auth import auth_bp

__all__ = [
    "main_bp",
    "catalog_bp",
    "product_bp",
    "delivery_bp",
    "auth_bp",
]


def register_blueprints(app):
    """
    Register all blueprints with the Flask app.

    Args:
        app: Flask application instance
    """
    app.register_blueprint(main_bp)
    app.register_blueprint(catalog_bp)
    app.register_blueprint(product_bp)
    app.register_blueprint(delivery_bp)
    app.register_blueprint(auth_bp)
