"""
Main routes (home, admin upload area, health).

The home page shows a few featured categories; if the catalog API is down
it still renders, just without them.
"""

from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    session,
    url_for,
)

from core.exceptions import NetworkError
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

main_bp = Blueprint("main", __name__)

FEATURED_CATEGORY_COUNT = 4


@main_bp.route("/")
def index():
    """Landing page with featured categories."""
    loader = current_app.config["PRODUCT_LOADER"]
    categories = []
    try:
        categories = loader.list_categories()[:FEATURED_CATEGORY_COUNT]
    except NetworkError as e:
        logger.warning(f"Home page rendered without categories: {e}")
    return render_template("home.html", categories=categories)


@main_bp.route("/upload", methods=["GET"])
def upload():
    """
    Artwork upload area (admins only).

    Admins land here after login; everybody else is sent home.
    """
    user = session.get("user")
    if not user or user.get("role") != "admin":
        flash("Please log in with an admin account to upload artwork.", "warning")
        return redirect(url_for("auth.login"))
    return render_template("upload.html", user=user)


@main_bp.route("/health", methods=["GET"])
def health():
    """Liveness probe; does not call the storefront API."""
    return {"status": "ok", "service": "print-storefront"}
