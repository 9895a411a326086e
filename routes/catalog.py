"""
Catalog routes.

    /digital-print                 - all categories
    /digital-print/<category_id>   - products of one category

Failures are shown in-page: a missing category gets the not-found view
with a link back to the category list, any other API failure shows its
message. Nothing is retried automatically.
"""

from flask import (
    Blueprint,
    current_app,
    render_template,
    url_for,
)

from core.exceptions import NetworkError, NotFoundError
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

catalog_bp = Blueprint("catalog", __name__)


@catalog_bp.route("/digital-print", methods=["GET"])
def categories():
    """List all categories."""
    loader = current_app.config["PRODUCT_LOADER"]
    try:
        category_list = loader.list_categories()
    except NetworkError as e:
        logger.error(f"Fetch categories failed: {e}")
        return render_template(
            "error.html",
            message=e.message,
            back_url=url_for("main.index"),
            back_label="Back to Home",
        ), 502

    return render_template("categories.html", categories=category_list)


@catalog_bp.route("/digital-print/<category_id>", methods=["GET"])
def products(category_id: str):
    """List the products of one category."""
    loader = current_app.config["PRODUCT_LOADER"]
    try:
        product_list = loader.list_products(category_id)
    except NotFoundError as e:
        logger.info(f"Unknown category requested: {category_id}")
        return render_template(
            "not_found.html",
            message=e.message,
            back_url=url_for("catalog.categories"),
            back_label="Back to Categories",
        ), 404
    except NetworkError as e:
        logger.error(f"Fetch products for {category_id} failed: {e}")
        return render_template(
            "error.html",
            message=e.message,
            back_url=url_for("catalog.categories"),
            back_label="Back to Categories",
        ), 502

    # The listing carries no category record of its own; borrow the name
    # from the first product's embedded category
    category_name = ""
    if product_list and product_list[0].category:
        category_name = product_list[0].category.name

    return render_template(
        "products.html",
        category_id=category_id,
        category_name=category_name,
        products=product_list,
    )
