"""
Product configurator routes.

    GET  /digital-print/<category_id>/<product_id>            - configurator page
    POST /digital-print/<category_id>/<product_id>/configure  - apply one change

The configure endpoint takes one user action at a time:

    {"action": "finish", "value": "Foil Gold"}
    {"action": "toggle_option", "value": "<option id>"}
    {"action": "quantity_text", "value": "15"}
    {"action": "finalize_quantity"}
    {"action": "preset", "value": 500}

and answers with the new selection and its quote. JSON requests may carry
an increasing "seq" number, which is echoed back; the page sends one
action at a time and ignores any answer older than the newest it applied.
Plain form posts are accepted too and redirect back to the page.

The selection lives in the Flask session under "configuration" together
with the product id it belongs to. Opening a different product starts
from the defaults and clears the delivery estimate.
"""

from typing import Any, Callable, Dict, Optional

from flask import (
    Blueprint,
    current_app,
    flash,
    jsonify,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from core.exceptions import NetworkError, NotFoundError, ValidationError
from models.selection import SelectionState
from modules.option_catalogs import finish_choices, shape_choices
from modules.quantity import PRESET_QUANTITIES
from services.configurator import ConfigurationSession
from services.delivery_service import MIN_PINCODE_LENGTH
from logging_config import get_logger

from .delivery import delivery_state, session_key


# Module logger
logger = get_logger(__name__)

product_bp = Blueprint("product", __name__)

CONFIGURATION_KEY = "configuration"


def _parse_preset(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValidationError("Preset quantity must be a number", field="quantity", value=value)


ACTIONS: Dict[str, Callable[[ConfigurationSession, Any], Any]] = {
    "finish": lambda s, v: s.set_finish(v),
    "shape": lambda s, v: s.set_shape(v),
    "toggle_option": lambda s, v: s.toggle_option(str(v)),
    "quantity_text": lambda s, v: s.set_quantity_text("" if v is None else str(v)),
    "finalize_quantity": lambda s, v: s.finalize_quantity(),
    "increment": lambda s, v: s.increment_quantity(),
    "decrement": lambda s, v: s.decrement_quantity(),
    "preset": lambda s, v: s.select_preset_quantity(_parse_preset(v)),
    "pincode": lambda s, v: s.set_pincode("" if v is None else str(v)),
}


def _parse_seq(value: Any) -> Optional[int]:
    """Client sequence number echoed back so the page can drop stale answers."""
    if isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _stored_selection(product_id: str) -> Optional[SelectionState]:
    """Selection saved in the session for this product, if any."""
    stored = session.get(CONFIGURATION_KEY)
    if not stored or stored.get("product_id") != product_id:
        return None
    try:
        return SelectionState.from_dict(stored.get("selection", {}))
    except ValidationError as e:
        logger.warning(f"Discarding stored selection for {product_id}: {e}")
        return None


def _save(config_session: ConfigurationSession) -> None:
    session[CONFIGURATION_KEY] = {
        "product_id": config_session.product.id,
        "selection": config_session.selection.to_dict(),
    }
    session.modified = True


def _open_configuration(product_id: str) -> ConfigurationSession:
    """
    Load the product and resume or start its configuration.

    Raises:
        NotFoundError, NetworkError: From the product loader
    """
    loader = current_app.config["PRODUCT_LOADER"]
    selection = _stored_selection(product_id)
    config_session = loader.open_session(product_id, selection=selection)

    if selection is None:
        # New product: the old delivery estimate no longer applies
        current_app.config["DELIVERY_SERVICE"].estimator_for(session_key()).clear()
        _save(config_session)
        logger.info(f"Started configuration of {product_id}")

    return config_session


def _failure_page(error, category_id: str):
    back_url = url_for("catalog.products", category_id=category_id)
    if isinstance(error, NotFoundError):
        return render_template(
            "not_found.html",
            message="The product you are looking for does not exist.",
            back_url=back_url,
            back_label="Back to Products",
        ), 404
    return render_template(
        "error.html",
        message=error.message,
        back_url=back_url,
        back_label="Back to Products",
    ), 502


@product_bp.route("/digital-print/<category_id>/<product_id>", methods=["GET"])
def detail(category_id: str, product_id: str):
    """Configurator page for one product."""
    try:
        config_session = _open_configuration(product_id)
    except (NotFoundError, NetworkError) as e:
        logger.warning(f"Product page {product_id} unavailable: {e}")
        return _failure_page(e, category_id)

    return render_template(
        "product_detail.html",
        category_id=category_id,
        product=config_session.product,
        state=config_session.to_view(),
        finishes=finish_choices(),
        shapes=shape_choices(),
        presets=PRESET_QUANTITIES,
        min_pincode_length=MIN_PINCODE_LENGTH,
        delivery=delivery_state(),
    )


@product_bp.route("/digital-print/<category_id>/<product_id>/configure", methods=["POST"])
def configure(category_id: str, product_id: str):
    """Apply one configuration action and return the new quote."""
    wants_json = request.is_json
    payload = request.get_json(silent=True) if wants_json else request.form
    payload = payload or {}
    action = payload.get("action", "")

    try:
        config_session = _open_configuration(product_id)
    except (NotFoundError, NetworkError) as e:
        if wants_json:
            status = 404 if isinstance(e, NotFoundError) else 502
            return jsonify({"error": e.message}), status
        return _failure_page(e, category_id)

    handler = ACTIONS.get(action)
    error = None
    if handler is None:
        error = f"Unknown action: {action}"
    else:
        try:
            handler(config_session, payload.get("value"))
        except ValidationError as e:
            # Selection stays as it was
            error = e.message

    _save(config_session)

    if not wants_json:
        if error:
            flash(error, "error")
        return redirect(url_for("product.detail", category_id=category_id, product_id=product_id))

    body = {"state": config_session.to_view(), "delivery": delivery_state()}
    seq = _parse_seq(payload.get("seq"))
    if seq is not None:
        body["seq"] = seq
    if error:
        logger.debug(f"Rejected configure action {action!r}: {error}")
        body["error"] = error
        return jsonify(body), 400
    return jsonify(body)
