"""
Delivery estimate routes (AJAX endpoints).

Handles:
- /api/delivery/check  - start a simulated check for a pincode
- /api/delivery/status - poll the latest estimate

A check runs on its own thread (see services.delivery_service). The page
polls /api/delivery/status until "checking" is false. If the shopper
presses Check again, the earlier check can never overwrite the later one.
"""

import uuid
from typing import Any, Dict

from flask import (
    Blueprint,
    current_app,
    jsonify,
    request,
    session,
)

from core.exceptions import ValidationError
from services.configurator import sanitize_pincode
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

delivery_bp = Blueprint("delivery", __name__)


def session_key() -> str:
    """Stable per-browser key used to find this session's estimator."""
    key = session.get("session_key")
    if not key:
        key = uuid.uuid4().hex
        session["session_key"] = key
    return key


def delivery_state() -> Dict[str, Any]:
    """Current delivery check status for this browser session."""
    estimator = current_app.config["DELIVERY_SERVICE"].estimator_for(session_key())
    estimate = estimator.estimate
    return {
        "checking": estimator.is_checking,
        "estimate": estimate.to_dict() if estimate else None,
    }


@delivery_bp.route("/api/delivery/check", methods=["POST"])
def check():
    """
    Start a delivery check.

    Accepts {"pincode": "..."} as JSON or form data. The pincode is also
    remembered in the current configuration.
    """
    payload = request.get_json(silent=True) or request.form
    pincode = sanitize_pincode(payload.get("pincode", ""))

    configuration = session.get("configuration")
    if configuration:
        configuration.setdefault("selection", {})["pincode"] = pincode
        session.modified = True

    estimator = current_app.config["DELIVERY_SERVICE"].estimator_for(session_key())
    try:
        request_id = estimator.check(pincode)
    except ValidationError as e:
        return jsonify({"error": e.message, **delivery_state()}), 400

    logger.info(f"Delivery check {request_id} requested")
    return jsonify({"request_id": request_id, **delivery_state()}), 202


@delivery_bp.route("/api/delivery/status", methods=["GET"])
def status():
    """Poll the latest delivery estimate."""
    return jsonify(delivery_state())
