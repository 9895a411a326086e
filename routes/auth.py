"""
Login and logout routes.

Credentials go straight to the auth service; the storefront keeps only
the returned token and user record in the session. Admins are sent to the
upload area after login, everybody else to the home page.
"""

import re

import bleach
from flask import (
    Blueprint,
    current_app,
    flash,
    redirect,
    render_template,
    request,
    session,
    url_for,
)

from core.exceptions import AuthenticationError, NetworkError
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

auth_bp = Blueprint("auth", __name__)

# Constants
MAX_EMAIL_LENGTH = 254
EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")


def _sanitize_text(text: str, max_length: int = None) -> str:
    """Sanitize user input text."""
    if not text:
        return ""
    text = text.strip()
    text = bleach.clean(text, tags=[], strip=True)
    if max_length and len(text) > max_length:
        text = text[:max_length]
    return text


def validate_login_form(email: str, password: str) -> dict:
    """
    Check the login form fields.

    Returns:
        Field name -> message for every problem (empty when valid)
    """
    errors = {}
    if not email:
        errors["email"] = "Email is required"
    elif not EMAIL_PATTERN.search(email):
        errors["email"] = "Please enter a valid email address"
    if not password:
        errors["password"] = "Password is required"
    return errors


@auth_bp.route("/login", methods=["GET", "POST"])
def login():
    """
    Handle sign-in.

    GET: Display the login form
    POST: Validate, call the auth service, store token and redirect
    """
    if request.method == "GET":
        return render_template("login.html", errors={}, email="")

    email = _sanitize_text(request.form.get("email", ""), max_length=MAX_EMAIL_LENGTH)
    password = request.form.get("password", "")

    errors = validate_login_form(email, password)
    if errors:
        return render_template("login.html", errors=errors, email=email), 400

    api_client = current_app.config["API_CLIENT"]
    try:
        result = api_client.login(email, password)
    except AuthenticationError as e:
        errors["general"] = e.message
        return render_template("login.html", errors=errors, email=email), 401
    except NetworkError as e:
        logger.error(f"Login error: {e}")
        errors["general"] = e.message
        return render_template("login.html", errors=errors, email=email), 502

    session["token"] = result.token
    session["user"] = result.user.to_dict()
    session.modified = True

    logger.info(f"User {result.user.email} logged in (role={result.user.role})")
    flash(f"Welcome back, {result.user.name or result.user.email}!", "success")

    if result.user.is_admin:
        return redirect(url_for("main.upload"))
    return redirect(url_for("main.index"))


@auth_bp.route("/logout", methods=["GET"])
def logout():
    """Forget the token and user; keep nothing else either."""
    key = session.get("session_key")
    if key:
        current_app.config["DELIVERY_SERVICE"].discard(key)
    session.clear()
    flash("You have been logged out.", "success")
    return redirect(url_for("main.index"))
