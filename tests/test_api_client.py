"""
Unit tests for the storefront API client.

The HTTP layer is replaced by a mocked requests.Session so every error
path can be exercised without a server.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from core.api_client import StorefrontAPIClient, looks_like_html
from core.exceptions import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    ProxyInterferenceError,
)


# Fixtures

def make_response(status_code=200, json_data=None, text=None, reason="OK"):
    """Build a requests.Response look-alike."""
    response = MagicMock()
    response.status_code = status_code
    response.ok = status_code < 400
    response.reason = reason
    if text is None:
        text = json.dumps(json_data)
    response.text = text

    def _json():
        return json.loads(text)

    response.json.side_effect = _json
    return response


@pytest.fixture
def http_session():
    session = MagicMock()
    session.headers = {}
    return session


@pytest.fixture
def api(http_session):
    return StorefrontAPIClient("http://api.test/", timeout_seconds=3, session=http_session)


# Tests for construction

class TestClientSetup:
    """Test client configuration."""

    def test_requires_base_url(self):
        """Test an empty base URL is refused."""
        with pytest.raises(ValueError):
            StorefrontAPIClient("")

    def test_headers_and_trailing_slash(self, api, http_session):
        """Test JSON/tunnel headers are set and the base URL normalized."""
        assert api.base_url == "http://api.test"
        assert http_session.headers["Accept"] == "application/json"
        assert http_session.headers["ngrok-skip-browser-warning"] == "true"


# Tests for catalog endpoints

class TestCatalogEndpoints:
    """Test category and product fetching."""

    def test_get_categories(self, api, http_session, category_data):
        """Test categories are parsed in server order."""
        second = dict(category_data, _id="cat-flyers", name="Flyers")
        http_session.request.return_value = make_response(json_data=[category_data, second])

        categories = api.get_categories()

        assert [c.name for c in categories] == ["Visiting Cards", "Flyers"]
        http_session.request.assert_called_once_with(
            "GET", "http://api.test/api/categories", timeout=3
        )

    def test_get_products_by_category(self, api, http_session, product_data):
        """Test the category listing endpoint is used."""
        http_session.request.return_value = make_response(json_data=[product_data])

        products = api.get_products_by_category("cat-cards")

        assert products[0].id == "prod-classic"
        assert http_session.request.call_args[0][1] == \
            "http://api.test/api/products/category/cat-cards"

    def test_unknown_category(self, api, http_session):
        """Test a 404 on a category listing is NotFoundError."""
        http_session.request.return_value = make_response(404, {"message": "nope"}, reason="Not Found")

        with pytest.raises(NotFoundError) as exc_info:
            api.get_products_by_category("missing")

        assert exc_info.value.resource == "category"

    def test_get_product(self, api, http_session, product_data):
        """Test a single product is parsed."""
        http_session.request.return_value = make_response(json_data=product_data)

        product = api.get_product("prod-classic")

        assert product.name == "Classic Visiting Card"

    def test_unknown_product(self, api, http_session):
        """Test a 404 on a product is NotFoundError."""
        http_session.request.return_value = make_response(404, {"message": "nope"}, reason="Not Found")

        with pytest.raises(NotFoundError) as exc_info:
            api.get_product("missing")

        assert str(exc_info.value).startswith("Product not found: missing")

    def test_null_product(self, api, http_session):
        """Test a 200 with a null body is treated as not found."""
        http_session.request.return_value = make_response(json_data=None)

        with pytest.raises(NotFoundError):
            api.get_product("ghost")

    def test_server_error(self, api, http_session):
        """Test other non-2xx statuses are NetworkError with the status."""
        http_session.request.return_value = make_response(
            500, {"message": "boom"}, reason="Internal Server Error"
        )

        with pytest.raises(NetworkError) as exc_info:
            api.get_categories()

        assert exc_info.value.status_code == 500
        assert exc_info.value.message == "HTTP 500 - Internal Server Error"

    def test_html_body(self, api, http_session):
        """Test an HTML interstitial is reported as proxy interference."""
        http_session.request.return_value = make_response(
            200, text="<!DOCTYPE html><html><body>Visit site</body></html>"
        )

        with pytest.raises(ProxyInterferenceError) as exc_info:
            api.get_categories()

        assert exc_info.value.message.startswith("Received an HTML page instead of JSON")

    def test_html_checked_before_status(self, api, http_session):
        """Test an HTML error page is still proxy interference, not a 404."""
        http_session.request.return_value = make_response(404, text="<html>gateway</html>")

        with pytest.raises(ProxyInterferenceError):
            api.get_product("prod-classic")

    def test_invalid_json(self, api, http_session):
        """Test a body that is not JSON is NetworkError."""
        http_session.request.return_value = make_response(200, text="not json")

        with pytest.raises(NetworkError) as exc_info:
            api.get_categories()

        assert exc_info.value.message == "Server did not return JSON."

    def test_unexpected_schema(self, api, http_session, product_data):
        """Test a record missing required fields is NetworkError."""
        del product_data["basePrice"]
        http_session.request.return_value = make_response(json_data=product_data)

        with pytest.raises(NetworkError) as exc_info:
            api.get_product("prod-classic")

        assert "Unexpected response schema" in exc_info.value.message

    def test_listing_not_a_list(self, api, http_session):
        """Test a listing endpoint returning an object is NetworkError."""
        http_session.request.return_value = make_response(json_data={"categories": []})

        with pytest.raises(NetworkError):
            api.get_categories()

    def test_connection_failure(self, api, http_session):
        """Test transport errors become NetworkError."""
        http_session.request.side_effect = requests.ConnectionError("refused")

        with pytest.raises(NetworkError) as exc_info:
            api.get_categories()

        assert exc_info.value.message == "Network error. Please check if the server is running."


# Tests for login

class TestLogin:
    """Test credential exchange."""

    def test_success(self, api, http_session):
        """Test a successful login returns token and user."""
        http_session.request.return_value = make_response(json_data={
            "success": True,
            "token": "jwt",
            "user": {"_id": "u1", "name": "Asha", "email": "asha@example.com", "role": "admin"},
        })

        result = api.login("asha@example.com", "secret")

        assert result.token == "jwt"
        assert result.user.is_admin is True
        args, kwargs = http_session.request.call_args
        assert args == ("POST", "http://api.test/api/auth/login")
        assert kwargs["json"] == {"email": "asha@example.com", "password": "secret"}

    def test_rejected_with_message(self, api, http_session):
        """Test the server's rejection message is kept."""
        http_session.request.return_value = make_response(
            401, {"success": False, "message": "Invalid credentials"}, reason="Unauthorized"
        )

        with pytest.raises(AuthenticationError) as exc_info:
            api.login("asha@example.com", "wrong")

        assert exc_info.value.message == "Invalid credentials"
        assert exc_info.value.status_code == 401

    def test_rejected_without_message(self, api, http_session):
        """Test a bare rejection uses the default message."""
        http_session.request.return_value = make_response(200, {"success": False})

        with pytest.raises(AuthenticationError) as exc_info:
            api.login("asha@example.com", "wrong")

        assert exc_info.value.message == "Login failed. Please check credentials."

    def test_non_json_login_response(self, api, http_session):
        """Test a non-JSON login response is NetworkError."""
        http_session.request.return_value = make_response(502, text="Bad Gateway")

        with pytest.raises(NetworkError):
            api.login("asha@example.com", "secret")


class TestLooksLikeHtml:
    """Test HTML detection."""

    @pytest.mark.parametrize("body,expected", [
        ("<!DOCTYPE html>", True),
        ("  <html lang='en'>", True),
        ('{"a": 1}', False),
        ("[]", False),
        ("", False),
    ])
    def test_detection(self, body, expected):
        """Test only documents starting with doctype/html are flagged."""
        assert looks_like_html(body) is expected
