"""
HTTP client for the storefront API (catalog + auth).

This module wraps the external REST service that owns categories,
products and user accounts. Pricing never happens server-side; the client
only fetches records and exchanges credentials for a token.

Endpoints:
    GET  /api/categories                      -> list of categories
    GET  /api/products/category/{categoryId}  -> list of products
    GET  /api/products/{productId}            -> single product
    POST /api/auth/login                      -> token + user

Error Mapping:
    - HTML body (proxy/tunnel warning page)  -> ProxyInterferenceError
    - 404 on a product/category lookup       -> NotFoundError
    - any other non-2xx                      -> NetworkError (status attached)
    - body that is not the expected JSON     -> NetworkError
    - connection/timeout failures            -> NetworkError
    - rejected login                         -> AuthenticationError

The HTML check runs before anything else because tunnels answer with a
200 status and an HTML warning page.

Usage:
    client = StorefrontAPIClient("http://localhost:5000", timeout_seconds=10)
    categories = client.get_categories()
    product = client.get_product("65f0c0ffee")
"""

from __future__ import annotations

import logging
from typing import Any, List, Optional

import requests

from models.account import LoginResult
from models.catalog import Category, Product
from logging_config import get_logger

from .exceptions import (
    AuthenticationError,
    NetworkError,
    NotFoundError,
    ProxyInterferenceError,
)


HTML_MARKERS = ("<!doctype", "<html")

DEFAULT_HEADERS = {
    "Accept": "application/json",
    # Tunnels such as ngrok serve an HTML interstitial without this
    "ngrok-skip-browser-warning": "true",
}


def looks_like_html(body: str) -> bool:
    """Whether a response body is an HTML document rather than JSON."""
    return body.lstrip().lower().startswith(HTML_MARKERS)


class StorefrontAPIClient:
    """
    Client for the storefront REST API.

    One instance is created by the app factory and shared by request
    handlers; requests.Session is used for connection pooling only, no
    per-user state lives here.

    Attributes:
        base_url: API root without a trailing slash
        timeout_seconds: Connect/read timeout per request
    """

    def __init__(
        self,
        base_url: str,
        timeout_seconds: float = 10.0,
        session: Optional[requests.Session] = None,
        logger: Optional[logging.Logger] = None
    ):
        """
        Initialize the API client.

        Args:
            base_url: API root, e.g. "http://localhost:5000"
            timeout_seconds: Per-request timeout
            session: Optional pre-configured requests.Session (tests inject one)
            logger: Logger instance (creates default if not provided)

        Raises:
            ValueError: If base_url is empty
        """
        if not base_url:
            raise ValueError("base_url is required - set STOREFRONT_API_URL")

        self.base_url = base_url.rstrip("/")
        self.timeout_seconds = timeout_seconds
        self._session = session or requests.Session()
        self._session.headers.update(DEFAULT_HEADERS)
        self._logger = logger or get_logger(__name__)

    # =========================================================================
    # CATALOG
    # =========================================================================

    def get_categories(self) -> List[Category]:
        """
        Fetch all categories in server order.

        Raises:
            NetworkError: If the call fails or the body is not a category list
        """
        data = self._get_json("/api/categories")
        return self._parse_list(data, Category.from_api_data, "/api/categories")

    def get_products_by_category(self, category_id: str) -> List[Product]:
        """
        Fetch the products of one category in server order.

        Raises:
            NotFoundError: If the category does not exist
            NetworkError: If the call fails or the body is not a product list
        """
        path = f"/api/products/category/{category_id}"
        data = self._get_json(path, not_found=("category", category_id))
        return self._parse_list(data, Product.from_api_data, path)

    def get_product(self, product_id: str) -> Product:
        """
        Fetch a single product.

        Raises:
            NotFoundError: If the product does not exist
            NetworkError: If the call fails or the body is not a product
        """
        path = f"/api/products/{product_id}"
        data = self._get_json(path, not_found=("product", product_id))
        if data is None:
            # Some backends answer 200 with a null body for unknown ids
            raise NotFoundError("product", product_id)
        try:
            return Product.from_api_data(data)
        except (ValueError, TypeError) as e:
            self._logger.error(f"Unexpected product schema from {path}: {e}")
            raise NetworkError(
                f"Unexpected response schema: {e}", url=self._url(path)
            ) from e

    # =========================================================================
    # AUTH
    # =========================================================================

    def login(self, email: str, password: str) -> LoginResult:
        """
        Exchange credentials for a token.

        Args:
            email: Account email
            password: Account password (never logged)

        Returns:
            LoginResult with token and user

        Raises:
            AuthenticationError: If the service rejects the credentials
            NetworkError: If the service cannot be reached or answers garbage
        """
        path = "/api/auth/login"
        self._logger.info(f"Logging in {email}")
        response = self._send("POST", path, json={"email": email, "password": password})
        data = self._decode_json(response, path)

        if not response.ok:
            message = data.get("message") if isinstance(data, dict) else None
            self._logger.warning(f"Login rejected for {email}: HTTP {response.status_code}")
            raise AuthenticationError(message, status_code=response.status_code)

        if isinstance(data, dict) and data.get("success") is False:
            raise AuthenticationError(data.get("message"), status_code=response.status_code)

        try:
            return LoginResult.from_api_data(data)
        except (ValueError, TypeError) as e:
            raise NetworkError(
                f"Unexpected response schema: {e}", url=self._url(path)
            ) from e

    # =========================================================================
    # INTERNALS
    # =========================================================================

    def _url(self, path: str) -> str:
        return f"{self.base_url}{path}"

    def _send(self, method: str, path: str, **kwargs) -> requests.Response:
        url = self._url(path)
        self._logger.debug(f"{method} {url}")
        try:
            response = self._session.request(method, url, timeout=self.timeout_seconds, **kwargs)
        except requests.RequestException as e:
            self._logger.error(f"{method} {url} failed: {e}")
            raise NetworkError(
                "Network error. Please check if the server is running.",
                url=url,
                details={"reason": str(e)},
            ) from e

        if looks_like_html(response.text):
            self._logger.error(f"{method} {url} returned HTML (status {response.status_code})")
            raise ProxyInterferenceError(url=url, status_code=response.status_code)

        return response

    def _get_json(self, path: str, not_found: Optional[tuple] = None) -> Any:
        response = self._send("GET", path)

        if response.status_code == 404 and not_found:
            resource, resource_id = not_found
            raise NotFoundError(resource, resource_id)

        if not response.ok:
            self._logger.error(f"GET {path} -> HTTP {response.status_code}")
            raise NetworkError(
                f"HTTP {response.status_code} - {response.reason}",
                status_code=response.status_code,
                url=self._url(path),
            )

        return self._decode_json(response, path)

    def _decode_json(self, response: requests.Response, path: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            self._logger.error(f"Invalid JSON from {path}: {e}")
            raise NetworkError(
                "Server did not return JSON.",
                status_code=response.status_code,
                url=self._url(path),
            ) from e

    def _parse_list(self, data: Any, parse, path: str) -> list:
        if not isinstance(data, list):
            raise NetworkError(
                f"Unexpected response schema: expected a list, got {type(data).__name__}",
                url=self._url(path),
            )
        try:
            return [parse(item) for item in data]
        except (ValueError, TypeError) as e:
            self._logger.error(f"Unexpected record schema from {path}: {e}")
            raise NetworkError(
                f"Unexpected response schema: {e}", url=self._url(path)
            ) from e
