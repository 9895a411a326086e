"""
Custom exceptions for the print storefront.

Exception Hierarchy:
    StorefrontError (base)
    ├── ValidationError         - Malformed user input (corrected locally)
    ├── NotFoundError           - Requested product/category does not exist
    ├── NetworkError            - Catalog/auth API call failed
    │   └── ProxyInterferenceError - Gateway returned an HTML page instead of JSON
    └── AuthenticationError     - Login rejected by the auth service

Usage:
    Validation errors never abort a view - they are shown inline and the
    previous valid state is kept. Network and not-found errors abandon the
    current operation and are surfaced to the user as a message. Nothing
    here is fatal to the process.
"""

from typing import Optional, Dict, Any


class StorefrontError(Exception):
    """
    Base exception for all storefront errors.

    All custom exceptions inherit from this class, allowing callers to catch
    all application-specific errors with a single except clause if needed.
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """
        Initialize the exception.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional context for debugging
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


# =============================================================================
# INPUT ERRORS - corrected locally, never a hard failure
# =============================================================================

class ValidationError(StorefrontError):
    """
    User input could not be accepted as-is.

    Raised for malformed quantity or pincode input, unknown finish/shape
    names and bad login form fields. Callers keep the last valid state.
    """

    def __init__(self, message: str, field: Optional[str] = None, value: Any = None):
        details = {}
        if field:
            details["field"] = field
        if value is not None:
            details["value"] = value
        super().__init__(message, details)
        self.field = field
        self.value = value


# =============================================================================
# REMOTE ERRORS - operation abandoned, message shown, no automatic retry
# =============================================================================

class NotFoundError(StorefrontError):
    """
    The requested product or category does not exist.

    Views render a dedicated "not found" page with a link back to the
    parent listing.
    """

    def __init__(self, resource: str, resource_id: str):
        message = f"{resource.capitalize()} not found: {resource_id}"
        details = {
            "resource": resource,
            "resource_id": resource_id,
        }
        super().__init__(message, details)
        self.resource = resource
        self.resource_id = resource_id


class NetworkError(StorefrontError):
    """
    A call to the catalog or auth API failed.

    Covers non-2xx responses, bodies that are not the expected JSON, and
    transport failures (connection refused, DNS, read errors).
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        url: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if status_code is not None:
            error_details["status_code"] = status_code
        if url:
            error_details["url"] = url
        super().__init__(message, error_details)
        self.status_code = status_code
        self.url = url


class ProxyInterferenceError(NetworkError):
    """
    The API answered with an HTML document instead of JSON.

    This happens when a reverse proxy or tunnel (e.g. an ngrok browser
    warning page) intercepts the request. It is reported with its own
    message rather than as a JSON parse failure.
    """

    def __init__(self, url: Optional[str] = None, status_code: Optional[int] = None):
        message = (
            "Received an HTML page instead of JSON - the request was blocked "
            "by a proxy or gateway in front of the API."
        )
        details = {
            "resolution": "Check the tunnel/proxy configuration in front of the storefront API"
        }
        super().__init__(message, status_code=status_code, url=url, details=details)


class AuthenticationError(StorefrontError):
    """
    The auth service rejected the login.

    The server's own message is kept so it can be shown on the login form.
    """

    DEFAULT_MESSAGE = "Login failed. Please check credentials."

    def __init__(self, message: Optional[str] = None, status_code: Optional[int] = None):
        details = {}
        if status_code is not None:
            details["status_code"] = status_code
        super().__init__(message or self.DEFAULT_MESSAGE, details)
        self.status_code = status_code
