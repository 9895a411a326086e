"""
Core module for the print storefront.

Contains fundamental infrastructure components:
- exceptions: Custom exception hierarchy
- api_client: HTTP client for the storefront REST API

Only the exceptions are re-exported here. The leaf modules import
core.exceptions, so loading this package must not pull in api_client
(and through it the models). Import StorefrontAPIClient from
core.api_client.
"""

from .exceptions import (
    StorefrontError,
    ValidationError,
    NotFoundError,
    NetworkError,
    ProxyInterferenceError,
    AuthenticationError,
)

__all__ = [
    "StorefrontError",
    "ValidationError",
    "NotFoundError",
    "NetworkError",
    "ProxyInterferenceError",
    "AuthenticationError",
]
