"""
Data models for the print storefront.

This module contains dataclasses for:
- Category, Product, ProductOption: Catalog records from the REST API
- AuthUser, LoginResult: Sign-in response
- SelectionState: The shopper's in-progress configuration
- PriceQuote: Computed total with its breakdown
- DeliveryEstimate: Result of a delivery check

Catalog records, quotes and estimates are frozen so they can be cached
and handed between threads safely.
"""

from .catalog import Category, Product, ProductOption
from .account import AuthUser, LoginResult
from .selection import SelectionState, PriceQuote, DeliveryEstimate

__all__ = [
    # Catalog models
    "Category",
    "Product",
    "ProductOption",
    # Account models
    "AuthUser",
    "LoginResult",
    # Configuration models
    "SelectionState",
    "PriceQuote",
    "DeliveryEstimate",
]
