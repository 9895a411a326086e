"""Pricing helper modules for the print storefront."""

__all__ = [
    "option_catalogs",
    "pricing",
    "quantity",
]
