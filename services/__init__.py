"""
Services layer for the print storefront.

This module contains the business logic services:
- ConfigurationSession: Selection + live price for one product
- ProductLoader: Fetches and caches product records
- DeliveryEstimator / DeliveryService: Simulated delivery checks

Thread Model:
    Main Thread (Flask)
    └── Delivery threads (one per check, latest check wins)
"""

from .configurator import ConfigurationSession
from .product_loader import ProductLoader
from .delivery_service import DeliveryEstimator, DeliveryService

__all__ = [
    "ConfigurationSession",
    "ProductLoader",
    "DeliveryEstimator",
    "DeliveryService",
]
