"""
Product loading for the configurator.

ProductLoader sits between the routes and the API client:
    - load(product_id) returns the same Product for the same id within the
      loader's lifetime (server data is treated as immutable)
    - open_session(product_id) loads and seeds a ConfigurationSession with
      the default selection
    - list_categories() / list_products() pass the catalog listings through

Errors from the API client (NotFoundError, NetworkError) propagate to the
caller unchanged and are never cached, so a retry hits the network again.
"""

from __future__ import annotations

import threading
from typing import Dict, List, Optional

from core.api_client import StorefrontAPIClient
from models.catalog import Category, Product
from models.selection import SelectionState
from services.configurator import ConfigurationSession
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)


class ProductLoader:
    """
    Loads products from the storefront API and caches them by id.

    The cache is shared by Flask worker threads, so it is guarded by a lock.

    Attributes:
        api_client: StorefrontAPIClient used for all fetches
    """

    def __init__(self, api_client: StorefrontAPIClient):
        self.api_client = api_client
        self._products: Dict[str, Product] = {}
        self._lock = threading.Lock()

    def load(self, product_id: str) -> Product:
        """
        Fetch a product (or return the cached copy).

        Raises:
            NotFoundError: If the product does not exist
            NetworkError: If the API call fails
        """
        with self._lock:
            cached = self._products.get(product_id)
        if cached is not None:
            logger.debug(f"Product {product_id} served from cache")
            return cached

        product = self.api_client.get_product(product_id)
        logger.info(f"Loaded product {product_id} ({product.name}, {len(product.options)} options)")

        with self._lock:
            # Another thread may have loaded it meanwhile; keep the first copy
            return self._products.setdefault(product_id, product)

    def open_session(
        self,
        product_id: str,
        selection: Optional[SelectionState] = None
    ) -> ConfigurationSession:
        """
        Load a product and start (or resume) its configuration.

        Args:
            product_id: Product to configure
            selection: Previously stored selection for this product, if any

        Returns:
            ConfigurationSession with its quote already computed
        """
        product = self.load(product_id)
        return ConfigurationSession(product, selection=selection)

    def list_categories(self) -> List[Category]:
        return self.api_client.get_categories()

    def list_products(self, category_id: str) -> List[Product]:
        return self.api_client.get_products_by_category(category_id)
