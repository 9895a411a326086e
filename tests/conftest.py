"""Shared fixtures: sample catalog records and a Flask app with a mocked API client."""

from decimal import Decimal
from unittest.mock import MagicMock

import pytest

from app import create_app
from core.api_client import StorefrontAPIClient
from models.catalog import Category, Product, ProductOption


# Fixtures

@pytest.fixture
def category_data():
    """Category record as returned by GET /api/categories."""
    return {
        "_id": "cat-cards",
        "name": "Visiting Cards",
        "description": "Premium business cards",
        "image": "https://cdn.example.com/cards.png",
        "createdAt": "2026-01-05T10:00:00.000Z",
        "updatedAt": "2026-02-01T09:30:00.000Z",
    }


@pytest.fixture
def product_data(category_data):
    """Product record as returned by GET /api/products/{id}."""
    return {
        "_id": "prod-classic",
        "name": "Classic Visiting Card",
        "description": "350gsm card stock",
        "image": "https://cdn.example.com/classic.png",
        "basePrice": 0.10,
        "category": category_data,
        "options": [
            {"_id": "opt-corners", "name": "Rounded corners", "priceAdd": 0.05},
            {"_id": "opt-double", "name": "Double sided", "priceAdd": 0.02,
             "description": "Print on both sides"},
        ],
    }


@pytest.fixture
def category(category_data):
    return Category.from_api_data(category_data)


@pytest.fixture
def product(product_data):
    """Product with base price 0.10 and two options."""
    return Product.from_api_data(product_data)


@pytest.fixture
def plain_product():
    """Product with base price 0.10 and no options."""
    return Product(id="prod-plain", name="Plain Card", base_price=Decimal("0.10"))


@pytest.fixture
def mock_api_client(category, product):
    """API client double answering with the sample records."""
    client = MagicMock(spec=StorefrontAPIClient)
    client.get_categories.return_value = [category]
    client.get_products_by_category.return_value = [product]
    client.get_product.return_value = product
    return client


@pytest.fixture
def app(mock_api_client):
    """Flask app wired to the mocked API client."""
    app = create_app("config.TestingConfig", api_client=mock_api_client)
    yield app
    app.config["DELIVERY_SERVICE"].shutdown(timeout_per_check=1.0)


@pytest.fixture
def client(app):
    return app.test_client()
