"""
Catalog data models.

These models represent records returned by the storefront API:
categories, products and the add-on options attached to a product.

Immutability:
    - All catalog records are frozen dataclasses
    - A Product is loaded once per configuration session and never mutated
    - Options are kept in server order (tuple) for display

Parsing:
    from_api_data() raises ValueError when a record does not match the
    expected schema. The API client turns that into a NetworkError.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal, InvalidOperation
from typing import Dict, Any, Optional


def _to_decimal(value: Any, field_name: str) -> Decimal:
    """Convert a JSON number to a non-negative Decimal (via str, so 0.1 stays 0.1)."""
    if isinstance(value, bool) or value is None:
        raise ValueError(f"{field_name} must be a number, got {value!r}")
    try:
        result = Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise ValueError(f"{field_name} must be a number, got {value!r}") from None
    if not result.is_finite() or result < 0:
        raise ValueError(f"{field_name} must be a non-negative number, got {value!r}")
    return result


def _require(data: Dict[str, Any], key: str) -> Any:
    if not isinstance(data, dict):
        raise ValueError(f"Expected an object, got {type(data).__name__}")
    if key not in data:
        raise ValueError(f"Missing required field '{key}'")
    return data[key]


@dataclass(frozen=True)
class Category:
    """
    A product category (e.g. "Visiting Cards").

    Returned by GET /api/categories and embedded in product records.
    """

    id: str
    """Server identifier (``_id`` on the wire)."""

    name: str
    """Display name."""

    description: str = ""
    """Short marketing description."""

    image: str = ""
    """Image URL for the category tile."""

    created_at: str = ""
    """ISO timestamp, as sent by the server."""

    updated_at: str = ""
    """ISO timestamp, as sent by the server."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for template rendering."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "created_at": self.created_at,
            "updated_at": self.updated_at,
        }

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> "Category":
        """Create a Category from an API record."""
        return cls(
            id=str(_require(data, "_id")),
            name=str(_require(data, "name")),
            description=data.get("description") or "",
            image=data.get("image") or "",
            created_at=data.get("createdAt") or "",
            updated_at=data.get("updatedAt") or "",
        )


@dataclass(frozen=True)
class ProductOption:
    """
    A server-defined add-on for a product (e.g. "Rounded corners").

    The surcharge is charged per printed unit.
    """

    id: str
    """Option identity (``_id`` on the wire)."""

    name: str
    """Display name."""

    price_add: Decimal
    """Per-unit surcharge, never negative."""

    description: str = ""
    """Short description shown under the name."""

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for template rendering and JSON responses."""
        return {
            "id": self.id,
            "name": self.name,
            "price_add": str(self.price_add),
            "description": self.description,
        }

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> "ProductOption":
        """Create a ProductOption from an API record."""
        return cls(
            id=str(_require(data, "_id")),
            name=str(_require(data, "name")),
            price_add=_to_decimal(_require(data, "priceAdd"), "priceAdd"),
            description=data.get("description") or "",
        )


@dataclass(frozen=True)
class Product:
    """
    A configurable print product.

    This is a FROZEN dataclass - the configuration session that loaded it
    owns it exclusively and never changes it. Pricing reads base_price and
    the option surcharges from here.
    """

    id: str
    """Server identifier (``_id`` on the wire)."""

    name: str
    """Display name."""

    base_price: Decimal
    """Per-unit base cost, never negative."""

    options: tuple[ProductOption, ...] = ()
    """Add-on options in server order."""

    description: str = ""
    """Marketing description."""

    image: str = ""
    """Image URL used for the preview."""

    category_id: str = ""
    """Identifier of the owning category."""

    category: Optional[Category] = None
    """Embedded category record, when the server populated it."""

    def get_option(self, option_id: str) -> Optional[ProductOption]:
        """
        Find an option by id.

        Args:
            option_id: ProductOption.id

        Returns:
            ProductOption if found, None otherwise
        """
        for option in self.options:
            if option.id == option_id:
                return option
        return None

    @property
    def option_ids(self) -> tuple[str, ...]:
        """Option ids in display order."""
        return tuple(option.id for option in self.options)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for template rendering and JSON responses."""
        return {
            "id": self.id,
            "name": self.name,
            "description": self.description,
            "image": self.image,
            "base_price": str(self.base_price),
            "category_id": self.category_id,
            "category": self.category.to_dict() if self.category else None,
            "options": [option.to_dict() for option in self.options],
        }

    @classmethod
    def from_api_data(cls, data: Dict[str, Any]) -> "Product":
        """
        Create a Product from an API record.

        The ``category`` field may be a populated category object or a bare
        id string, depending on the endpoint.

        Args:
            data: Product JSON object

        Returns:
            Product instance

        Raises:
            ValueError: If required fields are missing or malformed
        """
        if not isinstance(data, dict):
            raise ValueError(f"Expected a product object, got {type(data).__name__}")

        raw_category = data.get("category")
        category = None
        category_id = ""
        if isinstance(raw_category, dict):
            category = Category.from_api_data(raw_category)
            category_id = category.id
        elif raw_category is not None:
            category_id = str(raw_category)

        raw_options = data.get("options") or []
        if not isinstance(raw_options, list):
            raise ValueError("Field 'options' must be a list")

        return cls(
            id=str(_require(data, "_id")),
            name=str(_require(data, "name")),
            base_price=_to_decimal(_require(data, "basePrice"), "basePrice"),
            options=tuple(ProductOption.from_api_data(o) for o in raw_options),
            description=data.get("description") or "",
            image=data.get("image") or "",
            category_id=category_id,
            category=category,
        )
