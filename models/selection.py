"""
Configuration data models.

These models represent what the shopper has chosen on the product page and
the values derived from it:

    SelectionState   - mutable, owned by one configuration session
    PriceQuote       - derived total for one SelectionState (frozen)
    DeliveryEstimate - result of an explicit delivery check (frozen)

SelectionState round-trips through to_dict()/from_dict() so it can live in
the Flask session between requests.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal, ROUND_HALF_UP
from typing import Dict, Any, Set

from modules.option_catalogs import Finish, Shape, DEFAULT_FINISH, DEFAULT_SHAPE
from modules.quantity import QuantityInput, DEFAULT_QUANTITY, MIN_QUANTITY

from .catalog import Product


@dataclass
class SelectionState:
    """
    The shopper's current configuration of a product.

    Mutated only through ConfigurationSession so that every change is
    followed by a price recomputation.
    """

    finish: Finish = DEFAULT_FINISH
    """Surface treatment."""

    shape: Shape = DEFAULT_SHAPE
    """Physical cut."""

    selected_option_ids: Set[str] = field(default_factory=set)
    """Ids of the ProductOptions switched on (order irrelevant)."""

    quantity_input: QuantityInput = field(default_factory=QuantityInput)
    """Authoritative quantity plus the raw text in the input box."""

    pincode: str = ""
    """Postal code typed for the delivery check."""

    @property
    def quantity(self) -> int:
        """Quantity used for pricing (always >= 25)."""
        return self.quantity_input.quantity

    @property
    def quantity_text(self) -> str:
        """Raw text in the quantity box (may be provisional)."""
        return self.quantity_input.text

    @classmethod
    def defaults_for(cls, product: Product) -> "SelectionState":
        """
        Initial selection for a freshly loaded product.

        Glossy, Standard, 100 units, first option preselected (if the
        product has any options), empty pincode.
        """
        selected = {product.options[0].id} if product.options else set()
        return cls(
            finish=DEFAULT_FINISH,
            shape=DEFAULT_SHAPE,
            selected_option_ids=selected,
            quantity_input=QuantityInput(DEFAULT_QUANTITY),
            pincode="",
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for session storage."""
        return {
            "finish": self.finish.name,
            "shape": self.shape.name,
            "selected_option_ids": sorted(self.selected_option_ids),
            "quantity": self.quantity,
            "quantity_text": self.quantity_text,
            "pincode": self.pincode,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SelectionState":
        """Create from dictionary (e.g., from session)."""
        quantity = data.get("quantity", DEFAULT_QUANTITY)
        if not isinstance(quantity, int) or quantity < MIN_QUANTITY:
            quantity = MIN_QUANTITY
        return cls(
            finish=Finish.parse(data.get("finish", DEFAULT_FINISH.name)),
            shape=Shape.parse(data.get("shape", DEFAULT_SHAPE.name)),
            selected_option_ids=set(data.get("selected_option_ids", [])),
            quantity_input=QuantityInput(quantity, data.get("quantity_text")),
            pincode=data.get("pincode", ""),
        )


@dataclass(frozen=True)
class PriceQuote:
    """
    Total price for one configuration, with the factors that produced it.

    The total is never rounded here. Rounding to cents happens only when
    it is displayed (display_total).
    """

    total: Decimal
    """Unrounded order total."""

    quantity: int
    """Quantity the total was computed for."""

    base_total: Decimal = Decimal("0")
    """basePrice * quantity."""

    options_per_unit: Decimal = Decimal("0")
    """Sum of selected option surcharges."""

    options_total: Decimal = Decimal("0")
    """options_per_unit * quantity."""

    finish_multiplier: Decimal = Decimal("1")
    shape_multiplier: Decimal = Decimal("1")
    quantity_discount: Decimal = Decimal("1")

    @property
    def display_total(self) -> str:
        """Total formatted to two decimals, e.g. '67.50'."""
        return format_price(self.total)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "total": str(self.total),
            "display_total": self.display_total,
            "quantity": self.quantity,
            "base_total": str(self.base_total),
            "options_per_unit": str(self.options_per_unit),
            "options_total": str(self.options_total),
            "finish_multiplier": str(self.finish_multiplier),
            "shape_multiplier": str(self.shape_multiplier),
            "quantity_discount": str(self.quantity_discount),
        }


def format_price(amount: Decimal) -> str:
    """Round half-up to cents for display only."""
    return str(Decimal(amount).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP))


@dataclass(frozen=True)
class DeliveryEstimate:
    """
    Simulated delivery date for a pincode.

    Produced by DeliveryEstimator; a later check replaces it.
    """

    pincode: str
    """Pincode the check was issued for."""

    estimated_date: date
    """Local calendar date of expected delivery."""

    @property
    def display_date(self) -> str:
        """Formatted like 'Thursday, Oct 22'."""
        d = self.estimated_date
        return f"{d:%A}, {d:%b} {d.day}"

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON responses."""
        return {
            "pincode": self.pincode,
            "estimated_date": self.estimated_date.isoformat(),
            "display_date": self.display_date,
        }
