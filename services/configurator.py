"""
Configuration session for one product page.

A ConfigurationSession owns the loaded Product, the shopper's
SelectionState and the current PriceQuote. Every mutation method changes
the selection and then recomputes the quote before returning, so
``session.quote`` always belongs to the current selection. There is no
deferred or background recomputation.

Flow:
    1. ProductLoader loads a Product and opens a session (defaults seeded)
    2. Each user action calls one mutation method
    3. The view reads session.quote (and session.selection) for display

Usage:
    session = ConfigurationSession(product)
    session.set_finish("Foil Gold")
    session.toggle_option(product.options[1].id)
    session.set_quantity_text("1000")
    print(session.quote.display_total)
"""

from __future__ import annotations

from typing import Dict, Any, Optional, Union

import bleach

from models.catalog import Product
from models.selection import PriceQuote, SelectionState
from modules.option_catalogs import Finish, Shape
from modules.pricing import PriceCalculator
from modules.quantity import MIN_QUANTITY
from logging_config import get_logger


# Module logger
logger = get_logger(__name__)

MAX_PINCODE_LENGTH = 12


def sanitize_pincode(raw: str) -> str:
    """Strip markup and whitespace from a typed pincode."""
    if not raw:
        return ""
    text = bleach.clean(str(raw), tags=[], strip=True).strip()
    return text[:MAX_PINCODE_LENGTH]


class ConfigurationSession:
    """
    The active configuration of one product.

    Single-user, single-threaded: mutations are applied one at a time in
    the order the user makes them.

    Attributes:
        product: The immutable product being configured
        selection: Current SelectionState
        quote: PriceQuote for the current selection
    """

    def __init__(
        self,
        product: Product,
        selection: Optional[SelectionState] = None,
        calculator: Optional[PriceCalculator] = None,
    ):
        self.product = product
        self.selection = selection or SelectionState.defaults_for(product)
        self._calculator = calculator or PriceCalculator()
        self.quote: PriceQuote = self._calculator.quote(self.product, self.selection)

    def __repr__(self) -> str:
        return (
            f"ConfigurationSession(product={self.product.id!r}, "
            f"quantity={self.selection.quantity}, total={self.quote.total})"
        )

    # ------------------------------------------------------------------
    # Mutations
    # ------------------------------------------------------------------

    def set_finish(self, finish: Union[Finish, str]) -> PriceQuote:
        self.selection.finish = Finish.parse(finish)
        return self._recompute("finish")

    def set_shape(self, shape: Union[Shape, str]) -> PriceQuote:
        self.selection.shape = Shape.parse(shape)
        return self._recompute("shape")

    def toggle_option(self, option_id: str) -> PriceQuote:
        """Add the option if absent, remove it if present."""
        selected = self.selection.selected_option_ids
        if option_id in selected:
            selected.discard(option_id)
        else:
            selected.add(option_id)
        return self._recompute("option")

    def set_quantity_text(self, raw_text: str) -> PriceQuote:
        """Typed quantity; only adopted once it is a whole number >= 25."""
        self.selection.quantity_input.enter_text(raw_text)
        return self._recompute("quantity_text")

    def finalize_quantity(self) -> PriceQuote:
        """Quantity box lost focus: anything below 25 becomes 25."""
        self.selection.quantity_input.finalize()
        return self._recompute("quantity_finalize")

    def increment_quantity(self) -> PriceQuote:
        self.selection.quantity_input.increment()
        return self._recompute("quantity_increment")

    def decrement_quantity(self) -> PriceQuote:
        self.selection.quantity_input.decrement()
        return self._recompute("quantity_decrement")

    def select_preset_quantity(self, preset: int) -> PriceQuote:
        self.selection.quantity_input.select_preset(preset)
        return self._recompute("quantity_preset")

    def set_pincode(self, raw_pincode: str) -> PriceQuote:
        """
        Update the pincode text.

        Does not run or clear a delivery check; the shopper has to press
        Check again for a new estimate.
        """
        self.selection.pincode = sanitize_pincode(raw_pincode)
        return self._recompute("pincode")

    # ------------------------------------------------------------------
    # Views
    # ------------------------------------------------------------------

    def to_view(self) -> Dict[str, Any]:
        """Selection + quote, shaped for templates and JSON responses."""
        selection = self.selection
        return {
            "product_id": self.product.id,
            "finish": selection.finish.name,
            "shape": selection.shape.name,
            "selected_option_ids": [
                option_id for option_id in self.product.option_ids
                if option_id in selection.selected_option_ids
            ],
            "quantity": selection.quantity,
            "quantity_text": selection.quantity_text,
            "can_decrement": selection.quantity > MIN_QUANTITY,
            "pincode": selection.pincode,
            "quote": self.quote.to_dict(),
        }

    def _recompute(self, reason: str) -> PriceQuote:
        self.quote = self._calculator.quote(self.product, self.selection)
        logger.debug(f"Recomputed quote after {reason}: {self.quote.total}")
        return self.quote
