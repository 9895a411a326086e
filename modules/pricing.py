"""Price calculation for configured print products."""

from __future__ import annotations

import logging
from decimal import Decimal
from typing import Mapping, Optional

from models.catalog import Product
from models.selection import PriceQuote, SelectionState
from logging_config import get_logger

from .option_catalogs import FINISH_TABLE, SHAPE_TABLE, Finish, Shape


ONE = Decimal("1")

# (minimum quantity, multiplier) in ascending order. Later tiers overwrite
# earlier ones, so only the highest reached tier applies.
DISCOUNT_TIERS = (
    (500, Decimal("0.9")),
    (1000, Decimal("0.8")),
    (5000, Decimal("0.7")),
)


def quantity_discount(quantity: int) -> Decimal:
    """Multiplier for the highest discount tier reached by quantity."""
    discount = ONE
    for threshold, multiplier in DISCOUNT_TIERS:
        if quantity >= threshold:
            discount = multiplier
    return discount


class PriceCalculator:
    """
    Pure price calculation over injected, read-only multiplier tables.

    total = (basePrice*q + optionsPerUnit*q) * finish * shape * discount

    Nothing is rounded; PriceQuote.display_total rounds for display.
    """

    def __init__(
        self,
        finishes: Mapping[Finish, Decimal] = FINISH_TABLE,
        shapes: Mapping[Shape, Decimal] = SHAPE_TABLE,
        logger: Optional[logging.Logger] = None,
    ) -> None:
        self._finishes = finishes
        self._shapes = shapes
        self.logger = logger or get_logger(__name__)

    def finish_multiplier(self, finish: Finish) -> Decimal:
        return self._finishes.get(finish, ONE)

    def shape_multiplier(self, shape: Shape) -> Decimal:
        return self._shapes.get(shape, ONE)

    @staticmethod
    def options_per_unit(product: Product, selection: SelectionState) -> Decimal:
        """Sum of surcharges of the product's options that are selected.

        Selected ids the product does not know are ignored.
        """
        return sum(
            (option.price_add for option in product.options
             if option.id in selection.selected_option_ids),
            Decimal("0"),
        )

    def quote(self, product: Product, selection: SelectionState) -> PriceQuote:
        quantity = selection.quantity
        finish_mult = self.finish_multiplier(selection.finish)
        shape_mult = self.shape_multiplier(selection.shape)
        per_unit = self.options_per_unit(product, selection)
        discount = quantity_discount(quantity)

        base_total = product.base_price * quantity
        options_total = per_unit * quantity
        total = (base_total + options_total) * finish_mult * shape_mult * discount

        self.logger.debug(
            f"Quote for {product.id}: q={quantity}, base={base_total}, "
            f"options={options_total}, finish={finish_mult}, shape={shape_mult}, "
            f"discount={discount} -> {total}"
        )

        return PriceQuote(
            total=total,
            quantity=quantity,
            base_total=base_total,
            options_per_unit=per_unit,
            options_total=options_total,
            finish_multiplier=finish_mult,
            shape_multiplier=shape_mult,
            quantity_discount=discount,
        )

    def compute_total(self, product: Product, selection: SelectionState) -> Decimal:
        return self.quote(product, selection).total


def compute_total(
    product: Product,
    selection: SelectionState,
    finishes: Mapping[Finish, Decimal] = FINISH_TABLE,
    shapes: Mapping[Shape, Decimal] = SHAPE_TABLE,
) -> Decimal:
    """Total price, using the standard finish and shape tables unless others are given."""
    return PriceCalculator(finishes, shapes).compute_total(product, selection)
