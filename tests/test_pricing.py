"""
Unit tests for price calculation.

Covers the multiplier tables, the quantity discount tiers and the full
total formula on the sample product (base price 0.10).
"""

from decimal import Decimal
from types import MappingProxyType

import pytest

from models.catalog import Product
from models.selection import SelectionState
from modules.option_catalogs import FINISH_TABLE, SHAPE_TABLE, Finish, Shape
from modules.pricing import PriceCalculator, compute_total, quantity_discount
from modules.quantity import QuantityInput


# Fixtures

@pytest.fixture
def calculator():
    return PriceCalculator()


def make_selection(quantity=100, finish=Finish.GLOSSY, shape=Shape.STANDARD, options=()):
    """Selection with the given values and nothing else switched on."""
    return SelectionState(
        finish=finish,
        shape=shape,
        selected_option_ids=set(options),
        quantity_input=QuantityInput(quantity),
    )


# Tests for the multiplier tables

class TestMultiplierTables:
    """Test the finish and shape tables."""

    def test_finish_multipliers(self):
        """Test every finish has its listed multiplier."""
        assert FINISH_TABLE[Finish.GLOSSY] == Decimal("1.0")
        assert FINISH_TABLE[Finish.MATTE] == Decimal("1.1")
        assert FINISH_TABLE[Finish.VELVET] == Decimal("1.3")
        assert FINISH_TABLE[Finish.FOIL_GOLD] == Decimal("1.5")
        assert FINISH_TABLE[Finish.FOIL_SILVER] == Decimal("1.5")
        assert FINISH_TABLE[Finish.SPOT_UV] == Decimal("1.4")
        assert FINISH_TABLE[Finish.PLASTIC] == Decimal("2.0")
        assert FINISH_TABLE[Finish.KRAFT] == Decimal("1.2")

    def test_shape_multipliers(self):
        """Test every shape has its listed multiplier."""
        assert SHAPE_TABLE[Shape.STANDARD] == Decimal("1.0")
        assert SHAPE_TABLE[Shape.SQUARE] == Decimal("1.1")
        assert SHAPE_TABLE[Shape.ROUND] == Decimal("1.2")
        assert SHAPE_TABLE[Shape.CUSTOM] == Decimal("1.4")

    def test_tables_are_read_only(self):
        """Test the tables cannot be changed at runtime."""
        with pytest.raises(TypeError):
            FINISH_TABLE[Finish.GLOSSY] = Decimal("0")
        with pytest.raises(TypeError):
            SHAPE_TABLE[Shape.ROUND] = Decimal("0")


# Tests for quantity discounts

class TestQuantityDiscount:
    """Test the tier boundaries."""

    @pytest.mark.parametrize("quantity,expected", [
        (25, "1"),
        (499, "1"),
        (500, "0.9"),
        (999, "0.9"),
        (1000, "0.8"),
        (4999, "0.8"),
        (5000, "0.7"),
        (20000, "0.7"),
    ])
    def test_tier_boundaries(self, quantity, expected):
        """Test only the highest reached tier applies."""
        assert quantity_discount(quantity) == Decimal(expected)


# Tests for PriceCalculator

class TestPriceCalculator:
    """Test the total formula."""

    def test_bulk_discount_example(self, calculator, plain_product):
        """Test 1000 glossy standard cards at 0.10 cost 80.00."""
        quote = calculator.quote(plain_product, make_selection(quantity=1000))

        assert quote.total == Decimal("80")
        assert quote.display_total == "80.00"
        assert quote.quantity_discount == Decimal("0.8")

    def test_finish_and_shape_example(self, calculator, plain_product):
        """Test 100 foil gold round cards at 0.10 cost 18.00."""
        selection = make_selection(quantity=100, finish=Finish.FOIL_GOLD, shape=Shape.ROUND)

        quote = calculator.quote(plain_product, selection)

        assert quote.total == Decimal("18")
        assert quote.display_total == "18.00"
        assert quote.finish_multiplier == Decimal("1.5")
        assert quote.shape_multiplier == Decimal("1.2")

    def test_option_surcharge_example(self, calculator, product):
        """Test a 0.05 option on 500 cards gives 67.50."""
        selection = make_selection(quantity=500, options=["opt-corners"])

        quote = calculator.quote(product, selection)

        assert quote.total == Decimal("67.5")
        assert quote.display_total == "67.50"
        assert quote.options_per_unit == Decimal("0.05")
        assert quote.options_total == Decimal("25")
        assert quote.base_total == Decimal("50")

    def test_options_sum(self, calculator, product):
        """Test several selected options add up per unit."""
        selection = make_selection(quantity=100, options=["opt-corners", "opt-double"])

        quote = calculator.quote(product, selection)

        assert quote.options_per_unit == Decimal("0.07")
        assert quote.total == Decimal("17")

    def test_unknown_option_ids_ignored(self, calculator, product):
        """Test ids the product does not have contribute nothing."""
        with_unknown = make_selection(quantity=100, options=["opt-corners", "opt-missing"])
        without = make_selection(quantity=100, options=["opt-corners"])

        assert calculator.compute_total(product, with_unknown) == \
            calculator.compute_total(product, without)

    def test_zero_base_price(self, calculator):
        """Test a free product with no options costs nothing."""
        free = Product(id="free", name="Sample", base_price=Decimal("0"))

        total = calculator.compute_total(free, make_selection(finish=Finish.PLASTIC))

        assert total == 0

    def test_deterministic(self, calculator, product):
        """Test the same inputs give the same total."""
        selection = make_selection(quantity=250, finish=Finish.VELVET, options=["opt-double"])

        first = calculator.compute_total(product, selection)
        second = calculator.compute_total(product, selection)

        assert first == second

    def test_never_negative(self, calculator, product):
        """Test totals are never negative across all finishes and shapes."""
        for finish in Finish:
            for shape in Shape:
                selection = make_selection(quantity=25, finish=finish, shape=shape)
                assert calculator.compute_total(product, selection) >= 0

    def test_monotonic_within_tier(self, calculator, product):
        """Test more cards never cost less within a discount tier."""
        totals = [
            calculator.compute_total(product, make_selection(quantity=q, options=["opt-corners"]))
            for q in range(25, 500, 25)
        ]
        assert totals == sorted(totals)

    def test_total_not_rounded(self, calculator):
        """Test the total keeps sub-cent precision until display."""
        product = Product(id="p", name="P", base_price=Decimal("0.013"))

        quote = calculator.quote(product, make_selection(quantity=25, finish=Finish.MATTE))

        assert quote.total == Decimal("0.3575")
        assert quote.display_total == "0.36"

    def test_injected_tables(self, plain_product):
        """Test custom tables replace the standard multipliers."""
        calculator = PriceCalculator(
            finishes=MappingProxyType({Finish.GLOSSY: Decimal("2")}),
            shapes=MappingProxyType({Shape.STANDARD: Decimal("3")}),
        )

        total = calculator.compute_total(plain_product, make_selection(quantity=100))

        assert total == Decimal("60")

    def test_missing_table_entry_falls_back_to_one(self, plain_product):
        """Test a finish absent from an injected table counts as 1.0."""
        calculator = PriceCalculator(finishes=MappingProxyType({}), shapes=MappingProxyType({}))

        selection = make_selection(quantity=100, finish=Finish.FOIL_GOLD, shape=Shape.CUSTOM)

        assert calculator.compute_total(plain_product, selection) == Decimal("10")

    def test_module_level_compute_total(self, plain_product):
        """Test the convenience function uses the standard tables."""
        assert compute_total(plain_product, make_selection(quantity=1000)) == Decimal("80")

    def test_module_level_compute_total_with_tables(self, plain_product):
        """Test the convenience function accepts replacement tables."""
        total = compute_total(
            plain_product,
            make_selection(quantity=100, finish=Finish.MATTE),
            finishes=MappingProxyType({Finish.MATTE: Decimal("5")}),
        )

        assert total == Decimal("50")

    def test_quote_to_dict(self, calculator, plain_product):
        """Test quotes serialize decimals as strings."""
        data = calculator.quote(plain_product, make_selection(quantity=1000)).to_dict()

        assert data["display_total"] == "80.00"
        assert data["quantity"] == 1000
        assert data["quantity_discount"] == "0.8"
