"""Static finish and shape catalogs with their price multipliers."""

from __future__ import annotations

from decimal import Decimal
from enum import Enum
from types import MappingProxyType
from typing import Mapping, Union

from core.exceptions import ValidationError


class _CatalogEnum(Enum):
    """Enum whose members can be parsed from their value, name or compact name."""

    @classmethod
    def parse(cls, value: Union[str, "_CatalogEnum"]):
        """
        Resolve user/form input to a member.

        Accepts the member itself, its display value ("Foil Gold"), its name
        ("FOIL_GOLD") or the compact form ("FoilGold"), case-insensitively.

        Raises:
            ValidationError: If nothing matches
        """
        if isinstance(value, cls):
            return value
        key = _compact(str(value))
        for member in cls:
            if key in (_compact(member.value), _compact(member.name)):
                return member
        raise ValidationError(
            f"Unknown {cls.__name__.lower()}: {value}",
            field=cls.__name__.lower(),
            value=value,
        )


def _compact(text: str) -> str:
    return "".join(ch for ch in text.lower() if ch.isalnum())


class Finish(_CatalogEnum):
    """Surface treatment applied to the printed product."""

    GLOSSY = "Glossy"
    MATTE = "Matte"
    VELVET = "Velvet"
    FOIL_GOLD = "Foil Gold"
    FOIL_SILVER = "Foil Silver"
    SPOT_UV = "Spot UV"
    PLASTIC = "Plastic"
    KRAFT = "Kraft"

    @property
    def label(self) -> str:
        return self.value


class Shape(_CatalogEnum):
    """Physical cut of the product."""

    STANDARD = "Standard"
    SQUARE = "Square"
    ROUND = "Round"
    CUSTOM = "Custom"

    @property
    def label(self) -> str:
        return SHAPE_LABELS[self]


# Price multipliers applied to the whole order. Read-only views so nothing
# at runtime can change a price table.
FINISH_TABLE: Mapping[Finish, Decimal] = MappingProxyType({
    Finish.GLOSSY: Decimal("1.0"),
    Finish.MATTE: Decimal("1.1"),
    Finish.VELVET: Decimal("1.3"),
    Finish.FOIL_GOLD: Decimal("1.5"),
    Finish.FOIL_SILVER: Decimal("1.5"),
    Finish.SPOT_UV: Decimal("1.4"),
    Finish.PLASTIC: Decimal("2.0"),
    Finish.KRAFT: Decimal("1.2"),
})

SHAPE_TABLE: Mapping[Shape, Decimal] = MappingProxyType({
    Shape.STANDARD: Decimal("1.0"),
    Shape.SQUARE: Decimal("1.1"),
    Shape.ROUND: Decimal("1.2"),
    Shape.CUSTOM: Decimal("1.4"),
})

SHAPE_LABELS: Mapping[Shape, str] = MappingProxyType({
    Shape.STANDARD: 'Standard (3.5" x 2")',
    Shape.SQUARE: 'Square (2.5" x 2.5")',
    Shape.ROUND: "Round",
    Shape.CUSTOM: "Custom Shape",
})

DEFAULT_FINISH = Finish.GLOSSY
DEFAULT_SHAPE = Shape.STANDARD


def finish_choices() -> list[dict]:
    """Finish buttons for the configurator, in display order."""
    return [
        {"id": finish.name, "label": finish.label, "multiplier": str(FINISH_TABLE[finish])}
        for finish in Finish
    ]


def shape_choices() -> list[dict]:
    """Shape buttons for the configurator, in display order."""
    return [
        {"id": shape.name, "label": shape.label, "multiplier": str(SHAPE_TABLE[shape])}
        for shape in Shape
    ]
