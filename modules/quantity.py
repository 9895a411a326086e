"""
Quantity input handling for the product configurator.

The authoritative quantity used for pricing never drops below MIN_QUANTITY.
Free-text input is kept in a separate text field so the user can type
through intermediate values ("1" -> "15" -> "150") without the price
jumping around or going below the minimum.

Rules:
    - Text that parses to an integer >= 25 becomes the quantity immediately
    - Text that parses to < 25 is shown as typed but not used for pricing
    - On blur (finalize) anything below 25, or unparsable, becomes exactly 25
    - +/- step by one; minus never goes below 25
    - Presets bypass text parsing entirely
"""

from __future__ import annotations

from typing import Optional

from core.exceptions import ValidationError


MIN_QUANTITY = 25
DEFAULT_QUANTITY = 100
PRESET_QUANTITIES = (25, 50, 100, 250, 500, 1000, 2000, 5000)


def normalize(raw_text: str) -> Optional[int]:
    """
    Parse free-text quantity input.

    Args:
        raw_text: Text exactly as typed

    Returns:
        Parsed base-10 integer, or None when the text is empty or not a
        number. The value is NOT clamped here.
    """
    if raw_text is None:
        return None
    text = str(raw_text).strip()
    # int() would also accept "1_000"
    if not text.lstrip("+-").isdecimal():
        return None
    try:
        return int(text, 10)
    except ValueError:
        return None


class QuantityInput:
    """
    Quantity plus the raw text currently in the input box.

    ``quantity`` always satisfies quantity >= MIN_QUANTITY.
    ``text`` may temporarily hold anything the user typed.
    """

    def __init__(self, quantity: int = DEFAULT_QUANTITY, text: Optional[str] = None):
        if quantity < MIN_QUANTITY:
            raise ValidationError(
                f"Quantity must be at least {MIN_QUANTITY}",
                field="quantity",
                value=quantity,
            )
        self.quantity = quantity
        self.text = str(quantity) if text is None else text

    def __repr__(self) -> str:
        return f"QuantityInput(quantity={self.quantity}, text={self.text!r})"

    @property
    def is_provisional(self) -> bool:
        """Whether the input box shows something other than the quantity."""
        return self.text != str(self.quantity)

    def enter_text(self, raw_text: str) -> bool:
        """
        Record typed text and adopt it if it is a valid quantity.

        Returns:
            True if the quantity changed
        """
        self.text = "" if raw_text is None else str(raw_text)
        value = normalize(self.text)
        if value is None or value < MIN_QUANTITY:
            return False
        return self._set(value, rewrite_text=False)

    def finalize(self) -> bool:
        """
        Settle the input box when it loses focus.

        Anything unparsable or below the minimum is forced to MIN_QUANTITY.

        Returns:
            True if the quantity changed
        """
        value = normalize(self.text)
        if value is None or value < MIN_QUANTITY:
            return self._set(MIN_QUANTITY)
        return self._set(value)

    def increment(self) -> bool:
        return self._set(self.quantity + 1)

    def decrement(self) -> bool:
        if self.quantity - 1 < MIN_QUANTITY:
            return False
        return self._set(self.quantity - 1)

    def select_preset(self, preset: int) -> bool:
        """
        Jump to one of PRESET_QUANTITIES.

        Raises:
            ValidationError: If preset is not a listed preset
        """
        if preset not in PRESET_QUANTITIES:
            raise ValidationError(
                f"Unsupported preset quantity: {preset}",
                field="quantity",
                value=preset,
            )
        return self._set(preset)

    def _set(self, value: int, rewrite_text: bool = True) -> bool:
        changed = value != self.quantity
        self.quantity = value
        if rewrite_text:
            self.text = str(value)
        return changed
