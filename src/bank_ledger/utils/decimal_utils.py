"""Helpers for Decimal normalization."""

from decimal import Decimal, InvalidOperation

CENT = Decimal("0.01")


def coerce_decimal(value) -> Decimal:
    """Normalize numeric values to Decimal.

    Args:
        value: Raw numeric value from SQL or adapters.

    Returns:
        Decimal: Normalized numeric value.
    """
    if value is None:
        return Decimal("0")
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def parse_amount(value) -> Decimal | None:
    """Parse a caller-supplied money amount.

    Args:
        value: Amount as Decimal, int, float, or numeric string.

    Returns:
        Decimal | None: Amount quantized to cents, or None when the value is
        not a finite number with at most two decimal places.
    """
    if isinstance(value, bool) or value is None:
        return None
    try:
        amount = coerce_decimal(value.strip() if isinstance(value, str) else value)
        if not amount.is_finite():
            return None
        quantized = amount.quantize(CENT)
    except (InvalidOperation, ValueError):
        return None
    if quantized != amount:
        return None
    return quantized


def to_cents(amount: Decimal) -> int:
    """Convert a cents-precision amount to an integer number of cents."""
    return int(amount.quantize(CENT) * 100)


def from_cents(cents) -> Decimal:
    """Convert an integer number of cents back to a Decimal amount."""
    return (Decimal(int(cents)) / 100).quantize(CENT)


def format_money(amount: Decimal) -> str:
    """Render an amount the way console output shows it, e.g. ``$1000.00``."""
    return f"${amount.quantize(CENT):.2f}"


__all__ = [
    "CENT",
    "coerce_decimal",
    "parse_amount",
    "to_cents",
    "from_cents",
    "format_money",
]
