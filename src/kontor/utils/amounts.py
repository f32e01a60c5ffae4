"""Amount parsing, exact cent conversion and display formatting."""

from decimal import Decimal, InvalidOperation
import re

CENT = Decimal("0.01")


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Accepts plain and German notation:
    - "500", "123.45", "-123.45"
    - "123,45", "1.234,56", "1.234.567"
    - "1,234.56" (English thousands separator)
    - "500 €", "EUR 500", "(123,45)" (negative in parentheses)

    A single separator of either kind is read as the decimal separator.
    When both appear, the last one is the decimal separator.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if not amount_str or not amount_str.strip():
        raise ValueError("Empty amount string")

    amount_str = amount_str.strip()

    is_negative = False
    if amount_str.startswith("(") and amount_str.endswith(")"):
        is_negative = True
        amount_str = amount_str[1:-1]

    amount_str = re.sub(r"(EUR|[$€£¥\s])", "", amount_str)

    if "," in amount_str and "." in amount_str:
        if amount_str.rfind(",") > amount_str.rfind("."):
            amount_str = amount_str.replace(".", "").replace(",", ".")
        else:
            amount_str = amount_str.replace(",", "")
    elif amount_str.count(",") == 1:
        amount_str = amount_str.replace(",", ".")
    elif amount_str.count(",") > 1:
        amount_str = amount_str.replace(",", "")
    elif amount_str.count(".") > 1:
        amount_str = amount_str.replace(".", "")

    try:
        amount = Decimal(amount_str)
    except InvalidOperation:
        raise ValueError(f"Could not parse amount '{amount_str}'")
    if not amount.is_finite():
        raise ValueError(f"Could not parse amount '{amount_str}'")
    return -amount if is_negative else amount


def to_cents(amount: Decimal) -> int:
    """Convert an amount to integer cents.

    Raises:
        ValueError: If the amount has sub-cent precision
    """
    quantized = amount.quantize(CENT)
    if quantized != amount:
        raise ValueError(f"Amount {amount} has more than two decimal places")
    return int(quantized.scaleb(2))


def from_cents(cents: int) -> Decimal:
    """Convert integer cents back to a two-place Decimal."""
    return Decimal(cents).scaleb(-2)


def format_amount(amount: Decimal, currency: str | None = "€") -> str:
    """Format an amount in German notation, e.g. ``1.234,56 €``."""
    text = f"{amount.quantize(CENT):,.2f}"
    text = text.replace(",", "_").replace(".", ",").replace("_", ".")
    if currency:
        return f"{text} {currency}"
    return text
