"""Amount parsing utilities."""

from decimal import Decimal, DecimalException
import re


_NUMBER_RE = re.compile(r"^[+-]?(?:\d+\.?\d*|\.\d+)$")

# Must fit the transactions.amount column exactly
MAX_INTEGER_DIGITS = 9
MAX_DECIMAL_PLACES = 6


def parse_amount(amount_str: str) -> Decimal:
    """Parse an amount string into a Decimal.

    Bank exports use the French notation, so the first comma is the decimal
    separator and whitespace (including non-breaking spaces) may group
    thousands:
    - "1 234,56" -> 1234.56
    - "-12,3" -> -12.3
    - "42.10" -> 42.10
    - "12,50 €" -> 12.50

    The sign is kept as given. Exponent notation is not accepted.

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed, or has more than
            MAX_INTEGER_DIGITS integer digits or MAX_DECIMAL_PLACES decimals
    """
    if amount_str is None:
        raise ValueError("Invalid amount: empty value")

    cleaned = re.sub(r"\s", "", str(amount_str))

    # Remove currency symbols
    cleaned = re.sub(r"[€$£]", "", cleaned)

    cleaned = cleaned.replace(",", ".", 1)

    if not _NUMBER_RE.match(cleaned):
        raise ValueError(f"Invalid amount: {amount_str}")

    try:
        amount = Decimal(cleaned)
    except DecimalException as e:
        raise ValueError(f"Invalid amount: {amount_str}") from e

    if amount and amount.adjusted() >= MAX_INTEGER_DIGITS:
        raise ValueError(f"Invalid amount: {amount_str} (out of range)")
    if -amount.as_tuple().exponent > MAX_DECIMAL_PLACES:
        raise ValueError(f"Invalid amount: {amount_str} (too many decimals)")

    return amount
