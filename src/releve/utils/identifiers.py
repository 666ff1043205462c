"""Content-addressed transaction identifiers."""

import hashlib
from datetime import date
from decimal import Decimal
from typing import Optional


TRANSACTION_ID_LENGTH = 32


def format_amount(amount: Decimal) -> str:
    """Render an amount in its shortest plain form ("12.50" -> "12.5", "100.00" -> "100")."""
    if amount == 0:
        return "0"
    return format(amount.normalize(), "f")


def make_transaction_id(txn_date: date, amount: Decimal, balance: Optional[str] = None) -> str:
    """Derive a stable identifier from date, amount and balance.

    The label is deliberately not part of the digest, so a re-import where
    only the label changed updates the existing record.

    Args:
        txn_date: Transaction date
        amount: Signed transaction amount
        balance: Raw balance column value, if the export has one

    Returns:
        32 hex characters of a SHA-256 digest
    """
    payload = f"{txn_date.isoformat()}|{format_amount(amount)}|{balance or ''}"
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()[:TRANSACTION_ID_LENGTH]
