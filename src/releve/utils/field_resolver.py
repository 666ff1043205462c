"""Lookup of logical fields in rows whose column names are not known upfront.

Bank exports spell the same header many ways ("Date d'opération",
"DATE OPERATION", "Libellé", "Libelle", ...). Lookups try the aliases
verbatim first, then compare lower-cased, accent-free, alphanumeric-only
versions of both the aliases and the row keys.
"""

import re
import unicodedata
from decimal import Decimal
from typing import Mapping, Optional, Sequence

from releve.utils.amount_parser import parse_amount


DATE_COLUMNS = (
    "Date",
    "Date d'analyse",
    "Date de valeur",
    "Date operation",
    "Date d'operation",
    "Date d’opération",
)
LABEL_COLUMNS = ("Libellé", "Libelle", "Libell", "Description", "Motif")
BALANCE_COLUMNS = ("Solde", "Balance")
CATEGORY_COLUMNS = ("Catégorie", "Categorie", "Category")
SUBCATEGORY_COLUMNS = ("Sous-catégorie", "Sous-categorie", "Subcategory")
AMOUNT_COLUMNS = ("Montant", "Amount", "Valeur", "Value")
DEBIT_COLUMNS = ("Débit", "Debit", "DEBIT")
CREDIT_COLUMNS = ("Crédit", "Credit", "CREDIT")

_NON_ALNUM_RE = re.compile(r"[^a-z0-9]+")


def normalize_key(key: str | None) -> str:
    """Normalize a column name for fuzzy comparison ("Date d'opération" -> "datedoperation")."""
    s = unicodedata.normalize("NFD", (key or "").strip().lower())
    s = "".join(ch for ch in s if not unicodedata.combining(ch))
    return _NON_ALNUM_RE.sub("", s)


def _has_value(value: object) -> bool:
    return value is not None and str(value).strip() != ""


def pick_field(row: Mapping[str, str], candidates: Sequence[str]) -> Optional[str]:
    """Return the first non-empty value among candidate columns.

    Args:
        row: Column name -> raw value
        candidates: Column aliases, in preference order

    Returns:
        The raw value, or None if no candidate column holds a value
    """
    for name in candidates:
        value = row.get(name)
        if _has_value(value):
            return str(value)

    real_keys = {normalize_key(key): key for key in row.keys()}
    for name in candidates:
        real = real_keys.get(normalize_key(name))
        if real is not None and _has_value(row[real]):
            return str(row[real])

    return None


def amount_from_row(row: Mapping[str, str]) -> Optional[Decimal]:
    """Resolve the signed amount of a row.

    An amount column is used as-is. Otherwise a credit column gives a
    positive amount and a debit column a negative one, whatever sign the
    bank wrote.

    Returns:
        Signed amount, or None if the row has no amount-bearing column

    Raises:
        ValueError: If the amount-bearing value cannot be parsed
    """
    amount = pick_field(row, AMOUNT_COLUMNS)
    if amount is not None:
        return parse_amount(amount)

    debit = pick_field(row, DEBIT_COLUMNS)
    credit = pick_field(row, CREDIT_COLUMNS)

    if credit is not None:
        return abs(parse_amount(credit))
    if debit is not None:
        return -abs(parse_amount(debit))

    return None
