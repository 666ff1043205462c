"""Utility functions for releve."""

from releve.utils.date_parser import parse_date, month_range
from releve.utils.amount_parser import parse_amount
from releve.utils.label_cleaner import clean_label
from releve.utils.identifiers import make_transaction_id
from releve.utils.field_resolver import pick_field, amount_from_row

__all__ = [
    "parse_date",
    "month_range",
    "parse_amount",
    "clean_label",
    "make_transaction_id",
    "pick_field",
    "amount_from_row",
]
