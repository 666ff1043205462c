"""Domain model entities for releve.

These are pure data classes representing business concepts, independent of
database schema.
"""

from dataclasses import dataclass, field
from datetime import datetime, date
from decimal import Decimal
from typing import Optional


@dataclass(frozen=True)
class Account:
    """Bank account domain entity.

    File imports go to one synthetic account per owner, keyed by
    provider_account_id.
    """

    id: int
    user_id: str
    provider_account_id: str
    name: str
    currency: str
    created_at: datetime


@dataclass(frozen=True)
class Category:
    """Category domain entity.

    Hierarchy is carried by the name itself: "Group / Subgroup".
    """

    id: int
    user_id: str
    name: str
    created_at: datetime


@dataclass(frozen=True)
class Transaction:
    """Transaction domain entity."""

    id: int
    provider_tx_id: str
    account_id: int
    date: date
    amount: Decimal
    currency: str
    label: str
    raw_label: str
    balance: Optional[str]
    category_id: Optional[int]
    imported_at: datetime


@dataclass(frozen=True)
class Rule:
    """User-defined categorization rule: case-insensitive substring match on the raw label."""

    id: int
    user_id: str
    pattern: str
    category_id: int
    is_enabled: bool
    created_at: datetime


@dataclass(frozen=True)
class CanonicalTransaction:
    """One statement line after field resolution and value normalization."""

    date: date
    amount: Decimal
    label: str
    raw_label: str
    balance: Optional[str] = None
    category_id: Optional[int] = None


@dataclass(frozen=True)
class RowError:
    """Reason a CSV row was skipped. Row numbers count the header as row 1."""

    row: int
    reason: str


@dataclass
class ImportReport:
    """Outcome of one CSV import call."""

    imported: int = 0
    updated: int = 0
    skipped: int = 0
    total_rows: int = 0
    headers: list[str] = field(default_factory=list)
    errors_sample: list[RowError] = field(default_factory=list)
    delimiter: str = ","
    auto_categorized_top: list[tuple[str, int]] = field(default_factory=list)

    def to_dict(self) -> dict:
        """Serializable form, using the field names of the import API."""
        return {
            "imported": self.imported,
            "updated": self.updated,
            "skipped": self.skipped,
            "totalRows": self.total_rows,
            "headers": list(self.headers),
            "errorsSample": [{"row": e.row, "reason": e.reason} for e in self.errors_sample],
            "delimiter": self.delimiter,
            "autoCategorizedTop": [
                {"name": name, "count": count} for name, count in self.auto_categorized_top
            ],
        }
