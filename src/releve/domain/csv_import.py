"""CSV import domain service."""

import csv
import dataclasses
import io
import logging
from collections import Counter
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Union

from releve.database.base import Database
from releve.domain.category import CategoryRegistry, UNCATEGORIZED, normalize_category_name
from releve.domain.classifier import Classification, classify
from releve.domain.entities import CanonicalTransaction, ImportReport, RowError
from releve.domain.errors import CSVParseError, ValidationError, missing_file
from releve.utils.date_parser import parse_date
from releve.utils.field_resolver import (
    BALANCE_COLUMNS,
    CATEGORY_COLUMNS,
    DATE_COLUMNS,
    LABEL_COLUMNS,
    SUBCATEGORY_COLUMNS,
    amount_from_row,
    pick_field,
)
from releve.utils.identifiers import make_transaction_id
from releve.utils.label_cleaner import clean_label

logger = logging.getLogger(__name__)

ERROR_SAMPLE_LIMIT = 15
AUTO_CATEGORY_TOP = 20
# More replacement characters than this means the file is not UTF-8
MAX_REPLACEMENT_CHARS = 2
DEFAULT_LABEL = "Transaction"


def decode_content(data: bytes) -> str:
    """Decode an uploaded file, falling back to Latin-1 for legacy exports."""
    content = data.decode("utf-8", errors="replace")
    bad = content.count("\ufffd")
    if bad > MAX_REPLACEMENT_CHARS:
        logger.info("Found %d undecodable characters, decoding as Latin-1", bad)
        content = data.decode("latin-1")
    return content.removeprefix("\ufeff")


def detect_delimiter(content: str) -> str:
    """Semicolon if the file contains any, comma otherwise."""
    return ";" if ";" in content else ","


def parse_records(content: str, delimiter: str) -> tuple[list[str], list[dict[str, str]]]:
    """Split CSV content into a header row and one dict per data row.

    Values and headers are stripped and blank lines are skipped.

    Returns:
        Tuple of (headers, records)

    Raises:
        CSVParseError: On bad quoting or a row whose field count differs
            from the header's
    """
    reader = csv.reader(io.StringIO(content, newline=""), delimiter=delimiter, strict=True)
    try:
        rows = [row for row in reader if row and not (len(row) == 1 and not row[0].strip())]
    except csv.Error as e:
        raise CSVParseError(f"Unreadable CSV: {e}") from e

    if not rows:
        return [], []

    headers = [h.strip() for h in rows[0]]
    records = []
    for row_num, row in enumerate(rows[1:], start=2):
        if len(row) != len(headers):
            raise CSVParseError(
                f"Unreadable CSV: row {row_num} has {len(row)} fields, expected {len(headers)}"
            )
        records.append(dict(zip(headers, (value.strip() for value in row))))
    return headers, records


@dataclass(frozen=True)
class ResolvedRow:
    """A row that passed field resolution and normalization."""

    transaction: CanonicalTransaction
    classification: Classification


class CSVImportService:
    """Service for importing bank statement CSV files."""

    def __init__(self, db: Database, user_id: str):
        """Initialize CSV import service.

        Args:
            db: Database instance
            user_id: Owner of the imported transactions
        """
        self.db = db
        self.user_id = user_id

    def import_file(self, csv_file_path: str) -> ImportReport:
        """Import transactions from a CSV file on disk.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            CSVParseError: If the file is not readable as CSV
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")
        return self.import_csv(csv_path.read_bytes())

    def import_csv(self, data: Optional[bytes]) -> ImportReport:
        """Import transactions from uploaded CSV content.

        Rows are processed in order. A row that cannot be resolved is
        skipped and its reason kept in the report; it never aborts the
        import. Rows whose (date, amount, balance) already exist update the
        stored transaction instead of creating a new one.

        Args:
            data: Raw file content in any encoding handled by decode_content

        Returns:
            ImportReport for this call

        Raises:
            ValidationError: If no file content was given
            CSVParseError: If the content is not structurally valid CSV
        """
        if data is None:
            raise ValidationError(missing_file())

        content = decode_content(data)
        delimiter = detect_delimiter(content)
        headers, records = parse_records(content, delimiter)
        logger.info(
            "Importing %d rows for %s (delimiter %r)", len(records), self.user_id, delimiter
        )

        account = self.db.get_or_create_import_account(self.user_id)
        registry = CategoryRegistry(self.db, self.user_id)
        report = ImportReport(total_rows=len(records), headers=headers, delimiter=delimiter)
        auto_counts: Counter[str] = Counter()

        for row_num, record in enumerate(records, start=2):  # header is row 1
            resolved = self._resolve_row(row_num, record)
            if isinstance(resolved, RowError):
                report.skipped += 1
                if len(report.errors_sample) < ERROR_SAMPLE_LIMIT:
                    report.errors_sample.append(resolved)
                logger.debug("Skipped row %d: %s", resolved.row, resolved.reason)
                continue

            category_name = normalize_category_name(resolved.classification.name)
            category_id = None
            if category_name and category_name != UNCATEGORIZED:
                category_id = registry.resolve(category_name)
                if resolved.classification.is_auto:
                    auto_counts[category_name] += 1

            txn = dataclasses.replace(resolved.transaction, category_id=category_id)
            provider_tx_id = make_transaction_id(txn.date, txn.amount, txn.balance)

            existed = self.db.transaction_exists(account.id, provider_tx_id)
            self.db.upsert_transaction(account.id, provider_tx_id, txn)
            if existed:
                report.updated += 1
            else:
                report.imported += 1

        report.auto_categorized_top = auto_counts.most_common(AUTO_CATEGORY_TOP)
        logger.info(
            "Import finished for %s: %d imported, %d updated, %d skipped",
            self.user_id,
            report.imported,
            report.updated,
            report.skipped,
        )
        return report

    def _resolve_row(self, row_num: int, record: Mapping[str, str]) -> Union[ResolvedRow, RowError]:
        """Resolve and normalize one record, or say why it must be skipped."""
        date_raw = pick_field(record, DATE_COLUMNS)
        if date_raw is None:
            return RowError(row_num, "missing date")

        try:
            txn_date = parse_date(date_raw)
            amount = amount_from_row(record)
        except ValueError as e:
            return RowError(row_num, str(e))

        if amount is None:
            return RowError(row_num, "amount not found (Montant or Débit/Crédit)")

        raw_label = pick_field(record, LABEL_COLUMNS) or DEFAULT_LABEL
        transaction = CanonicalTransaction(
            date=txn_date,
            amount=amount,
            label=clean_label(raw_label) or raw_label,
            raw_label=raw_label,
            balance=pick_field(record, BALANCE_COLUMNS),
        )
        classification = classify(
            raw_label,
            amount,
            category=pick_field(record, CATEGORY_COLUMNS),
            subcategory=pick_field(record, SUBCATEGORY_COLUMNS),
        )
        return ResolvedRow(transaction, classification)
