"""Transaction domain service."""

from datetime import date
from typing import Optional

from releve.database.base import Database
from releve.domain.entities import Transaction as TransactionEntity
from releve.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    transaction_not_found,
)
from releve.utils.date_parser import month_range

LIST_LIMIT = 500


class TransactionService:
    """Service for reading and re-categorizing an owner's transactions."""

    def __init__(self, db: Database, user_id: str):
        """Initialize transaction service.

        Args:
            db: Database instance
            user_id: Owner of the transactions
        """
        self.db = db
        self.user_id = user_id

    def get_transaction(self, transaction_id: int) -> Optional[TransactionEntity]:
        """Get transaction by ID, None if missing or owned by someone else."""
        return self.db.get_transaction(transaction_id, self.user_id)

    def list_transactions(self, month: Optional[str] = None) -> list[TransactionEntity]:
        """List one month of transactions, newest first.

        Args:
            month: "YYYY-MM"; defaults to the current month

        Returns:
            Up to LIST_LIMIT transactions

        Raises:
            ValidationError: If month is malformed
        """
        if month is None:
            month = date.today().strftime("%Y-%m")
        try:
            start_date, end_date = month_range(month)
        except ValueError as e:
            raise ValidationError(str(e)) from e

        return self.db.list_transactions(
            self.user_id, start_date=start_date, end_date=end_date, limit=LIST_LIMIT
        )

    def update_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Set or clear a transaction's category.

        Args:
            transaction_id: Transaction ID
            category_id: Category ID, or None to clear

        Raises:
            NotFoundError: If the transaction or category is missing or owned
                by someone else
        """
        if self.db.get_transaction(transaction_id, self.user_id) is None:
            raise NotFoundError(transaction_not_found(transaction_id))

        if category_id is not None and self.db.get_category(category_id, self.user_id) is None:
            raise NotFoundError(category_not_found(category_id))

        self.db.update_transaction_category(transaction_id, category_id)
