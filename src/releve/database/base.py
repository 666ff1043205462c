"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Optional
from datetime import date

# Import entities directly to avoid circular import through domain/__init__.py
from releve.domain.entities import (
    Account,
    Category,
    Transaction,
    Rule,
    CanonicalTransaction,
)


IMPORT_ACCOUNT_NAME = "Compte CSV"
DEFAULT_CURRENCY = "EUR"


def import_account_key(user_id: str) -> str:
    """Return the provider account ID of the owner's file-import account."""
    return f"csv_{user_id}"


class Database(ABC):
    """Abstract database interface for releve.

    Everything is scoped by owner: lookups that take a user_id return None
    for records owned by somebody else.
    """

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Account operations
    @abstractmethod
    def get_or_create_import_account(self, user_id: str) -> Account:
        """Get the owner's synthetic file-import account, creating it on first use."""
        pass

    # Category operations
    @abstractmethod
    def create_category(self, user_id: str, name: str) -> int:
        """Create a category. Returns category ID.

        Raises ConflictError if the owner already has a category with this name.
        """
        pass

    @abstractmethod
    def get_category(self, category_id: int, user_id: str) -> Optional[Category]:
        """Get an owner's category by ID."""
        pass

    @abstractmethod
    def find_category_by_name(self, user_id: str, name: str) -> Optional[Category]:
        """Get an owner's category by exact (normalized) name."""
        pass

    @abstractmethod
    def list_categories(self, user_id: str) -> list[Category]:
        """List an owner's categories ordered by name."""
        pass

    # Transaction operations
    @abstractmethod
    def transaction_exists(self, account_id: int, provider_tx_id: str) -> bool:
        """Check if a transaction with given provider_tx_id exists for account."""
        pass

    @abstractmethod
    def upsert_transaction(
        self, account_id: int, provider_tx_id: str, txn: CanonicalTransaction
    ) -> int:
        """Create or replace the transaction keyed by (account_id, provider_tx_id).

        Returns transaction ID.
        """
        pass

    @abstractmethod
    def get_transaction(self, transaction_id: int, user_id: str) -> Optional[Transaction]:
        """Get an owner's transaction by ID."""
        pass

    @abstractmethod
    def list_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: Optional[int] = None,
    ) -> list[Transaction]:
        """List an owner's transactions, newest first.

        Args:
            user_id: Owner
            start_date: Optional inclusive start date filter
            end_date: Optional exclusive end date filter
            limit: Optional maximum number of transactions
        """
        pass

    @abstractmethod
    def find_uncategorized_transactions(
        self,
        user_id: str,
        start_date: Optional[date] = None,
        end_date: Optional[date] = None,
        limit: int = 5000,
    ) -> list[Transaction]:
        """List an owner's transactions without a category (end date exclusive)."""
        pass

    @abstractmethod
    def update_transaction_category(self, transaction_id: int, category_id: Optional[int]) -> None:
        """Update transaction category."""
        pass

    # Rule operations
    @abstractmethod
    def create_rule(self, user_id: str, pattern: str, category_id: int) -> int:
        """Create an enabled rule. Returns rule ID."""
        pass

    @abstractmethod
    def get_rule(self, rule_id: int, user_id: str) -> Optional[Rule]:
        """Get an owner's rule by ID."""
        pass

    @abstractmethod
    def list_rules(self, user_id: str) -> list[Rule]:
        """List an owner's rules, most recently created first."""
        pass

    @abstractmethod
    def list_enabled_rules(self, user_id: str) -> list[Rule]:
        """List an owner's enabled rules, most recently created first."""
        pass

    @abstractmethod
    def set_rule_enabled(self, rule_id: int, is_enabled: bool) -> None:
        """Enable or disable a rule."""
        pass

    @abstractmethod
    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule."""
        pass
