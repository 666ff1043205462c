"""User rule domain service."""

import logging
from typing import Optional

from releve.database.base import Database
from releve.domain.classifier import match_user_rule
from releve.domain.entities import Rule as RuleEntity
from releve.domain.errors import (
    NotFoundError,
    ValidationError,
    category_not_found,
    rule_not_found,
)
from releve.utils.date_parser import month_range

logger = logging.getLogger(__name__)

APPLY_BATCH_SIZE = 5000


class RuleService:
    """Service for managing and applying an owner's categorization rules."""

    def __init__(self, db: Database, user_id: str):
        """Initialize rule service.

        Args:
            db: Database instance
            user_id: Owner of the rules
        """
        self.db = db
        self.user_id = user_id

    def list_rules(self) -> list[RuleEntity]:
        """List rules, most recently created first."""
        return self.db.list_rules(self.user_id)

    def create_rule(self, pattern: str, category_id: int) -> int:
        """Create an enabled rule.

        Args:
            pattern: Text to look for in transaction labels (case-insensitive)
            category_id: Category assigned on match

        Returns:
            Rule ID

        Raises:
            ValidationError: If pattern or category is missing
            NotFoundError: If the category does not belong to the owner
        """
        pattern = (pattern or "").strip()
        if not pattern or category_id is None:
            raise ValidationError("pattern and category are required")

        if self.db.get_category(category_id, self.user_id) is None:
            raise NotFoundError(category_not_found(category_id))

        return self.db.create_rule(self.user_id, pattern, category_id)

    def _get_owned_rule(self, rule_id: int) -> RuleEntity:
        rule = self.db.get_rule(rule_id, self.user_id)
        if rule is None:
            raise NotFoundError(rule_not_found(rule_id))
        return rule

    def toggle_rule(self, rule_id: int) -> bool:
        """Flip a rule between enabled and disabled.

        Returns:
            The new enabled state

        Raises:
            NotFoundError: If the rule does not exist or belongs to someone else
        """
        rule = self._get_owned_rule(rule_id)
        self.db.set_rule_enabled(rule.id, not rule.is_enabled)
        return not rule.is_enabled

    def delete_rule(self, rule_id: int) -> None:
        """Delete a rule.

        Raises:
            NotFoundError: If the rule does not exist or belongs to someone else
        """
        rule = self._get_owned_rule(rule_id)
        self.db.delete_rule(rule.id)

    def apply_rules(self, month: Optional[str] = None) -> int:
        """Categorize uncategorized transactions with the enabled rules.

        The most recently created matching rule wins. At most
        APPLY_BATCH_SIZE transactions are examined per call; call again to
        process the rest.

        Args:
            month: Optional "YYYY-MM" restricting the transactions examined

        Returns:
            Number of transactions updated

        Raises:
            ValidationError: If month is malformed
        """
        start_date = end_date = None
        if month:
            try:
                start_date, end_date = month_range(month)
            except ValueError as e:
                raise ValidationError(str(e)) from e

        rules = self.db.list_enabled_rules(self.user_id)
        if not rules:
            return 0

        transactions = self.db.find_uncategorized_transactions(
            self.user_id, start_date, end_date, limit=APPLY_BATCH_SIZE
        )

        updated = 0
        for txn in transactions:
            rule = match_user_rule(rules, txn.raw_label)
            if rule is None:
                continue
            self.db.update_transaction_category(txn.id, rule.category_id)
            updated += 1

        logger.info(
            "Applied %d rules to %d uncategorized transactions: %d updated",
            len(rules),
            len(transactions),
            updated,
        )
        return updated
