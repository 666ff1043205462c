"""Mapper functions to convert between domain models and SQLAlchemy models."""

from releve.domain import entities as domain
from releve.database.models import (
    Account as ORMAccount,
    Category as ORMCategory,
    Transaction as ORMTransaction,
    Rule as ORMRule,
)


def account_to_domain(orm_account: ORMAccount) -> domain.Account:
    """Convert SQLAlchemy Account model to domain Account entity."""
    return domain.Account(
        id=orm_account.id,
        user_id=orm_account.user_id,
        provider_account_id=orm_account.provider_account_id,
        name=orm_account.name,
        currency=orm_account.currency,
        created_at=orm_account.created_at,
    )


def category_to_domain(orm_category: ORMCategory) -> domain.Category:
    """Convert SQLAlchemy Category model to domain Category entity."""
    return domain.Category(
        id=orm_category.id,
        user_id=orm_category.user_id,
        name=orm_category.name,
        created_at=orm_category.created_at,
    )


def transaction_to_domain(orm_transaction: ORMTransaction) -> domain.Transaction:
    """Convert SQLAlchemy Transaction model to domain Transaction entity."""
    return domain.Transaction(
        id=orm_transaction.id,
        provider_tx_id=orm_transaction.provider_tx_id,
        account_id=orm_transaction.account_id,
        date=orm_transaction.date,
        amount=orm_transaction.amount,
        currency=orm_transaction.currency,
        label=orm_transaction.label,
        raw_label=orm_transaction.raw_label,
        balance=orm_transaction.balance,
        category_id=orm_transaction.category_id,
        imported_at=orm_transaction.imported_at,
    )


def rule_to_domain(orm_rule: ORMRule) -> domain.Rule:
    """Convert SQLAlchemy Rule model to domain Rule entity."""
    return domain.Rule(
        id=orm_rule.id,
        user_id=orm_rule.user_id,
        pattern=orm_rule.pattern,
        category_id=orm_rule.category_id,
        is_enabled=orm_rule.is_enabled,
        created_at=orm_rule.created_at,
    )
