"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class CSVParseError(ValidationError):
    """The uploaded file is not structurally readable as CSV."""


class NotFoundError(DomainError):
    """Requested domain entity does not exist or belongs to another owner."""


class ConflictError(DomainError):
    """Domain conflict, such as uniqueness violations."""


def missing_file() -> str:
    """Return message for an import call without a file."""
    return "Missing uploaded file"


def category_not_found(category_id: int) -> str:
    """Return message for missing category by ID."""
    return f"Category {category_id} not found"


def category_name_not_found(name: str) -> str:
    """Return message for missing category by name."""
    return f"Category '{name}' not found"


def duplicate_category(name: str) -> str:
    """Return message for duplicate category name."""
    return f"Category '{name}' already exists"


def rule_not_found(rule_id: int) -> str:
    """Return message for missing rule."""
    return f"Rule {rule_id} not found"


def transaction_not_found(transaction_id: int) -> str:
    """Return message for missing transaction."""
    return f"Transaction {transaction_id} not found"
