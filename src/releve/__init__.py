"""Releve: bank statement CSV import and categorization."""

__version__ = "0.1.0"
