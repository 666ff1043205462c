"""Shared pytest fixtures for releve tests."""

import tempfile
import os
import pytest

from releve.database.factories import create_sqlite_database
from releve.domain.category import CategoryService
from releve.domain.csv_import import CSVImportService
from releve.domain.rules import RuleService
from releve.domain.transaction import TransactionService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for tests that need it
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    # Cleanup
    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def user_id():
    """Owner used by most tests."""
    return "alice"


@pytest.fixture
def import_service(temp_db, user_id):
    """Create a CSVImportService with a temporary database."""
    return CSVImportService(temp_db, user_id)


@pytest.fixture
def category_service(temp_db, user_id):
    """Create a CategoryService with a temporary database."""
    return CategoryService(temp_db, user_id)


@pytest.fixture
def rule_service(temp_db, user_id):
    """Create a RuleService with a temporary database."""
    return RuleService(temp_db, user_id)


@pytest.fixture
def transaction_service(temp_db, user_id):
    """Create a TransactionService with a temporary database."""
    return TransactionService(temp_db, user_id)


@pytest.fixture
def make_csv():
    """Build CSV bytes from lines."""

    def _make_csv(*lines, encoding="utf-8"):
        return ("\n".join(lines) + "\n").encode(encoding)

    return _make_csv


@pytest.fixture
def statement_bytes(make_csv):
    """A small French bank export, semicolon separated."""
    return make_csv(
        "Date;Libellé;Montant;Solde",
        "05/03/2024;PAIEMENT CB 0503 CARREFOUR MARKET CARTE 1234;-45,20;1 000,00",
        "06/03/2024;SALAIRE DASSAULT SYSTEMES;2 500,00;3 500,00",
        "07/03/2024;VIREMENT LIVRET A;-200,00;3 300,00",
        "08/03/2024;XYZ SHOP;-12,00;3 288,00",
    )


@pytest.fixture
def cli_runner():
    """Create a Click CLI test runner."""
    from click.testing import CliRunner

    return CliRunner()
