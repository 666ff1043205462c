"""Domain tests for CSV import service."""

from decimal import Decimal

import pytest

from releve.domain.csv_import import (
    CSVImportService,
    decode_content,
    detect_delimiter,
    parse_records,
)
from releve.domain.errors import CSVParseError, ValidationError
from releve.utils.identifiers import make_transaction_id


def _transactions(transaction_service, month="2024-03"):
    return transaction_service.list_transactions(month)


def _category_name(category_service, txn):
    if txn.category_id is None:
        return None
    return category_service.get_category(txn.category_id).name


def test_decode_content_utf8_and_bom():
    assert decode_content("\ufeffDate;Libellé".encode("utf-8")) == "Date;Libellé"


def test_decode_content_latin1_fallback():
    data = "Date;Libellé;Catégorie;Crédit".encode("latin-1")
    assert decode_content(data) == "Date;Libellé;Catégorie;Crédit"


def test_decode_content_tolerates_few_bad_bytes():
    data = "Libellé".encode("latin-1") + b";ok"
    assert decode_content(data) == "Libell\ufffd;ok"


def test_detect_delimiter():
    assert detect_delimiter("Date;Montant\n") == ";"
    assert detect_delimiter("Date,Amount\n") == ","
    assert detect_delimiter("") == ","


def test_parse_records_trims_and_skips_blank_lines():
    headers, records = parse_records(" Date ; Montant \n\n01/03/2024 ; -1,00 \n", ";")
    assert headers == ["Date", "Montant"]
    assert records == [{"Date": "01/03/2024", "Montant": "-1,00"}]


def test_parse_records_quoted_fields():
    headers, records = parse_records('Date,Label,Amount\n2024-03-01,"A, B",-1.00\n', ",")
    assert records[0]["Label"] == "A, B"


def test_parse_records_field_count_mismatch():
    with pytest.raises(CSVParseError):
        parse_records("Date;Montant\n01/03/2024;1;2\n", ";")


def test_import_statement(import_service, transaction_service, category_service, statement_bytes):
    """Rows are stored, cleaned and classified."""
    report = import_service.import_csv(statement_bytes)

    assert report.imported == 4
    assert report.updated == 0
    assert report.skipped == 0
    assert report.total_rows == 4
    assert report.delimiter == ";"
    assert report.headers == ["Date", "Libellé", "Montant", "Solde"]
    assert report.errors_sample == []

    by_label = {t.raw_label: t for t in _transactions(transaction_service)}
    card = by_label["PAIEMENT CB 0503 CARREFOUR MARKET CARTE 1234"]
    assert card.label == "CARREFOUR MARKET"
    assert card.amount == Decimal("-45.20")
    assert card.balance == "1 000,00"
    assert card.currency == "EUR"
    assert _category_name(category_service, card) == "Courses / Supermarché"

    salary = by_label["SALAIRE DASSAULT SYSTEMES"]
    assert salary.amount == Decimal("2500")
    assert _category_name(category_service, salary) == "Revenus / Salaire"

    savings = by_label["VIREMENT LIVRET A"]
    assert _category_name(category_service, savings) == "Épargne / Placements"

    assert by_label["XYZ SHOP"].category_id is None


def test_import_report_auto_categories(import_service, statement_bytes):
    report = import_service.import_csv(statement_bytes)

    assert report.auto_categorized_top == [
        ("Courses / Supermarché", 1),
        ("Revenus / Salaire", 1),
        ("Épargne / Placements", 1),
    ]


def test_import_report_to_dict(import_service, make_csv):
    report = import_service.import_csv(
        make_csv("Date;Libellé;Montant", "01/03/2024;NETFLIX;-13,49", "bad;X;1")
    )

    assert report.to_dict() == {
        "imported": 1,
        "updated": 0,
        "skipped": 1,
        "totalRows": 2,
        "headers": ["Date", "Libellé", "Montant"],
        "errorsSample": [{"row": 3, "reason": "Invalid date: bad"}],
        "delimiter": ";",
        "autoCategorizedTop": [{"name": "Abonnements / Netflix", "count": 1}],
    }


def test_reimport_is_idempotent(import_service, transaction_service, statement_bytes):
    import_service.import_csv(statement_bytes)
    report = import_service.import_csv(statement_bytes)

    assert report.imported == 0
    assert report.updated == 4
    assert len(_transactions(transaction_service)) == 4


def test_reimport_updates_label_in_place(import_service, transaction_service, make_csv):
    import_service.import_csv(make_csv("Date;Libellé;Montant;Solde", "08/03/2024;XYZ;-12,00;100,00"))
    before = _transactions(transaction_service)[0]

    report = import_service.import_csv(
        make_csv("Date;Libellé;Montant;Solde", "08/03/2024;XYZ SHOP PARIS;-12,00;100,00")
    )

    after = _transactions(transaction_service)
    assert report.updated == 1
    assert len(after) == 1
    assert after[0].id == before.id
    assert after[0].provider_tx_id == before.provider_tx_id
    assert after[0].raw_label == "XYZ SHOP PARIS"


def test_transaction_id_uses_date_amount_balance(import_service, transaction_service, statement_bytes):
    from datetime import date

    import_service.import_csv(statement_bytes)
    salary = next(
        t for t in _transactions(transaction_service) if t.raw_label == "SALAIRE DASSAULT SYSTEMES"
    )
    assert salary.provider_tx_id == make_transaction_id(
        date(2024, 3, 6), Decimal("2500"), "3 500,00"
    )


def test_identical_rows_in_one_file_collapse(import_service, transaction_service, make_csv):
    row = "01/03/2024;CAFE;-2,50"
    report = import_service.import_csv(make_csv("Date;Libellé;Montant", row, row))

    assert report.imported == 1
    assert report.updated == 1
    assert len(_transactions(transaction_service)) == 1


def test_csv_category_takes_precedence(import_service, transaction_service, category_service, make_csv):
    report = import_service.import_csv(
        make_csv(
            "Date;Libellé;Montant;Catégorie;Sous-catégorie",
            "01/03/2024;NETFLIX.COM;-13,49;Loisirs;Streaming",
        )
    )

    txn = _transactions(transaction_service)[0]
    assert _category_name(category_service, txn) == "Loisirs / Streaming"
    assert report.auto_categorized_top == []


def test_debit_credit_columns(import_service, transaction_service, make_csv):
    import_service.import_csv(
        make_csv(
            "Date,Libelle,Debit,Credit",
            "2024-03-01,LOYER FONCIA,850.00,",
            "2024-03-02,REMBOURSEMENT,,-20.00",
        )
    )

    amounts = {t.raw_label: t.amount for t in _transactions(transaction_service)}
    assert amounts["LOYER FONCIA"] == Decimal("-850")
    assert amounts["REMBOURSEMENT"] == Decimal("20")


def test_latin1_file(import_service, transaction_service, make_csv):
    data = make_csv(
        "Date;Libellé;Montant",
        "01/03/2024;CAFÉ DE LA GARE;-3,50",
        "02/03/2024;PÂTISSERIE;-4,00",
        encoding="latin-1",
    )

    report = import_service.import_csv(data)

    assert report.headers == ["Date", "Libellé", "Montant"]
    assert report.imported == 2
    labels = {t.raw_label for t in _transactions(transaction_service)}
    assert labels == {"CAFÉ DE LA GARE", "PÂTISSERIE"}


def test_bom_is_stripped(import_service, make_csv):
    report = import_service.import_csv(make_csv("\ufeffDate;Libellé;Montant", "01/03/2024;X;-1,00"))

    assert report.headers[0] == "Date"
    assert report.imported == 1


def test_iso_dates_and_comma_delimiter(import_service, transaction_service, make_csv):
    report = import_service.import_csv(
        make_csv("Date,Description,Amount", "2024-03-15T10:00:00Z,SNCF TGV,-45.00")
    )

    assert report.delimiter == ","
    txn = _transactions(transaction_service)[0]
    assert txn.date.isoformat() == "2024-03-15"


def test_unreadable_csv_stores_nothing(import_service, transaction_service, make_csv):
    data = make_csv("Date;Libellé;Montant", "01/03/2024;A;-1,00", "02/03/2024;B;-1,00;extra")

    with pytest.raises(CSVParseError):
        import_service.import_csv(data)

    assert _transactions(transaction_service) == []


def test_missing_content(import_service):
    with pytest.raises(ValidationError) as excinfo:
        import_service.import_csv(None)

    assert "Missing uploaded file" in str(excinfo.value)


def test_import_file(import_service, statement_bytes, tmp_path):
    csv_path = tmp_path / "releve.csv"
    csv_path.write_bytes(statement_bytes)

    assert import_service.import_file(str(csv_path)).imported == 4


def test_import_file_missing(import_service, tmp_path):
    with pytest.raises(FileNotFoundError):
        import_service.import_file(str(tmp_path / "absent.csv"))


def test_empty_file(import_service):
    report = import_service.import_csv(b"")

    assert report.total_rows == 0
    assert report.headers == []
    assert report.imported == 0
    assert report.delimiter == ","


def test_header_only(import_service, make_csv):
    report = import_service.import_csv(make_csv("Date;Libellé;Montant"))

    assert report.headers == ["Date", "Libellé", "Montant"]
    assert report.total_rows == 0


def test_row_errors(import_service, make_csv):
    report = import_service.import_csv(
        make_csv(
            "Date;Libellé;Montant",
            ";SANS DATE;-1,00",
            "31/02/2024;MAUVAISE DATE;-1,00",
            "01/03/2024;MAUVAIS MONTANT;abc",
            "01/03/2024;OK;-1,00",
        )
    )

    assert report.imported == 1
    assert report.skipped == 3
    assert [(e.row, e.reason) for e in report.errors_sample] == [
        (2, "missing date"),
        (3, "Invalid date: 31/02/2024"),
        (4, "Invalid amount: abc"),
    ]


def test_missing_amount_columns(import_service, make_csv):
    report = import_service.import_csv(make_csv("Date;Libellé", "01/03/2024;X"))

    assert report.skipped == 1
    assert report.errors_sample[0].reason == "amount not found (Montant or Débit/Crédit)"


def test_error_sample_is_bounded(import_service, make_csv):
    lines = ["Date;Libellé;Montant"] + ["pas une date;X;1,00"] * 50
    report = import_service.import_csv(make_csv(*lines))

    assert report.skipped == 50
    assert report.imported == 0
    assert [e.row for e in report.errors_sample] == list(range(2, 17))


def test_default_label(import_service, transaction_service, make_csv):
    import_service.import_csv(make_csv("Date;Libellé;Montant", "01/03/2024;;-5,00"))

    txn = _transactions(transaction_service)[0]
    assert txn.raw_label == "Transaction"
    assert txn.label == "Transaction"


def test_auto_categories_ordered_by_count(import_service, make_csv):
    report = import_service.import_csv(
        make_csv(
            "Date;Libellé;Montant",
            "01/03/2024;CARREFOUR;-10,00",
            "02/03/2024;SNCF;-20,00",
            "03/03/2024;SNCF;-21,00",
            "04/03/2024;NETFLIX;-13,49",
            "05/03/2024;NETFLIX;-13,50",
            "06/03/2024;NETFLIX;-13,51",
        )
    )

    assert report.auto_categorized_top == [
        ("Abonnements / Netflix", 3),
        ("Transport / Train", 2),
        ("Courses / Supermarché", 1),
    ]


def test_auto_categories_are_capped(import_service, make_csv, monkeypatch):
    monkeypatch.setattr("releve.domain.csv_import.AUTO_CATEGORY_TOP", 2)
    report = import_service.import_csv(
        make_csv(
            "Date;Libellé;Montant",
            "01/03/2024;CARREFOUR;-10,00",
            "02/03/2024;SNCF;-20,00",
            "04/03/2024;NETFLIX;-13,49",
        )
    )

    assert len(report.auto_categorized_top) == 2


def test_categories_created_once(import_service, category_service, make_csv):
    import_service.import_csv(
        make_csv(
            "Date;Libellé;Montant",
            "01/03/2024;NETFLIX;-13,49",
            "01/04/2024;NETFLIX;-13,49",
        )
    )
    import_service.import_csv(make_csv("Date;Libellé;Montant", "01/05/2024;NETFLIX;-13,49"))

    names = [c.name for c in category_service.list_categories()]
    assert names == ["Abonnements / Netflix"]


def test_imports_are_owner_scoped(temp_db, import_service, transaction_service, statement_bytes):
    from releve.domain.transaction import TransactionService

    import_service.import_csv(statement_bytes)
    report = CSVImportService(temp_db, "bob").import_csv(statement_bytes)

    assert report.imported == 4
    assert len(_transactions(transaction_service)) == 4
    assert len(TransactionService(temp_db, "bob").list_transactions("2024-03")) == 4


@pytest.mark.parametrize(
    "header,bad_row",
    [
        ("Date;Libellé;Montant", "02/03/2024;ENORME;1e1000000"),
        ("Date;Libellé;Crédit", "02/03/2024;ENORME;1e1000000"),
        ("Date;Libellé;Montant", "9999-12-31T23:00:00-05:00;LOIN;-1,00"),
    ],
)
def test_unparseable_value_skips_only_its_row(import_service, make_csv, header, bad_row):
    good_amount = "-1,00" if "Montant" in header else "1,00"
    report = import_service.import_csv(
        make_csv(header, f"01/03/2024;OK;{good_amount}", bad_row, f"03/03/2024;OK 2;{good_amount}")
    )

    assert report.imported == 2
    assert report.skipped == 1
    assert report.errors_sample[0].row == 3


def test_amount_stored_at_full_precision(import_service, transaction_service, make_csv):
    import_service.import_csv(make_csv("Date;Libellé;Montant", "01/03/2024;X;-12,345"))

    txn = _transactions(transaction_service)[0]
    assert txn.amount == Decimal("-12.345")
    assert txn.provider_tx_id == make_transaction_id(txn.date, txn.amount, None)
