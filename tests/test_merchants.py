"""Tests for merchant extraction."""

from releve.domain.merchants import UNKNOWN_MERCHANT, merchant_from_label, title_case


def test_known_merchants():
    assert merchant_from_label("CB AMAZON EU SARL") == "Amazon"
    assert merchant_from_label("PRLV SEPA FREE MOBILE") == "Free"
    assert merchant_from_label("UBR* PENDING.UBER.COM") == "Uber"
    assert merchant_from_label("IMAGINE R") == "RATP / Navigo"


def test_card_payment_shape():
    label = "PAIEMENT CB 1203 LE PETIT CAFE PARIS 15 CARTE 1234"
    assert merchant_from_label(label) == "Cafe Paris 15"


def test_first_words_of_cleaned_label():
    assert merchant_from_label("VIR SEPA JEAN DUPONT LOYER MARS") == "Jean Dupont Loyer"
    assert merchant_from_label("boulangerie") == "Boulangerie"


def test_unknown():
    assert merchant_from_label("") == UNKNOWN_MERCHANT
    assert merchant_from_label(None) == UNKNOWN_MERCHANT
    assert merchant_from_label("***") == UNKNOWN_MERCHANT


def test_title_case():
    assert title_case("CARREFOUR  CITY") == "Carrefour City"


def test_card_payment_without_usable_words_falls_back():
    assert merchant_from_label("PAIEMENT CB 1203 *** CARTE 1234") == UNKNOWN_MERCHANT
    assert merchant_from_label("PAIEMENT CB 1203 ** GARAGE CARTE 1234") == "Garage"
