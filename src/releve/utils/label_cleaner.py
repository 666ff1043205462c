"""Removal of bank boilerplate from transaction labels."""

import re


# Applied in order. Prefixes are anchored, suffix tags may appear anywhere.
_BOILERPLATE_PATTERNS = (
    re.compile(r"^PAIEMENT\s+(CB|PSC)\s+\d{4}\s+", re.IGNORECASE),
    re.compile(r"^PRLV\s+SEPA\s+", re.IGNORECASE),
    re.compile(r"^VIR\s+(SEPA\s+)?", re.IGNORECASE),
    re.compile(r"\s+CARTE\s+\d{2,4}\b", re.IGNORECASE),
    re.compile(r"\s+PAYWEB\d+\b", re.IGNORECASE),
)

_WHITESPACE_RE = re.compile(r"\s+")


def clean_label(raw: str | None) -> str:
    """Strip payment-method tags and bank markers from a label.

    Args:
        raw: Label as exported by the bank

    Returns:
        Cleaned label with single spaces, e.g.
        "PAIEMENT CB 1203 CARREFOUR PARIS CARTE 1234" -> "CARREFOUR PARIS"
    """
    s = (raw or "").strip()
    for pattern in _BOILERPLATE_PATTERNS:
        s = pattern.sub("", s)
    return _WHITESPACE_RE.sub(" ", s).strip()
