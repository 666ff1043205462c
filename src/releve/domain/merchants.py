"""Best-effort merchant names for display."""

import re
from typing import Optional

from releve.utils.label_cleaner import clean_label


UNKNOWN_MERCHANT = "Inconnu"

# Checked in order against the upper-cased raw label
KNOWN_MERCHANTS = (
    (("AMAZON",), "Amazon"),
    (("SPOTIFY",), "Spotify"),
    (("OPENAI", "CHATGPT"), "OpenAI"),
    (("APPLE", "COM/BILL"), "Apple"),
    (("MICROSOFT", "MSBILL", "SUBSCR"), "Microsoft"),
    (("PAYPAL",), "PayPal"),
    (("UBR*", "UBER"), "Uber"),
    (("BOLT",), "Bolt"),
    (("SFR",), "SFR"),
    (("ORANGE",), "Orange"),
    (("FREE",), "Free"),
    (("IMAGINE R", "NAVIGO", "RATP"), "RATP / Navigo"),
)

_CARD_PAYMENT_RE = re.compile(r"PAIEMENT\s+(?:CB|PSC)\s+\d{4}\s+(.+?)\s+CARTE", re.IGNORECASE)
_PUNCTUATION_RE = re.compile(r"[^a-zA-Z0-9'&-]+")


def title_case(text: str) -> str:
    """Title-case space separated words ("CARREFOUR CITY" -> "Carrefour City")."""
    words = [w for w in text.lower().split(" ") if w]
    return " ".join(w[0].upper() + w[1:] for w in words)


def merchant_from_label(label: Optional[str]) -> str:
    """Guess the merchant behind a transaction label.

    Well-known merchants are matched by keyword. Card payments shaped like
    "PAIEMENT CB 1203 <where> CARTE 1234" keep the last three words before
    the card marker. Anything else keeps the first three words of the
    cleaned label.
    """
    raw = label or ""
    upper = raw.upper()

    for keywords, name in KNOWN_MERCHANTS:
        if any(keyword in upper for keyword in keywords):
            return name

    m = _CARD_PAYMENT_RE.search(raw)
    if m is not None and m.group(1).strip():
        tail = " ".join(m.group(1).strip().split()[-3:])
        name = title_case(_PUNCTUATION_RE.sub(" ", tail).strip())
        if name:
            return name

    words = _PUNCTUATION_RE.sub(" ", clean_label(raw)).split()
    if not words:
        return UNKNOWN_MERCHANT
    return title_case(" ".join(words[:3]))
