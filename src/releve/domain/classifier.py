"""Category classification for statement lines.

Tiers, first decision wins:
1. CSV-declared category/subcategory columns, used verbatim
2. User rules (bulk re-classification only, see RuleService.apply_rules)
3. Built-in rule tables, one for inflows and one for outflows
4. Keyword fallbacks, ending in the uncategorized sentinel

Rule tables are evaluated top to bottom against the cleaned, upper-cased
label. Order encodes precedence: savings patterns sit above the generic
transfer pattern, so "VIREMENT LIVRET A" lands in savings.
"""

import re
from dataclasses import dataclass
from decimal import Decimal
from typing import Optional, Sequence

from releve.domain.category import UNCATEGORIZED
from releve.domain.entities import Rule
from releve.utils.label_cleaner import clean_label


SOURCE_CSV = "csv"
SOURCE_USER_RULE = "user_rule"
SOURCE_BUILTIN = "builtin"
SOURCE_FALLBACK = "fallback"
SOURCE_NONE = "none"


@dataclass(frozen=True)
class Classification:
    """Category name chosen for a transaction and the tier that chose it."""

    name: str
    source: str

    @property
    def is_auto(self) -> bool:
        """True when the built-in table or a fallback picked a real category."""
        return self.source in (SOURCE_BUILTIN, SOURCE_FALLBACK)

    @property
    def is_uncategorized(self) -> bool:
        return self.source == SOURCE_NONE


def _rule(pattern: str, category: str) -> tuple[re.Pattern, str]:
    return (re.compile(pattern, re.IGNORECASE), category)


INCOME_RULES = (
    _rule(r"DASSAULT", "Revenus / Salaire"),
    _rule(r"\bSALAIRE\b", "Revenus / Salaire"),
    _rule(r"\bCAF\b", "Revenus / CAF"),
    _rule(r"\bREMBOUR", "Revenus / Remboursement"),
    _rule(r"\bDIVID", "Revenus / Dividendes"),
    _rule(r"\bVIR\s+INST\b", "Revenus / Virement instantané"),
    _rule(r"\bVIR\s+PERMANENT\b", "Revenus / Virement permanent"),
)

EXPENSE_RULES = (
    # Savings before generic transfers
    _rule(r"\bPEL\b", "Épargne / PEL"),
    _rule(r"\bLIVRET\b|\bLDDS\b|\bLEP\b|\bAV\b|\bASSURANCE\s+VIE\b", "Épargne / Placements"),
    _rule(r"\bVIR\s+SEPA\b|\bVIREMENT\b", "Virements / Transferts"),
    # Housing
    _rule(r"\bLOYER\b|\bFONCIA\b|\bNEXITY\b|\bCITYA\b|\bCDC\s+HABITAT\b", "Logement / Loyer"),
    _rule(r"\bEDF\b|\bENGIE\b|\bTOTALENERGIES\b|\bGDF\b", "Logement / Énergie"),
    _rule(r"\bVEOLIA\b|\bSUEZ\b|\bEAU\b", "Logement / Eau"),
    _rule(r"\bORANGE\b|\bSFR\b|\bFREE\b|\bBOUYGUES\b", "Abonnements / Télécom"),
    # Insurance
    _rule(r"\bASSURANCE\b|\bACCIDENTS\s+DE\s+LA\s+VIE\b|\bPREVOYANCE\b", "Assurances / Prévoyance"),
    _rule(r"\bAUTOMOBILE\b|\bAUTO\b|\bMAIF\b|\bMACIF\b|\bAXA\b|\bALLIANZ\b", "Assurances / Auto"),
    # Digital subscriptions
    _rule(r"\bSPOTIFY\b", "Abonnements / Spotify"),
    _rule(r"\bNETFLIX\b", "Abonnements / Netflix"),
    _rule(r"\bDISNEY\b", "Abonnements / Disney+"),
    _rule(r"\bAMAZON\s+PRIME\b|\bPRIME\b", "Abonnements / Amazon Prime"),
    _rule(r"\bAPPLE\b|\bCOM/BILL\b", "Abonnements / Apple"),
    _rule(r"\bMICROSOFT\b|\bMSBILL\b|\bSUBSCR\b", "Abonnements / Microsoft"),
    _rule(r"\bOPENAI\b|\bCHATGPT\b", "Abonnements / IA"),
    _rule(r"\bOVH\b|\bGITHUB\b|\bDROPBOX\b|\bNOTION\b|\bADOBE\b", "Abonnements / Services web"),
    # Transport
    _rule(r"\bIMAGINE\s+R\b|\bNAVIGO\b|\bRATP\b", "Transport / Navigo"),
    _rule(r"\bSNCF\b|\bOUIGO\b|\bTGV\b", "Transport / Train"),
    _rule(r"\bUBER\b|\bUBR\*?\b|\bBOLT\b|\bHEETCH\b|\bFREENOW\b", "Transport / VTC"),
    _rule(r"\bPARKING\b|\bINDIGO\b|\bVINCI\s+PARK\b", "Transport / Parking"),
    _rule(r"\bTOTAL\b|\bESSO\b|\bSHELL\b|\bBP\b", "Transport / Carburant"),
    # Groceries
    _rule(
        r"\bCARREFOUR\b|\bAUCHAN\b|\bLECLERC\b|\bINTERMARCHE\b|\bLIDL\b|\bALDI\b"
        r"|\bMONOPRIX\b|\bFRANPRIX\b|\bPICARD\b|\bBIOCOOP\b",
        "Courses / Supermarché",
    ),
    # Dining
    _rule(
        r"\bMCDONALD\b|\bBURGER\s+KING\b|\bKFC\b|\bSUBWAY\b|\bFIVE\s+GUYS\b"
        r"|\bSTARBUCKS\b|\bDOMINO'?S\b|\bDEL\s+ARTE\b",
        "Restaurants / Fast-food",
    ),
    _rule(r"\bSUSHI\b|\bPIZZA\b|\bHIPPOPOTAMUS\b|\bBRASSERIE\b|\bRESTAUR", "Restaurants / Sorties"),
    _rule(
        r"\bDELIVEROO\b|\bUBER\s*EATS\b|\bJUST\s*EAT\b|\bNYX\*NYXEASYMEAL\b",
        "Restaurants / Livraison",
    ),
    # Shopping
    _rule(r"\bAMAZON\b", "Shopping / Amazon"),
    _rule(r"\bFNAC\b|\bDARTY\b|\bBOULANGER\b|\bIKEA\b|\bDECATHLON\b", "Shopping / Magasins"),
    _rule(r"\bLEBONCOIN\b|\bVINTED\b", "Shopping / Occasion"),
    _rule(r"\bPAYPAL\b", "Paiements / PayPal"),
    # Health
    _rule(
        r"\bPHARM\b|\bDOCTOLIB\b|\bCLINIQUE\b|\bHOPITAL\b|\bLABORATOIRE\b|\bOPTIC\b|\bDENT",
        "Santé / Soins",
    ),
    # Taxes and fines
    _rule(r"\bDGFIP\b|\bIMPOT\b|\bTAXE\b", "Impôts / Taxes"),
    _rule(r"\bAMENDE\b|\bANTAI\b", "Impôts / Amendes"),
    # Gambling
    _rule(r"\bFDJ\b|\bPMU\b|\bWINAMAX\b|\bUNIBET\b|\bPOKERSTARS\b", "Loisirs / Jeux"),
    # Bank fees
    _rule(r"\bFRAIS\b|\bCOTIS\b|\bAGIOS\b|\bCOMMISSION\b", "Frais / Bancaires"),
    # Card terminals (SumUp, Zettle, ...)
    _rule(r"\bSUMUP\b|\bZETTLE\b|\bSQUARE\b", "Paiements / Marchands"),
    # Short "BOULOGNE-BILL ..." labels, usually micro payments
    _rule(r"\bBOULOGNE-?BILL\b", "Divers / Petites dépenses"),
)

INCOME_TRANSFER = "Revenus / Virement"
INCOME_OTHER = "Revenus / Autres"
DIRECT_DEBIT = "Abonnements / Prélèvements"
CARD_PAYMENT = "Dépenses / Carte"
CASH_WITHDRAWAL = "Cash / Retraits"


def _first_match(rules: Sequence[tuple[re.Pattern, str]], text: str) -> Optional[str]:
    for pattern, category in rules:
        if pattern.search(text):
            return category
    return None


def declared_category(category: Optional[str], subcategory: Optional[str]) -> Optional[str]:
    """Compose the category given by CSV columns ("Category / Subcategory")."""
    if category and subcategory:
        return f"{category} / {subcategory}"
    return category or subcategory or None


def guess_category(label: Optional[str], amount: Decimal) -> Classification:
    """Pick a category from the built-in tables, then keyword fallbacks.

    Args:
        label: Raw or cleaned label; it is cleaned again, which is idempotent
        amount: Signed amount; strictly positive amounts use the income table

    Returns:
        Classification, possibly the uncategorized sentinel
    """
    upper = clean_label(label).upper()

    if amount > 0:
        name = _first_match(INCOME_RULES, upper)
        if name is not None:
            return Classification(name, SOURCE_BUILTIN)
        if "VIR" in upper or "VIREMENT" in upper:
            return Classification(INCOME_TRANSFER, SOURCE_FALLBACK)
        return Classification(INCOME_OTHER, SOURCE_FALLBACK)

    name = _first_match(EXPENSE_RULES, upper)
    if name is not None:
        return Classification(name, SOURCE_BUILTIN)

    if "PRLV" in upper:
        return Classification(DIRECT_DEBIT, SOURCE_FALLBACK)
    if "PAIEMENT" in upper:
        return Classification(CARD_PAYMENT, SOURCE_FALLBACK)
    if "RETRAIT" in upper or "DAB" in upper:
        return Classification(CASH_WITHDRAWAL, SOURCE_FALLBACK)

    return Classification(UNCATEGORIZED, SOURCE_NONE)


def classify(
    label: Optional[str],
    amount: Decimal,
    category: Optional[str] = None,
    subcategory: Optional[str] = None,
) -> Classification:
    """Classify a statement line during CSV import.

    A category declared by the CSV always wins over the built-in tables.
    """
    declared = declared_category(category, subcategory)
    if declared is not None:
        return Classification(declared, SOURCE_CSV)
    return guess_category(label, amount)


def match_user_rule(rules: Sequence[Rule], raw_label: Optional[str]) -> Optional[Rule]:
    """Return the first rule whose pattern occurs in the label, ignoring case.

    Args:
        rules: Enabled rules, most recently created first
        raw_label: Label as exported by the bank
    """
    label_upper = (raw_label or "").upper()
    for rule in rules:
        if rule.pattern.upper() in label_upper:
            return rule
    return None
