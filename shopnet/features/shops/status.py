"""Shop status normalization.

The backend reports `statut` as free text, with or without French accents
("validé" / "valide", "rejeté" / "rejete"). Everything goes through one
normalization step before the table lookup.
"""

import unicodedata
from typing import Optional

from shopnet.features.shops.models import ShopStatus


STATUS_ALIASES = {
    "valide": ShopStatus.VALIDATED,
    "active": ShopStatus.VALIDATED,
    "actif": ShopStatus.VALIDATED,
    "pending_payment": ShopStatus.PENDING_PAYMENT,
    "pending_validation": ShopStatus.PENDING_VALIDATION,
    "rejete": ShopStatus.REJECTED,
    "refuse": ShopStatus.REJECTED,
}


def strip_diacritics(text: str) -> str:
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def normalize_status(raw: Optional[str]) -> str:
    """Lowercase, trim and strip accents: "Validé " -> "valide"."""
    if raw is None:
        return ""
    return strip_diacritics(str(raw)).strip().lower()


def canonical_status(raw: Optional[str]) -> ShopStatus:
    return STATUS_ALIASES.get(normalize_status(raw), ShopStatus.UNKNOWN)
