"""
Status presentation and routes for the shop screens.

Maps canonical statuses and resolver decisions to the labels and routes the
mobile client renders; no network calls here.
"""

from dataclasses import dataclass
from typing import Dict, Optional
from urllib.parse import quote

from shopnet.core.config import settings
from shopnet.features.entitlements.service import Decision, DecisionKind
from shopnet.features.shops.models import ShopEntitlement, ShopRoute, ShopStatus
from shopnet.features.shops.status import canonical_status


CREATE_SHOP_PATH = "/(tabs)/Auth/Boutique/CreerBoutique"
PAYMENT_PROOF_PATH = "/(tabs)/Auth/Boutique/Premium/PaymentProofBoutique"
PREMIUM_DASHBOARD_PATH = "/(tabs)/Auth/Boutique/Premium/BoutiquePremium"
SHOP_HOME_PATH = "/(tabs)/Auth/Boutique/Boutique"
LOGIN_PATH = "/splash"


@dataclass(frozen=True)
class StatusView:
    status: ShopStatus
    label: str
    description: str
    action_label: str
    action: Optional[ShopRoute]

    def to_dict(self) -> Dict[str, object]:
        return {
            "status": self.status.value,
            "label": self.label,
            "description": self.description,
            "action_label": self.action_label,
            "action": self.action.model_dump() if self.action else None,
        }


_LABELS = {
    ShopStatus.VALIDATED: "Validée ✓",
    ShopStatus.PENDING_PAYMENT: "Paiement en attente",
    ShopStatus.PENDING_VALIDATION: "Validation en cours",
    ShopStatus.REJECTED: "Rejetée",
    ShopStatus.UNKNOWN: "Statut inconnu",
}

_ACTION_LABELS = {
    ShopStatus.VALIDATED: "Accéder à ma boutique",
    ShopStatus.PENDING_PAYMENT: "Effectuer le paiement",
    ShopStatus.PENDING_VALIDATION: "Modifier la preuve de paiement",
    ShopStatus.REJECTED: "Soumettre une nouvelle preuve",
    ShopStatus.UNKNOWN: "Contacter le support",
}


def _shop_params(entitlement: ShopEntitlement) -> Dict[str, str]:
    params = {"boutiqueId": str(entitlement.shop_id)}
    if entitlement.shop_name:
        params["boutiqueNom"] = entitlement.shop_name
    return params


def _description(status: ShopStatus, entitlement: ShopEntitlement) -> str:
    if status == ShopStatus.VALIDATED:
        days = entitlement.days_remaining
        suffix = f" pour encore {days} jours" if days is not None else ""
        return f"Votre boutique premium est active{suffix}."
    if status == ShopStatus.PENDING_PAYMENT:
        return "Effectuez le paiement de 9.99 USD pour activer votre boutique premium."
    if status == ShopStatus.PENDING_VALIDATION:
        return "Votre preuve de paiement est en cours de validation. Vous pouvez la modifier."
    if status == ShopStatus.REJECTED:
        return "Votre preuve de paiement a été rejetée. Vous pouvez en soumettre une nouvelle."
    return "Le statut de votre boutique est inconnu. Contactez le support."


def management_route(entitlement: ShopEntitlement) -> Optional[ShopRoute]:
    """Where the "my shop" button leads for an existing shop.

    Returns None when there is no shop or the status is unknown; the caller
    offers support contact instead.
    """
    if not entitlement.has_shop:
        return None

    status = canonical_status(entitlement.status)
    params = _shop_params(entitlement)
    if status == ShopStatus.PENDING_PAYMENT:
        return ShopRoute(pathname=PAYMENT_PROOF_PATH, params=params)
    if status == ShopStatus.PENDING_VALIDATION:
        return ShopRoute(
            pathname=PAYMENT_PROOF_PATH,
            params={**params, "isModification": "true", "status": "pending_validation"},
        )
    if status == ShopStatus.VALIDATED:
        return ShopRoute(pathname=PREMIUM_DASHBOARD_PATH, params={"boutiqueId": params["boutiqueId"]})
    if status == ShopStatus.REJECTED:
        return ShopRoute(
            pathname=PAYMENT_PROOF_PATH,
            params={**params, "isModification": "true", "status": "rejeté"},
        )
    return None


def describe_status(entitlement: ShopEntitlement) -> Optional[StatusView]:
    if not entitlement.has_shop:
        return None
    status = canonical_status(entitlement.status)
    return StatusView(
        status=status,
        label=_LABELS[status],
        description=_description(status, entitlement),
        action_label=_ACTION_LABELS[status],
        action=management_route(entitlement),
    )


def route_for_decision(decision: Decision) -> ShopRoute:
    """Screen the mobile router pushes for a resolver decision."""
    entitlement = decision.entitlement
    if decision.kind == DecisionKind.SHOW_CREATION_FORM or entitlement is None:
        return ShopRoute(pathname=CREATE_SHOP_PATH)
    if decision.kind == DecisionKind.GO_TO_DASHBOARD:
        return ShopRoute(pathname=PREMIUM_DASHBOARD_PATH, params={"boutiqueId": str(entitlement.shop_id)})
    if decision.kind == DecisionKind.GO_TO_PAYMENT_STEP:
        return ShopRoute(pathname=PAYMENT_PROOF_PATH, params=_shop_params(entitlement))
    # Pending and rejected notices are shown on the shop home screen.
    return ShopRoute(
        pathname=SHOP_HOME_PATH,
        params={**_shop_params(entitlement), "notice": decision.kind.value},
    )


def support_links(entitlement: Optional[ShopEntitlement] = None, *, urgent: bool = False) -> Dict[str, str]:
    """mailto: and WhatsApp links prefilled with the shop's details."""
    subject = "URGENT - Support Boutique Premium" if urgent else "Support Boutique Premium"
    lines = ["Bonjour,", "", "J'ai besoin d'assistance pour ma boutique premium."]
    if entitlement is not None and entitlement.has_shop:
        raw_status = entitlement.raw_record.get("statut") or entitlement.status
        lines += [
            "",
            f"Boutique: {entitlement.shop_name}",
            f"ID: {entitlement.shop_id}",
            f"Statut: {raw_status}",
        ]
    lines += ["", "Merci."]
    body = "\n".join(lines)
    whatsapp_text = subject if urgent else "Bonjour, j'ai besoin d'assistance pour ma boutique premium."
    return {
        "email": f"mailto:{settings.SUPPORT_EMAIL}?subject={quote(subject)}&body={quote(body)}",
        "whatsapp": f"https://wa.me/{settings.SUPPORT_WHATSAPP}?text={quote(whatsapp_text)}",
    }
