"""
shopnet/features/shops/tiers.py

Shop offers shown on the creation screen (Standard, Premium, Pro VIP).

Only Standard can be created in-app today; Premium and Pro lead to the
"update required" screen until the paid flows ship in the mobile client.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field

from shopnet.core.errors import ConflictError, NotFoundError
from shopnet.features.shops.models import ShopEntitlement, ShopRoute, ShopTier


STANDARD_FORM_PATH = "/(tabs)/Auth/Boutique/FormulaireStandard"
UPDATE_REQUIRED_PATH = "/MisAjour"


class TierOffer(BaseModel):
    model_config = ConfigDict(frozen=True)

    tier: ShopTier
    title: str
    description: str
    price_label: str
    monthly_price_usd: float
    max_products: Optional[int] = Field(None, description="None means unlimited")
    features: List[str] = Field(default_factory=list)
    limitations: List[str] = Field(default_factory=list)
    available: bool = False


TIER_OFFERS: Dict[ShopTier, TierOffer] = {
    ShopTier.STANDARD: TierOffer(
        tier=ShopTier.STANDARD,
        title="Standard",
        description="Parfait pour commencer à vendre en ligne",
        price_label="Gratuit / $0",
        monthly_price_usd=0.0,
        max_products=50,
        features=[
            "Publier et gérer jusqu'à 50 produits",
            "Gérer les commandes (confirmation, expédition)",
            "Voir les avis clients sur ses produits",
            "Gestion simple du profil vendeur",
            "Support de base par email",
        ],
        limitations=[
            "Pas de statistiques détaillées",
            "Pas d'historique complet des ventes",
            "Pas de mise en avant des produits",
        ],
        available=True,
    ),
    ShopTier.PREMIUM: TierOffer(
        tier=ShopTier.PREMIUM,
        title="Premium",
        description="Solution avancée pour développer votre business",
        price_label="$9.99/mois",
        monthly_price_usd=9.99,
        max_products=200,
        features=[
            "Toutes les fonctionnalités Standard",
            "Modifier photo de profil et couverture",
            "Statistiques détaillées (ventes, vues, produits populaires)",
            "Historique complet des commandes et retours",
            "Gestion des avis clients et réponses",
            "Jusqu'à 200 produits",
        ],
        limitations=[
            "Pas de promotions avancées",
            "Pas de recommandations IA",
        ],
    ),
    ShopTier.PRO: TierOffer(
        tier=ShopTier.PRO,
        title="Pro VIP",
        description="Solution complète avec marketing et IA",
        price_label="$24.99/mois",
        monthly_price_usd=24.99,
        max_products=None,
        features=[
            "Toutes les fonctionnalités Premium",
            "Mise en avant des produits (top listing)",
            "Gestion de promotions, remises et coupons",
            "Recommandations IA pour les clients",
            "Rapports avancés (ventes, clients, tendances)",
            "Produits illimités",
            "Support prioritaire 24/7",
        ],
    ),
}


def list_offers() -> List[TierOffer]:
    return list(TIER_OFFERS.values())


def parse_tier(value: str) -> ShopTier:
    try:
        return ShopTier(value.strip().lower())
    except ValueError as exc:
        raise NotFoundError(f"Unknown shop tier '{value}'") from exc


def get_offer(tier: ShopTier) -> TierOffer:
    offer = TIER_OFFERS.get(tier)
    if offer is None:
        raise NotFoundError(f"No offer for shop tier '{tier.value}'")
    return offer


def route_for_offer(tier: ShopTier) -> ShopRoute:
    offer = get_offer(tier)
    if offer.available:
        return ShopRoute(pathname=STANDARD_FORM_PATH)
    return ShopRoute(pathname=UPDATE_REQUIRED_PATH, params={"tier": tier.value})


def select_offer(tier: ShopTier, entitlement: Optional[ShopEntitlement] = None) -> ShopRoute:
    """Route for the "choose" button, refusing callers who already own a shop."""
    if entitlement is not None and entitlement.has_shop:
        raise ConflictError("Vous avez déjà une boutique.", code="shop_exists")
    return route_for_offer(tier)
