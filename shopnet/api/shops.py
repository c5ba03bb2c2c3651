"""
Shop API routes for the mobile storefront.

Surface:
- GET  /v1/shop/entitlement: Resolve which screen to show next (always 200)
- GET  /v1/shop/status: Status view + "my shop" route for the caller's premium shop
- GET  /v1/shop/tiers: Shop offers
- GET  /v1/shop/tiers/{tier}: One offer
- POST /v1/shop/tiers/{tier}/select: Route for the offer's "choose" button
- POST /v1/shop/standard: Create a Standard shop
- GET  /v1/shop/support: Support contact links
"""
import logging
from typing import Any, Dict, Iterator, List, Optional

from fastapi import APIRouter, Depends
from pydantic import BaseModel

from shopnet.core.auth import get_optional_credential, get_required_credential
from shopnet.features.entitlements.service import resolve_entitlement
from shopnet.features.shops.client import ShopApiClient
from shopnet.features.shops.creation import parse_form, submit_standard_shop
from shopnet.features.shops.models import ShopEntitlement, ShopTier
from shopnet.features.shops.presentation import (
    describe_status,
    route_for_decision,
    support_links,
)
from shopnet.features.shops.tiers import (
    TierOffer,
    get_offer,
    list_offers,
    parse_tier,
    select_offer,
)

logger = logging.getLogger("shopnet")

router = APIRouter(prefix="/v1/shop", tags=["shop"])


def get_shop_client() -> Iterator[ShopApiClient]:
    """One backend client per request, closed afterwards."""
    client = ShopApiClient()
    try:
        yield client
    finally:
        client.close()


class RouteModel(BaseModel):
    pathname: str
    params: Dict[str, str] = {}


class EntitlementResponse(BaseModel):
    """Resolver decision plus the route the mobile router should push."""
    kind: str
    message: Optional[str] = None
    advisory: Optional[str] = None
    session_expired: bool = False
    route: RouteModel
    entitlement: Optional[Dict[str, Any]] = None


@router.get("/entitlement", response_model=EntitlementResponse)
def get_entitlement(
    credential: Optional[str] = Depends(get_optional_credential),
    client: ShopApiClient = Depends(get_shop_client),
):
    """
    Resolve the caller's shop entitlement.

    Never fails because of the shop backend: failures come back as
    kind=show_creation_form with an advisory.
    """
    decision = resolve_entitlement(credential, client=client)
    body = decision.to_dict()
    body["route"] = route_for_decision(decision).model_dump()
    return body


@router.get("/status")
def get_status(
    credential: str = Depends(get_required_credential),
    client: ShopApiClient = Depends(get_shop_client),
):
    """
    Status card for the caller's premium shop.

    Errors:
        401: No credential, or the backend rejected it
        502/503: Backend failure (normalized error payload)
    """
    entitlement: ShopEntitlement = client.lookup(credential, ShopTier.PREMIUM)
    view = describe_status(entitlement)
    return {
        "entitlement": entitlement.to_dict(),
        "view": view.to_dict() if view else None,
    }


@router.get("/tiers", response_model=List[TierOffer])
def get_tiers():
    return list_offers()


@router.get("/tiers/{tier}", response_model=TierOffer)
def get_tier(tier: str):
    return get_offer(parse_tier(tier))


@router.post("/tiers/{tier}/select")
def choose_tier(
    tier: str,
    credential: Optional[str] = Depends(get_optional_credential),
    client: ShopApiClient = Depends(get_shop_client),
):
    """
    Route for an offer's "choose" button.

    Logged-in callers who already own a shop get 409. If the ownership check
    itself fails, the caller is let through (the backend rejects duplicates
    at creation).
    """
    shop_tier = parse_tier(tier)
    entitlement = None
    if credential:
        decision = resolve_entitlement(credential, client=client)
        entitlement = decision.entitlement
    return {"route": select_offer(shop_tier, entitlement).model_dump()}


@router.post("/standard", status_code=201)
def create_standard_shop(
    payload: Dict[str, Any],
    credential: str = Depends(get_required_credential),
    client: ShopApiClient = Depends(get_shop_client),
):
    form = parse_form(payload)
    return submit_standard_shop(credential, form, client=client)


@router.get("/support")
def get_support(
    urgent: bool = False,
    credential: Optional[str] = Depends(get_optional_credential),
    client: ShopApiClient = Depends(get_shop_client),
):
    entitlement = None
    if credential:
        entitlement = resolve_entitlement(credential, client=client).entitlement
    return support_links(entitlement, urgent=urgent)
