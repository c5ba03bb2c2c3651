"""
shopnet/features/shops/models.py

Shop record models shared by the resolver, the presentation helpers and the API.

ShopEntitlement is derived fresh from one backend response and never cached.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class ShopTier(str, Enum):
    """Which kind of shop the caller owns, by the endpoint that reported it."""
    NONE = "none"
    STANDARD = "standard"
    PREMIUM = "premium"
    PRO = "pro"


class ShopStatus(str, Enum):
    """Canonical shop status after normalization."""
    VALIDATED = "validated"
    PENDING_PAYMENT = "pending_payment"
    PENDING_VALIDATION = "pending_validation"
    REJECTED = "rejected"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class ShopEntitlement:
    has_shop: bool
    tier: ShopTier = ShopTier.NONE
    status: str = ""
    shop_id: Optional[int] = None
    raw_record: Dict[str, Any] = field(default_factory=dict, compare=False)

    def __post_init__(self):
        if not self.has_shop and (self.status or self.tier != ShopTier.NONE):
            raise ValueError("an entitlement without a shop carries no status and no tier")
        if self.has_shop and self.shop_id is None:
            raise ValueError("an entitlement with a shop must carry its shop_id")

    @classmethod
    def absent(cls) -> "ShopEntitlement":
        return cls(has_shop=False)

    @property
    def shop_name(self) -> str:
        return str(self.raw_record.get("nom") or "")

    @property
    def days_remaining(self) -> Optional[int]:
        value = self.raw_record.get("jours_restants")
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "has_shop": self.has_shop,
            "tier": self.tier.value,
            "status": self.status,
            "shop_id": self.shop_id,
            "record": self.raw_record,
        }


class ShopRoute(BaseModel):
    """A screen the mobile router should push, with its params."""
    model_config = ConfigDict(frozen=True)

    pathname: str
    params: Dict[str, str] = Field(default_factory=dict)
