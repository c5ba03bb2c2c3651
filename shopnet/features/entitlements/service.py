"""
shopnet/features/entitlements/service.py

Shop entitlement resolver.

Handles:
- Deciding which screen the caller sees next (creation form, payment step,
  pending/rejected notice, dashboard) from one read of the premium check endpoint
- Fail-open: every failure becomes "show the creation form" plus an advisory
- Structured logs only; navigation is the caller's job
"""

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Dict, Any
import logging

from shopnet.core.logging import log_event
from shopnet.features.shops.client import (
    ShopApiClient,
    ShopApiError,
    ShopSessionExpiredError,
)
from shopnet.features.shops.models import ShopEntitlement, ShopStatus, ShopTier
from shopnet.features.shops.status import canonical_status


logger = logging.getLogger(__name__)

PENDING_VALIDATION_MESSAGE = "en attente de validation"
GENERIC_PENDING_MESSAGE = "Votre boutique est en cours de traitement."
REJECTED_MESSAGE = "Votre boutique a été rejetée. Veuillez contacter le support pour plus d'informations."
VERIFY_FAILED_ADVISORY = "could not verify your shop, you may still create one"
SESSION_EXPIRED_ADVISORY = "Votre session a expiré. Veuillez vous reconnecter."


class DecisionKind(str, Enum):
    """Which screen the caller should present next."""
    SHOW_CREATION_FORM = "show_creation_form"
    GO_TO_DASHBOARD = "go_to_dashboard"
    GO_TO_PAYMENT_STEP = "go_to_payment_step"
    SHOW_PENDING_NOTICE = "show_pending_notice"
    SHOW_REJECTED_NOTICE = "show_rejected_notice"


@dataclass(frozen=True)
class Decision:
    kind: DecisionKind
    message: Optional[str] = None
    advisory: Optional[str] = None
    session_expired: bool = False
    entitlement: Optional[ShopEntitlement] = None

    @classmethod
    def creation_form(cls, advisory: Optional[str] = None, *, session_expired: bool = False) -> "Decision":
        return cls(DecisionKind.SHOW_CREATION_FORM, advisory=advisory, session_expired=session_expired)

    @classmethod
    def dashboard(cls, entitlement: ShopEntitlement) -> "Decision":
        return cls(DecisionKind.GO_TO_DASHBOARD, entitlement=entitlement)

    @classmethod
    def payment_step(cls, entitlement: ShopEntitlement) -> "Decision":
        return cls(DecisionKind.GO_TO_PAYMENT_STEP, entitlement=entitlement)

    @classmethod
    def pending_notice(cls, message: str, entitlement: Optional[ShopEntitlement] = None) -> "Decision":
        return cls(DecisionKind.SHOW_PENDING_NOTICE, message=message, entitlement=entitlement)

    @classmethod
    def rejected_notice(cls, entitlement: ShopEntitlement) -> "Decision":
        return cls(DecisionKind.SHOW_REJECTED_NOTICE, message=REJECTED_MESSAGE, entitlement=entitlement)

    @property
    def has_advisory(self) -> bool:
        return self.advisory is not None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "kind": self.kind.value,
            "message": self.message,
            "advisory": self.advisory,
            "session_expired": self.session_expired,
            "entitlement": self.entitlement.to_dict() if self.entitlement else None,
        }


def decide(entitlement: ShopEntitlement) -> Decision:
    """Dispatch on the entitlement's normalized status."""
    if not entitlement.has_shop:
        return Decision.creation_form()

    status = canonical_status(entitlement.status)
    if status == ShopStatus.VALIDATED:
        return Decision.dashboard(entitlement)
    if status == ShopStatus.PENDING_PAYMENT:
        return Decision.payment_step(entitlement)
    if status == ShopStatus.PENDING_VALIDATION:
        return Decision.pending_notice(PENDING_VALIDATION_MESSAGE, entitlement)
    if status == ShopStatus.REJECTED:
        return Decision.rejected_notice(entitlement)

    # Unrecognized statuses are shown as provisional. Logged for product review.
    logger.warning(
        "shop.status.unknown",
        extra={"shop_id": entitlement.shop_id, "shop_status": entitlement.status},
    )
    return Decision.pending_notice(GENERIC_PENDING_MESSAGE, entitlement)


def resolve_entitlement(credential: Optional[str], client: Optional[ShopApiClient] = None) -> Decision:
    """Decide what the caller sees next on the shop screen.

    Args:
        credential: Bearer token, or None/empty for an anonymous caller.
        client: Optional ShopApiClient (tests inject one backed by MockTransport).

    Returns:
        A Decision. Never raises for backend failures: those fail open to
        the creation form with an advisory.
    """
    token = (credential or "").strip()
    if not token:
        # Login is enforced when the creation form is submitted, not here.
        return Decision.creation_form()

    owns_client = client is None
    api = client or ShopApiClient()
    try:
        entitlement = api.lookup(token, ShopTier.PREMIUM)
    except ShopSessionExpiredError as exc:
        log_event("warning", "shop.check.session_expired", event_type="shop.check", error_code=exc.code)
        return Decision.creation_form(SESSION_EXPIRED_ADVISORY, session_expired=True)
    except ShopApiError as exc:
        log_event(
            "warning",
            "shop.check.failed",
            event_type="shop.check",
            error_code=exc.code,
            extra={"error_message": exc.message},
        )
        return Decision.creation_form(VERIFY_FAILED_ADVISORY)
    finally:
        if owns_client:
            api.close()

    decision = decide(entitlement)
    log_event(
        "info",
        "shop.check.resolved",
        shop_id=entitlement.shop_id,
        event_type="shop.check",
        extra={"decision": decision.kind.value, "shop_status": entitlement.status},
    )
    return decision
