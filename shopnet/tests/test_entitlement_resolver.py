"""
Tests for the shop entitlement resolver.
"""
import logging

import httpx
import pytest

from shopnet.features.entitlements.service import (
    Decision,
    DecisionKind,
    GENERIC_PENDING_MESSAGE,
    PENDING_VALIDATION_MESSAGE,
    VERIFY_FAILED_ADVISORY,
    decide,
    resolve_entitlement,
)
from shopnet.features.shops.client import PREMIUM_CHECK_PATH
from shopnet.features.shops.models import ShopEntitlement, ShopTier


def _shop(statut, shop_id=7, **extra):
    record = {"id": shop_id, "statut": statut, **extra}
    return (200, {"success": True, "hasBoutique": True, "boutique": record, "message": None})


@pytest.mark.parametrize("credential", [None, "", "   "])
def test_absent_credential_shows_form_without_network(credential, fake_backend, shop_client):
    decision = resolve_entitlement(credential, client=shop_client)
    assert decision == Decision.creation_form()
    assert not decision.has_advisory
    assert fake_backend.requests == []


def test_sends_single_bearer_read(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop("validé")
    resolve_entitlement("tok-123", client=shop_client)

    assert len(fake_backend.requests) == 1
    request = fake_backend.requests[0]
    assert request.method == "GET"
    assert request.headers["Authorization"] == "Bearer tok-123"


def test_no_shop_shows_creation_form(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = (200, {"success": True, "hasBoutique": False, "message": None})
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.advisory is None
    assert decision.entitlement is None


@pytest.mark.parametrize("statut", ["validé", "valide", "VALIDÉ", "Valide", "active", "ACTIF", " actif "])
def test_validated_statuses_go_to_dashboard(statut, fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop(statut)
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.GO_TO_DASHBOARD
    assert decision.entitlement.shop_id == 7
    assert decision.entitlement.tier == ShopTier.PREMIUM


def test_pending_payment_goes_to_payment_step(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop("pending_payment", shop_id=3)
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.GO_TO_PAYMENT_STEP
    assert decision.entitlement.shop_id == 3


def test_pending_validation_shows_pending_notice(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop("pending_validation")
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_PENDING_NOTICE
    assert decision.message == PENDING_VALIDATION_MESSAGE


@pytest.mark.parametrize("statut", ["rejeté", "rejete", "refusé", "refuse", "REJETÉ"])
def test_rejected_statuses_show_rejected_notice(statut, fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop(statut)
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_REJECTED_NOTICE


@pytest.mark.parametrize("statut", ["suspendu", "archived", "PENDING", "en_revue"])
def test_unknown_status_is_pending_never_an_error(statut, fake_backend, shop_client, caplog):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop(statut)
    with caplog.at_level(logging.WARNING, logger="shopnet"):
        decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_PENDING_NOTICE
    assert decision.message == GENERIC_PENDING_MESSAGE
    assert decision.advisory is None
    assert any(r.getMessage() == "shop.status.unknown" for r in caplog.records)


def test_connection_refused_fails_open_with_advisory(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = httpx.ConnectError("connection refused")
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.has_advisory
    assert decision.advisory == VERIFY_FAILED_ADVISORY
    assert decision.session_expired is False


def test_timeout_fails_open_with_advisory(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = httpx.ReadTimeout("timed out")
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.has_advisory


@pytest.mark.parametrize(
    "response",
    [
        (500, {"success": False, "message": "boom"}),
        (404, {"message": "missing"}),
        (200, "<html>maintenance</html>"),
        (200, [1, 2, 3]),
        (200, {"success": True}),
        (200, {"success": True, "hasBoutique": True}),
        (200, {"success": True, "hasBoutique": True, "boutique": {"statut": "validé"}}),
        (200, {"success": False, "hasBoutique": True, "boutique": {"id": 1, "statut": "validé"}}),
    ],
)
def test_bad_responses_fail_open(response, fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = response
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.advisory == VERIFY_FAILED_ADVISORY


def test_unauthorized_flags_session_expired(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = (401, {"message": "Token invalide"})
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.session_expired is True
    assert decision.has_advisory


def test_resolution_is_idempotent(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = _shop("pending_validation", nom="Chez Mado")
    first = resolve_entitlement("tok", client=shop_client)
    second = resolve_entitlement("tok", client=shop_client)
    assert first == second
    assert len(fake_backend.requests) == 2


def test_resolver_closes_its_own_client(monkeypatch):
    import shopnet.features.entitlements.service as service

    closed = []

    class FakeClient:
        def lookup(self, credential, tier):
            return ShopEntitlement.absent()

        def close(self):
            closed.append(True)

    monkeypatch.setattr(service, "ShopApiClient", FakeClient)
    decision = service.resolve_entitlement("tok")
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert closed == [True]


def test_decide_is_pure_table_lookup():
    entitlement = ShopEntitlement(has_shop=True, tier=ShopTier.PREMIUM, status="refuse", shop_id=1)
    assert decide(entitlement).kind == DecisionKind.SHOW_REJECTED_NOTICE
    assert decide(ShopEntitlement.absent()) == Decision.creation_form()


# End-to-end scenarios

def test_scenario_validated_shop_goes_to_dashboard(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = (
        200,
        {"success": True, "hasBoutique": True, "boutique": {"id": 7, "statut": "Validé"}},
    )
    assert resolve_entitlement("tok", client=shop_client).kind == DecisionKind.GO_TO_DASHBOARD


def test_scenario_no_shop_shows_form(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = (200, {"success": True, "hasBoutique": False})
    assert resolve_entitlement("tok", client=shop_client).kind == DecisionKind.SHOW_CREATION_FORM


def test_scenario_backend_timeout_shows_form_with_advisory(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = httpx.ConnectTimeout("timed out")
    decision = resolve_entitlement("tok", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.has_advisory


def test_scenario_pending_payment_goes_to_payment_step(fake_backend, shop_client):
    fake_backend.responses[PREMIUM_CHECK_PATH] = (
        200,
        {"success": True, "hasBoutique": True, "boutique": {"id": 3, "statut": "pending_payment"}},
    )
    assert resolve_entitlement("tok", client=shop_client).kind == DecisionKind.GO_TO_PAYMENT_STEP


def test_non_ascii_credential_fails_open(fake_backend, shop_client):
    decision = resolve_entitlement("jeton-é", client=shop_client)
    assert decision.kind == DecisionKind.SHOW_CREATION_FORM
    assert decision.advisory == VERIFY_FAILED_ADVISORY
    assert decision.session_expired is False
    assert fake_backend.requests == []
