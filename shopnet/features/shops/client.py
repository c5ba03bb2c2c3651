"""
shopnet/features/shops/client.py

httpx client for the remote e-commerce backend's shop endpoints.

Handles:
- Bearer credential on every call
- Fixed timeout (SHOP_API_TIMEOUT_SECONDS), expiry is a transport failure
- Typed errors: transport / session expired / upstream status / unexpected shape
- Parsing of the check responses into ShopEntitlement
"""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from shopnet.core.config import settings
from shopnet.core.errors import (
    AppError,
    AuthRequiredError,
    UpstreamError,
    UpstreamUnavailableError,
)
from shopnet.features.shops.models import ShopEntitlement, ShopTier
from shopnet.features.shops.status import normalize_status


logger = logging.getLogger(__name__)

PREMIUM_CHECK_PATH = "/boutique/premium/check"
STANDARD_CHECK_PATH = "/boutiques/check"
STANDARD_CREATE_PATH = "/boutiques/create"

CHECK_PATHS = {
    ShopTier.PREMIUM: PREMIUM_CHECK_PATH,
    ShopTier.STANDARD: STANDARD_CHECK_PATH,
}


class ShopApiError(AppError):
    """Base class for failures talking to the shop backend."""
    code = "shop_api_error"
    status_code = 502


class ShopTransportError(ShopApiError, UpstreamUnavailableError):
    """The request could not complete (DNS, connection, timeout)."""
    code = "shop_unreachable"
    status_code = 503


class ShopSessionExpiredError(ShopApiError, AuthRequiredError):
    """The backend rejected the credential (HTTP 401)."""
    code = "session_expired"
    status_code = 401


class ShopCredentialError(ShopApiError, AuthRequiredError):
    """The credential cannot be sent as an HTTP header (non-ASCII)."""
    code = "invalid_credential"
    status_code = 401


class ShopUpstreamError(ShopApiError, UpstreamError):
    """The backend answered with a non-2xx status."""
    code = "shop_upstream_error"
    status_code = 502

    def __init__(self, message: str, *, upstream_status: Optional[int] = None, body: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.upstream_status = upstream_status
        self.body = body or {}


class ShopUnexpectedShapeError(ShopApiError, UpstreamError):
    """A 2xx response whose body does not match the expected schema."""
    code = "shop_unexpected_shape"
    status_code = 502


def _decode_json(response: httpx.Response) -> Any:
    try:
        return response.json()
    except ValueError:
        return None


def _coerce_shop_id(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().isdigit():
        return int(value.strip())
    return None


def parse_entitlement(body: Any, tier: ShopTier = ShopTier.PREMIUM) -> ShopEntitlement:
    """Build a ShopEntitlement from a check response body.

    Expected shapes:
        {"success": true, "hasBoutique": true, "boutique": {"id": 7, "statut": "validé", ...}}
        {"success": true, "hasBoutique": false}

    Raises:
        ShopUnexpectedShapeError: for anything else.
    """
    if not isinstance(body, dict):
        raise ShopUnexpectedShapeError("shop check response is not a JSON object")
    if body.get("success") is False:
        raise ShopUnexpectedShapeError(str(body.get("message") or "shop check reported success=false"))

    has_shop = body.get("hasBoutique")
    if not isinstance(has_shop, bool):
        raise ShopUnexpectedShapeError("shop check response has no boolean 'hasBoutique'")
    if not has_shop:
        return ShopEntitlement.absent()

    record = body.get("boutique")
    if not isinstance(record, dict):
        raise ShopUnexpectedShapeError("shop check response has no 'boutique' object")
    shop_id = _coerce_shop_id(record.get("id"))
    if shop_id is None:
        raise ShopUnexpectedShapeError("shop record has no integer 'id'")
    raw_status = record.get("statut")
    if raw_status is not None and not isinstance(raw_status, str):
        raise ShopUnexpectedShapeError("shop record 'statut' is not a string")

    return ShopEntitlement(
        has_shop=True,
        tier=tier,
        status=normalize_status(raw_status),
        shop_id=shop_id,
        raw_record=record,
    )


class ShopApiClient:
    """Thin wrapper around the backend's shop endpoints.

    Pass `http_client` to reuse a pooled client (or an httpx.MockTransport in
    tests). A client created here is owned and closed by this wrapper.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        timeout: Optional[float] = None,
        http_client: Optional[httpx.Client] = None,
    ) -> None:
        self.base_url = (base_url or settings.SHOPNET_API_BASE).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.SHOP_API_TIMEOUT_SECONDS
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=self.timeout)

    def __enter__(self) -> "ShopApiClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        if self._owns_client:
            self._client.close()

    def _request(self, method: str, path: str, credential: str, payload: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        # httpx encodes header values as ASCII
        if not credential.isascii():
            raise ShopCredentialError("credential contains non-ASCII characters")
        headers = {
            "Authorization": f"Bearer {credential}",
            "Accept": "application/json",
        }
        try:
            response = self._client.request(method, url, headers=headers, json=payload, timeout=self.timeout)
        except httpx.TimeoutException as exc:
            raise ShopTransportError(f"shop backend timed out after {self.timeout}s") from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            raise ShopTransportError(f"shop backend unreachable: {exc}") from exc

        body = _decode_json(response)

        if response.status_code == 401:
            raise ShopSessionExpiredError("session expired, please log in again")
        if response.status_code < 200 or response.status_code >= 300:
            message = None
            if isinstance(body, dict):
                message = body.get("message")
            raise ShopUpstreamError(
                str(message or f"shop backend returned HTTP {response.status_code}"),
                upstream_status=response.status_code,
                body=body if isinstance(body, dict) else None,
            )
        if not isinstance(body, dict):
            raise ShopUnexpectedShapeError(f"shop backend returned a non-object body for {path}")

        logger.debug("[shops] %s %s -> %s", method, path, response.status_code)
        return body

    def check_premium_shop(self, credential: str) -> Dict[str, Any]:
        return self._request("GET", PREMIUM_CHECK_PATH, credential)

    def check_standard_shop(self, credential: str) -> Dict[str, Any]:
        return self._request("GET", STANDARD_CHECK_PATH, credential)

    def lookup(self, credential: str, tier: ShopTier = ShopTier.PREMIUM) -> ShopEntitlement:
        """Read the check endpoint for `tier` and parse it."""
        path = CHECK_PATHS.get(tier)
        if path is None:
            raise ValueError(f"no shop check endpoint for tier '{tier.value}'")
        return parse_entitlement(self._request("GET", path, credential), tier)

    def create_standard_shop(self, credential: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        body = dict(payload)
        body["type"] = "Standard"
        return self._request("POST", STANDARD_CREATE_PATH, credential, body)
