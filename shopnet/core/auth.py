"""
Credential extraction for the shop API.

The gateway does not verify tokens itself: the bearer credential is forwarded
as-is to the e-commerce backend, which accepts or rejects it (401).
"""
from typing import Optional

from fastapi import Request

from shopnet.core.errors import AuthRequiredError


def bearer_from_header(auth_header: Optional[str]) -> Optional[str]:
    """Return the token of a "Bearer <token>" header, or None."""
    if not auth_header:
        return None
    scheme, _, token = auth_header.strip().partition(" ")
    if scheme.lower() != "bearer":
        return None
    token = token.strip()
    return token or None


async def get_optional_credential(request: Request) -> Optional[str]:
    """Anonymous callers are allowed; they just have no credential."""
    return bearer_from_header(request.headers.get("Authorization"))


async def get_required_credential(request: Request) -> str:
    credential = bearer_from_header(request.headers.get("Authorization"))
    if not credential:
        raise AuthRequiredError("Connexion requise : en-tête Authorization (Bearer) manquant")
    return credential
