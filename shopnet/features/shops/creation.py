"""
Standard shop creation.

This is where "must be logged in" and "already has a shop" are enforced; the
entitlement resolver deliberately lets anonymous callers see the form.
"""

import re
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, ValidationError as PydanticValidationError, field_validator

from shopnet.core.errors import AuthRequiredError, ConflictError, ValidationError
from shopnet.core.logging import log_event
from shopnet.features.shops.client import ShopApiClient, ShopUpstreamError
from shopnet.features.shops.models import ShopRoute


GMAIL_RE = re.compile(r"^[^\s@]+@gmail\.com$")
PHONE_RE = re.compile(r"^(0|243)\d{8,12}$")
MIN_DESCRIPTION_LENGTH = 70
ALREADY_EXISTS_MARKER = "existe déjà"

AFTER_CREATE_PATH = "/(tabs)/Auth/Produits/Fil"


class StandardShopForm(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    nom: str
    proprietaire: str
    email: str
    whatsapp: str
    adresse: str
    categorie: str
    description: str

    @field_validator("nom", "proprietaire", "adresse", "categorie")
    @classmethod
    def _required(cls, value: str) -> str:
        if not value:
            raise ValueError("Veuillez remplir tous les champs requis !")
        return value

    @field_validator("email")
    @classmethod
    def _gmail_only(cls, value: str) -> str:
        if not GMAIL_RE.match(value):
            raise ValueError("Email invalide. L'email doit se terminer par @gmail.com")
        return value

    @field_validator("whatsapp")
    @classmethod
    def _phone(cls, value: str) -> str:
        if not PHONE_RE.match(value):
            raise ValueError("Numéro invalide. Commencez par 0 ou 243 et utilisez uniquement des chiffres.")
        return value

    @field_validator("description")
    @classmethod
    def _long_enough(cls, value: str) -> str:
        if len(value) < MIN_DESCRIPTION_LENGTH:
            raise ValueError(f"La description doit contenir au moins {MIN_DESCRIPTION_LENGTH} caractères !")
        return value


def parse_form(data: Dict[str, Any]) -> StandardShopForm:
    """Validate raw form data, turning pydantic errors into a 400."""
    try:
        return StandardShopForm.model_validate(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        message = str(first.get("msg", "Formulaire invalide")).removeprefix("Value error, ")
        raise ValidationError(message) from exc


def submit_standard_shop(
    credential: Optional[str],
    form: StandardShopForm,
    client: Optional[ShopApiClient] = None,
) -> Dict[str, Any]:
    """Create a Standard shop for the caller.

    Raises:
        AuthRequiredError: no credential.
        ConflictError: the backend says the shop already exists.
        ShopApiError: any other backend failure.
    """
    token = (credential or "").strip()
    if not token:
        raise AuthRequiredError("Veuillez vous connecter pour créer une boutique")

    owns_client = client is None
    api = client or ShopApiClient()
    try:
        body = api.create_standard_shop(token, form.model_dump())
    except ShopUpstreamError as exc:
        if ALREADY_EXISTS_MARKER in exc.message:
            raise ConflictError(exc.message, code="shop_exists") from exc
        raise
    finally:
        if owns_client:
            api.close()

    log_event("info", "shop.standard.created", event_type="shop.create", extra={"categorie": form.categorie})
    return {
        "shop": body.get("boutique"),
        "message": body.get("message") or "Boutique créée avec succès !",
        "route": ShopRoute(pathname=AFTER_CREATE_PATH).model_dump(),
    }
