"""
Environment validation utilities.

Ensures the gateway fails fast on misconfiguration while
remaining bypassable for tests via SKIP_ENV_VALIDATION.
"""

import os
from typing import Optional
from urllib.parse import urlparse

from shopnet.core.config import settings


class EnvValidationError(RuntimeError):
    """Raised when environment validation fails."""


def is_valid_api_base(url: Optional[str], *, require_https: bool = False) -> bool:
    """Basic SHOPNET_API_BASE validation using urlparse."""
    if not url:
        return False
    parsed = urlparse(url)
    if not (parsed.scheme and parsed.netloc):
        return False
    if require_https:
        return parsed.scheme == "https"
    return parsed.scheme in {"http", "https"}


def validate_env(env: Optional[str] = None, settings_obj=None) -> bool:
    """Validate environment configuration.

    Args:
        env: Override environment name (defaults to settings.ENV)
        settings_obj: Override settings object (defaults to shopnet.core.config.settings)

    Returns:
        True if validation passes.

    Raises:
        EnvValidationError when a rule is violated.
    """
    if os.getenv("SKIP_ENV_VALIDATION") == "1":
        return True

    cfg = settings_obj or settings
    mode = (env or getattr(cfg, "ENV", "development") or "development").lower()
    api_base = getattr(cfg, "SHOPNET_API_BASE", None)

    if mode == "production":
        if not is_valid_api_base(api_base, require_https=True):
            raise EnvValidationError("SHOPNET_API_BASE must be an https URL in production")
    elif api_base and not is_valid_api_base(api_base):
        raise EnvValidationError("SHOPNET_API_BASE must be a valid URL (e.g. https://host/api)")

    return True
