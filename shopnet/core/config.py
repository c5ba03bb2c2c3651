import logging

from pydantic_settings import BaseSettings
from pydantic import ConfigDict
from typing import Optional

class Settings(BaseSettings):
    # Environment
    ENV: str = "development"
    CONFIG_STRICT: bool = False

    # Remote e-commerce backend
    SHOPNET_API_BASE: str = "https://shopnet-backend.onrender.com/api"
    SHOP_API_TIMEOUT_SECONDS: float = 10.0

    # Support contacts (shown on rejected / unknown shop status)
    SUPPORT_EMAIL: str = "Entrepriseshopia@gmail.com"
    SUPPORT_WHATSAPP: str = "243896037137"

    # CORS for the mobile dev server / web preview
    CORS_ALLOWED_ORIGINS: str = "http://localhost:8081"  # comma-separated

    model_config = ConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )
settings = Settings()


def cors_origins(settings_obj: Optional[Settings] = None) -> list[str]:
    cfg = settings_obj or settings
    return [o.strip() for o in cfg.CORS_ALLOWED_ORIGINS.split(",") if o.strip()]


def validate_config(strict: Optional[bool] = None, settings_obj: Optional[Settings] = None, logger: Optional[logging.Logger] = None) -> bool:
    """Validate required configuration.

    In strict mode raise RuntimeError; otherwise emit warnings only.
    """
    cfg = settings_obj or settings
    log = logger or logging.getLogger("shopnet")
    strict_mode = strict if strict is not None else getattr(cfg, "CONFIG_STRICT", False)

    required_keys = [
        "SHOPNET_API_BASE",
        "SUPPORT_EMAIL",
        "SUPPORT_WHATSAPP",
    ]

    missing = [key for key in required_keys if not getattr(cfg, key, None)]
    if missing:
        message = f"Missing required configuration: {', '.join(missing)}"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    timeout = getattr(cfg, "SHOP_API_TIMEOUT_SECONDS", None)
    if timeout is not None and timeout <= 0:
        message = "SHOP_API_TIMEOUT_SECONDS must be positive"
        if strict_mode:
            raise RuntimeError(message)
        log.warning(message)

    return True
