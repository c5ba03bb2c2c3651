import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

# Load env from shopnet/.env
package_dir = os.path.dirname(os.path.abspath(__file__))
if "PYTEST_CURRENT_TEST" not in os.environ:
    load_dotenv(dotenv_path=os.path.join(package_dir, ".env"))

# Import after dotenv is loaded
from shopnet.core.config import settings, validate_config, cors_origins
from shopnet.core.logging import configure_logging
from shopnet.core.middleware.request_id import RequestIdMiddleware
from shopnet.core.validation import validate_env
from shopnet.core.errors import (
    AppError,
    app_error_handler,
    http_error_handler,
    unhandled_exception_handler,
)
from shopnet.api import health, shops

configure_logging(settings.ENV)
validate_env()
validate_config(strict=getattr(settings, "CONFIG_STRICT", False))


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger = logging.getLogger("shopnet")
    logger.info("Starting SHOPNET storefront gateway...")
    try:
        yield
    finally:
        logging.getLogger("shopnet").info("Stopping SHOPNET storefront gateway...")


app = FastAPI(title="SHOPNET - Storefront gateway", lifespan=lifespan)

app.add_middleware(RequestIdMiddleware)

app.add_exception_handler(AppError, app_error_handler)
app.add_exception_handler(HTTPException, http_error_handler)
app.add_exception_handler(Exception, unhandled_exception_handler)

# CORS for the mobile web preview (adjust origins in production)
app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins(),
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.root_router, tags=["health"])
app.include_router(shops.router, tags=["shop"])


def run() -> None:
    """Serve the gateway with uvicorn (console script `shopnet-serve`)."""
    import uvicorn

    uvicorn.run(
        "shopnet.main:app",
        host=os.getenv("HOST", "0.0.0.0"),
        port=int(os.getenv("PORT", "8000")),
        reload=False,
        log_level="info",
    )


if __name__ == "__main__":
    run()
