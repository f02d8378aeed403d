"""
FastAPI application entry point for the 404 Redirect app.

Routes:
- /health: liveness check (no authentication)
- /api/proxy/settings: storefront settings via Shopify App Proxy (signature)
- /api/redirect-setting: admin settings (Shopify session token)
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse
from fastapi.middleware.cors import CORSMiddleware

from src.api.routes import health
from src.api.routes import proxy_settings
from src.api.routes import redirect_settings
from src.config.app_config import describe_database_url, get_app_config

# Configure structured logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events."""
    logger.info("Starting 404 Redirect API")

    config = get_app_config()
    app.state.config_status = config.status()

    if config.is_production and not config.shopify_api_secret:
        logger.error(
            "SHOPIFY_API_SECRET is not set. App Proxy requests will return 500 "
            "and admin requests will return 503 until it is configured."
        )
    elif not config.is_production:
        logger.warning(
            "Running outside production: App Proxy signature verification is disabled",
            extra={"environment": config.environment}
        )

    if not config.database_url:
        logger.error("DATABASE_URL is not set. Settings endpoints will return 503.")
    else:
        logger.info("DATABASE_URL configured", extra={"database": describe_database_url(config.database_url)})

    yield

    logger.info("Shutting down 404 Redirect API")


app = FastAPI(
    title="404 Redirect API",
    description="Per-shop 404 redirect settings for Shopify storefronts",
    version="1.0.0",
    lifespan=lifespan
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=get_app_config().cors_origins,
    allow_credentials=True,
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

app.include_router(health.router)

# Storefront settings (App Proxy signature, not session token)
app.include_router(proxy_settings.router)
app.add_exception_handler(proxy_settings.ProxyRequestRejected, proxy_settings.proxy_rejection_handler)

# Admin settings (Shopify session token)
app.include_router(redirect_settings.router)


@app.exception_handler(Exception)
async def global_exception_handler(request: Request, exc: Exception):
    """Handle unhandled exceptions with proper logging."""
    logger.error(
        "Unhandled exception",
        extra={
            "error": str(exc),
            "error_type": type(exc).__name__,
            "path": request.url.path
        },
        exc_info=True
    )

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Internal server error"}
    )


if __name__ == "__main__":
    import uvicorn

    port = int(os.getenv("PORT", 8000))
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=port,
        reload=get_app_config().environment == "development"
    )
