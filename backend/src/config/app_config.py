"""
Application configuration for the 404 Redirect backend.

All environment access happens here, once. Request boundaries receive an
AppConfig through FastAPI dependency injection instead of reading
os.environ themselves, so the signature verifier and routes can be tested
without touching the process environment.

Environment variables:
    ENV: Deployment environment ("production", "development", "test")
    SHOPIFY_API_KEY: App API key (session token audience)
    SHOPIFY_API_SECRET: App API secret (App Proxy + session token signing key)
    DATABASE_URL: SQLAlchemy database URL
    CORS_ORIGINS: Comma-separated list of allowed origins
    APP_PROXY_PATH: Storefront App Proxy subpath (default /apps/404redirect)

Usage:
    from src.config.app_config import AppConfig, get_app_config

    @router.get("/items")
    async def get_items(config: AppConfig = Depends(get_app_config)):
        if config.is_production:
            ...
"""

import os
import logging
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Optional

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

logger = logging.getLogger(__name__)

PRODUCTION = "production"
DEFAULT_ENVIRONMENT = "development"
DEFAULT_APP_PROXY_PATH = "/apps/404redirect"
SHOPIFY_ADMIN_ORIGIN = "https://admin.shopify.com"


def normalize_database_url(database_url: Optional[str]) -> Optional[str]:
    """
    Normalize a database URL for SQLAlchemy.

    Handles Render's postgres:// URL format by converting to postgresql://.
    """
    if not database_url:
        return None
    if database_url.startswith("postgres://"):
        return database_url.replace("postgres://", "postgresql://", 1)
    return database_url


def describe_database_url(database_url: Optional[str]) -> dict:
    """
    Describe a database URL for logging: dialect, host, port and database only.

    Credentials never appear, including passwords passed as query options.
    """
    if not database_url:
        return {"configured": False}

    try:
        url = make_url(database_url)
    except ArgumentError:
        return {"configured": True, "parseable": False}

    return {
        "configured": True,
        "dialect": url.get_backend_name(),
        "host": url.host,
        "port": url.port,
        "database": url.database,
    }


def _parse_cors_origins(raw: Optional[str]) -> list[str]:
    origins = [o.strip() for o in (raw or "http://localhost:3000").split(",") if o.strip()]
    # Shopify Admin always embeds the app
    if SHOPIFY_ADMIN_ORIGIN not in origins:
        origins.append(SHOPIFY_ADMIN_ORIGIN)
    return origins


@dataclass(frozen=True)
class AppConfig:
    """Immutable runtime configuration."""
    environment: str = DEFAULT_ENVIRONMENT
    shopify_api_key: Optional[str] = None
    shopify_api_secret: Optional[str] = None
    database_url: Optional[str] = None
    cors_origins: list[str] = field(default_factory=lambda: [SHOPIFY_ADMIN_ORIGIN])
    app_proxy_path: str = DEFAULT_APP_PROXY_PATH

    @property
    def is_production(self) -> bool:
        return self.environment == PRODUCTION

    def status(self) -> dict:
        """
        Describe which settings are present, without exposing values.

        Safe to log.
        """
        return {
            "environment": self.environment,
            "SHOPIFY_API_KEY": "set" if self.shopify_api_key else "missing",
            "SHOPIFY_API_SECRET": "set" if self.shopify_api_secret else "missing",
            "DATABASE_URL": "set" if self.database_url else "missing",
            "app_proxy_path": self.app_proxy_path,
        }


def load_config() -> AppConfig:
    """Build an AppConfig from environment variables."""
    environment = (os.getenv("ENV") or DEFAULT_ENVIRONMENT).strip().lower()
    return AppConfig(
        environment=environment,
        shopify_api_key=os.getenv("SHOPIFY_API_KEY") or None,
        shopify_api_secret=os.getenv("SHOPIFY_API_SECRET") or None,
        database_url=normalize_database_url(os.getenv("DATABASE_URL")),
        cors_origins=_parse_cors_origins(os.getenv("CORS_ORIGINS")),
        app_proxy_path=os.getenv("APP_PROXY_PATH", DEFAULT_APP_PROXY_PATH).rstrip("/") or DEFAULT_APP_PROXY_PATH,
    )


@lru_cache(maxsize=1)
def get_app_config() -> AppConfig:
    """
    FastAPI dependency returning the process-wide configuration.

    Loaded once on first use. Tests replace it via app.dependency_overrides.
    """
    config = load_config()
    logger.info("Configuration loaded", extra={"config_status": config.status()})
    return config
