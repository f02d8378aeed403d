"""
Public redirect settings endpoint, served through the Shopify App Proxy.

The storefront script on a 404 page fetches /apps/404redirect/settings;
Shopify forwards that to GET /api/proxy/settings with the shop and a
`signature` over the query parameters.

This route does not use admin session authentication. In production every
request must carry a valid App Proxy signature. Outside production the
signature check is skipped so the endpoint can be called directly during
development.
"""

import logging

from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.schemas.redirect_settings import ErrorResponse, RedirectSettingResponse
from src.config.app_config import AppConfig, get_app_config
from src.database.session import get_db_session
from src.platform.app_proxy import query_params_to_dict, verify_proxy_signature
from src.repositories.redirect_settings_repo import RedirectSettingsRepository

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/proxy", tags=["app-proxy"])

# Settings change whenever the merchant saves; storefronts must see it at once
NO_STORE_HEADERS = {"Cache-Control": "no-store"}


class ProxyRequestRejected(Exception):
    """App Proxy request refused before any database access."""

    def __init__(self, status_code: int, message: str):
        super().__init__(message)
        self.status_code = status_code
        self.message = message


async def proxy_rejection_handler(request: Request, exc: ProxyRequestRejected) -> JSONResponse:
    """Render a rejected App Proxy request as {"error": ...}."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.message},
        headers=NO_STORE_HEADERS,
    )


async def get_verified_proxy_shop(
    request: Request,
    config: AppConfig = Depends(get_app_config),
) -> str:
    """
    Authenticate the App Proxy request and return its shop.

    Declared ahead of the database dependency so that configuration and
    signature failures are reported without opening a session.

    Raises:
        ProxyRequestRejected: 500 if SHOPIFY_API_SECRET is missing
            (production), 401 on an invalid signature (production),
            400 if shop is missing
    """
    params = query_params_to_dict(request.query_params)

    if config.is_production:
        if not config.shopify_api_secret:
            logger.error("SHOPIFY_API_SECRET not configured, cannot verify App Proxy request")
            raise ProxyRequestRejected(status.HTTP_500_INTERNAL_SERVER_ERROR, "Server configuration error")

        if not verify_proxy_signature(params, config.shopify_api_secret):
            logger.warning("Invalid App Proxy signature", extra={
                "shop": params.get("shop", "unknown")
            })
            raise ProxyRequestRejected(status.HTTP_401_UNAUTHORIZED, "Invalid signature")
    else:
        logger.debug("App Proxy signature check skipped", extra={
            "environment": config.environment
        })

    shop = params.get("shop")
    if not shop:
        raise ProxyRequestRejected(status.HTTP_400_BAD_REQUEST, "Shop parameter is required")

    return shop


@router.get(
    "/settings",
    response_model=RedirectSettingResponse,
    responses={
        400: {"model": ErrorResponse},
        401: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def get_proxy_settings(
    shop: str = Depends(get_verified_proxy_shop),
    db: Session = Depends(get_db_session),
):
    """
    Return the redirect setting for the requesting shop.

    Response codes:
    - 200: {"redirectUrl", "isEnabled"}; empty/false when the shop has none
    - 400: shop parameter missing
    - 401: App Proxy signature invalid (production only)
    - 500: SHOPIFY_API_SECRET not configured (production only)
    - 503: database not configured (only after the request is authenticated)
    """
    setting = RedirectSettingsRepository(db).get_by_shop(shop)

    if setting is None:
        body = RedirectSettingResponse(redirectUrl="", isEnabled=False)
    else:
        body = RedirectSettingResponse(**setting.to_response())

    logger.info("Redirect settings served via App Proxy", extra={
        "shop": shop,
        "configured": setting is not None,
        "is_enabled": body.isEnabled
    })

    return JSONResponse(content=body.model_dump(), headers=NO_STORE_HEADERS)
