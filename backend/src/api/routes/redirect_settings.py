"""
Admin redirect settings endpoints.

Used by the embedded admin settings page. Authenticated with the Shopify
App Bridge session token; the shop always comes from the verified token.

Endpoints:
- GET  /api/redirect-setting: current setting or defaults
- POST /api/redirect-setting: upsert from the settings form
"""

import logging

from fastapi import APIRouter, Depends, Form, status
from fastapi.responses import JSONResponse
from sqlalchemy.orm import Session

from src.api.schemas.redirect_settings import (
    ErrorResponse,
    RedirectSettingResponse,
    SaveRedirectSettingResponse,
    is_valid_redirect_url,
    parse_form_bool,
)
from src.database.session import get_db_session
from src.platform.shopify_session import ShopifySessionContext, get_shopify_session
from src.repositories.redirect_settings_repo import (
    RedirectSettingsRepository,
    RedirectSettingsRepositoryError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/redirect-setting", tags=["redirect-settings"])

# New installs redirect as soon as a URL is saved
DEFAULT_SETTING = RedirectSettingResponse(redirectUrl="", isEnabled=True)


@router.get("", response_model=RedirectSettingResponse)
async def get_redirect_setting(
    session: ShopifySessionContext = Depends(get_shopify_session),
    db: Session = Depends(get_db_session),
):
    """Return the shop's redirect setting, or defaults if it has none yet."""
    setting = RedirectSettingsRepository(db).get_by_shop(session.shop)

    if setting is None:
        return DEFAULT_SETTING

    return RedirectSettingResponse(**setting.to_response())


@router.post(
    "",
    response_model=SaveRedirectSettingResponse,
    responses={
        400: {"model": ErrorResponse},
        500: {"model": ErrorResponse},
    },
)
async def save_redirect_setting(
    redirect_url: str = Form("", alias="redirectUrl"),
    is_enabled_value: str = Form("", alias="isEnabled"),
    session: ShopifySessionContext = Depends(get_shopify_session),
    db: Session = Depends(get_db_session),
):
    """
    Create or update the shop's redirect setting.

    Form fields:
    - redirectUrl: absolute http(s) URL, or empty to disable; stored as sent
    - isEnabled: "true" enables; any other value disables
    """
    is_enabled = parse_form_bool(is_enabled_value)

    if not is_valid_redirect_url(redirect_url):
        logger.info("Rejected invalid redirect URL", extra={"shop": session.shop})
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": "Invalid redirect URL"},
        )

    try:
        setting = RedirectSettingsRepository(db).upsert(
            shop=session.shop,
            redirect_url=redirect_url,
            is_enabled=is_enabled,
        )
    except RedirectSettingsRepositoryError:
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": "Failed to save settings"},
        )

    return SaveRedirectSettingResponse(
        success=True,
        settings=RedirectSettingResponse(**setting.to_response()),
    )
