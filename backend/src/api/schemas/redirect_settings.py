"""
Redirect setting schemas shared by the admin and App Proxy endpoints.

Field names are camelCase because the storefront script and the admin UI
read them as-is.
"""

from typing import Optional
from urllib.parse import urlparse

from pydantic import BaseModel

ALLOWED_REDIRECT_SCHEMES = ("http", "https")


class RedirectSettingResponse(BaseModel):
    """Current redirect configuration for a shop."""
    redirectUrl: str = ""
    isEnabled: bool


class SaveRedirectSettingResponse(BaseModel):
    """Result of an admin save."""
    success: bool = True
    settings: RedirectSettingResponse


class ErrorResponse(BaseModel):
    error: str


def parse_form_bool(value: Optional[str]) -> bool:
    """Form checkboxes arrive as strings; only the exact string "true" is True."""
    return value == "true"


def is_valid_redirect_url(url: str) -> bool:
    """
    Check a merchant-supplied redirect target.

    Empty is valid (it disables redirection). Anything else must be an
    absolute http(s) URL with a host.
    """
    if not url:
        return True

    try:
        parsed = urlparse(url)
    except ValueError:
        return False

    return parsed.scheme in ALLOWED_REDIRECT_SCHEMES and bool(parsed.netloc)
