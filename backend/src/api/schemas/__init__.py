"""
API schemas package.

Contains Pydantic models for request/response validation.
"""

from src.api.schemas.redirect_settings import (
    RedirectSettingResponse,
    SaveRedirectSettingResponse,
    ErrorResponse,
)

__all__ = [
    "RedirectSettingResponse",
    "SaveRedirectSettingResponse",
    "ErrorResponse",
]
