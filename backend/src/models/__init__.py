"""
Database models for the 404 Redirect app.
"""

from src.models.base import TimestampMixin
from src.models.redirect_setting import RedirectSetting

__all__ = ["TimestampMixin", "RedirectSetting"]
