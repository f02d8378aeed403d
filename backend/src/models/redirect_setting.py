"""
RedirectSetting model: per-shop 404 redirect configuration.

One row per shop. shop is the canonical Shopify identifier
(mystore.myshopify.com) taken from the admin session token, never from
form input.
"""

from sqlalchemy import Boolean, Column, String, Text, true

from src.models.base import Base, TimestampMixin, generate_uuid


class RedirectSetting(Base, TimestampMixin):
    """
    Where to send storefront visitors that land on a 404 page.

    Read by the admin UI and by the public App Proxy endpoint.
    Written only through RedirectSettingsRepository.upsert().
    """

    __tablename__ = "redirect_settings"

    id = Column(
        String(36),
        primary_key=True,
        default=generate_uuid,
        comment="UUID primary key"
    )

    shop = Column(
        String(255),
        nullable=False,
        unique=True,
        index=True,
        comment="Shopify store domain (mystore.myshopify.com)"
    )

    redirect_url = Column(
        Text,
        nullable=False,
        default="",
        comment="Redirect target; empty string means no redirect"
    )

    is_enabled = Column(
        Boolean,
        nullable=False,
        default=True,
        server_default=true(),
        comment="Whether the storefront script should redirect"
    )

    def to_response(self) -> dict:
        """Wire shape shared by the admin and proxy endpoints."""
        return {
            "redirectUrl": self.redirect_url or "",
            "isEnabled": bool(self.is_enabled),
        }

    def __repr__(self) -> str:
        return f"<RedirectSetting(shop={self.shop}, is_enabled={self.is_enabled})>"
