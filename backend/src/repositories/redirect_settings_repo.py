"""
Redirect Settings Repository.

Settings are keyed by shop domain, one row per shop. The shop comes from
the verified admin session token or from the signed App Proxy query,
never from form input.
"""

import logging
from typing import Optional

from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from src.models.redirect_setting import RedirectSetting

logger = logging.getLogger(__name__)


class RedirectSettingsRepositoryError(Exception):
    """Base exception for redirect settings repository errors."""
    pass


class RedirectSettingsRepository:
    """
    Repository for RedirectSetting reads and upserts.
    """

    def __init__(self, db_session: Session):
        """
        Initialize redirect settings repository.

        Args:
            db_session: Database session
        """
        self.db = db_session

    @staticmethod
    def _require_shop(shop: str) -> None:
        if not shop:
            raise ValueError("shop is required and cannot be empty")

    def get_by_shop(self, shop: str) -> Optional[RedirectSetting]:
        """
        Get the redirect setting for a shop.

        Args:
            shop: Shop domain (e.g., "mystore.myshopify.com")

        Returns:
            RedirectSetting if found, None otherwise
        """
        self._require_shop(shop)
        return self.db.query(RedirectSetting).filter(RedirectSetting.shop == shop).first()

    def upsert(self, shop: str, redirect_url: str, is_enabled: bool) -> RedirectSetting:
        """
        Create or update the redirect setting for a shop.

        A concurrent create for the same shop surfaces as an IntegrityError
        on the unique shop column; that case is retried once as an update.

        Args:
            shop: Shop domain
            redirect_url: Redirect target ("" disables redirection)
            is_enabled: Whether the storefront should redirect

        Returns:
            The persisted RedirectSetting

        Raises:
            ValueError: If shop is empty
            RedirectSettingsRepositoryError: On database failure
        """
        self._require_shop(shop)

        try:
            return self._upsert_once(shop, redirect_url, is_enabled)
        except IntegrityError:
            self.db.rollback()
            logger.info("Redirect setting created concurrently, retrying as update", extra={
                "shop": shop
            })
            try:
                return self._upsert_once(shop, redirect_url, is_enabled)
            except SQLAlchemyError as e:
                self.db.rollback()
                logger.error("Failed to upsert redirect setting after retry", extra={
                    "shop": shop,
                    "error": str(e)
                })
                raise RedirectSettingsRepositoryError(f"Upsert failed for shop {shop}: {e}")
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.error("Failed to upsert redirect setting", extra={
                "shop": shop,
                "error": str(e)
            })
            raise RedirectSettingsRepositoryError(f"Upsert failed for shop {shop}: {e}")

    def _upsert_once(self, shop: str, redirect_url: str, is_enabled: bool) -> RedirectSetting:
        setting = self.get_by_shop(shop)
        created = setting is None

        if created:
            setting = RedirectSetting(
                shop=shop,
                redirect_url=redirect_url,
                is_enabled=is_enabled
            )
            self.db.add(setting)
        else:
            setting.redirect_url = redirect_url
            setting.is_enabled = is_enabled

        self.db.commit()
        self.db.refresh(setting)

        logger.info("Redirect setting saved", extra={
            "shop": shop,
            "created": created,
            "is_enabled": is_enabled,
            "has_redirect_url": bool(redirect_url)
        })
        return setting
