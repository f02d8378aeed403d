"""
Shopify session token authentication for the embedded admin UI.

The admin settings page runs inside the Shopify Admin iframe and calls the
backend with an App Bridge session token (a JWT signed by Shopify with the
app's API secret) in the Authorization header. The shop the settings
belong to is taken from the token's `dest` claim.

Documentation: https://shopify.dev/docs/apps/auth/oauth/session-tokens
"""

import logging
from typing import Optional
from dataclasses import dataclass

import jwt
from fastapi import Depends, Request, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from src.config.app_config import AppConfig, get_app_config

logger = logging.getLogger(__name__)

# Security scheme for extracting Bearer token
security = HTTPBearer(auto_error=False)


@dataclass
class ShopifySessionContext:
    """Context extracted from Shopify session token."""
    shop: str
    user_id: Optional[str]


def normalize_shop_domain(value: str) -> str:
    """Strip scheme, path and trailing slash: "https://a.myshopify.com/admin" -> "a.myshopify.com"."""
    domain = value.strip().replace("https://", "").replace("http://", "")
    return domain.split("/", 1)[0].lower()


class ShopifySessionTokenVerifier:
    """
    Verifies Shopify session tokens (JWTs).

    Session tokens are signed with HS256 using the app's API secret.
    """

    def __init__(self, api_key: str, api_secret: str):
        if not api_key:
            raise ValueError("SHOPIFY_API_KEY is required")
        if not api_secret:
            raise ValueError("SHOPIFY_API_SECRET is required")

        self.api_key = api_key
        self.api_secret = api_secret

    def verify_session_token(self, token: str) -> ShopifySessionContext:
        """
        Verify Shopify session token and extract context.

        Args:
            token: JWT session token from Shopify

        Returns:
            ShopifySessionContext with the shop domain

        Raises:
            HTTPException: 401 if token is invalid, expired, or verification fails
        """
        try:
            payload = jwt.decode(
                token,
                self.api_secret,
                algorithms=["HS256"],
                audience=self.api_key,
                options={
                    "verify_signature": True,
                    "verify_aud": True,
                    "verify_exp": True,
                }
            )
        except jwt.ExpiredSignatureError:
            logger.warning("Session token expired")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session token has expired"
            )
        except jwt.InvalidAudienceError:
            logger.warning("Session token invalid audience")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session token has invalid audience"
            )
        except jwt.InvalidSignatureError:
            logger.warning("Session token invalid signature")
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session token signature is invalid"
            )
        except jwt.PyJWTError as e:
            logger.warning("Session token rejected", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session token verification failed"
            )

        # 'dest' is the shop URL, e.g. "https://mystore.myshopify.com"
        dest = payload.get("dest")
        if not dest or not isinstance(dest, str):
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Session token missing 'dest' claim"
            )

        shop = normalize_shop_domain(dest)

        logger.debug("Session token verified", extra={"shop": shop})

        return ShopifySessionContext(
            shop=shop,
            user_id=payload.get("sub"),
        )


async def get_shopify_session(
    request: Request,
    config: AppConfig = Depends(get_app_config),
) -> ShopifySessionContext:
    """
    FastAPI dependency to extract and verify Shopify session token.

    Usage:
        @router.get("/api/redirect-setting")
        async def get_setting(session: ShopifySessionContext = Depends(get_shopify_session)):
            ...

    Raises:
        HTTPException: 503 if credentials are not configured,
            401 if token is missing or invalid
    """
    if not config.shopify_api_key or not config.shopify_api_secret:
        logger.error("Shopify API credentials not configured")
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Shopify authentication not configured"
        )

    credentials: Optional[HTTPAuthorizationCredentials] = await security(request)

    if not credentials or not credentials.credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Missing or invalid authorization token"
        )

    verifier = ShopifySessionTokenVerifier(config.shopify_api_key, config.shopify_api_secret)
    return verifier.verify_session_token(credentials.credentials)
