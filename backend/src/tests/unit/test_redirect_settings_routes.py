"""
Unit tests for the admin redirect settings routes.

Tests cover:
- GET /api/redirect-setting: defaults and stored values
- POST /api/redirect-setting: create, update, isEnabled parsing, URL validation
- Session token enforcement (401/503)
"""

from unittest.mock import patch

import pytest

from src.models.redirect_setting import RedirectSetting
from src.repositories.redirect_settings_repo import RedirectSettingsRepositoryError

SHOP = "test-store.myshopify.com"
URL = "/api/redirect-setting"


@pytest.fixture
def auth_headers(session_token):
    return {"Authorization": f"Bearer {session_token()}"}


# =============================================================================
# GET /api/redirect-setting
# =============================================================================

class TestGetRedirectSetting:

    def test_defaults_when_not_configured(self, client, auth_headers):
        """New shops default to enabled with no URL."""
        response = client.get(URL, headers=auth_headers)

        assert response.status_code == 200
        assert response.json() == {"redirectUrl": "", "isEnabled": True}

    def test_returns_stored_setting(self, client, auth_headers, db_session):
        db_session.add(RedirectSetting(shop=SHOP, redirect_url="https://a.com/", is_enabled=False))
        db_session.commit()

        response = client.get(URL, headers=auth_headers)

        assert response.json() == {"redirectUrl": "https://a.com/", "isEnabled": False}

    def test_other_shops_setting_not_visible(self, client, session_token, db_session):
        db_session.add(RedirectSetting(shop=SHOP, redirect_url="https://a.com/", is_enabled=True))
        db_session.commit()

        token = session_token(shop="another-store.myshopify.com")
        response = client.get(URL, headers={"Authorization": f"Bearer {token}"})

        assert response.json() == {"redirectUrl": "", "isEnabled": True}

    def test_missing_token_is_401(self, client):
        response = client.get(URL)

        assert response.status_code == 401

    def test_invalid_token_is_401(self, client):
        response = client.get(URL, headers={"Authorization": "Bearer not-a-jwt"})

        assert response.status_code == 401

    def test_unconfigured_credentials_is_503(self, client, app, make_config, auth_headers):
        from src.config.app_config import get_app_config

        app.dependency_overrides[get_app_config] = lambda: make_config(shopify_api_key=None)

        response = client.get(URL, headers=auth_headers)

        assert response.status_code == 503


# =============================================================================
# POST /api/redirect-setting
# =============================================================================

class TestSaveRedirectSetting:

    def test_creates_setting(self, client, auth_headers, db_session):
        response = client.post(
            URL,
            data={"redirectUrl": "https://test-store.com/", "isEnabled": "true"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "settings": {"redirectUrl": "https://test-store.com/", "isEnabled": True},
        }

        stored = db_session.query(RedirectSetting).filter_by(shop=SHOP).one()
        assert stored.redirect_url == "https://test-store.com/"
        assert stored.is_enabled is True

    def test_updates_existing_setting(self, client, auth_headers, db_session):
        client.post(URL, data={"redirectUrl": "https://one.com", "isEnabled": "true"}, headers=auth_headers)
        response = client.post(URL, data={"redirectUrl": "https://two.com", "isEnabled": "false"}, headers=auth_headers)

        assert response.json()["settings"] == {"redirectUrl": "https://two.com", "isEnabled": False}
        assert db_session.query(RedirectSetting).filter_by(shop=SHOP).count() == 1

    @pytest.mark.parametrize("value, expected", [
        ("true", True),
        ("false", False),
        ("True", False),
        ("1", False),
        ("on", False),
        ("", False),
    ])
    def test_is_enabled_parsing(self, client, auth_headers, value, expected):
        response = client.post(URL, data={"redirectUrl": "", "isEnabled": value}, headers=auth_headers)

        assert response.json()["settings"]["isEnabled"] is expected

    def test_missing_fields_disable_and_clear(self, client, auth_headers):
        response = client.post(URL, data={}, headers=auth_headers)

        assert response.status_code == 200
        assert response.json()["settings"] == {"redirectUrl": "", "isEnabled": False}

    def test_url_stored_as_sent(self, client, auth_headers, db_session):
        """Surrounding whitespace is not trimmed away."""
        response = client.post(
            URL,
            data={"redirectUrl": "https://a.com/landing ", "isEnabled": "true"},
            headers=auth_headers,
        )

        assert response.status_code == 200
        assert response.json()["settings"]["redirectUrl"] == "https://a.com/landing "
        stored = db_session.query(RedirectSetting).filter_by(shop=SHOP).one()
        assert stored.redirect_url == "https://a.com/landing "

    @pytest.mark.parametrize("bad_url", [
        "not a url",
        "/relative/path",
        "javascript:alert(1)",
        "ftp://files.example.com",
        "https://",
    ])
    def test_invalid_url_rejected(self, client, auth_headers, db_session, bad_url):
        response = client.post(URL, data={"redirectUrl": bad_url, "isEnabled": "true"}, headers=auth_headers)

        assert response.status_code == 400
        assert response.json() == {"error": "Invalid redirect URL"}
        assert db_session.query(RedirectSetting).count() == 0

    def test_saved_setting_served_through_proxy(self, client, auth_headers, sign_params):
        client.post(URL, data={"redirectUrl": "https://sale.example.com", "isEnabled": "true"}, headers=auth_headers)

        response = client.get(
            "/api/proxy/settings",
            params=sign_params({"shop": SHOP, "path_prefix": "/apps/404redirect", "timestamp": "1700000000"}),
        )

        assert response.json() == {"redirectUrl": "https://sale.example.com", "isEnabled": True}

    def test_repository_failure_is_500(self, client, auth_headers):
        with patch(
            "src.api.routes.redirect_settings.RedirectSettingsRepository.upsert",
            side_effect=RedirectSettingsRepositoryError("boom"),
        ):
            response = client.post(URL, data={"redirectUrl": "", "isEnabled": "true"}, headers=auth_headers)

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to save settings"}

    def test_missing_token_is_401(self, client, db_session):
        response = client.post(URL, data={"redirectUrl": "https://a.com", "isEnabled": "true"})

        assert response.status_code == 401
        assert db_session.query(RedirectSetting).count() == 0
