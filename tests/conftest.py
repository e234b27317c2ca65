"""Shared fixtures for solidlogin tests."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from aioresponses import aioresponses as aioresponses_mock

from solidlogin.models import LoginOptions

IDP = "https://idp.example"
AUTH_URL = f"{IDP}/.oidc/auth?client_id=test-client&response_type=code"


@pytest.fixture
def mock_idp():
    """Script IdP responses for aiohttp requests."""
    with aioresponses_mock() as m:
        yield m


@pytest.fixture
def login_options() -> LoginOptions:
    """Return LoginOptions for a test account."""
    return LoginOptions(idp=IDP, email="alice@example.com", password="s3cret!")


@pytest.fixture
def session_handle() -> MagicMock:
    """Return a fake OIDC session that logs in when handed a callback URL.

    Its ``login`` calls the provider's redirect handler with ``AUTH_URL``.
    """

    async def _login(oidc_issuer, handle_redirect):
        await handle_redirect(AUTH_URL)

    handle = MagicMock()
    handle.login = AsyncMock(side_effect=_login)
    handle.handle_incoming_redirect = AsyncMock(
        return_value=MagicMock(is_logged_in=True)
    )
    return handle
