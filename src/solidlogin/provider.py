"""Automated login and consent against a Solid identity provider.

Drives the same redirect chain a browser would walk through when a user
logs in to a Solid IdP and approves a client application:

1. GET the authorization URL handed out by the OIDC session; the IdP
   answers with a redirect to its login form.
2. POST ``email`` and ``password`` to the login form, then follow the
   single redirect it returns to pick up the login cookies.
3. GET the resulting URL to acknowledge the login.
4. POST the consent form, read the ``location`` from its JSON body and
   GET it; the ``303`` it returns carries the client callback URL.
5. Hand the callback URL to the OIDC session to finish the token exchange.

Redirects are never followed automatically, so each hop's status code and
``Location`` header can be checked where the IdP produced them.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any, Protocol
from urllib.parse import urlencode

import aiohttp

from solidlogin.const import (
    APPLICATION_X_WWW_FORM_URLENCODED,
    CONSENT_REDIRECT_STATUS,
    CONSENT_STATUS,
    FlowStep,
)
from solidlogin.cookies import CookieJar
from solidlogin.exceptions import (
    LoginAssertionError,
    MalformedBodyError,
    MissingRedirectError,
    UnexpectedStatusError,
)
from solidlogin.fetcher import ManualRedirectFetcher

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from solidlogin.models import LoginOptions, ResponseSnapshot

_LOGGER = logging.getLogger(__name__)


class SessionInfo(Protocol):
    """Outcome reported by an OIDC session after an incoming redirect."""

    is_logged_in: bool


class SessionHandle(Protocol):
    """OIDC client session that performs the actual token exchange."""

    async def login(
        self,
        oidc_issuer: str,
        handle_redirect: Callable[[str], Awaitable[Any]],
    ) -> None:
        """Start a login and pass the authorization URL to ``handle_redirect``."""
        ...

    async def handle_incoming_redirect(self, url: str) -> SessionInfo | None:
        """Complete the login from the client callback URL."""
        ...


class SolidSessionProvider:
    """Log an OIDC session in to a Solid IdP without a browser.

    Use as an async context manager to manage the underlying aiohttp
    session::

        options = LoginOptions.from_env()
        async with SolidSessionProvider(options, session) as provider:
            await provider.login()
            await provider.handle_consent_screen(consent_url)

    One provider runs one login flow at a time; its cookie jar is shared
    by every hop and is not guarded against concurrent use.

    Args:
        options: IdP URL and credentials.
        session: The OIDC session to log in.
        http_session: Optional aiohttp session to issue requests with. It
            should use ``aiohttp.DummyCookieJar`` since cookies are managed
            here.
    """

    def __init__(
        self,
        options: LoginOptions,
        session: SessionHandle,
        http_session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._options = options
        self._session = session
        self._external_http_session = http_session is not None
        self._http_session = http_session
        self._cookies = CookieJar()
        self._fetcher: ManualRedirectFetcher | None = None

    async def __aenter__(self) -> SolidSessionProvider:
        """Enter the async context manager, creating a session if needed."""
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(
                cookie_jar=aiohttp.DummyCookieJar(),
            )
        return self

    async def __aexit__(self, *exc: object) -> None:
        """Exit the async context manager, closing the session if we own it."""
        if not self._external_http_session and self._http_session:
            await self._http_session.close()

    @property
    def options(self) -> LoginOptions:
        """The login options this provider was created with."""
        return self._options

    @property
    def session(self) -> SessionHandle:
        """The OIDC session being logged in."""
        return self._session

    @property
    def cookies(self) -> CookieJar:
        """Cookies collected from the IdP so far."""
        return self._cookies

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    async def _fetch_idp(
        self,
        url: str,
        method: str = "GET",
        body: str | None = None,
        content_type: str | None = None,
    ) -> ResponseSnapshot:
        if self._http_session is None:
            msg = (
                "No aiohttp session available. "
                "Use the provider as an async context manager or provide a session."
            )
            raise RuntimeError(msg)
        if self._fetcher is None:
            self._fetcher = ManualRedirectFetcher(self._http_session, self._cookies)
        return await self._fetcher.fetch(url, method, body, content_type)

    # ------------------------------------------------------------------
    # Flow entrypoints
    # ------------------------------------------------------------------

    async def login(self) -> SessionHandle:
        """Log the session in to the configured IdP.

        The session calls :meth:`handle_redirect` with its authorization
        URL.  Consent, when the IdP asks for it, is handled separately by
        :meth:`handle_consent_screen`.
        """
        _LOGGER.debug("Starting login against %s", self._options.idp)
        await self._session.login(self._options.idp, self.handle_redirect)
        return self._session

    async def handle_redirect(self, url: str) -> ResponseSnapshot:
        """Walk from the authorization URL through login to the final ack.

        Returns:
            The response to the final acknowledgement request.

        Raises:
            MissingRedirectError: If the authorization URL does not redirect
                to a login form, or the login form misbehaves.
        """
        _LOGGER.debug("[%s] Requesting %s", FlowStep.START.value, url)
        res = await self._fetch_idp(url)
        login_url = res.location
        if not login_url:
            raise MissingRedirectError(
                "Could not login. No redirect given.", FlowStep.START
            )

        redirect = await self.handle_login_screen(
            login_url, self._options.email, self._options.password
        )

        _LOGGER.debug("[%s] Acknowledging login at %s", FlowStep.DONE.value, redirect)
        return await self._fetch_idp(redirect)

    async def handle_login_screen(self, url: str, email: str, password: str) -> str:
        """Submit credentials to the login form at ``url``.

        Returns:
            The URL the login redirect page points to.

        Raises:
            MissingRedirectError: If either the form submission or the
                redirect page that follows it returns no ``Location``.
        """
        _LOGGER.debug("[%s] Posting login form to %s", FlowStep.LOGIN_FORM.value, url)
        form_data = urlencode({"email": email, "password": password})
        res = await self._fetch_idp(
            url, "POST", form_data, APPLICATION_X_WWW_FORM_URLENCODED
        )
        location = res.location
        if not location:
            raise MissingRedirectError(
                "No redirect location given by login screen on form submission.",
                FlowStep.LOGIN_FORM,
            )

        _LOGGER.debug(
            "[%s] Following login redirect to %s",
            FlowStep.LOGIN_SUBMITTED.value,
            location,
        )
        res = await self._fetch_idp(location)
        next_location = res.location
        if not next_location:
            raise MissingRedirectError(
                "Incorrect redirect returned by login screen redirect page.",
                FlowStep.LOGIN_SUBMITTED,
            )
        return next_location

    async def handle_consent_screen(self, url: str) -> SessionInfo:
        """Accept the consent screen at ``url`` and complete the login.

        Returns:
            The session info reported after the handoff.

        Raises:
            UnexpectedStatusError: If the consent POST does not return 200,
                or the confirmation GET does not return 303.
            MalformedBodyError: If the consent response has no usable
                ``location``.
            MissingRedirectError: If the 303 carries no ``Location``.
            LoginAssertionError: If the session is not logged in afterwards.
        """
        _LOGGER.debug("[%s] Posting consent form to %s", FlowStep.CONSENT.value, url)
        res = await self._fetch_idp(url, "POST", "", APPLICATION_X_WWW_FORM_URLENCODED)
        if res.status != CONSENT_STATUS:
            raise UnexpectedStatusError(
                "Incorrect status code returned by consent screen",
                CONSENT_STATUS,
                res.status,
                FlowStep.CONSENT,
            )

        payload = res.json()
        location = payload.get("location") if isinstance(payload, dict) else None
        if not isinstance(location, str) or not location:
            raise MalformedBodyError(
                "Consent screen response has no location", FlowStep.CONSENT
            )

        res = await self._fetch_idp(location)
        if res.status != CONSENT_REDIRECT_STATUS:
            raise UnexpectedStatusError(
                "Incorrect status code returned by consent screen redirect",
                CONSENT_REDIRECT_STATUS,
                res.status,
                FlowStep.CONSENT,
            )
        callback_url = res.location
        if not callback_url:
            raise MissingRedirectError(
                "No redirect location given by consent screen redirect.",
                FlowStep.CONSENT,
            )

        _LOGGER.debug(
            "[%s] Handing %s to the session", FlowStep.DONE.value, callback_url
        )
        info = await self._session.handle_incoming_redirect(callback_url)
        if info is None or not info.is_logged_in:
            raise LoginAssertionError(
                "Session is not logged in after the consent redirect.",
                FlowStep.DONE,
            )
        return info
