"""Single-hop HTTP requests against the IdP with manual redirect handling."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from urllib.parse import parse_qsl

import aiohttp
import yarl
from multidict import MultiMapping

from solidlogin.cookies import CookieJar
from solidlogin.exceptions import TransportError
from solidlogin.models import FetchOptions, ResponseSnapshot

_LOGGER = logging.getLogger(__name__)

_BODY_PREVIEW_LIMIT = 2000
_MASKED_FIELDS = frozenset({"password"})


def _mask_body(body: str) -> str:
    """Mask secret fields in a urlencoded body for logging."""
    if "=" not in body:
        return body
    pairs = parse_qsl(body, keep_blank_values=True)
    return "&".join(f"{k}={'***' if k in _MASKED_FIELDS else v}" for k, v in pairs)


def _log_request(
    method: str,
    url: str,
    *,
    headers: Mapping[str, str] | None = None,
    body: str | None = None,
) -> None:
    """Log an outgoing HTTP request at DEBUG level."""
    _LOGGER.debug(">>> %s %s", method, url)
    if headers:
        safe = dict(headers)
        if "Cookie" in safe:
            names = [part.split("=", 1)[0] for part in safe["Cookie"].split("; ")]
            safe["Cookie"] = f"<{', '.join(names)}>"
        _LOGGER.debug(">>>   headers: %s", safe)
    if body:
        _LOGGER.debug(">>>   body: %s", _mask_body(body))


def _log_response(
    status: int,
    url: str,
    headers: MultiMapping[str],
    body: str | None = None,
) -> None:
    """Log an incoming HTTP response at DEBUG level."""
    _LOGGER.debug("<<< %s %s", status, url)
    safe = {k: v for k, v in headers.items() if k.lower() != "set-cookie"}
    _LOGGER.debug("<<<   headers: %s", safe)
    if body is not None:
        preview = body[:_BODY_PREVIEW_LIMIT]
        if len(body) > _BODY_PREVIEW_LIMIT:
            preview += f"... ({len(body)} bytes total)"
        _LOGGER.debug("<<<   body: %s", preview)


class ManualRedirectFetcher:
    """Issue IdP requests without following redirects, tracking cookies.

    Every response's ``Set-Cookie`` headers are fed into the shared
    :class:`CookieJar`, and the jar's contents are sent back on the next
    request.  The aiohttp session should be created with a
    ``DummyCookieJar`` so aiohttp does not inject cookies of its own.

    Instances are not safe for concurrent use: the jar is mutated without
    synchronisation.
    """

    def __init__(self, session: aiohttp.ClientSession, jar: CookieJar) -> None:
        self._session = session
        self._jar = jar

    @property
    def jar(self) -> CookieJar:
        """The cookie jar updated by every fetch."""
        return self._jar

    def _build_options(
        self,
        method: str,
        body: str | None,
        content_type: str | None,
    ) -> FetchOptions:
        headers: dict[str, str] = {}
        cookie = self._jar.render()
        if cookie:
            headers["Cookie"] = cookie
        if content_type:
            headers["Content-Type"] = content_type
        return FetchOptions(method=method, headers=headers, body=body)

    async def fetch(
        self,
        url: str,
        method: str = "GET",
        body: str | None = None,
        content_type: str | None = None,
    ) -> ResponseSnapshot:
        """Perform one request and return a snapshot of the response.

        Args:
            url: URL to request.
            method: HTTP method.
            body: Optional request body, sent as-is.
            content_type: Content-Type of ``body``.

        Returns:
            The response status, headers and fully read body.

        Raises:
            TransportError: If aiohttp fails to complete the request.
        """
        options = self._build_options(method, body, content_type)
        _log_request(options.method, url, headers=options.headers, body=body)
        try:
            async with self._session.request(
                options.method,
                yarl.URL(url, encoded=True),
                headers=options.headers,
                data=options.body,
                allow_redirects=options.follow_redirects,
            ) as resp:
                raw = await resp.read()
                snapshot = ResponseSnapshot(
                    status=resp.status,
                    url=str(resp.url),
                    headers=resp.headers,
                    body=raw,
                )
        except aiohttp.ClientError as exc:
            raise TransportError(
                f"Network error during {options.method} {url}: {exc}"
            ) from exc

        _log_response(
            snapshot.status,
            snapshot.url,
            snapshot.headers,
            snapshot.text() if snapshot.body else None,
        )

        set_cookies = snapshot.headers.getall("Set-Cookie", [])
        if set_cookies:
            self._jar.record(set_cookies)
            _LOGGER.debug(
                "Cookie jar now holds: %s", ", ".join(c.name for c in self._jar)
            )
        return snapshot
