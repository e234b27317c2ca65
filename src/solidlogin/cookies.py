"""In-memory cookie jar for a single login flow.

The IdP expects cookies to be replayed exactly as they were set, so this
jar keeps raw values rather than going through ``http.cookies``, which
quotes values containing ``+``, ``/`` or ``=``.  Cookies are keyed by name
only; ``Domain`` and ``Path`` are recorded but never used for matching,
which is sufficient while a flow talks to a single IdP origin.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

_LOGGER = logging.getLogger(__name__)

# A comma only separates two cookies when it is followed by ``name=``.
# Commas inside attribute values such as ``Expires=Wed, 21 Oct 2015 ...``
# reach a ``;`` or the end of the string before any ``=``.
_COOKIE_SEPARATOR = re.compile(r",(?=\s*[^\s=;,][^=;,]*=)")


@dataclass(frozen=True, slots=True)
class Cookie:
    """A single cookie parsed from a ``Set-Cookie`` header."""

    name: str
    value: str
    attributes: dict[str, str | bool] = field(default_factory=dict)


def split_cookies_string(header: str) -> list[str]:
    """Split a combined ``Set-Cookie`` header into individual cookie strings."""
    return [part.strip() for part in _COOKIE_SEPARATOR.split(header) if part.strip()]


def parse_set_cookie(entry: str) -> Cookie | None:
    """Parse one ``Set-Cookie`` entry.

    Returns None when the entry has no ``name=value`` pair.
    """
    pair, *attrs = entry.split(";")
    name, sep, value = pair.partition("=")
    name = name.strip()
    if not sep or not name:
        return None

    attributes: dict[str, str | bool] = {}
    for attr in attrs:
        key, sep, attr_value = attr.partition("=")
        key = key.strip().lower()
        if not key:
            continue
        attributes[key] = attr_value.strip() if sep else True
    return Cookie(name=name, value=value.strip(), attributes=attributes)


class CookieJar:
    """Cookies seen during one login flow, keyed by name.

    A later cookie with the same name replaces the earlier one but keeps its
    original position, so :meth:`render` output is stable.
    """

    def __init__(self) -> None:
        self._cookies: dict[str, Cookie] = {}

    def __len__(self) -> int:
        return len(self._cookies)

    def __contains__(self, name: object) -> bool:
        return name in self._cookies

    def __iter__(self) -> Iterator[Cookie]:
        return iter(self._cookies.values())

    def get(self, name: str) -> Cookie | None:
        """Return the stored cookie with the given name, if any."""
        return self._cookies.get(name)

    def record(self, set_cookie: str | Iterable[str]) -> None:
        """Upsert every cookie found in one or more ``Set-Cookie`` values."""
        headers = [set_cookie] if isinstance(set_cookie, str) else set_cookie
        for header in headers:
            for entry in split_cookies_string(header):
                cookie = parse_set_cookie(entry)
                if cookie is None:
                    _LOGGER.debug("Ignoring Set-Cookie entry without a name")
                    continue
                self._cookies[cookie.name] = cookie

    def render(self) -> str:
        """Return the ``Cookie`` request header value for all stored cookies."""
        return "; ".join(f"{c.name}={c.value}" for c in self._cookies.values())
