"""Data models for the solidlogin library."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import urljoin

from multidict import MultiMapping

from solidlogin.const import ENV_EMAIL, ENV_IDP, ENV_PASSWORD
from solidlogin.exceptions import ConfigurationError, MalformedBodyError

# ---------------------------------------------------------------------------
# Login configuration
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class LoginOptions:
    """Credentials and IdP location for one login attempt."""

    idp: str
    email: str
    password: str = field(repr=False)

    @classmethod
    def from_env(cls, environ: dict[str, str] | None = None) -> LoginOptions:
        """Build login options from the ``SOLID_*`` environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ``.

        Raises:
            ConfigurationError: If any of the variables is unset or empty.
        """
        env = os.environ if environ is None else environ
        names = (ENV_IDP, ENV_EMAIL, ENV_PASSWORD)
        missing = [name for name in names if not env.get(name)]
        if missing:
            raise ConfigurationError(
                f"Missing login configuration: {', '.join(missing)}"
            )
        return cls(
            idp=env[ENV_IDP],
            email=env[ENV_EMAIL],
            password=env[ENV_PASSWORD],
        )


# ---------------------------------------------------------------------------
# HTTP request / response projections
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class FetchOptions:
    """Options for a single IdP request."""

    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: str | None = None
    follow_redirects: bool = False


@dataclass(frozen=True, slots=True)
class ResponseSnapshot:
    """The part of an HTTP response the login flow inspects."""

    status: int
    url: str
    headers: MultiMapping[str]
    body: bytes = b""

    @property
    def location(self) -> str | None:
        """Return the absolute ``Location`` target, or None when absent."""
        location = self.headers.get("Location")
        if not location:
            return None
        return urljoin(self.url, location)

    def text(self, encoding: str = "utf-8") -> str:
        """Return the body decoded as text."""
        return self.body.decode(encoding, errors="replace")

    def json(self) -> Any:
        """Return the body parsed as JSON.

        Raises:
            MalformedBodyError: If the body is not valid JSON.
        """
        try:
            return json.loads(self.body)
        except ValueError as exc:
            raise MalformedBodyError(
                f"Response from {self.url} is not valid JSON: {exc}"
            ) from exc
