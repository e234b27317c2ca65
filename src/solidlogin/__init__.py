"""Automated OIDC login and consent against Solid identity providers."""

from __future__ import annotations

__version__ = "0.1.0"

from solidlogin.const import FlowStep
from solidlogin.cookies import Cookie, CookieJar
from solidlogin.exceptions import (
    ConfigurationError,
    LoginAssertionError,
    MalformedBodyError,
    MissingRedirectError,
    SolidLoginError,
    TransportError,
    UnexpectedStatusError,
)
from solidlogin.fetcher import ManualRedirectFetcher
from solidlogin.models import FetchOptions, LoginOptions, ResponseSnapshot
from solidlogin.provider import SessionHandle, SessionInfo, SolidSessionProvider

__all__ = [
    "__version__",
    # Provider
    "SessionHandle",
    "SessionInfo",
    "SolidSessionProvider",
    # HTTP
    "Cookie",
    "CookieJar",
    "ManualRedirectFetcher",
    # Exceptions
    "ConfigurationError",
    "LoginAssertionError",
    "MalformedBodyError",
    "MissingRedirectError",
    "SolidLoginError",
    "TransportError",
    "UnexpectedStatusError",
    # Dataclasses
    "FetchOptions",
    "LoginOptions",
    "ResponseSnapshot",
    # Enums
    "FlowStep",
]
