"""Constants for the solidlogin library."""

from __future__ import annotations

from enum import Enum

APPLICATION_X_WWW_FORM_URLENCODED: str = "application/x-www-form-urlencoded"

ENV_IDP: str = "SOLID_IDP"
ENV_EMAIL: str = "SOLID_EMAIL"
ENV_PASSWORD: str = "SOLID_PASSWORD"

REDIRECT_STATUSES: frozenset[int] = frozenset({301, 302, 303, 307, 308})

CONSENT_STATUS: int = 200
CONSENT_REDIRECT_STATUS: int = 303


class FlowStep(Enum):
    """Position of a login flow in the fixed hop sequence."""

    START = "start"
    LOGIN_FORM = "login-form"
    LOGIN_SUBMITTED = "login-submitted"
    CONSENT = "consent"
    DONE = "done"
