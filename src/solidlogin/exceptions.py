"""Exception hierarchy for the solidlogin library."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from solidlogin.const import FlowStep


class SolidLoginError(Exception):
    """Base exception for all solidlogin errors."""

    def __init__(self, message: str, step: FlowStep | None = None) -> None:
        self.step = step
        super().__init__(message)


class ConfigurationError(SolidLoginError):
    """Raised when login options cannot be assembled."""


class MissingRedirectError(SolidLoginError):
    """Raised when a hop does not return the expected Location header."""


class UnexpectedStatusError(SolidLoginError):
    """Raised when a hop returns a status code other than the expected one."""

    def __init__(
        self,
        message: str,
        expected: int,
        status: int,
        step: FlowStep | None = None,
    ) -> None:
        self.expected = expected
        self.status = status
        super().__init__(f"{message}: expected {expected}, got {status}", step)


class TransportError(SolidLoginError):
    """Raised when the underlying HTTP transport fails."""


class MalformedBodyError(SolidLoginError):
    """Raised when a response body cannot be decoded as expected."""


class LoginAssertionError(SolidLoginError):
    """Raised when the session handle is not logged in after the handoff."""
