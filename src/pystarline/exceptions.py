"""Custom exception hierarchy for pystarline."""

from __future__ import annotations


class StarlineError(Exception):
    """Base exception for all pystarline errors."""


class StarlineConfigError(StarlineError):
    """Invalid or missing configuration."""


class StarlineTransportError(StarlineError):
    """HTTP-level failure (network, timeout, non-2xx without a JSON body)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class StarlineDecodeError(StarlineError):
    """Response body is not JSON or does not match the expected shape."""

    def __init__(self, message: str, *, endpoint: str = "") -> None:
        self.endpoint = endpoint
        super().__init__(message)


class StarlineStartupError(StarlineError):
    """The one-time startup reads failed.

    Raised when the event catalog cannot be loaded or the very first
    device snapshot cannot be fetched.  The dashboard has nothing useful
    to show in that case, so the process should exit with a diagnostic.
    """
