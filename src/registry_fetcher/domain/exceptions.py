"""Domain exception hierarchy.

Each exception maps to a specific HTTP status code at the interface layer.
Inner layers raise these; the outermost error-handler translates them.
"""

from __future__ import annotations


class RegistryFetcherError(Exception):
    """Base exception for the entire application."""


# ── Input validation ────────────────────────────────────────────────────────


class ValidationFailedError(RegistryFetcherError):
    """Caller-supplied arguments violate the method's shape rules."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = list(messages)
        super().__init__("Validation failed: " + "; ".join(self.messages))


class UnknownMethodError(RegistryFetcherError):
    """The requested method is not served by the façade."""


# ── Remote host errors ──────────────────────────────────────────────────────


class NotFoundError(RegistryFetcherError):
    """The requested component, demo, block or path does not exist (404)."""


class AuthenticationFailedError(RegistryFetcherError):
    """The configured credential was rejected (401)."""


class ForbiddenError(RegistryFetcherError):
    """Permission denied for a reason other than rate limiting (403)."""


class RateLimitedError(RegistryFetcherError):
    """Host call quota exhausted (429 / 403 with a rate-limit indicator)."""


class NetworkError(RegistryFetcherError):
    """Transport-level failure: refused connection, unresolved host, timeout."""


class RemoteError(RegistryFetcherError):
    """Any other non-2xx response from the host."""

    def __init__(self, status_code: int, message: str) -> None:
        self.status_code = status_code
        self.message = message
        super().__init__(f"GitHub API error ({status_code}): {message}")


# ── Failure isolation ───────────────────────────────────────────────────────


class ServiceUnavailableError(RegistryFetcherError):
    """The circuit breaker is open; the downstream was not contacted."""
