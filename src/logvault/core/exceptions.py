# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Custom exception hierarchy for logvault."""

from __future__ import annotations

from typing import Any

from logvault.core.constants import ErrorKind


class LogVaultError(Exception):
    """Base exception for all logvault errors."""

    kind: ErrorKind | None = None


class AuthenticationError(LogVaultError):
    """Missing, malformed, invalid or revoked API key."""

    kind = ErrorKind.AUTHENTICATION


class ValidationError(LogVaultError):
    """Event rejected, either locally before sending or by the server (HTTP 422).

    Attributes
    ----------
    status_code : int | None
        ``422`` when the server rejected the event, ``None`` for local checks.
    data : Any
        Server-reported validation detail, when available.
    """

    kind = ErrorKind.VALIDATION

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        data: Any = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.data = data


class RateLimitError(LogVaultError):
    """Raised on HTTP 429. The engine never retries these itself."""

    kind = ErrorKind.RATE_LIMITED

    def __init__(self, message: str, retry_after: int | None = None) -> None:
        super().__init__(message)
        self.retry_after = retry_after


class APIError(LogVaultError):
    """Any other failure: server errors, timeouts, network failures, other 4xx."""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response: Any = None,
        *,
        kind: ErrorKind | None = None,
    ) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.response = response
        self.kind = kind


class ConfigurationError(LogVaultError):
    """Invalid client configuration."""
