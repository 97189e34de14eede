# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Map a failed attempt to an error kind and a retry decision."""

from __future__ import annotations

import json
from collections.abc import Mapping
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from logvault.core.constants import RETRYABLE_KINDS, ErrorKind
from logvault.core.exceptions import (
    APIError,
    AuthenticationError,
    LogVaultError,
    RateLimitError,
    ValidationError,
)

if TYPE_CHECKING:
    from logvault.delivery.executor import AttemptOutcome


@dataclass(frozen=True)
class Classification:
    """The classified failure of one attempt."""

    kind: ErrorKind
    message: str
    status_code: int | None = None
    retry_after: int | None = None
    detail: Any = None

    @property
    def retryable(self) -> bool:
        return self.kind in RETRYABLE_KINDS

    def to_error(self) -> LogVaultError:
        """Build the typed exception the caller sees for this failure."""
        if self.kind is ErrorKind.AUTHENTICATION:
            return AuthenticationError(self.message)
        if self.kind is ErrorKind.VALIDATION:
            return ValidationError(self.message, self.status_code, self.detail)
        if self.kind is ErrorKind.RATE_LIMITED:
            return RateLimitError(self.message, self.retry_after)
        return APIError(
            self.message,
            self.status_code,
            self.detail,
            kind=self.kind,
        )


def parse_retry_after(headers: Mapping[str, str] | None) -> int | None:
    """Read ``Retry-After`` as whole seconds; never raises."""
    try:
        raw = headers.get("Retry-After") if headers is not None else None
        if raw is None:
            return None
        return max(0, int(float(str(raw).strip())))
    except Exception:
        # Malformed values and broken header objects both mean "unknown".
        return None


def _parse_detail(body: bytes) -> Any:
    if not body:
        return {}
    try:
        return json.loads(body)
    except (ValueError, UnicodeDecodeError):
        return {}


def classify(outcome: AttemptOutcome) -> Classification | None:
    """Classify *outcome*; returns ``None`` for a 2xx response."""
    if outcome.succeeded:
        return None

    if outcome.timed_out:
        return Classification(
            kind=ErrorKind.TIMEOUT,
            message=outcome.error or "Request timed out",
        )

    status = outcome.status_code
    if status is None:
        return Classification(
            kind=ErrorKind.NETWORK_ERROR,
            message=f"Network error: {outcome.error or 'connection failed'}",
        )

    if status == 401:
        return Classification(
            kind=ErrorKind.AUTHENTICATION,
            message="Invalid API key",
            status_code=status,
        )
    if status == 422:
        return Classification(
            kind=ErrorKind.VALIDATION,
            message="Validation failed",
            status_code=status,
            detail=_parse_detail(outcome.body),
        )
    if status == 429:
        return Classification(
            kind=ErrorKind.RATE_LIMITED,
            message="Rate limit exceeded",
            status_code=status,
            retry_after=parse_retry_after(outcome.headers),
        )
    if status >= 500:
        return Classification(
            kind=ErrorKind.SERVER_ERROR,
            message=f"HTTP error {status}",
            status_code=status,
            detail=_parse_detail(outcome.body),
        )
    return Classification(
        kind=ErrorKind.CLIENT_ERROR,
        message=f"HTTP error {status}",
        status_code=status,
        detail=_parse_detail(outcome.body),
    )
