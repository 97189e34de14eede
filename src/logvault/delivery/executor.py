# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Single-attempt HTTP request execution with a hard per-attempt deadline."""

from __future__ import annotations

import asyncio
import base64
import logging
import secrets
from collections.abc import Mapping
from dataclasses import dataclass, field

import httpx

from logvault.core.config import ClientConfig

logger = logging.getLogger("logvault.delivery.executor")


@dataclass(frozen=True)
class AttemptOutcome:
    """Raw result of one attempt, before any interpretation.

    Exactly one of ``status_code`` (a response arrived) or ``error``
    (transport failure or timeout) is set.
    """

    status_code: int | None = None
    body: bytes = b""
    headers: Mapping[str, str] = field(default_factory=dict)
    timed_out: bool = False
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.status_code is not None and 200 <= self.status_code < 300


def generate_nonce() -> str:
    """Return 32 random bytes, base64url-encoded without padding."""
    return base64.urlsafe_b64encode(secrets.token_bytes(32)).rstrip(b"=").decode("ascii")


class RequestExecutor:
    """Performs exactly one ``POST /v1/events`` attempt.

    The attempt is wrapped in ``asyncio.timeout`` so that an elapsed deadline
    cancels the in-flight request instead of leaving it running. Status codes
    are not interpreted here; retries are not attempted here.
    """

    def __init__(self, config: ClientConfig) -> None:
        self._config = config

    def build_headers(self) -> dict[str, str]:
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._config.api_key}",
            "User-Agent": self._config.user_agent,
            "X-Client-Version": self._config.client_version,
        }
        if self._config.enable_nonce:
            headers["X-Nonce"] = generate_nonce()
        return headers

    async def execute(self, client: httpx.AsyncClient, body: bytes) -> AttemptOutcome:
        timeout_ms = round(self._config.timeout * 1000)
        try:
            async with asyncio.timeout(self._config.timeout):
                resp = await client.post(
                    self._config.events_url,
                    content=body,
                    headers=self.build_headers(),
                )
        except (TimeoutError, httpx.TimeoutException):
            logger.debug("attempt timed out after %dms", timeout_ms)
            return AttemptOutcome(timed_out=True, error=f"Request timed out ({timeout_ms}ms)")
        except httpx.RequestError as exc:
            reason = str(exc) or type(exc).__name__
            logger.debug("attempt failed at transport level: %s", reason)
            return AttemptOutcome(error=reason)

        return AttemptOutcome(
            status_code=resp.status_code,
            body=resp.content,
            headers=resp.headers,
        )
