# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Resilient event delivery: bounded retries with exponential backoff.

Each ``send()`` runs an explicit state machine::

    IDLE -> ATTEMPTING -> SUCCEEDED
                       -> CLASSIFYING -> RETRYING -> ATTEMPTING
                                      -> FAILED

Terminal kinds (authentication, validation, rate limiting, other 4xx) fail
immediately. Retryable kinds (server error, timeout, network error) retry
while ``retries < max_retries`` and otherwise fail with the last classified
error. The loop performs at most ``max_retries + 1`` attempts.
"""

from __future__ import annotations

import asyncio
import json
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field

import httpx
from pydantic import ValidationError as PydanticValidationError

from logvault.core.config import ClientConfig
from logvault.core.constants import (
    ACTION_PATTERN,
    MAX_PAYLOAD_BYTES,
    TERMINAL_STATES,
    DeliveryState,
    ErrorKind,
)
from logvault.core.exceptions import APIError, ValidationError
from logvault.delivery.backoff import BackoffPolicy
from logvault.delivery.base import EventDelivery
from logvault.delivery.classifier import Classification, classify
from logvault.delivery.executor import AttemptOutcome, RequestExecutor
from logvault.models.event import AuditEvent, AuditEventRecord, SerializationFailure

logger = logging.getLogger("logvault.delivery.engine")

Sleeper = Callable[[float], Awaitable[None]]


def validate_event(event: AuditEvent) -> None:
    """Pre-flight checks that need no network. Raises :class:`ValidationError`."""
    if not ACTION_PATTERN.match(event.action):
        raise ValidationError(
            f"Invalid action format '{event.action}'. "
            "Expected format: 'domain.event' (e.g., auth.login)"
        )
    if not event.user_id:
        raise ValidationError("user_id is required")


def serialize_event(event: AuditEvent) -> bytes:
    """Encode the request body.

    Raises ``TypeError``/``ValueError`` when the event cannot be serialized
    and :class:`ValidationError` when the body exceeds 1 MiB.
    """
    body = json.dumps(event.to_payload(), separators=(",", ":")).encode("utf-8")
    if len(body) > MAX_PAYLOAD_BYTES:
        raise ValidationError(
            f"Payload exceeds 1MB limit ({len(body)} bytes)"
        )
    return body


@dataclass
class DeliveryRun:
    """Mutable bookkeeping for a single ``send()`` call."""

    max_retries: int
    state: DeliveryState = DeliveryState.IDLE
    attempts: int = 0
    retries: int = 0
    last_failure: Classification | None = None
    history: list[DeliveryState] = field(default_factory=list)

    def transition(self, new_state: DeliveryState) -> None:
        logger.debug(
            "delivery %s -> %s (attempt %d, retries %d/%d)",
            self.state,
            new_state,
            self.attempts,
            self.retries,
            self.max_retries,
            extra={"state": str(new_state), "attempt": self.attempts},
        )
        self.history.append(new_state)
        self.state = new_state


class DeliveryEngine(EventDelivery):
    """Sends events to ``POST {base_url}/v1/events`` with bounded retries.

    Parameters
    ----------
    config:
        Immutable client configuration.
    backoff:
        Delay policy consulted before each retry.
    transport:
        Optional ``httpx`` transport (tests use ``httpx.MockTransport``).
    sleep:
        Coroutine used for backoff waits; the only suspension point
        besides the request itself.
    """

    def __init__(
        self,
        config: ClientConfig,
        *,
        backoff: BackoffPolicy | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        sleep: Sleeper = asyncio.sleep,
    ) -> None:
        self._config = config
        self._backoff = backoff or BackoffPolicy()
        self._transport = transport
        self._sleep = sleep
        self._executor = RequestExecutor(config)

    @property
    def name(self) -> str:
        return "http"

    @property
    def config(self) -> ClientConfig:
        return self._config

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout),
            transport=self._transport,
        )

    async def send(self, event: AuditEvent) -> AuditEventRecord | SerializationFailure:
        validate_event(event)

        try:
            body = serialize_event(event)
        except (TypeError, ValueError) as exc:
            logger.exception(
                "Serialization failed for action=%s", event.action, extra={"action": event.action}
            )
            return SerializationFailure(reason=str(exc))

        run = DeliveryRun(max_retries=self._config.max_retries)
        try:
            async with asyncio.timeout(self._config.total_timeout):
                return await self._run(run, body)
        except TimeoutError:
            logger.warning(
                "Delivery deadline of %.1fs exceeded after %d attempt(s)",
                self._config.total_timeout,
                run.attempts,
            )
            raise APIError(
                f"Delivery deadline of {self._config.total_timeout}s exceeded "
                f"after {run.attempts} attempt(s)",
                kind=ErrorKind.TIMEOUT,
            ) from None

    async def _run(self, run: DeliveryRun, body: bytes) -> AuditEventRecord:
        outcome = AttemptOutcome()

        async with self._client() as client:
            run.transition(DeliveryState.ATTEMPTING)
            while run.state not in TERMINAL_STATES:
                if run.state is DeliveryState.ATTEMPTING:
                    run.attempts += 1
                    outcome = await self._executor.execute(client, body)
                    run.transition(
                        DeliveryState.SUCCEEDED if outcome.succeeded else DeliveryState.CLASSIFYING
                    )

                elif run.state is DeliveryState.CLASSIFYING:
                    run.last_failure = classify(outcome)
                    if (
                        run.last_failure is not None
                        and run.last_failure.retryable
                        and run.retries < run.max_retries
                    ):
                        run.transition(DeliveryState.RETRYING)
                    else:
                        run.transition(DeliveryState.FAILED)

                elif run.state is DeliveryState.RETRYING:
                    delay = self._backoff.delay(run.retries + 1)
                    logger.warning(
                        "Delivery attempt %d/%d failed (%s), retrying in %.2fs",
                        run.attempts,
                        run.max_retries + 1,
                        run.last_failure.kind if run.last_failure else "unknown",
                        delay,
                        extra={
                            "attempt": run.attempts,
                            "max_attempts": run.max_retries + 1,
                            "kind": run.last_failure.kind if run.last_failure else None,
                            "delay_ms": round(delay * 1000),
                        },
                    )
                    await self._sleep(delay)
                    run.retries += 1
                    run.transition(DeliveryState.ATTEMPTING)

        if run.state is DeliveryState.SUCCEEDED:
            return _parse_record(outcome)

        failure = run.last_failure
        if failure is None:
            raise APIError("Delivery failed without a classified error")
        logger.warning(
            "Delivery failed after %d attempt(s): %s (%s)",
            run.attempts,
            failure.message,
            failure.kind,
            extra={
                "attempt": run.attempts,
                "kind": failure.kind,
                "status_code": failure.status_code,
            },
        )
        raise failure.to_error()


def _parse_record(outcome: AttemptOutcome) -> AuditEventRecord:
    try:
        return AuditEventRecord.model_validate_json(outcome.body)
    except PydanticValidationError as exc:
        raise APIError(
            "Invalid response body from server",
            outcome.status_code,
            outcome.body[:200].decode("utf-8", errors="replace"),
        ) from exc
