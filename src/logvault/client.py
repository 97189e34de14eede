# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Async client for the LogVault audit-log API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from datetime import datetime
from typing import Any, Literal, TypeVar

import httpx
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from logvault.chain.verifier import verify_locally
from logvault.core.config import ClientConfig, Settings, get_settings
from logvault.core.constants import (
    API_KEY_PREFIXES,
    CHAIN_VERIFY_LIMIT_DEFAULT,
    CHAIN_VERIFY_LIMIT_MAX,
    DEFAULT_BASE_URL,
    DEFAULT_MAX_RETRIES,
    DEFAULT_TIMEOUT,
    LIST_PAGE_SIZE_DEFAULT,
    LIST_PAGE_SIZE_MAX,
    ErrorKind,
)
from logvault.core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    ValidationError,
)
from logvault.delivery.backoff import BackoffPolicy
from logvault.delivery.base import EventDelivery
from logvault.delivery.engine import DeliveryEngine
from logvault.delivery.local import LocalDeliveryEngine
from logvault.models.chain import (
    ChainStats,
    ChainVerificationResult,
    EventProof,
    VerificationResult,
)
from logvault.models.event import (
    AuditEvent,
    AuditEventList,
    AuditEventRecord,
    ChainLink,
    SerializationFailure,
    VerifyEventResponse,
)

logger = logging.getLogger("logvault.client")

_ModelT = TypeVar("_ModelT", bound=BaseModel)


def validate_api_key(api_key: str) -> None:
    """Raise :class:`AuthenticationError` unless *api_key* is well-formed."""
    if not api_key:
        raise AuthenticationError("API key is required")
    if not api_key.startswith(API_KEY_PREFIXES):
        raise AuthenticationError(
            "Invalid API key format: must start with 'lv_live_' or 'lv_test_'"
        )


def _check_response(resp: httpx.Response, context: str = "", event_id: str | None = None) -> None:
    """Raise a typed error for non-2xx responses of read endpoints."""
    if resp.is_success:
        return
    if resp.status_code == 401:
        raise AuthenticationError("Invalid API key")
    if resp.status_code == 404 and event_id is not None:
        raise APIError(f"Event not found: {event_id}", 404, kind=ErrorKind.CLIENT_ERROR)
    msg = f"{context}: HTTP error {resp.status_code}" if context else f"HTTP error {resp.status_code}"
    kind = ErrorKind.SERVER_ERROR if resp.status_code >= 500 else ErrorKind.CLIENT_ERROR
    raise APIError(msg, resp.status_code, resp.text[:200], kind=kind)


def _parse(resp: httpx.Response, model: type[_ModelT]) -> _ModelT:
    """Validate a 2xx body into *model*; malformed bodies become :class:`APIError`."""
    try:
        return model.model_validate_json(resp.content)
    except PydanticValidationError as exc:
        logger.warning("Unparseable %s body (HTTP %d)", model.__name__, resp.status_code)
        raise APIError(
            "Invalid response body from server",
            resp.status_code,
            resp.text[:200],
            kind=ErrorKind.SERVER_ERROR,
        ) from exc


class LogVaultClient:
    """Client for sending audit events and inspecting the hash chain.

    Parameters
    ----------
    api_key:
        ``lv_live_...`` or ``lv_test_...`` key. Checked here, at
        construction, unless local mode is active.
    base_url:
        Override the API base URL (useful for testing).
    timeout:
        Per-attempt timeout in seconds.
    max_retries:
        Retries after the first attempt for retryable failures.
    enable_nonce:
        Send a fresh ``X-Nonce`` header with every attempt.
    total_timeout:
        Optional wall-clock budget across all attempts and backoff waits.
    local_mode:
        ``True`` to render events to the console instead of sending them,
        ``"auto"`` to enable it when *environment* is ``development``.
    environment:
        Deployment environment consulted by ``local_mode="auto"``; read
        from settings when omitted.
    delivery:
        Replace the delivery strategy entirely.
    transport:
        ``httpx`` transport shared by delivery and read calls.

    Raises
    ------
    AuthenticationError
        Missing or malformed API key outside local mode.
    ConfigurationError
        Non-positive timeouts or a negative retry count.
    """

    def __init__(
        self,
        api_key: str = "",
        *,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        enable_nonce: bool = False,
        total_timeout: float | None = None,
        local_mode: bool | Literal["auto"] = False,
        environment: str | None = None,
        backoff: BackoffPolicy | None = None,
        delivery: EventDelivery | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if local_mode == "auto":
            env = environment if environment is not None else get_settings().environment
            self._local_mode = env.lower() == "development"
        else:
            self._local_mode = bool(local_mode)

        if not self._local_mode:
            validate_api_key(api_key)

        try:
            self._config = ClientConfig(
                api_key=api_key,
                base_url=base_url,
                timeout=timeout,
                max_retries=max_retries,
                enable_nonce=enable_nonce,
                total_timeout=total_timeout,
            )
        except PydanticValidationError as exc:
            raise ConfigurationError(f"Invalid client configuration: {exc}") from exc
        self._transport = transport

        if delivery is not None:
            self._delivery = delivery
        elif self._local_mode:
            self._delivery = LocalDeliveryEngine()
        else:
            self._delivery = DeliveryEngine(self._config, backoff=backoff, transport=transport)

    @classmethod
    def from_settings(cls, settings: Settings | None = None, **overrides: Any) -> LogVaultClient:
        """Build a client from ``LOGVAULT_*`` environment settings."""
        settings = settings or get_settings()
        kwargs: dict[str, Any] = {
            "base_url": settings.base_url,
            "timeout": settings.timeout,
            "max_retries": settings.max_retries,
            "enable_nonce": settings.enable_nonce,
            "total_timeout": settings.total_timeout,
            "local_mode": settings.local_mode,
            "environment": settings.environment,
        }
        kwargs.update(overrides)
        return cls(settings.api_key, **kwargs)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def delivery(self) -> EventDelivery:
        return self._delivery

    @property
    def is_local_mode(self) -> bool:
        return self._local_mode

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self._config.timeout),
            headers={
                "Authorization": f"Bearer {self._config.api_key}",
                "User-Agent": self._config.user_agent,
            },
            transport=self._transport,
        )

    async def _get(
        self,
        path: str,
        *,
        params: Mapping[str, str | int] | None = None,
        context: str = "",
        event_id: str | None = None,
    ) -> httpx.Response:
        logger.debug("GET %s params=%s", path, dict(params or {}))
        try:
            async with self._client() as client:
                resp = await client.get(f"{self._config.base_url}{path}", params=params)
        except httpx.TimeoutException as exc:
            raise APIError(
                f"Request timed out ({round(self._config.timeout * 1000)}ms)",
                kind=ErrorKind.TIMEOUT,
            ) from exc
        except httpx.RequestError as exc:
            raise APIError(f"Network error: {exc}", kind=ErrorKind.NETWORK_ERROR) from exc

        _check_response(resp, context, event_id)
        return resp

    # -----------------------------------------------------------------
    # Delivery
    # -----------------------------------------------------------------

    async def log(
        self,
        event: AuditEvent | None = None,
        *,
        action: str | None = None,
        user_id: str | None = None,
        resource: str | None = None,
        metadata: dict[str, Any] | None = None,
        timestamp: datetime | str | None = None,
    ) -> AuditEventRecord | SerializationFailure:
        """Send one audit event.

        Either pass a prepared :class:`AuditEvent` or the individual fields.

        Raises:
            ValidationError: Bad action format, missing user, payload over
                1 MiB, or HTTP 422.
            AuthenticationError: HTTP 401.
            RateLimitError: HTTP 429; see ``retry_after``.
            APIError: Server errors, timeouts and network failures once
                retries are exhausted, and other non-2xx statuses.
        """
        if event is None:
            try:
                event = AuditEvent(
                    action=action or "",
                    user_id=user_id or "",
                    resource=resource,
                    metadata=metadata,
                    timestamp=timestamp,
                )
            except PydanticValidationError as exc:
                raise ValidationError(str(exc), data=exc.errors()) from exc

        return await self._delivery.send(event)

    def log_sync(
        self,
        event: AuditEvent | None = None,
        **fields: Any,
    ) -> AuditEventRecord | SerializationFailure:
        """Blocking :meth:`log`; not for use inside a running event loop."""
        return asyncio.run(self.log(event, **fields))

    # -----------------------------------------------------------------
    # Read endpoints
    # -----------------------------------------------------------------

    async def list_events(
        self,
        *,
        page: int = 1,
        page_size: int = LIST_PAGE_SIZE_DEFAULT,
        user_id: str | None = None,
        action: str | None = None,
    ) -> AuditEventList:
        """List audit events, newest first, with optional filters."""
        params: dict[str, str | int] = {
            "page": max(page, 1),
            "page_size": min(page_size, LIST_PAGE_SIZE_MAX),
        }
        if user_id:
            params["user_id"] = user_id
        if action:
            params["action"] = action

        resp = await self._get("/v1/events", params=params, context="list events")
        return _parse(resp, AuditEventList)

    async def get_event(self, event_id: str) -> AuditEventRecord:
        """Fetch a single stored event."""
        resp = await self._get(f"/v1/events/{event_id}", event_id=event_id)
        return _parse(resp, AuditEventRecord)

    async def verify_event(self, event_id: str) -> VerifyEventResponse:
        """Ask the service to verify an event's signature."""
        resp = await self._get(f"/v1/events/{event_id}/verify", event_id=event_id)
        return _parse(resp, VerifyEventResponse)

    # -----------------------------------------------------------------
    # Chain integrity
    # -----------------------------------------------------------------

    async def verify_chain(
        self,
        *,
        start_date: str | None = None,
        end_date: str | None = None,
        limit: int = CHAIN_VERIFY_LIMIT_DEFAULT,
    ) -> ChainVerificationResult:
        """Ask the service to walk the hash chain.

        The service checks that each ``chain_hash`` is correctly computed and
        that each ``prev_hash`` matches the preceding event's ``chain_hash``.
        """
        params: dict[str, str | int] = {"limit": min(limit, CHAIN_VERIFY_LIMIT_MAX)}
        if start_date:
            params["start_date"] = start_date
        if end_date:
            params["end_date"] = end_date

        resp = await self._get("/v1/chain/verify", params=params, context="verify chain")
        return _parse(resp, ChainVerificationResult)

    async def get_chain_stats(self) -> ChainStats:
        resp = await self._get("/v1/chain/stats", context="chain stats")
        return _parse(resp, ChainStats)

    async def get_event_proof(self, event_id: str) -> EventProof:
        """Fetch the cryptographic proof for *event_id*.

        Check it offline with :func:`logvault.chain.verify_proof` rather than
        trusting the service's own verdict.
        """
        resp = await self._get(f"/v1/events/{event_id}/proof", event_id=event_id)
        return _parse(resp, EventProof)

    def verify_event_locally(
        self,
        event: ChainLink | Mapping[str, Any],
        prev_chain_hash: str | None = None,
    ) -> VerificationResult:
        """Offline chain-hash check; performs no network call."""
        return verify_locally(event, prev_chain_hash)
