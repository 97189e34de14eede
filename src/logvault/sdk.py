# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Module-level convenience API.

Usage::

    from logvault import log, log_sync, verify_file

    # Synchronous (blocking), configured from LOGVAULT_* variables
    record = log_sync(action="auth.login", user_id="user_123")

    # Async
    record = await log(action="document.delete", user_id="u1", resource="doc:42")

    # Offline audit of an exported chain segment
    result = verify_file("events.json")
    print(result.is_valid, result.details)
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any

from pydantic import ValidationError as PydanticValidationError

from logvault.chain.verifier import verify_locally, verify_proof, verify_sequence
from logvault.client import LogVaultClient
from logvault.core.exceptions import ValidationError
from logvault.models.chain import ChainVerificationResult, EventProof, VerificationResult
from logvault.models.event import AuditEvent, AuditEventRecord, SerializationFailure

logger = logging.getLogger("logvault.sdk")


# ---------------------------------------------------------------------------
# Public async API
# ---------------------------------------------------------------------------


async def log(
    event: AuditEvent | None = None,
    *,
    action: str | None = None,
    user_id: str | None = None,
    resource: str | None = None,
    metadata: dict[str, Any] | None = None,
    timestamp: datetime | str | None = None,
    client: LogVaultClient | None = None,
) -> AuditEventRecord | SerializationFailure:
    """Send one event with *client*, or with a client built from settings.

    Parameters
    ----------
    event:
        A prepared event; alternatively pass the individual fields.
    client:
        Reuse an existing client. When omitted, one is built with
        :meth:`LogVaultClient.from_settings`.
    """
    client = client or LogVaultClient.from_settings()
    return await client.log(
        event,
        action=action,
        user_id=user_id,
        resource=resource,
        metadata=metadata,
        timestamp=timestamp,
    )


async def check_proof(
    event_id: str,
    *,
    client: LogVaultClient | None = None,
) -> tuple[EventProof, VerificationResult]:
    """Fetch the server proof for *event_id* and recompute it locally.

    The returned :class:`VerificationResult` comes from this process, not
    from the service.
    """
    client = client or LogVaultClient.from_settings()
    proof = await client.get_event_proof(event_id)
    return proof, verify_proof(proof)


# ---------------------------------------------------------------------------
# Offline helpers
# ---------------------------------------------------------------------------


def verify_file(
    path: str | Path,
    *,
    prev_chain_hash: str | None = None,
) -> VerificationResult | ChainVerificationResult:
    """Verify an exported event or chain segment stored as JSON.

    A JSON object is checked with :func:`verify_locally` (optionally against
    *prev_chain_hash*); a JSON array is walked in order with
    :func:`verify_sequence`.

    Raises:
        ValidationError: The file is not valid JSON, holds neither an
            object nor an array, or contains a malformed event record.
    """
    resolved = Path(path)
    try:
        data = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValidationError(f"{resolved.name}: not valid JSON ({exc.msg} at line {exc.lineno})") from exc

    if not isinstance(data, (dict, list)):
        raise ValidationError(
            f"{resolved.name}: expected a JSON object or array, got {type(data).__name__}"
        )

    try:
        if isinstance(data, dict):
            logger.debug("verifying single event from %s", resolved)
            return verify_locally(data, prev_chain_hash)
        logger.debug("verifying %d event(s) from %s", len(data), resolved)
        return verify_sequence(data)
    except PydanticValidationError as exc:
        first = exc.errors()[0]
        field = ".".join(str(part) for part in first["loc"]) or "record"
        raise ValidationError(
            f"{resolved.name}: malformed event record ({field}: {first['msg']})",
            data=exc.errors(),
        ) from exc
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"{resolved.name}: malformed event record ({exc})") from exc


# ---------------------------------------------------------------------------
# Public sync wrappers
# ---------------------------------------------------------------------------


def log_sync(
    event: AuditEvent | None = None,
    *,
    action: str | None = None,
    user_id: str | None = None,
    resource: str | None = None,
    metadata: dict[str, Any] | None = None,
    timestamp: datetime | str | None = None,
    client: LogVaultClient | None = None,
) -> AuditEventRecord | SerializationFailure:
    """Synchronous wrapper around :func:`log`.

    Calls ``asyncio.run()`` internally, so it must **not** be called from
    within an already-running event loop.
    """
    return asyncio.run(
        log(
            event,
            action=action,
            user_id=user_id,
            resource=resource,
            metadata=metadata,
            timestamp=timestamp,
            client=client,
        )
    )


def check_proof_sync(
    event_id: str,
    *,
    client: LogVaultClient | None = None,
) -> tuple[EventProof, VerificationResult]:
    """Synchronous wrapper around :func:`check_proof`."""
    return asyncio.run(check_proof(event_id, client=client))
