# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Audit event models: the outbound event and the server-issued record."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Literal

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class AuditEvent(BaseModel):
    """An audit event as constructed by the caller.

    Instances are never mutated once built. Action format and payload size
    are checked by the delivery engine before the first network attempt so
    that a bad event fails without consuming a request.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    action: str = Field(description="Dot-separated action name, e.g. 'auth.login'")
    user_id: str = Field(
        validation_alias=AliasChoices("userId", "user_id", "actorId", "actor_id"),
        serialization_alias="userId",
        description="Identifier of the actor performing the action",
    )
    resource: str | None = None
    metadata: dict[str, Any] | None = None
    timestamp: datetime | str | None = Field(
        default=None,
        description="Client-side timestamp; the server assigns one when omitted",
    )

    def to_payload(self) -> dict[str, Any]:
        """Return the JSON-ready request body.

        Raises ``ValueError`` (``PydanticSerializationError``) when metadata
        cannot be serialized, e.g. on a circular reference.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class ChainLink(BaseModel):
    """The cryptographic envelope of a stored event."""

    model_config = ConfigDict(frozen=True)

    signature: str = ""
    prev_hash: str | None = None
    chain_hash: str | None = None

    @property
    def is_legacy(self) -> bool:
        """True for events recorded before chain tracking existed."""
        return not self.chain_hash


class AuditEventRecord(ChainLink):
    """A stored event as returned by the service."""

    model_config = ConfigDict(frozen=True, extra="allow")

    id: str
    org_id: str = ""
    user_id: str | None = None
    action: str = ""
    resource: str | None = None
    timestamp: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)
    nonce: str | None = None
    ip_address: str | None = None
    created_at: str | None = None


class SerializationFailure(BaseModel):
    """Returned instead of raising when an event body cannot be serialized."""

    id: Literal["failed-serialization"] = "failed-serialization"
    status: Literal["error"] = "error"
    timestamp: datetime = Field(default_factory=lambda: datetime.now(UTC))
    reason: str = ""


class AuditEventList(BaseModel):
    """One page of the event listing endpoint."""

    events: list[AuditEventRecord] = Field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 0
    has_next: bool = False


class VerifyEventResponse(BaseModel):
    """Server-side signature verification result for a single event."""

    valid: bool
    event_id: str
    signature: str = ""
    verified_at: str | None = None
    chain_valid: bool | None = None
    prev_hash_valid: bool | None = None
