# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Hash-chain verification results, statistics and event proofs."""

from __future__ import annotations

from datetime import UTC, datetime

from pydantic import BaseModel, ConfigDict, Field

from logvault.core.constants import ChainErrorType
from logvault.models.event import AuditEventRecord


class VerificationChecks(BaseModel):
    """Individual checks performed by local verification."""

    has_chain_hash: bool = False
    chain_hash_valid: bool = False
    prev_hash_matches: bool = False


class VerificationResult(BaseModel):
    """Outcome of verifying one event offline."""

    model_config = ConfigDict(frozen=True)

    is_valid: bool
    checks: VerificationChecks
    details: str


class ChainEventRef(BaseModel):
    """Pointer to a neighbouring event in the chain."""

    id: str
    created_at: str | None = None
    chain_hash: str | None = None


class ProofBody(BaseModel):
    signature: str
    chain_hash: str | None = None
    prev_hash: str | None = None
    is_genesis: bool = False
    is_chained: bool = False
    previous_event: ChainEventRef | None = None
    next_event: ChainEventRef | None = None


class ProofVerification(BaseModel):
    """How a third party recomputes the chain hash."""

    algorithm: str
    formula: str
    genesis_hash: str
    steps: list[str] = Field(default_factory=list)


class EventProof(BaseModel):
    """Self-contained bundle for verifying one event without trusting the server.

    Assembling a proof does not verify it; see
    :func:`logvault.chain.verifier.verify_proof`.
    """

    event: AuditEventRecord
    proof: ProofBody
    verification: ProofVerification


class ChainStats(BaseModel):
    total_events: int = 0
    chained_events: int = 0
    legacy_events: int = 0
    chain_coverage: float = 0.0
    first_chained_event: ChainEventRef | None = None
    last_chained_event: ChainEventRef | None = None
    genesis_hash: str = ""


class ChainVerificationResult(BaseModel):
    """Result of walking a sequence of events."""

    is_valid: bool
    events_checked: int = 0
    events_with_chain: int = 0
    legacy_events: int = 0
    first_invalid_event: str | None = None
    error_type: ChainErrorType | None = None
    details: str = ""
    verified_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
