# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Domain models for logvault."""

from logvault.models.chain import (
    ChainEventRef,
    ChainStats,
    ChainVerificationResult,
    EventProof,
    ProofBody,
    ProofVerification,
    VerificationChecks,
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

__all__ = [
    "AuditEvent",
    "AuditEventList",
    "AuditEventRecord",
    "ChainEventRef",
    "ChainLink",
    "ChainStats",
    "ChainVerificationResult",
    "EventProof",
    "ProofBody",
    "ProofVerification",
    "SerializationFailure",
    "VerificationChecks",
    "VerificationResult",
    "VerifyEventResponse",
]
