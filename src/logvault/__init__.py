# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""logvault - Audit log client with tamper-evident hash-chain verification."""

__version__ = "0.4.0"

from logvault.chain.verifier import (
    GENESIS_HASH,
    compute_chain_hash,
    verify_locally,
    verify_proof,
    verify_sequence,
)
from logvault.client import LogVaultClient
from logvault.core.exceptions import (
    APIError,
    AuthenticationError,
    ConfigurationError,
    LogVaultError,
    RateLimitError,
    ValidationError,
)
from logvault.models.event import AuditEvent, AuditEventRecord
from logvault.sdk import check_proof, check_proof_sync, log, log_sync, verify_file

__all__ = [
    "GENESIS_HASH",
    "APIError",
    "AuditEvent",
    "AuditEventRecord",
    "AuthenticationError",
    "ConfigurationError",
    "LogVaultClient",
    "LogVaultError",
    "RateLimitError",
    "ValidationError",
    "__version__",
    "check_proof",
    "check_proof_sync",
    "compute_chain_hash",
    "log",
    "log_sync",
    "verify_file",
    "verify_locally",
    "verify_proof",
    "verify_sequence",
]
