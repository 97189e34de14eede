# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Offline verification of the audit hash chain."""

from logvault.chain.verifier import (
    DOMAIN_SEPARATOR,
    GENESIS_HASH,
    build_proof,
    compute_chain_hash,
    summarize_chain,
    verify_locally,
    verify_proof,
    verify_sequence,
)

__all__ = [
    "DOMAIN_SEPARATOR",
    "GENESIS_HASH",
    "build_proof",
    "compute_chain_hash",
    "summarize_chain",
    "verify_locally",
    "verify_proof",
    "verify_sequence",
]
