# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Offline hash-chain verification.

Every chained event binds its server-issued signature to its predecessor::

    chain_hash = SHA256(signature + ":" + prev_hash + ":" + "LogVault")

where ``prev_hash`` is the predecessor's ``chain_hash`` or, for the first
event of a chain, the published genesis anchor. Everything in this module
is pure: no I/O, no clocks except the ``verified_at`` stamp, no shared state.
An auditor can therefore recompute the chain without trusting the service's
own "valid" claim.
"""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from typing import Any

from logvault.core.constants import ChainErrorType
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
from logvault.models.event import AuditEventRecord, ChainLink

GENESIS_SEED = "LogVault_Chain_Genesis_2025"
GENESIS_HASH = "GENESIS_" + hashlib.sha256(GENESIS_SEED.encode("utf-8")).hexdigest()[:32]
DOMAIN_SEPARATOR = "LogVault"

HASH_ALGORITHM = "SHA-256"
CHAIN_FORMULA = f"SHA256(signature + ':' + prev_hash + ':' + '{DOMAIN_SEPARATOR}')"


def compute_chain_hash(signature: str, prev_hash: str) -> str:
    """Return the hex SHA-256 chain hash for *signature* linked to *prev_hash*."""
    chain_input = f"{signature}:{prev_hash}:{DOMAIN_SEPARATOR}"
    return hashlib.sha256(chain_input.encode("utf-8")).hexdigest()


def _as_link(event: ChainLink | Mapping[str, Any]) -> ChainLink:
    if isinstance(event, ChainLink):
        return event
    return ChainLink.model_validate(dict(event))


def _as_record(event: AuditEventRecord | Mapping[str, Any]) -> AuditEventRecord:
    if isinstance(event, AuditEventRecord):
        return event
    return AuditEventRecord.model_validate(dict(event))


def verify_locally(
    event: ChainLink | Mapping[str, Any],
    known_prev_chain_hash: str | None = None,
) -> VerificationResult:
    """Recompute and check one event's chain hash.

    Parameters
    ----------
    event:
        A record (or plain dict) carrying ``signature``, ``prev_hash`` and
        ``chain_hash``.
    known_prev_chain_hash:
        The predecessor's ``chain_hash`` as known to the caller. When given,
        it is used for the recomputation and ``event.prev_hash`` must equal it.

    Returns
    -------
    VerificationResult
        ``details`` describes the first failing check. A legacy event (no
        ``chain_hash``) is reported as invalid with ``has_chain_hash=False``;
        that is not evidence of tampering.
    """
    link = _as_link(event)

    if not link.chain_hash:
        return VerificationResult(
            is_valid=False,
            checks=VerificationChecks(),
            details="Legacy event, not chain-tracked (no chain_hash)",
        )

    prev = known_prev_chain_hash or link.prev_hash or GENESIS_HASH
    expected = compute_chain_hash(link.signature, prev)
    chain_hash_valid = expected == link.chain_hash
    prev_hash_matches = (
        link.prev_hash == known_prev_chain_hash if known_prev_chain_hash else True
    )

    checks = VerificationChecks(
        has_chain_hash=True,
        chain_hash_valid=chain_hash_valid,
        prev_hash_matches=prev_hash_matches,
    )

    if not chain_hash_valid:
        details = (
            f"Chain hash mismatch. Expected: {expected[:16]}..., "
            f"Got: {link.chain_hash[:16]}..."
        )
    elif not prev_hash_matches:
        details = "prev_hash mismatch with provided previous chain hash"
    else:
        details = "Event chain integrity verified"

    return VerificationResult(
        is_valid=chain_hash_valid and prev_hash_matches,
        checks=checks,
        details=details,
    )


def build_proof(
    event: AuditEventRecord,
    predecessor: AuditEventRecord | None = None,
    successor: AuditEventRecord | None = None,
) -> EventProof:
    """Assemble an :class:`EventProof` for *event*.

    Only collects fields; call :func:`verify_proof` to check it.
    """
    previous_ref = None
    if predecessor is not None:
        previous_ref = ChainEventRef(
            id=predecessor.id,
            created_at=predecessor.created_at,
            chain_hash=predecessor.chain_hash,
        )
    next_ref = None
    if successor is not None:
        next_ref = ChainEventRef(id=successor.id, created_at=successor.created_at)

    return EventProof(
        event=event,
        proof=ProofBody(
            signature=event.signature,
            chain_hash=event.chain_hash,
            prev_hash=event.prev_hash,
            is_genesis=event.prev_hash == GENESIS_HASH,
            is_chained=not event.is_legacy,
            previous_event=previous_ref,
            next_event=next_ref,
        ),
        verification=ProofVerification(
            algorithm=HASH_ALGORITHM,
            formula=CHAIN_FORMULA,
            genesis_hash=GENESIS_HASH,
            steps=[
                "Take the event's signature",
                f"Take prev_hash (the genesis hash {GENESIS_HASH} for the first event)",
                f"Concatenate signature + ':' + prev_hash + ':' + '{DOMAIN_SEPARATOR}'",
                "Compute the SHA-256 digest and hex-encode it",
                "Compare the result with chain_hash",
                "Compare prev_hash with previous_event.chain_hash",
            ],
        ),
    )


def verify_proof(proof: EventProof) -> VerificationResult:
    """Independently check a proof, e.g. one returned by the service."""
    body = proof.proof
    known_prev: str | None = None
    if body.previous_event is not None and body.previous_event.chain_hash:
        known_prev = body.previous_event.chain_hash
    elif body.previous_event is None and body.is_genesis:
        known_prev = GENESIS_HASH

    return verify_locally(
        ChainLink(
            signature=body.signature,
            prev_hash=body.prev_hash,
            chain_hash=body.chain_hash,
        ),
        known_prev,
    )


def verify_sequence(
    records: Iterable[AuditEventRecord | Mapping[str, Any]],
) -> ChainVerificationResult:
    """Walk records in chain order and report the first break.

    Legacy events are counted and skipped. The first chained event is
    checked against its own ``prev_hash``; every later one must link to the
    ``chain_hash`` of the chained event before it.
    """
    checked = chained = legacy = 0
    prev_chain_hash: str | None = None

    for raw in records:
        record = _as_record(raw)
        checked += 1
        if record.is_legacy:
            legacy += 1
            continue
        chained += 1

        result = verify_locally(record, prev_chain_hash)
        error_type: ChainErrorType | None = None
        if not result.checks.prev_hash_matches:
            error_type = ChainErrorType.BROKEN_CHAIN
        elif not result.checks.chain_hash_valid:
            error_type = ChainErrorType.INVALID_CHAIN_HASH

        if error_type is not None:
            return ChainVerificationResult(
                is_valid=False,
                events_checked=checked,
                events_with_chain=chained,
                legacy_events=legacy,
                first_invalid_event=record.id,
                error_type=error_type,
                details=f"Event {record.id}: {result.details}",
            )
        prev_chain_hash = record.chain_hash

    details = f"Chain integrity verified for {chained} chained event(s)"
    if legacy:
        details += f"; {legacy} legacy event(s) skipped"
    return ChainVerificationResult(
        is_valid=True,
        events_checked=checked,
        events_with_chain=chained,
        legacy_events=legacy,
        details=details,
    )


def summarize_chain(
    records: Iterable[AuditEventRecord | Mapping[str, Any]],
) -> ChainStats:
    """Compute :class:`ChainStats` for records already held by the caller."""
    total = 0
    chained: list[AuditEventRecord] = []
    for raw in records:
        record = _as_record(raw)
        total += 1
        if not record.is_legacy:
            chained.append(record)

    def _ref(record: AuditEventRecord) -> ChainEventRef:
        return ChainEventRef(
            id=record.id,
            created_at=record.created_at,
            chain_hash=record.chain_hash,
        )

    return ChainStats(
        total_events=total,
        chained_events=len(chained),
        legacy_events=total - len(chained),
        chain_coverage=round(len(chained) / total, 4) if total else 0.0,
        first_chained_event=_ref(chained[0]) if chained else None,
        last_chained_event=_ref(chained[-1]) if chained else None,
        genesis_hash=GENESIS_HASH,
    )
