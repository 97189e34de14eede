# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for proofs, sequence walks and chain statistics."""

from __future__ import annotations

import pytest

from logvault.chain.verifier import (
    CHAIN_FORMULA,
    GENESIS_HASH,
    build_proof,
    summarize_chain,
    verify_proof,
    verify_sequence,
)
from logvault.core.constants import ChainErrorType
from logvault.models.chain import EventProof
from logvault.models.event import AuditEventRecord


def _records(payloads: list[dict]) -> list[AuditEventRecord]:
    return [AuditEventRecord.model_validate(p) for p in payloads]


# ---------------------------------------------------------------------------
# Proofs
# ---------------------------------------------------------------------------


class TestBuildProof:
    def test_genesis_event(self, make_chain):
        first, second = _records(make_chain(2))

        proof = build_proof(first, successor=second)

        assert proof.proof.is_genesis
        assert proof.proof.is_chained
        assert proof.proof.previous_event is None
        assert proof.proof.next_event.id == "evt_2"
        assert proof.verification.algorithm == "SHA-256"
        assert proof.verification.formula == CHAIN_FORMULA
        assert proof.verification.genesis_hash == GENESIS_HASH
        assert proof.verification.steps

    def test_middle_event(self, make_chain):
        first, second, third = _records(make_chain(3))

        proof = build_proof(second, predecessor=first, successor=third)

        assert not proof.proof.is_genesis
        assert proof.proof.previous_event.chain_hash == first.chain_hash
        assert proof.proof.next_event.chain_hash is None

    def test_legacy_event(self, make_record):
        proof = build_proof(AuditEventRecord.model_validate(make_record()))
        assert not proof.proof.is_chained


class TestVerifyProof:
    def test_built_proofs_verify(self, make_chain):
        records = _records(make_chain(3))
        assert verify_proof(build_proof(records[0])).is_valid
        assert verify_proof(build_proof(records[1], predecessor=records[0])).is_valid
        assert verify_proof(build_proof(records[2], predecessor=records[1])).is_valid

    def test_server_proof_payload(self, make_chain):
        first, second = make_chain(2)
        payload = {
            "event": second,
            "proof": {
                "signature": second["signature"],
                "chain_hash": second["chain_hash"],
                "prev_hash": second["prev_hash"],
                "is_genesis": False,
                "is_chained": True,
                "previous_event": {
                    "id": first["id"],
                    "created_at": first["created_at"],
                    "chain_hash": first["chain_hash"],
                },
                "next_event": None,
            },
            "verification": {
                "algorithm": "SHA-256",
                "formula": CHAIN_FORMULA,
                "genesis_hash": GENESIS_HASH,
                "steps": [],
            },
        }

        assert verify_proof(EventProof.model_validate(payload)).is_valid

    def test_wrong_predecessor_detected(self, make_chain):
        records = _records(make_chain(3))
        # Claim evt_1 precedes evt_3.
        proof = build_proof(records[2], predecessor=records[0])

        result = verify_proof(proof)

        assert not result.is_valid
        assert not result.checks.prev_hash_matches

    def test_tampered_signature_detected(self, make_chain):
        payloads = make_chain(2)
        payloads[1]["signature"] = "forged"
        records = _records(payloads)

        result = verify_proof(build_proof(records[1], predecessor=records[0]))

        assert not result.is_valid
        assert not result.checks.chain_hash_valid

    def test_legacy_proof(self, make_record):
        result = verify_proof(build_proof(AuditEventRecord.model_validate(make_record())))
        assert not result.is_valid
        assert not result.checks.has_chain_hash


# ---------------------------------------------------------------------------
# verify_sequence()
# ---------------------------------------------------------------------------


class TestVerifySequence:
    def test_intact_chain(self, make_chain):
        result = verify_sequence(make_chain(5))

        assert result.is_valid
        assert result.events_checked == 5
        assert result.events_with_chain == 5
        assert result.legacy_events == 0
        assert result.first_invalid_event is None
        assert result.error_type is None
        assert result.details == "Chain integrity verified for 5 chained event(s)"

    def test_empty(self):
        result = verify_sequence([])
        assert result.is_valid
        assert result.events_checked == 0

    def test_legacy_events_skipped(self, make_chain, make_record):
        payloads = [make_record("old_1"), make_record("old_2"), *make_chain(2)]

        result = verify_sequence(payloads)

        assert result.is_valid
        assert result.events_checked == 4
        assert result.legacy_events == 2
        assert result.events_with_chain == 2
        assert result.details.endswith("; 2 legacy event(s) skipped")

    def test_tampered_hash(self, make_chain):
        payloads = make_chain(3)
        payloads[1]["signature"] = "forged"

        result = verify_sequence(payloads)

        assert not result.is_valid
        assert result.first_invalid_event == "evt_2"
        assert result.error_type is ChainErrorType.INVALID_CHAIN_HASH
        assert result.details.startswith("Event evt_2: Chain hash mismatch")
        assert result.events_checked == 2

    def test_missing_link(self, make_chain):
        payloads = make_chain(4)
        del payloads[1]

        result = verify_sequence(payloads)

        assert not result.is_valid
        assert result.first_invalid_event == "evt_3"
        assert result.error_type is ChainErrorType.BROKEN_CHAIN

    def test_reordered(self, make_chain):
        payloads = make_chain(3)
        payloads[1], payloads[2] = payloads[2], payloads[1]

        result = verify_sequence(payloads)

        assert not result.is_valid
        assert result.first_invalid_event == "evt_3"
        assert result.error_type is ChainErrorType.BROKEN_CHAIN

    def test_segment_starting_mid_chain(self, make_chain):
        # The first record is checked against its own prev_hash.
        result = verify_sequence(make_chain(5)[2:])
        assert result.is_valid
        assert result.events_checked == 3

    @pytest.mark.parametrize("as_models", [True, False])
    def test_accepts_models_or_dicts(self, make_chain, as_models):
        payloads = make_chain(2)
        items = _records(payloads) if as_models else payloads
        assert verify_sequence(items).is_valid


# ---------------------------------------------------------------------------
# summarize_chain()
# ---------------------------------------------------------------------------


class TestSummarizeChain:
    def test_mixed(self, make_chain, make_record):
        payloads = [make_record("old_1"), *make_chain(3)]

        stats = summarize_chain(payloads)

        assert stats.total_events == 4
        assert stats.chained_events == 3
        assert stats.legacy_events == 1
        assert stats.chain_coverage == 0.75
        assert stats.first_chained_event.id == "evt_1"
        assert stats.last_chained_event.id == "evt_3"
        assert stats.last_chained_event.chain_hash == payloads[-1]["chain_hash"]
        assert stats.genesis_hash == GENESIS_HASH

    def test_empty(self):
        stats = summarize_chain([])
        assert stats.total_events == 0
        assert stats.chain_coverage == 0.0
        assert stats.first_chained_event is None
