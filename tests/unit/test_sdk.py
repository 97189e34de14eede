# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Tests for the public SDK functions (log, check_proof, verify_file)."""

from __future__ import annotations

import json

import httpx
import pytest
import respx

import logvault
from logvault import LogVaultClient, ValidationError, log, log_sync, verify_file
from logvault.chain.verifier import CHAIN_FORMULA, GENESIS_HASH
from logvault.models.chain import ChainVerificationResult, VerificationResult
from logvault.sdk import check_proof, check_proof_sync

BASE_URL = "https://api.test.logvault.eu"
API_KEY = "lv_test_abc123def456"


class TestPublicSurface:
    def test_version(self):
        assert logvault.__version__ == "0.4.0"

    def test_exports(self):
        for name in logvault.__all__:
            assert hasattr(logvault, name), name


# ---------------------------------------------------------------------------
# log / log_sync
# ---------------------------------------------------------------------------


class TestLog:
    @respx.mock
    async def test_log_uses_settings(self, monkeypatch):
        monkeypatch.setenv("LOGVAULT_API_KEY", API_KEY)
        monkeypatch.setenv("LOGVAULT_BASE_URL", BASE_URL)
        route = respx.post(f"{BASE_URL}/v1/events").mock(
            return_value=httpx.Response(201, json={"id": "evt_1"})
        )

        record = await log(action="auth.login", user_id="u1")

        assert record.id == "evt_1"
        assert route.call_count == 1

    @respx.mock
    async def test_log_with_explicit_client(self):
        respx.post(f"{BASE_URL}/v1/events").mock(
            return_value=httpx.Response(201, json={"id": "evt_2"})
        )
        client = LogVaultClient(API_KEY, base_url=BASE_URL)

        record = await log(action="auth.logout", user_id="u1", client=client)

        assert record.id == "evt_2"

    def test_log_sync_in_local_mode(self, monkeypatch):
        monkeypatch.setenv("LOGVAULT_LOCAL_MODE", "true")

        record = log_sync(action="auth.login", user_id="u1")

        assert record.id.startswith("local_")


# ---------------------------------------------------------------------------
# check_proof
# ---------------------------------------------------------------------------


def _proof_payload(first: dict, second: dict) -> dict:
    return {
        "event": second,
        "proof": {
            "signature": second["signature"],
            "chain_hash": second["chain_hash"],
            "prev_hash": second["prev_hash"],
            "is_chained": True,
            "previous_event": {"id": first["id"], "chain_hash": first["chain_hash"]},
        },
        "verification": {
            "algorithm": "SHA-256",
            "formula": CHAIN_FORMULA,
            "genesis_hash": GENESIS_HASH,
        },
    }


class TestCheckProof:
    @respx.mock
    async def test_recomputes_locally(self, make_chain):
        first, second = make_chain(2)
        respx.get(f"{BASE_URL}/v1/events/evt_2/proof").mock(
            return_value=httpx.Response(200, json=_proof_payload(first, second))
        )
        client = LogVaultClient(API_KEY, base_url=BASE_URL)

        proof, result = await check_proof("evt_2", client=client)

        assert proof.event.id == "evt_2"
        assert result.is_valid

    @respx.mock
    async def test_detects_forged_server_proof(self, make_chain):
        first, second = make_chain(2)
        payload = _proof_payload(first, second)
        payload["proof"]["signature"] = "forged"
        respx.get(f"{BASE_URL}/v1/events/evt_2/proof").mock(
            return_value=httpx.Response(200, json=payload)
        )
        client = LogVaultClient(API_KEY, base_url=BASE_URL)

        _, result = await check_proof("evt_2", client=client)

        assert not result.is_valid

    def test_sync_wrapper(self, make_chain):
        first, second = make_chain(2)
        client = LogVaultClient(API_KEY, base_url=BASE_URL)
        with respx.mock:
            respx.get(f"{BASE_URL}/v1/events/evt_2/proof").mock(
                return_value=httpx.Response(200, json=_proof_payload(first, second))
            )
            _, result = check_proof_sync("evt_2", client=client)

        assert result.is_valid


# ---------------------------------------------------------------------------
# verify_file
# ---------------------------------------------------------------------------


class TestVerifyFile:
    def test_single_event(self, tmp_path, make_chain):
        path = tmp_path / "event.json"
        path.write_text(json.dumps(make_chain(1)[0]))

        result = verify_file(path)

        assert isinstance(result, VerificationResult)
        assert result.is_valid

    def test_single_event_with_prev(self, tmp_path, make_chain):
        records = make_chain(2)
        path = tmp_path / "event.json"
        path.write_text(json.dumps(records[1]))

        assert verify_file(path, prev_chain_hash=records[0]["chain_hash"]).is_valid
        assert not verify_file(path, prev_chain_hash="0" * 64).is_valid

    def test_chain_segment(self, tmp_path, make_chain):
        path = tmp_path / "events.json"
        path.write_text(json.dumps(make_chain(4)))

        result = verify_file(str(path))

        assert isinstance(result, ChainVerificationResult)
        assert result.is_valid
        assert result.events_checked == 4

    def test_invalid_json(self, tmp_path):
        path = tmp_path / "broken.json"
        path.write_text("{not json")

        with pytest.raises(ValidationError, match="not valid JSON"):
            verify_file(path)

    def test_wrong_shape(self, tmp_path):
        path = tmp_path / "number.json"
        path.write_text("42")

        with pytest.raises(ValidationError, match="expected a JSON object or array"):
            verify_file(path)

    def test_segment_record_without_id(self, tmp_path, make_chain):
        record = make_chain(1)[0]
        del record["id"]
        path = tmp_path / "segment.json"
        path.write_text(json.dumps([record]))

        with pytest.raises(ValidationError, match=r"segment\.json: malformed event record \(id: ") as exc_info:
            verify_file(path)

        assert exc_info.value.data[0]["loc"] == ("id",)

    def test_segment_element_not_an_object(self, tmp_path, make_chain):
        path = tmp_path / "segment.json"
        path.write_text(json.dumps([make_chain(1)[0], 7]))

        with pytest.raises(ValidationError, match="malformed event record"):
            verify_file(path)

    def test_wrongly_typed_field(self, tmp_path, make_chain):
        event = make_chain(1)[0]
        event["signature"] = ["not", "a", "string"]
        path = tmp_path / "event.json"
        path.write_text(json.dumps(event))

        with pytest.raises(ValidationError, match=r"malformed event record \(signature: "):
            verify_file(path)
