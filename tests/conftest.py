# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Shared test fixtures and configuration."""

import hashlib
import logging

import pytest

TEST_API_KEY = "lv_test_abc123def456ghi789"
TEST_BASE_URL = "https://api.test.logvault.eu"

_ENV_VARS = (
    "API_KEY",
    "BASE_URL",
    "TIMEOUT",
    "MAX_RETRIES",
    "ENABLE_NONCE",
    "TOTAL_TIMEOUT",
    "LOCAL_MODE",
    "ENVIRONMENT",
    "LOG_LEVEL",
    "LOG_FORMAT",
)


def sha256_hex(text: str) -> str:
    return hashlib.sha256(text.encode("utf-8")).hexdigest()


def record_payload(event_id: str = "evt_1", **overrides) -> dict:
    """A stored event as the service returns it."""
    payload = {
        "id": event_id,
        "org_id": "org_1",
        "user_id": "user_123",
        "action": "auth.login",
        "resource": "session:abc",
        "timestamp": "2026-03-01T12:00:00Z",
        "metadata": {},
        "signature": "sig_" + event_id,
        "created_at": "2026-03-01T12:00:00Z",
    }
    payload.update(overrides)
    return payload


@pytest.fixture(autouse=True)
def _isolate_env(monkeypatch, tmp_path):
    """Keep LOGVAULT_* variables and stray .env files out of every test."""
    for name in _ENV_VARS:
        monkeypatch.delenv(f"LOGVAULT_{name}", raising=False)
    monkeypatch.chdir(tmp_path)


@pytest.fixture(autouse=True)
def _reset_logging():
    """Drop handlers installed by setup_logging() between tests."""
    yield
    logger = logging.getLogger("logvault")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)


@pytest.fixture
def api_key() -> str:
    return TEST_API_KEY


@pytest.fixture
def config():
    from logvault.core.config import ClientConfig

    return ClientConfig(api_key=TEST_API_KEY, base_url=TEST_BASE_URL, timeout=1.0, max_retries=3)


@pytest.fixture
def make_record():
    return record_payload


@pytest.fixture
def make_chain():
    """Build a correctly linked list of record payloads, genesis first."""
    from logvault.chain.verifier import GENESIS_HASH

    def _build(count: int = 3, prefix: str = "evt") -> list[dict]:
        records = []
        prev = GENESIS_HASH
        for i in range(1, count + 1):
            signature = f"sig{i}"
            chain_hash = sha256_hex(f"{signature}:{prev}:LogVault")
            records.append(
                record_payload(
                    f"{prefix}_{i}",
                    signature=signature,
                    prev_hash=prev,
                    chain_hash=chain_hash,
                    created_at=f"2026-03-01T12:00:0{i}Z",
                )
            )
            prev = chain_hash
        return records

    return _build
