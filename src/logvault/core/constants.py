# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Enumerations, wire constants, and client limits."""

import re
from enum import StrEnum


class ErrorKind(StrEnum):
    """Classification of a failed delivery attempt."""

    AUTHENTICATION = "authentication"
    VALIDATION = "validation"
    RATE_LIMITED = "rate_limited"
    SERVER_ERROR = "server_error"
    CLIENT_ERROR = "client_error"
    TIMEOUT = "timeout"
    NETWORK_ERROR = "network_error"


RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset({
    ErrorKind.SERVER_ERROR,
    ErrorKind.TIMEOUT,
    ErrorKind.NETWORK_ERROR,
})


class DeliveryState(StrEnum):
    IDLE = "idle"
    ATTEMPTING = "attempting"
    CLASSIFYING = "classifying"
    RETRYING = "retrying"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


TERMINAL_STATES: frozenset[DeliveryState] = frozenset({
    DeliveryState.SUCCEEDED,
    DeliveryState.FAILED,
})


class ChainErrorType(StrEnum):
    INVALID_CHAIN_HASH = "INVALID_CHAIN_HASH"
    BROKEN_CHAIN = "BROKEN_CHAIN"


DEFAULT_BASE_URL = "https://api.logvault.eu"
DEFAULT_TIMEOUT = 10.0  # seconds, per attempt
DEFAULT_MAX_RETRIES = 3

API_KEY_PREFIXES = ("lv_live_", "lv_test_")

# Dot-separated lowercase snake_case segments, at least two of them.
ACTION_PATTERN = re.compile(r"^[a-z0-9_]+(\.[a-z0-9_]+)+$")

MAX_PAYLOAD_BYTES = 1024 * 1024

LIST_PAGE_SIZE_DEFAULT = 50
LIST_PAGE_SIZE_MAX = 100
CHAIN_VERIFY_LIMIT_DEFAULT = 1000
CHAIN_VERIFY_LIMIT_MAX = 10000
