# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Exponential backoff with additive jitter."""

from __future__ import annotations

import random
from dataclasses import dataclass, field


@dataclass(frozen=True)
class BackoffPolicy:
    """``delay(attempt) = 2**attempt * base_ms + uniform[0, jitter_ms)``.

    *attempt* is 1 for the first retry, so the defaults give roughly
    2s, 4s, 8s, ... The first try is never delayed.
    """

    base_ms: float = 1000.0
    jitter_ms: float = 500.0
    rng: random.Random = field(default_factory=random.Random, repr=False, compare=False)

    def base_delay_ms(self, attempt: int) -> float:
        if attempt < 1:
            raise ValueError(f"attempt must be >= 1, got {attempt}")
        return (2 ** attempt) * self.base_ms

    def delay_ms(self, attempt: int) -> float:
        return self.base_delay_ms(attempt) + self.rng.random() * self.jitter_ms

    def delay(self, attempt: int) -> float:
        """Delay in seconds before retry number *attempt*."""
        return self.delay_ms(attempt) / 1000.0
