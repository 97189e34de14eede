# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Event delivery: classification, backoff, single attempts and the retry engine."""

from logvault.delivery.backoff import BackoffPolicy
from logvault.delivery.base import EventDelivery
from logvault.delivery.classifier import Classification, classify
from logvault.delivery.engine import DeliveryEngine
from logvault.delivery.executor import AttemptOutcome, RequestExecutor
from logvault.delivery.local import LocalDeliveryEngine

__all__ = [
    "AttemptOutcome",
    "BackoffPolicy",
    "Classification",
    "DeliveryEngine",
    "EventDelivery",
    "LocalDeliveryEngine",
    "RequestExecutor",
    "classify",
]
