# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Abstract base class for event delivery strategies."""

from __future__ import annotations

import abc

from logvault.models.event import AuditEvent, AuditEventRecord, SerializationFailure


class EventDelivery(abc.ABC):
    """Interface shared by the network engine and the local console engine.

    The client picks one implementation at construction time; callers only
    ever see ``send()``.
    """

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Short strategy name (e.g. ``'http'``, ``'local'``)."""

    @abc.abstractmethod
    async def send(self, event: AuditEvent) -> AuditEventRecord | SerializationFailure:
        """Deliver *event* and return the stored record.

        Raises:
            LogVaultError: A typed, classified failure.
        """
