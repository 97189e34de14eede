# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Local development delivery: render events to the console, no network.

Selected instead of :class:`~logvault.delivery.engine.DeliveryEngine` when
the client runs in local mode. Events are checked (action format, user id,
likely PII in metadata, compliance hints) and printed with Rich, and a
synthetic record is returned so calling code behaves as in production.
"""

from __future__ import annotations

import json
import logging
import re
import secrets
import time
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from logvault.core.constants import ACTION_PATTERN
from logvault.delivery.base import EventDelivery
from logvault.models.event import AuditEvent, AuditEventRecord

logger = logging.getLogger("logvault.delivery.local")

LOCAL_SIGNATURE = "local_mode_no_signature"

PII_PATTERNS: list[tuple[re.Pattern[str], str]] = [
    (re.compile(r"\b[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}\b"), "email"),
    (re.compile(r"\b\d{3}[-.\s]?\d{3}[-.\s]?\d{4}\b"), "phone"),
    (re.compile(r"\b\d{9}\b"), "SSN (possible)"),
    (re.compile(r"\b\d{4}[-\s]?\d{4}[-\s]?\d{4}[-\s]?\d{4}\b"), "credit card"),
    (
        re.compile(r"\b(?:password|passwd|pwd|secret|token|api_key|apikey)\b", re.IGNORECASE),
        "sensitive key",
    ),
    (re.compile(r"\b(?:street|address|zipcode|postal)\b", re.IGNORECASE), "address field"),
    (re.compile(r"\b(?:ssn|social.?security)\b", re.IGNORECASE), "SSN field"),
    (re.compile(r"\b(?:dob|date.?of.?birth|birthday)\b", re.IGNORECASE), "DOB field"),
]


@dataclass
class LocalReport:
    """Result of checking one event in local mode."""

    event: AuditEvent
    action_valid: bool
    has_user_id: bool
    pii_warnings: list[str] = field(default_factory=list)
    gdpr_ready: bool = True
    soc2_ready: bool = True
    compliance_details: list[str] = field(default_factory=list)

    @property
    def success(self) -> bool:
        return self.action_valid


def detect_pii(obj: Any, path: str = "", _seen: set[int] | None = None) -> list[str]:
    """Return warnings for metadata keys and string values that look like PII."""
    warnings: list[str] = []
    if obj is None:
        return warnings

    if isinstance(obj, str):
        for pattern, label in PII_PATTERNS:
            if pattern.search(obj):
                warnings.append(f"{path}: possible {label} detected")
        return warnings

    if not isinstance(obj, dict | list | tuple):
        return warnings
    seen = _seen if _seen is not None else set()
    if id(obj) in seen:
        return warnings
    seen.add(id(obj))

    if isinstance(obj, dict):
        for key, value in obj.items():
            key_path = f"{path}.{key}" if path else str(key)
            for pattern, label in PII_PATTERNS:
                if pattern.search(str(key)):
                    warnings.append(f"{key_path}: field name suggests {label}")
            warnings.extend(detect_pii(value, key_path, seen))
    else:
        for index, value in enumerate(obj):
            warnings.extend(detect_pii(value, f"{path}[{index}]", seen))
    return warnings


def check_compliance(event: AuditEvent) -> tuple[bool, bool, list[str]]:
    details: list[str] = []
    gdpr_ready = True
    soc2_ready = True

    if not event.user_id:
        gdpr_ready = False
        details.append("GDPR: no user id, data subject requests cannot be fulfilled")
    if "." not in event.action:
        soc2_ready = False
        details.append("SOC2: action should use the domain.event format")
    if event.timestamp is None:
        details.append("SOC2: timestamp will be assigned by the server")

    return gdpr_ready, soc2_ready, details


def inspect_event(
    event: AuditEvent,
    *,
    pii_warnings: bool = True,
    show_compliance: bool = True,
) -> LocalReport:
    report = LocalReport(
        event=event,
        action_valid=bool(ACTION_PATTERN.match(event.action)),
        has_user_id=bool(event.user_id),
        pii_warnings=detect_pii(event.metadata) if pii_warnings else [],
    )
    if show_compliance:
        report.gdpr_ready, report.soc2_ready, report.compliance_details = check_compliance(event)
    return report


def _metadata_preview(metadata: dict[str, Any] | None, limit: int = 60) -> str:
    if not metadata:
        return "(not set)"
    try:
        text = json.dumps(metadata, default=str)
    except (TypeError, ValueError):
        return "(unserializable)"
    return text if len(text) <= limit else text[:limit] + "..."


class LocalDeliveryEngine(EventDelivery):
    """Console-only delivery for development.

    Parameters
    ----------
    console:
        Rich console to render to (defaults to stdout).
    pretty:
        Render a panel per event; otherwise one line per event.
    pii_warnings:
        Scan metadata for likely personal data.
    show_compliance:
        Show GDPR/SOC2 readiness hints.
    """

    def __init__(
        self,
        *,
        console: Console | None = None,
        pretty: bool = True,
        pii_warnings: bool = True,
        show_compliance: bool = True,
    ) -> None:
        self._console = console or Console()
        self._pretty = pretty
        self._pii_warnings = pii_warnings
        self._show_compliance = show_compliance
        self._banner_shown = False

    @property
    def name(self) -> str:
        return "local"

    async def send(self, event: AuditEvent) -> AuditEventRecord:
        if not self._banner_shown:
            self._print_banner()
            self._banner_shown = True

        report = inspect_event(
            event,
            pii_warnings=self._pii_warnings,
            show_compliance=self._show_compliance,
        )
        if self._pretty:
            self._print_report(report)
        else:
            self._print_line(report)

        now = datetime.now(UTC).isoformat()
        logger.debug("local mode event action=%s", event.action)
        return AuditEventRecord(
            id=f"local_{int(time.time() * 1000)}_{secrets.token_hex(3)}",
            org_id="local_org",
            user_id=event.user_id or "unknown",
            action=event.action,
            resource=event.resource or "",
            timestamp=now,
            metadata=event.metadata or {},
            signature=LOCAL_SIGNATURE,
            created_at=now,
        )

    def _print_banner(self) -> None:
        self._console.print(
            Panel(
                "[bold]LogVault Local Mode Active[/bold]\n"
                "[dim]Events logged to console (no API calls)[/dim]",
                style="cyan",
                expand=False,
            )
        )

    def _print_report(self, report: LocalReport) -> None:
        event = report.event
        status = "[green]✓[/green]" if report.success else "[red]✗[/red]"

        table = Table(show_header=False, box=None, padding=(0, 2))
        table.add_column("key", style="dim")
        table.add_column("value")
        table.add_row("Action:", escape(event.action))
        table.add_row("User ID:", escape(event.user_id) or "[dim](not set)[/dim]")
        table.add_row("Resource:", escape(event.resource or "") or "[dim](not set)[/dim]")
        table.add_row("Metadata:", escape(_metadata_preview(event.metadata)))
        table.add_row(
            "Validation:",
            "[green]✓ Valid[/green]" if report.action_valid else "[red]✗ Invalid action[/red]",
        )
        if self._show_compliance:
            gdpr = "[green]✓ GDPR[/green]" if report.gdpr_ready else "[yellow]⚠ GDPR[/yellow]"
            soc2 = "[green]✓ SOC2[/green]" if report.soc2_ready else "[yellow]⚠ SOC2[/yellow]"
            table.add_row("Compliance:", f"{gdpr} {soc2}")

        self._console.print(
            Panel(table, title=f"[cyan][LogVault Local][/cyan] {status} {escape(event.action)}", expand=False)
        )

        if not report.action_valid:
            self._console.print(
                "  [red]⚠ Expected format: 'domain.event' (e.g., auth.login)[/red]"
            )
        if report.pii_warnings:
            self._console.print("  [yellow]⚠ PII Detected:[/yellow]")
            for warning in report.pii_warnings:
                self._console.print(f"    [yellow]• {escape(warning)}[/yellow]")
        for detail in report.compliance_details:
            self._console.print(f"  [dim]{escape(detail)}[/dim]")

    def _print_line(self, report: LocalReport) -> None:
        event = report.event
        status = "✓" if report.success else "✗"
        self._console.print(
            f"[LogVault Local] {status} {event.action} | user: {event.user_id or '-'} "
            f"| resource: {event.resource or '-'}",
            markup=False,
        )
        if not report.action_valid:
            self._console.print("  ⚠ Expected format: 'domain.event' (e.g., auth.login)", markup=False)
        for warning in report.pii_warnings:
            self._console.print(f"  ⚠ PII: {warning}", markup=False)
