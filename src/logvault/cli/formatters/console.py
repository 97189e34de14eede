# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Rich console output for records, verification results and chain stats."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel
from rich.table import Table

from logvault import __version__
from logvault.models.chain import (
    ChainStats,
    ChainVerificationResult,
    EventProof,
    VerificationResult,
)
from logvault.models.event import AuditEventRecord, SerializationFailure

console = Console()


def _short(value: str | None, width: int = 16) -> str:
    if not value:
        return "[dim]-[/dim]"
    return escape(value[:width] + "..." if len(value) > width else value)


def _mark(ok: bool) -> str:
    return "[green]yes[/green]" if ok else "[red]no[/red]"


def format_record(record: AuditEventRecord | SerializationFailure) -> None:
    """Print the stored record returned by a successful ``log()``."""
    if isinstance(record, SerializationFailure):
        console.print(
            Panel(
                f"[yellow]Event not sent: serialization failed[/yellow]\n{escape(record.reason)}",
                style="yellow",
                expand=False,
            )
        )
        return

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")
    table.add_row("ID:", escape(record.id))
    table.add_row("Action:", escape(record.action))
    table.add_row("User:", escape(record.user_id or "-"))
    if record.resource:
        table.add_row("Resource:", escape(record.resource))
    table.add_row("Created:", escape(record.created_at or record.timestamp or "-"))
    table.add_row("Signature:", _short(record.signature, 24))
    table.add_row("Chain hash:", _short(record.chain_hash))
    table.add_row("Prev hash:", _short(record.prev_hash))

    console.print(Panel(table, title="[green]Event stored[/green]", expand=False))


def format_verification(result: VerificationResult, *, title: str = "Local verification") -> None:
    """Print the outcome of an offline single-event check."""
    color = "green" if result.is_valid else "red"
    verdict = "VALID" if result.is_valid else "INVALID"

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("check", style="dim")
    table.add_column("result")
    table.add_row("Has chain hash:", _mark(result.checks.has_chain_hash))
    table.add_row("Chain hash valid:", _mark(result.checks.chain_hash_valid))
    table.add_row("Prev hash matches:", _mark(result.checks.prev_hash_matches))

    console.print(f"[bold {color}]{verdict}[/bold {color}]  {escape(result.details)}")
    console.print(Panel(table, title=title, expand=False))


def format_chain_result(result: ChainVerificationResult) -> None:
    """Print the outcome of a chain walk, remote or local."""
    color = "green" if result.is_valid else "red"
    verdict = "CHAIN VALID" if result.is_valid else "CHAIN BROKEN"

    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")
    table.add_row("Events checked:", str(result.events_checked))
    table.add_row("Chained events:", str(result.events_with_chain))
    table.add_row("Legacy events:", str(result.legacy_events))
    if result.first_invalid_event:
        table.add_row("First invalid:", escape(result.first_invalid_event))
    if result.error_type:
        table.add_row("Error type:", str(result.error_type))
    table.add_row("Verified at:", result.verified_at.isoformat())

    console.print(f"[bold {color}]{verdict}[/bold {color}]  {escape(result.details)}")
    console.print(Panel(table, expand=False))


def format_chain_stats(stats: ChainStats) -> None:
    table = Table(title="Chain Statistics")
    table.add_column("Metric", style="cyan")
    table.add_column("Value", justify="right")
    table.add_row("Total events", str(stats.total_events))
    table.add_row("Chained events", str(stats.chained_events))
    table.add_row("Legacy events", str(stats.legacy_events))
    table.add_row("Coverage", f"{stats.chain_coverage:.1%}")
    if stats.first_chained_event:
        table.add_row("First chained", escape(stats.first_chained_event.id))
    if stats.last_chained_event:
        table.add_row("Last chained", escape(stats.last_chained_event.id))
    table.add_row("Genesis hash", escape(stats.genesis_hash or "-"))

    console.print(table)


def format_proof(proof: EventProof, result: VerificationResult) -> None:
    """Print a server proof next to its locally recomputed verdict."""
    body = proof.proof
    table = Table(show_header=False, box=None, padding=(0, 2))
    table.add_column("key", style="dim")
    table.add_column("value")
    table.add_row("Event:", escape(proof.event.id))
    table.add_row("Algorithm:", escape(proof.verification.algorithm))
    table.add_row("Formula:", escape(proof.verification.formula))
    table.add_row("Genesis:", _mark(body.is_genesis))
    table.add_row("Chained:", _mark(body.is_chained))
    table.add_row("Chain hash:", _short(body.chain_hash))
    table.add_row("Prev hash:", _short(body.prev_hash))
    if body.previous_event:
        table.add_row("Previous event:", escape(body.previous_event.id))
    if body.next_event:
        table.add_row("Next event:", escape(body.next_event.id))

    console.print(Panel(table, title="Event proof", expand=False))
    format_verification(result, title="Recomputed locally")


def format_doctor(checks: list[tuple[str, bool, str]]) -> None:
    """Print ``(name, passed, detail)`` rows from ``logvault doctor``."""
    console.print(f"[bold]logvault v{__version__}[/bold] - configuration check")
    console.print()

    table = Table(show_header=True)
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Detail")
    for name, passed, detail in checks:
        status = "[green]OK[/green]" if passed else "[red]FAIL[/red]"
        table.add_row(name, status, escape(detail))
    console.print(table)

    failed = sum(1 for _, passed, _ in checks if not passed)
    if failed:
        console.print(f"\n  [red]{failed} check(s) failed[/red]")
    else:
        console.print("\n  [green]All checks passed[/green]")
