# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""CLI commands for server-side hash-chain integrity."""

from __future__ import annotations

import asyncio
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from logvault.core.constants import CHAIN_VERIFY_LIMIT_DEFAULT

app = typer.Typer(help="Inspect and verify the organisation's hash chain.")
console = Console()


@app.command(name="verify")
def chain_verify(
    start_date: Annotated[
        str | None,
        typer.Option("--start", help="Start date (ISO format)"),
    ] = None,
    end_date: Annotated[
        str | None,
        typer.Option("--end", help="End date (ISO format)"),
    ] = None,
    limit: Annotated[
        int,
        typer.Option("--limit", "-n", help="Maximum number of events to walk (max 10000)"),
    ] = CHAIN_VERIFY_LIMIT_DEFAULT,
) -> None:
    """Ask the service to walk the chain and report the first break."""
    exit_code = asyncio.run(_async_chain_verify(start_date, end_date, limit))
    raise typer.Exit(exit_code)


async def _async_chain_verify(
    start_date: str | None,
    end_date: str | None,
    limit: int,
) -> int:
    from logvault.cli.formatters.console import format_chain_result
    from logvault.client import LogVaultClient
    from logvault.core.exceptions import LogVaultError

    try:
        client = LogVaultClient.from_settings()
        result = await client.verify_chain(
            start_date=start_date,
            end_date=end_date,
            limit=limit,
        )
    except LogVaultError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    format_chain_result(result)
    return 0 if result.is_valid else 1


@app.command(name="stats")
def chain_stats() -> None:
    """Show how much of the audit log is chain-tracked."""
    asyncio.run(_async_chain_stats())


async def _async_chain_stats() -> None:
    from logvault.cli.formatters.console import format_chain_stats
    from logvault.client import LogVaultClient
    from logvault.core.exceptions import LogVaultError

    try:
        client = LogVaultClient.from_settings()
        stats = await client.get_chain_stats()
    except LogVaultError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    format_chain_stats(stats)
