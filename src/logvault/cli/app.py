# Copyright (c) 2026 Veritas Aequitas Holdings LLC. All rights reserved.
"""Typer CLI application root."""

from __future__ import annotations

import asyncio
from pathlib import Path
from typing import Annotated

import typer
from rich.console import Console
from rich.markup import escape

from logvault.cli.commands import chain as chain_cmd

app = typer.Typer(
    name="logvault",
    help="Audit log client with tamper-evident hash-chain verification",
    no_args_is_help=True,
)
console = Console()

app.add_typer(chain_cmd.app, name="chain", help="Server-side chain verification and statistics")


@app.callback()
def main(
    log_level: Annotated[
        str | None,
        typer.Option("--log-level", help="Override LOGVAULT_LOG_LEVEL"),
    ] = None,
) -> None:
    """Configure logging from settings before any command runs."""
    from logvault.core.config import get_settings
    from logvault.core.logging import setup_logging

    settings = get_settings()
    setup_logging(log_level or settings.log_level, settings.log_format)


def _parse_meta(pairs: list[str] | None) -> dict[str, str] | None:
    if not pairs:
        return None
    metadata: dict[str, str] = {}
    for pair in pairs:
        key, sep, value = pair.partition("=")
        if not sep or not key:
            raise typer.BadParameter(f"expected KEY=VALUE, got '{pair}'", param_hint="--meta")
        metadata[key] = value
    return metadata


@app.command()
def send(
    action: Annotated[str, typer.Argument(help="Action in domain.event form, e.g. auth.login")],
    user: Annotated[str, typer.Option("--user", "-u", help="Acting user ID")],
    resource: Annotated[
        str | None,
        typer.Option("--resource", "-r", help="Affected resource, e.g. document:42"),
    ] = None,
    meta: Annotated[
        list[str] | None,
        typer.Option("--meta", "-m", help="Metadata entry KEY=VALUE (repeatable)"),
    ] = None,
) -> None:
    """Send one audit event and print the stored record."""
    metadata = _parse_meta(meta)
    asyncio.run(_async_send(action, user, resource, metadata))


async def _async_send(
    action: str,
    user: str,
    resource: str | None,
    metadata: dict[str, str] | None,
) -> None:
    from logvault.cli.formatters.console import format_record
    from logvault.client import LogVaultClient
    from logvault.core.exceptions import LogVaultError, RateLimitError

    try:
        client = LogVaultClient.from_settings()
        record = await client.log(
            action=action,
            user_id=user,
            resource=resource,
            metadata=metadata,
        )
    except RateLimitError as exc:
        hint = f" (retry after {exc.retry_after}s)" if exc.retry_after is not None else ""
        console.print(f"[red]Error:[/red] {escape(str(exc))}{hint}")
        raise typer.Exit(1) from None
    except LogVaultError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    format_record(record)


@app.command()
def verify(
    file: Annotated[
        Path,
        typer.Argument(
            help="Exported event (JSON object) or chain segment (JSON array)",
            exists=True,
            dir_okay=False,
            readable=True,
        ),
    ],
    prev: Annotated[
        str | None,
        typer.Option("--prev", help="Known chain_hash of the preceding event"),
    ] = None,
) -> None:
    """Verify exported events offline, without contacting the service."""
    from logvault.cli.formatters.console import format_chain_result, format_verification
    from logvault.core.exceptions import ValidationError
    from logvault.models.chain import ChainVerificationResult
    from logvault.sdk import verify_file

    try:
        result = verify_file(file, prev_chain_hash=prev)
    except ValidationError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        raise typer.Exit(1) from None

    if isinstance(result, ChainVerificationResult):
        format_chain_result(result)
    else:
        format_verification(result)
    raise typer.Exit(0 if result.is_valid else 1)


@app.command()
def proof(
    event_id: Annotated[str, typer.Argument(help="Event ID to fetch the proof for")],
) -> None:
    """Fetch an event's proof and recompute its chain hash locally."""
    exit_code = asyncio.run(_async_proof(event_id))
    raise typer.Exit(exit_code)


async def _async_proof(event_id: str) -> int:
    from logvault.cli.formatters.console import format_proof
    from logvault.core.exceptions import LogVaultError
    from logvault.sdk import check_proof

    try:
        event_proof, result = await check_proof(event_id)
    except LogVaultError as exc:
        console.print(f"[red]Error:[/red] {escape(str(exc))}")
        return 1

    format_proof(event_proof, result)
    return 0 if result.is_valid else 1


@app.command()
def doctor() -> None:
    """Check the local configuration without calling the service."""
    from pydantic import ValidationError as PydanticValidationError

    from logvault.cli.formatters.console import format_doctor
    from logvault.core.config import ClientConfig, get_settings
    from logvault.core.constants import API_KEY_PREFIXES
    from logvault.core.logging import redact_sensitive

    settings = get_settings()
    local = settings.resolve_local_mode()
    checks: list[tuple[str, bool, str]] = []

    if local:
        checks.append(("API key", True, "not required in local mode"))
    elif not settings.api_key:
        checks.append(("API key", False, "LOGVAULT_API_KEY is not set"))
    elif not settings.api_key.startswith(API_KEY_PREFIXES):
        checks.append(("API key", False, "must start with 'lv_live_' or 'lv_test_'"))
    else:
        key_type = "live" if settings.api_key.startswith("lv_live_") else "test"
        checks.append(("API key", True, f"{redact_sensitive(settings.api_key)} ({key_type})"))

    base_url = settings.base_url
    secure = base_url.startswith("https://") or base_url.startswith(
        ("http://localhost", "http://127.0.0.1")
    )
    checks.append(("Base URL", secure, base_url if secure else f"{base_url} (HTTPS required)"))

    try:
        config = ClientConfig.from_settings(settings)
    except PydanticValidationError as exc:
        errors = ", ".join(str(err["loc"][0]) for err in exc.errors())
        checks.append(("Delivery settings", False, f"invalid: {errors}"))
    else:
        deadline = f", deadline {config.total_timeout}s" if config.total_timeout else ""
        checks.append((
            "Delivery settings",
            True,
            f"timeout {config.timeout}s, {config.max_retries} retries{deadline}",
        ))

    checks.append((
        "Local mode",
        True,
        f"{'enabled' if local else 'disabled'} (environment: {settings.environment})",
    ))

    format_doctor(checks)
    if not all(passed for _, passed, _ in checks):
        raise typer.Exit(1)
