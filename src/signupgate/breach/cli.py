"""
CLI commands for password breach checks.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import json

import click
from rich.console import Console
from rich.table import Table

from signupgate.breach.client import PwnedPasswordsClient
from signupgate.breach.models import PasswordCheckResult, RiskLevel
from signupgate.config import GateConfig
from signupgate.errors import InvalidInputError, UpstreamUnavailableError

console = Console()

EXPOSURE_STYLES = {
    RiskLevel.SAFE: "green",
    RiskLevel.LOW: "yellow",
    RiskLevel.MEDIUM: "orange3",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold red",
}


def range_source(result: PasswordCheckResult) -> str:
    """Where the range answer came from."""
    if result.failed_open:
        return f"[yellow]unavailable, failed open ({result.error})[/yellow]"
    if result.cached:
        return "cache"
    return "live range query"


def gate_verdict(result: PasswordCheckResult) -> str:
    """How the signup gate would treat this password."""
    if result.breached:
        return "[red]blocked at signup: password appears in breach corpus[/red]"
    if result.failed_open:
        return "[yellow]allowed at signup: breach status could not be verified[/yellow]"
    return "[green]allowed at signup[/green]"


def render_result(result: PasswordCheckResult, ttl_seconds: float) -> Table:
    style = EXPOSURE_STYLES.get(result.risk_level, "white")

    table = Table(title="Breach Exposure", show_header=False)
    table.add_column("Field", style="cyan")
    table.add_column("Value")
    table.add_row("Prefix sent", result.hash_prefix or "-")
    table.add_row("Range source", range_source(result))
    table.add_row("Range cache TTL", f"{ttl_seconds / 3600:g} h")
    table.add_row("Seen in breaches", f"{result.occurrences:,}")
    table.add_row("Exposure", f"[{style}]{result.risk_level.value}[/{style}]")
    if result.breached:
        table.add_row("Detail", result.risk_description)
    table.add_row("Signup gate", gate_verdict(result))
    return table


@click.group()
@click.pass_context
def breach(ctx: click.Context) -> None:
    """Password breach exposure checks.

    Uses the Pwned Passwords range API with k-anonymity: only the first
    5 characters of the password's SHA-1 hash are sent.
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console


@breach.command("password")
@click.option("--password", "-p", help="Password to check (prompted when omitted)")
@click.option("--hash", "password_hash", help="Full SHA-1 digest to check instead")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.option("--strict", is_flag=True, help="Exit non-zero if the range API is unavailable")
@click.pass_context
def check_password(
    ctx: click.Context,
    password: str | None,
    password_hash: str | None,
    json_output: bool,
    strict: bool,
) -> None:
    """Look up a password the way the signup gate does.

    Example:
        signupgate breach password
        signupgate breach password --hash 5BAA61E4C9B93F3F0682250B6CF8331B7EE68FD8
    """
    if not password and not password_hash:
        password = click.prompt("Password", hide_input=True)

    config = GateConfig.from_env()

    async def _check():
        async with PwnedPasswordsClient.from_config(config) as client:
            if password_hash:
                return await client.check_password_hash(password_hash)
            return await client.check_password(password)

    try:
        with console.status("Querying breach range..."):
            result = asyncio.run(_check())
    except InvalidInputError as e:
        console.print(f"[red]{e}[/red]")
        raise SystemExit(2)

    if strict:
        try:
            result.raise_for_error()
        except UpstreamUnavailableError as e:
            console.print(f"[red]{e}[/red]")
            raise SystemExit(1)

    if json_output:
        console.print(json.dumps(result.to_dict(), indent=2, default=str))
        return

    console.print(render_result(result, config.breach_cache_ttl_seconds))
