"""
CLI commands for identity store lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import json

import click
from rich.console import Console
from rich.panel import Panel

from signupgate.config import GateConfig
from signupgate.identity.client import IdentityStoreClient
from signupgate.identity.models import IdentityError

console = Console()


@click.group()
@click.pass_context
def identity(ctx: click.Context) -> None:
    """Email uniqueness checks against the identity store.

    Requires SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY.
    """
    ctx.ensure_object(dict)
    ctx.obj["console"] = console


@identity.command("email")
@click.argument("email")
@click.option("--json", "json_output", is_flag=True, help="Output as JSON")
@click.pass_context
def check_email(ctx: click.Context, email: str, json_output: bool) -> None:
    """Check whether EMAIL already belongs to a registered account.

    Example:
        signupgate identity email user@example.com
    """
    config = GateConfig.from_env()

    async def _check():
        async with IdentityStoreClient.from_config(config) as client:
            return await client.check_email_exists(email)

    result = asyncio.run(_check())

    if json_output:
        console.print(json.dumps(result.to_dict(), indent=2, default=str))
        if not result.ok:
            raise SystemExit(1)
        return

    if result.error == IdentityError.NOT_CONFIGURED:
        console.print("[red]Identity store not configured.[/red]")
        console.print("  export SUPABASE_URL=https://<project>.supabase.co")
        console.print("  export SUPABASE_SERVICE_ROLE_KEY=<service role key>")
        raise SystemExit(1)

    if result.error:
        console.print(f"[red]Could not verify {result.email_normalized}: {result.detail}[/red]")
        raise SystemExit(1)

    if result.exists:
        console.print(Panel(
            f"[yellow]{result.email_normalized}[/yellow] is already registered",
            title="Uniqueness Check Result"
        ))
    else:
        console.print(Panel(
            f"[green]{result.email_normalized}[/green] is available",
            title="Uniqueness Check Result"
        ))
