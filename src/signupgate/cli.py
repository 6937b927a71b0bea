"""
SignupGate CLI - Main entry point for the command-line interface.
"""

import logging

import click
from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

from signupgate import __version__
from signupgate.config import GateConfig

console = Console()


@click.group()
@click.version_option(version=__version__, prog_name="signupgate")
@click.option(
    "--log-level",
    type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
    default="WARNING",
    help="Logging verbosity",
)
@click.pass_context
def main(ctx: click.Context, log_level: str) -> None:
    """SignupGate - credential risk assessment for account signup

    Checks password strength, password breach exposure and email
    uniqueness, and runs the gated signup wizard and its API server.
    """
    logging.basicConfig(
        level=log_level.upper(),
        format="%(message)s",
        handlers=[RichHandler(console=console, show_path=False)],
    )
    ctx.ensure_object(dict)
    ctx.obj["console"] = console


@main.command("config")
def show_config() -> None:
    """Show signup gate configuration and credential status."""
    config = GateConfig.from_env()

    table = Table(title="Signup Gate Configuration")
    table.add_column("Setting", style="cyan")
    table.add_column("Value")

    for key, value in config.to_dict().items():
        if isinstance(value, bool):
            value = "[green]Set[/green]" if value else "[red]Not set[/red]"
        table.add_row(key, str(value) if value is not None else "[dim]-[/dim]")

    console.print(table)

    for error in config.validate():
        console.print(f"[red]{error}[/red]")


# Import and register subcommand groups
from signupgate.breach.cli import breach
from signupgate.identity.cli import identity
from signupgate.server import server
from signupgate.wizard.cli import signup

main.add_command(breach)
main.add_command(identity)
main.add_command(server)
main.add_command(signup)


if __name__ == "__main__":
    main()
