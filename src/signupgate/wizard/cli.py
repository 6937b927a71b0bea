"""
Interactive signup command.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio

import click
from rich.console import Console
from rich.panel import Panel
from rich.progress import Progress, SpinnerColumn, TextColumn

from signupgate.accounts import SupabaseAccountCreator
from signupgate.breach.client import PwnedPasswordsClient
from signupgate.config import GateConfig
from signupgate.identity.client import IdentityStoreClient
from signupgate.wizard.machine import OnboardingWizard
from signupgate.wizard.models import FeedbackKind, StepOutcome, WizardStep

console = Console()

BACK = "back"
QUIT = "quit"

STEP_TITLES = {
    WizardStep.SECURITY: "Security",
    WizardStep.PERSONAL_INFO: "Personal Info",
    WizardStep.CONTACT: "Contact",
}


def feedback_color(kind: FeedbackKind) -> str:
    """Get color for a feedback category."""
    colors = {
        FeedbackKind.VALIDATION: "yellow",
        FeedbackKind.WEAK_PASSWORD: "orange3",
        FeedbackKind.EMAIL_REGISTERED: "red",
        FeedbackKind.PASSWORD_BREACHED: "bold red",
        FeedbackKind.VERIFICATION_UNAVAILABLE: "red",
        FeedbackKind.ACCOUNT_CREATION_FAILED: "red",
    }
    return colors.get(kind, "white")


def show_outcome(outcome: StepOutcome) -> None:
    for item in outcome.feedback:
        color = feedback_color(item.kind)
        console.print(f"[{color}]{item.message}[/{color}]")


async def _with_spinner(label: str, coro):
    with Progress(
        SpinnerColumn(),
        TextColumn("[progress.description]{task.description}"),
        console=console,
        transient=True,
    ) as progress:
        progress.add_task(label, total=None)
        return await coro


async def run_wizard(wizard: OnboardingWizard) -> WizardStep:
    """Drive a wizard from the terminal until it reaches a terminal state.

    Typing ``back`` or ``quit`` at the first prompt of a step moves back
    or abandons the session.
    """
    while not wizard.is_terminal:
        step = wizard.step
        console.print(f"\n[bold]Step {step.number} of 3: {STEP_TITLES[step]}[/bold]")

        if step == WizardStep.SECURITY:
            email = click.prompt("Email")
            if email.strip().lower() == QUIT:
                wizard.abandon()
                break
            password = click.prompt("Password", hide_input=True, default="", show_default=False)
            confirm = click.prompt("Confirm password", hide_input=True, default="", show_default=False)
            outcome = await _with_spinner(
                "Checking your details...",
                wizard.submit_security(email, password, confirm),
            )

        elif step == WizardStep.PERSONAL_INFO:
            first_name = click.prompt("First name")
            if first_name.strip().lower() == BACK:
                show_outcome(wizard.back())
                continue
            if first_name.strip().lower() == QUIT:
                wizard.abandon()
                break
            last_name = click.prompt("Last name")
            outcome = await wizard.submit_personal(first_name, last_name)

        else:
            phone = click.prompt("Phone")
            if phone.strip().lower() == BACK:
                show_outcome(wizard.back())
                continue
            if phone.strip().lower() == QUIT:
                wizard.abandon()
                break
            address = click.prompt("Street address", default="", show_default=False)
            city = click.prompt("City", default="", show_default=False)
            zip_code = click.prompt("Postal code", default="", show_default=False)
            outcome = await _with_spinner(
                "Creating your account...",
                wizard.submit_contact(phone, address, city, zip_code),
            )

        show_outcome(outcome)

    return wizard.step


@click.command("signup")
@click.option("--settle-delay", type=float, default=1.0, show_default=True,
              help="Pause after the security checks pass")
@click.pass_context
def signup(ctx: click.Context, settle_delay: float) -> None:
    """Create an account through the gated signup wizard.

    Type 'back' at the first prompt of a step to return to the previous
    step, or 'quit' to abandon the signup.

    Example:
        signupgate signup
    """
    config = GateConfig.from_env()
    config.settle_delay = settle_delay

    errors = config.validate()
    if errors:
        console.print(f"[red]Configuration errors: {', '.join(errors)}[/red]")
        raise SystemExit(1)

    async def _run():
        async with PwnedPasswordsClient.from_config(config) as breach_client, \
                IdentityStoreClient.from_config(config) as identity_client:
            wizard = OnboardingWizard.from_config(
                config,
                breach_checker=breach_client,
                identity_checker=identity_client,
                account_creator=SupabaseAccountCreator.from_config(config),
            )
            return await run_wizard(wizard)

    final_step = asyncio.run(_run())

    if final_step == WizardStep.COMPLETED:
        console.print(Panel("[green]Account created successfully![/green]", title="Signup"))
    else:
        console.print("[yellow]Signup abandoned. Nothing was saved.[/yellow]")
        raise SystemExit(1)
