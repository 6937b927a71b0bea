"""Tests for the command-line interface."""

from __future__ import annotations

import asyncio

from click.testing import CliRunner

from signupgate.cli import main
from signupgate.wizard import OnboardingWizard, WizardStep
from signupgate.wizard import cli as wizard_cli

from conftest import FakeAccountCreator, FakeBreachChecker, FakeIdentityChecker

STRONG = "tR7#qLm2!vXz9@Pw"


def test_help_lists_commands():
    result = CliRunner().invoke(main, ["--help"])

    assert result.exit_code == 0
    for command in ("breach", "identity", "server", "signup", "config"):
        assert command in result.output


def test_config_hides_secrets(monkeypatch):
    monkeypatch.setenv("SUPABASE_SERVICE_ROLE_KEY", "super-secret-key")

    result = CliRunner().invoke(main, ["config"])

    assert result.exit_code == 0
    assert "super-secret-key" not in result.output


def test_identity_email_without_credentials_fails(monkeypatch):
    for name in ("SUPABASE_URL", "NEXT_PUBLIC_SUPABASE_URL",
                 "SUPABASE_SERVICE_ROLE_KEY", "SUPABASE_SERVICE_ROLE"):
        monkeypatch.delenv(name, raising=False)

    result = CliRunner().invoke(main, ["identity", "email", "user@example.com"])

    assert result.exit_code == 1
    assert "not configured" in result.output


def test_breach_password_rejects_bad_hash():
    result = CliRunner().invoke(main, ["breach", "password", "--hash", "not-a-hash"])

    assert result.exit_code == 2


def scripted_prompts(monkeypatch, answers):
    answers = iter(answers)
    monkeypatch.setattr(wizard_cli.click, "prompt", lambda *args, **kwargs: next(answers))


def make_wizard(call_log, policy, creator):
    return OnboardingWizard(
        breach_checker=FakeBreachChecker(call_log),
        identity_checker=FakeIdentityChecker(call_log),
        account_creator=creator,
        strength_policy=policy,
    )


def test_run_wizard_with_back_and_retry(monkeypatch, call_log, policy):
    creator = FakeAccountCreator()
    wizard = make_wizard(call_log, policy, creator)
    scripted_prompts(monkeypatch, [
        "jane@example.com", STRONG, "mismatch",       # refused: passwords differ
        "jane@example.com", STRONG, STRONG,
        "back",                                      # step 2 -> step 1
        "jane@example.com", STRONG, STRONG,
        "Jane", "Doe",
        "0821234567", "1 Main Road", "Cape Town", "8001",
    ])

    final = asyncio.run(wizard_cli.run_wizard(wizard))

    assert final == WizardStep.COMPLETED
    assert call_log == ["identity", "breach", "identity", "breach"]
    assert len(creator.candidates) == 1


def test_run_wizard_quit_abandons(monkeypatch, call_log, policy):
    creator = FakeAccountCreator()
    wizard = make_wizard(call_log, policy, creator)
    scripted_prompts(monkeypatch, ["quit"])

    final = asyncio.run(wizard_cli.run_wizard(wizard))

    assert final == WizardStep.ABANDONED
    assert call_log == []
    assert creator.candidates == []


def test_breach_verdicts_reflect_gate_policy():
    from signupgate.breach.cli import gate_verdict, range_source
    from signupgate.breach.models import PasswordCheckResult

    breached = PasswordCheckResult(breached=True, count=3, hash_prefix="5BAA6")
    failed_open = PasswordCheckResult(failed_open=True, error="HTTP 503", hash_prefix="5BAA6")
    cached = PasswordCheckResult(cached=True, hash_prefix="5BAA6")

    assert "blocked" in gate_verdict(breached)
    assert "could not be verified" in gate_verdict(failed_open)
    assert "failed open (HTTP 503)" in range_source(failed_open)
    assert range_source(cached) == "cache"
