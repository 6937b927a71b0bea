"""
Data models for the onboarding wizard.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from enum import Enum


class WizardStep(str, Enum):
    """Wizard states. The last two are terminal."""

    SECURITY = "security"
    PERSONAL_INFO = "personal_info"
    CONTACT = "contact"
    COMPLETED = "completed"
    ABANDONED = "abandoned"

    @property
    def is_terminal(self) -> bool:
        return self in (WizardStep.COMPLETED, WizardStep.ABANDONED)

    @property
    def number(self) -> int | None:
        """1-based position for the interactive steps."""
        return {
            WizardStep.SECURITY: 1,
            WizardStep.PERSONAL_INFO: 2,
            WizardStep.CONTACT: 3,
        }.get(self)


class FeedbackKind(str, Enum):
    """Category of a message shown to the person signing up."""

    VALIDATION = "validation"
    WEAK_PASSWORD = "weak_password"
    EMAIL_REGISTERED = "email_registered"
    PASSWORD_BREACHED = "password_breached"
    VERIFICATION_UNAVAILABLE = "verification_unavailable"
    ACCOUNT_CREATION_FAILED = "account_creation_failed"
    CHECK_IN_PROGRESS = "check_in_progress"
    SESSION_CLOSED = "session_closed"


@dataclass
class Feedback:
    """One actionable message, optionally tied to a form field."""

    kind: FeedbackKind
    message: str
    field: str | None = None


@dataclass
class CredentialCandidate:
    """Signup data held only for the lifetime of a wizard session."""

    email: str = ""
    password: str = field(default="", repr=False)
    first_name: str = ""
    last_name: str = ""
    phone: str = ""
    address: str = ""
    city: str = ""
    zip_code: str = ""


@dataclass
class GateStatus:
    """Results of the step 1 remote checks for the current attempt."""

    email_checked: bool = False
    email_exists: bool = False
    breach_checked: bool = False
    breached: bool = False

    def reset(self) -> None:
        self.email_checked = False
        self.email_exists = False
        self.breach_checked = False
        self.breached = False


@dataclass
class StepOutcome:
    """Result of a wizard transition attempt."""

    accepted: bool
    step: WizardStep
    feedback: list[Feedback] = field(default_factory=list)

    @property
    def kinds(self) -> set[FeedbackKind]:
        return {f.kind for f in self.feedback}

    @property
    def messages(self) -> list[str]:
        return [f.message for f in self.feedback]
