"""
Gated multi-step signup wizard.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from signupgate.wizard.models import (
    CredentialCandidate,
    Feedback,
    FeedbackKind,
    GateStatus,
    StepOutcome,
    WizardStep,
)
from signupgate.wizard.machine import OnboardingWizard

__all__ = [
    "OnboardingWizard",
    "CredentialCandidate",
    "Feedback",
    "FeedbackKind",
    "GateStatus",
    "StepOutcome",
    "WizardStep",
]
