"""
Onboarding wizard state machine.

Step 1 (security) runs its gates strictly in order: local validation,
strength policy, email uniqueness, then breach exposure. The breach
lookup only starts after the identity store has answered "not
registered". Each gate with a remote call is guarded by an in-flight
flag, and every awaited result is checked against the session
generation so a late answer cannot touch an abandoned or rewound
session.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from typing import Awaitable, Callable, Protocol

from signupgate.accounts import AccountCreationResult, AccountCreator
from signupgate.breach.models import PasswordCheckResult
from signupgate.config import GateConfig
from signupgate.identity.models import IdentityError, UniquenessResult
from signupgate.strength import StrengthPolicy, context_inputs
from signupgate.wizard.models import (
    CredentialCandidate,
    Feedback,
    FeedbackKind,
    GateStatus,
    StepOutcome,
    WizardStep,
)
from signupgate.wizard.validation import (
    validate_contact,
    validate_personal,
    validate_security,
)

logger = logging.getLogger(__name__)


class BreachChecker(Protocol):
    async def check_password(self, password: str) -> PasswordCheckResult: ...


class IdentityChecker(Protocol):
    async def check_email_exists(self, email: str) -> UniquenessResult: ...


class OnboardingWizard:
    """Gated three-step signup flow for a single session.

    Args:
        breach_checker: Breach Detection Service
        identity_checker: Identity Uniqueness Service
        account_creator: External account-creation collaborator
        strength_policy: Length and score policy (default: zxcvbn, score >= 3)
        settle_delay: Seconds to pause before leaving step 1
        sleep: Coroutine used for the settle delay
    """

    def __init__(
        self,
        breach_checker: BreachChecker,
        identity_checker: IdentityChecker,
        account_creator: AccountCreator,
        strength_policy: StrengthPolicy | None = None,
        settle_delay: float = 0.0,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ):
        self.breach_checker = breach_checker
        self.identity_checker = identity_checker
        self.account_creator = account_creator
        self.strength_policy = strength_policy or StrengthPolicy()
        self.settle_delay = settle_delay
        self._sleep = sleep

        self.step = WizardStep.SECURITY
        self.status = GateStatus()
        self.candidate = CredentialCandidate()
        self.account: AccountCreationResult | None = None

        self._generation = 0
        self._in_flight: set[WizardStep] = set()

    @classmethod
    def from_config(
        cls,
        config: GateConfig,
        breach_checker: BreachChecker,
        identity_checker: IdentityChecker,
        account_creator: AccountCreator,
        strength_policy: StrengthPolicy | None = None,
    ) -> "OnboardingWizard":
        return cls(
            breach_checker=breach_checker,
            identity_checker=identity_checker,
            account_creator=account_creator,
            strength_policy=strength_policy or StrengthPolicy.from_config(config),
            settle_delay=config.settle_delay,
        )

    @property
    def is_terminal(self) -> bool:
        return self.step.is_terminal

    def in_flight(self, step: WizardStep | None = None) -> bool:
        """Whether a remote check is running (for ``step``, or any step)."""
        if step is None:
            return bool(self._in_flight)
        return step in self._in_flight

    def _refuse(self, *feedback: Feedback) -> StepOutcome:
        return StepOutcome(accepted=False, step=self.step, feedback=list(feedback))

    def _accept(self) -> StepOutcome:
        return StepOutcome(accepted=True, step=self.step)

    def _closed(self) -> StepOutcome:
        return self._refuse(Feedback(
            FeedbackKind.SESSION_CLOSED,
            "This signup session is no longer active.",
        ))

    def _guard(self, expected: WizardStep) -> StepOutcome | None:
        """Refusal for a forward call made in the wrong state, else None."""
        if self.is_terminal:
            return self._closed()
        if expected in self._in_flight:
            return self._refuse(Feedback(
                FeedbackKind.CHECK_IN_PROGRESS,
                "Still checking your details. Please wait.",
            ))
        if self.step != expected:
            return self._refuse(Feedback(
                FeedbackKind.VALIDATION,
                f"Cannot submit the {expected.value} step from the {self.step.value} step.",
            ))
        return None

    def _is_current(self, generation: int) -> bool:
        return generation == self._generation and not self.is_terminal

    # =========================================================================
    # Step 1: Security
    # =========================================================================

    async def submit_security(
        self,
        email: str,
        password: str,
        confirm_password: str,
    ) -> StepOutcome:
        """Try to advance from step 1 to step 2."""
        refusal = self._guard(WizardStep.SECURITY)
        if refusal:
            return refusal

        errors = validate_security(email, password, confirm_password)
        if errors:
            return self._refuse(*errors)

        email = email.strip()
        verdict = self.strength_policy.evaluate(
            password,
            context_inputs(email, self.candidate.first_name, self.candidate.last_name),
        )
        if not verdict.acceptable:
            return self._refuse(*(
                Feedback(FeedbackKind.WEAK_PASSWORD, message, field="password")
                for message in verdict.feedback
            ))

        self.status.reset()
        generation = self._generation
        self._in_flight.add(WizardStep.SECURITY)
        try:
            return await self._run_security_gates(generation, email, password)
        finally:
            self._in_flight.discard(WizardStep.SECURITY)

    async def _run_security_gates(self, generation: int, email: str, password: str) -> StepOutcome:
        try:
            uniqueness = await self.identity_checker.check_email_exists(email)
        except Exception:
            logger.exception("Email uniqueness check raised")
            uniqueness = None

        if not self._is_current(generation):
            logger.info("Discarding uniqueness result for an inactive session")
            return self._closed()

        if uniqueness is None or not uniqueness.ok:
            if uniqueness is not None and uniqueness.error == IdentityError.NOT_CONFIGURED:
                logger.error("Blocking signup: identity store not configured")
            return self._refuse(Feedback(
                FeedbackKind.VERIFICATION_UNAVAILABLE,
                "We could not verify your email address right now. Please try again shortly.",
                field="email",
            ))

        self.status.email_checked = True
        self.status.email_exists = uniqueness.exists
        if uniqueness.exists:
            return self._refuse(Feedback(
                FeedbackKind.EMAIL_REGISTERED,
                "An account with this email already exists. Try signing in instead.",
                field="email",
            ))

        try:
            breach = await self.breach_checker.check_password(password)
        except Exception:
            logger.exception("Password breach check raised")
            breach = None

        if not self._is_current(generation):
            logger.info("Discarding breach result for an inactive session")
            return self._closed()

        if breach is None:
            return self._refuse(Feedback(
                FeedbackKind.VERIFICATION_UNAVAILABLE,
                "We could not check your password right now. Please try again shortly.",
                field="password",
            ))

        self.status.breach_checked = True
        self.status.breached = breach.breached
        if breach.breached:
            return self._refuse(Feedback(
                FeedbackKind.PASSWORD_BREACHED,
                "This password has appeared in a known data breach. Please choose a different one.",
                field="password",
            ))

        if self.settle_delay > 0:
            await self._sleep(self.settle_delay)
            if not self._is_current(generation):
                return self._closed()

        self.candidate.email = email
        self.candidate.password = password
        self.step = WizardStep.PERSONAL_INFO
        return self._accept()

    # =========================================================================
    # Step 2: Personal info
    # =========================================================================

    async def submit_personal(self, first_name: str, last_name: str) -> StepOutcome:
        """Try to advance from step 2 to step 3."""
        refusal = self._guard(WizardStep.PERSONAL_INFO)
        if refusal:
            return refusal

        errors = validate_personal(first_name, last_name)
        if errors:
            return self._refuse(*errors)

        self.candidate.first_name = first_name.strip()
        self.candidate.last_name = last_name.strip()
        self.step = WizardStep.CONTACT
        return self._accept()

    # =========================================================================
    # Step 3: Contact and account creation
    # =========================================================================

    async def submit_contact(
        self,
        phone: str,
        address: str = "",
        city: str = "",
        zip_code: str = "",
    ) -> StepOutcome:
        """Validate contact details and hand the candidate to the auth service."""
        refusal = self._guard(WizardStep.CONTACT)
        if refusal:
            return refusal

        errors = validate_contact(phone)
        if errors:
            return self._refuse(*errors)

        candidate = CredentialCandidate(
            email=self.candidate.email,
            password=self.candidate.password,
            first_name=self.candidate.first_name,
            last_name=self.candidate.last_name,
            phone=phone.strip(),
            address=(address or "").strip(),
            city=(city or "").strip(),
            zip_code=(zip_code or "").strip(),
        )

        generation = self._generation
        self._in_flight.add(WizardStep.CONTACT)
        try:
            try:
                result = await self.account_creator.create_account(candidate)
            except Exception as e:
                logger.exception("Account creation raised")
                result = AccountCreationResult(error=str(e) or "Account creation failed")
        finally:
            self._in_flight.discard(WizardStep.CONTACT)

        if not self._is_current(generation):
            logger.warning("Account creation finished after the session moved on")
            return self._closed()

        if not result.created:
            return self._refuse(Feedback(
                FeedbackKind.ACCOUNT_CREATION_FAILED,
                result.error or "Account creation failed",
            ))

        self.account = result
        self.candidate = CredentialCandidate()
        self.status.reset()
        self.step = WizardStep.COMPLETED
        return self._accept()

    # =========================================================================
    # Backward and terminal transitions
    # =========================================================================

    def back(self) -> StepOutcome:
        """Go back one step without re-running any gate."""
        if self.is_terminal:
            return self._closed()
        if self._in_flight:
            return self._refuse(Feedback(
                FeedbackKind.CHECK_IN_PROGRESS,
                "Still checking your details. Please wait.",
            ))

        if self.step == WizardStep.CONTACT:
            self.step = WizardStep.PERSONAL_INFO
        elif self.step == WizardStep.PERSONAL_INFO:
            self.step = WizardStep.SECURITY
            self.status.reset()
        else:
            return self._accept()
        self._generation += 1
        return self._accept()

    def abandon(self) -> StepOutcome:
        """Discard the session. No external side effects."""
        if self.is_terminal:
            return self._closed()

        self._generation += 1
        self.candidate = CredentialCandidate()
        self.status.reset()
        self.step = WizardStep.ABANDONED
        return self._accept()
