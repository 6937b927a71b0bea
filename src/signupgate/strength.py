"""
Password strength policy.

Strength is estimated with zxcvbn (score 0-4). A password must clear both
a length floor and a minimum score; a high score alone does not pass a
short password. Raw passwords are never logged.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

import zxcvbn as _zxcvbn

from signupgate.config import GateConfig

# zxcvbn scores: 0=very weak, 1=weak, 2=fair, 3=strong, 4=very strong
MIN_SCORE = 3
MIN_LENGTH = 12
MAX_LENGTH = 128

GENERIC_WEAK_MESSAGE = (
    "Password is too easy to guess. Avoid common words, repeated "
    "characters, or sequences."
)


@dataclass
class StrengthEstimate:
    """Output of a strength estimator."""

    score: int
    warning: str = ""
    suggestions: list[str] = field(default_factory=list)


class StrengthEstimator(ABC):
    """Heuristic password scorer."""

    @abstractmethod
    def estimate(self, password: str, user_inputs: list[str] | None = None) -> StrengthEstimate:
        """Score ``password``; ``user_inputs`` are penalised if reused."""
        pass


class ZxcvbnEstimator(StrengthEstimator):
    """Strength estimator backed by the zxcvbn library."""

    def estimate(self, password: str, user_inputs: list[str] | None = None) -> StrengthEstimate:
        result = _zxcvbn.zxcvbn(password, user_inputs=[u for u in (user_inputs or []) if u])
        feedback = result.get("feedback") or {}
        return StrengthEstimate(
            score=int(result["score"]),
            warning=feedback.get("warning") or "",
            suggestions=list(feedback.get("suggestions") or []),
        )


@dataclass
class StrengthVerdict:
    """Outcome of applying the strength policy to one password."""

    acceptable: bool
    score: int
    feedback: list[str] = field(default_factory=list)


class StrengthPolicy:
    """Length limits plus a minimum heuristic score."""

    def __init__(
        self,
        estimator: StrengthEstimator | None = None,
        min_score: int = MIN_SCORE,
        min_length: int = MIN_LENGTH,
        max_length: int = MAX_LENGTH,
    ):
        self.estimator = estimator or ZxcvbnEstimator()
        self.min_score = min_score
        self.min_length = min_length
        self.max_length = max_length

    @classmethod
    def from_config(
        cls, config: GateConfig, estimator: StrengthEstimator | None = None
    ) -> "StrengthPolicy":
        return cls(
            estimator=estimator,
            min_score=config.min_score,
            min_length=config.min_password_length,
            max_length=config.max_password_length,
        )

    def evaluate(self, password: str, user_inputs: list[str] | None = None) -> StrengthVerdict:
        """Apply length rules, then the estimator's score."""
        if len(password) < self.min_length:
            return StrengthVerdict(
                acceptable=False,
                score=0,
                feedback=[f"Password must be at least {self.min_length} characters long."],
            )

        if len(password) > self.max_length:
            return StrengthVerdict(
                acceptable=False,
                score=0,
                feedback=[f"Password must be fewer than {self.max_length} characters."],
            )

        estimate = self.estimator.estimate(password, user_inputs or [])
        if estimate.score >= self.min_score:
            return StrengthVerdict(acceptable=True, score=estimate.score)

        feedback = []
        if estimate.warning:
            feedback.append(estimate.warning)
        feedback.extend(estimate.suggestions)
        if not feedback:
            feedback.append(GENERIC_WEAK_MESSAGE)

        return StrengthVerdict(acceptable=False, score=estimate.score, feedback=feedback)


def context_inputs(email: str, *names: str) -> list[str]:
    """Personal strings that should not appear inside a password."""
    inputs = []
    email = (email or "").strip().lower()
    if email:
        inputs.append(email)
        local_part = email.split("@", 1)[0]
        if local_part and local_part != email:
            inputs.append(local_part)
    inputs.extend(n.strip() for n in names if n and n.strip())
    return inputs
