"""
Configuration for the signup gate.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import os
from dataclasses import dataclass
from typing import Any


def _env_float(name: str, default: float) -> float:
    try:
        return float(os.environ.get(name, default))
    except ValueError:
        return default


def _env_int(name: str, default: int) -> int:
    try:
        return int(os.environ.get(name, default))
    except ValueError:
        return default


@dataclass
class GateConfig:
    """Configuration for the signup gate services."""

    # Identity store (Supabase auth admin API)
    identity_url: str | None = None
    identity_service_key: str | None = None
    identity_anon_key: str | None = None

    # Pwned Passwords range API
    pwned_passwords_url: str = "https://api.pwnedpasswords.com"
    breach_cache_ttl_seconds: float = 60 * 60 * 24  # 24 hours

    # Outbound HTTP
    request_timeout: float = 8.0
    user_agent: str = "SignupGate/1.0"

    # Password policy
    min_score: int = 3  # zxcvbn scale 0-4
    min_password_length: int = 12
    max_password_length: int = 128

    # Pause before advancing past the security step
    settle_delay: float = 0.0

    @classmethod
    def from_env(cls) -> "GateConfig":
        """Load configuration from environment variables."""
        return cls(
            identity_url=(
                os.environ.get("SUPABASE_URL")
                or os.environ.get("NEXT_PUBLIC_SUPABASE_URL")
            ),
            identity_service_key=(
                os.environ.get("SUPABASE_SERVICE_ROLE_KEY")
                or os.environ.get("SUPABASE_SERVICE_ROLE")
            ),
            identity_anon_key=os.environ.get("SUPABASE_ANON_KEY"),
            pwned_passwords_url=os.environ.get(
                "SIGNUPGATE_PWNED_PASSWORDS_URL", "https://api.pwnedpasswords.com"
            ),
            breach_cache_ttl_seconds=_env_float("SIGNUPGATE_BREACH_CACHE_TTL", 60 * 60 * 24),
            request_timeout=_env_float("SIGNUPGATE_REQUEST_TIMEOUT", 8.0),
            user_agent=os.environ.get("SIGNUPGATE_USER_AGENT", "SignupGate/1.0"),
            min_score=_env_int("SIGNUPGATE_MIN_SCORE", 3),
            min_password_length=_env_int("SIGNUPGATE_MIN_PASSWORD_LENGTH", 12),
            max_password_length=_env_int("SIGNUPGATE_MAX_PASSWORD_LENGTH", 128),
            settle_delay=_env_float("SIGNUPGATE_SETTLE_DELAY", 0.0),
        )

    @property
    def identity_configured(self) -> bool:
        """True when the admin lookup has both a URL and a service key."""
        return bool(self.identity_url and self.identity_service_key)

    def validate(self) -> list[str]:
        """Validate configuration. Returns list of errors."""
        errors = []

        if not 0 <= self.min_score <= 4:
            errors.append("Minimum strength score must be between 0 and 4")
        if self.min_password_length < 1:
            errors.append("Minimum password length must be positive")
        if self.max_password_length < self.min_password_length:
            errors.append("Maximum password length is below the minimum")
        if self.request_timeout <= 0:
            errors.append("Request timeout must be positive")
        if self.breach_cache_ttl_seconds < 0:
            errors.append("Breach cache TTL cannot be negative")

        return errors

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary (excludes sensitive values)."""
        return {
            "identity_url": self.identity_url,
            "identity_service_key_set": bool(self.identity_service_key),
            "identity_anon_key_set": bool(self.identity_anon_key),
            "pwned_passwords_url": self.pwned_passwords_url,
            "breach_cache_ttl_seconds": self.breach_cache_ttl_seconds,
            "request_timeout": self.request_timeout,
            "user_agent": self.user_agent,
            "min_score": self.min_score,
            "min_password_length": self.min_password_length,
            "max_password_length": self.max_password_length,
            "settle_delay": self.settle_delay,
        }
