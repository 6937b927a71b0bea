"""
Data models for Pwned Passwords range lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import hashlib
import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from signupgate.errors import InvalidInputError, UpstreamUnavailableError

PREFIX_LENGTH = 5
PREFIX_PATTERN = re.compile(r"^[0-9A-F]{5}$")
SUFFIX_PATTERN = re.compile(r"^[0-9A-F]+$")


class RiskLevel(str, Enum):
    """Risk level based on password exposure."""

    SAFE = "safe"
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


@dataclass(frozen=True)
class BreachHashPair:
    """SHA-1 digest of a password split for a k-anonymity range query.

    Only ``prefix`` is ever sent over the network; ``suffix`` is compared
    locally against the returned range.
    """

    prefix: str
    suffix: str

    @classmethod
    def from_password(cls, password: str) -> "BreachHashPair":
        """Hash a password (uppercase hex SHA-1) and split it."""
        if not password:
            raise InvalidInputError("Password must not be empty")
        digest = hashlib.sha1(password.encode("utf-8")).hexdigest().upper()
        return cls.from_digest(digest)

    @classmethod
    def from_digest(cls, digest: str) -> "BreachHashPair":
        """Split a full 40-character SHA-1 hex digest."""
        digest = digest.strip().upper()
        if len(digest) != 40 or not SUFFIX_PATTERN.match(digest):
            raise InvalidInputError("Expected a 40 character SHA-1 hex digest")
        return cls(prefix=digest[:PREFIX_LENGTH], suffix=digest[PREFIX_LENGTH:])

    @classmethod
    def from_parts(cls, prefix: str, suffix: str) -> "BreachHashPair":
        """Validate caller-supplied hash parts (already hashed client side)."""
        prefix = str(prefix or "").strip().upper()
        suffix = str(suffix or "").strip().upper()
        if not PREFIX_PATTERN.match(prefix) or not SUFFIX_PATTERN.match(suffix):
            raise InvalidInputError("Invalid prefix/suffix")
        return cls(prefix=prefix, suffix=suffix)

    @property
    def digest(self) -> str:
        return self.prefix + self.suffix


@dataclass
class PasswordCheckResult:
    """Result of checking a password hash against Pwned Passwords."""

    breached: bool = False
    count: int | None = None
    checked_at: datetime = field(default_factory=datetime.now)
    cached: bool = False
    failed_open: bool = False
    error: str | None = None
    # Never store the actual password or full hash
    hash_prefix: str = ""

    @property
    def occurrences(self) -> int:
        return self.count or 0

    @property
    def risk_level(self) -> RiskLevel:
        """Determine risk level based on occurrences."""
        if not self.breached:
            return RiskLevel.SAFE
        elif self.occurrences < 10:
            return RiskLevel.LOW
        elif self.occurrences < 100:
            return RiskLevel.MEDIUM
        elif self.occurrences < 10000:
            return RiskLevel.HIGH
        else:
            return RiskLevel.CRITICAL

    @property
    def risk_description(self) -> str:
        """Get human-readable risk description."""
        descriptions = {
            RiskLevel.SAFE: "This password has not been found in any known data breaches.",
            RiskLevel.LOW: f"This password has been seen {self.occurrences} times in data breaches. Consider changing it.",
            RiskLevel.MEDIUM: f"This password has been seen {self.occurrences} times. You should change it.",
            RiskLevel.HIGH: f"This password has been seen {self.occurrences:,} times! Change it immediately.",
            RiskLevel.CRITICAL: f"This password has been seen {self.occurrences:,} times! It's extremely common and must be changed.",
        }
        return descriptions[self.risk_level]

    def raise_for_error(self) -> None:
        """Raise if the lookup failed open instead of answering."""
        if self.failed_open:
            raise UpstreamUnavailableError(self.error or "Range lookup unavailable")

    def to_response(self) -> dict[str, Any]:
        """Wire shape for the gate-facing breach endpoint."""
        response: dict[str, Any] = {"breached": self.breached}
        if self.breached:
            response["count"] = self.occurrences
        return response

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "breached": self.breached,
            "count": self.count,
            "risk_level": self.risk_level.value,
            "risk_description": self.risk_description,
            "hash_prefix": self.hash_prefix,
            "checked_at": self.checked_at.isoformat(),
            "cached": self.cached,
            "failed_open": self.failed_open,
            "error": self.error,
        }
