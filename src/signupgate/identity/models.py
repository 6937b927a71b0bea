"""
Data models for identity store uniqueness lookups.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from signupgate.errors import NotConfiguredError, UpstreamRejectedError


class IdentityError(str, Enum):
    """Why a uniqueness lookup could not produce an answer."""

    NOT_CONFIGURED = "not_configured"
    UPSTREAM_FAILURE = "upstream_failure"


def normalize_email(email: Any) -> str:
    """Trim and lowercase an email-like value."""
    return str(email or "").strip().lower()


def extract_candidates(payload: Any) -> list[dict[str, Any]]:
    """Normalize an admin listing response into a list of user records.

    The listing is either a bare list or an object with a ``users`` list.
    Anything else yields no candidates.
    """
    if isinstance(payload, list):
        records = payload
    elif isinstance(payload, dict) and isinstance(payload.get("users"), list):
        records = payload["users"]
    else:
        return []
    return [r for r in records if isinstance(r, dict)]


def candidate_email(record: dict[str, Any]) -> str:
    """Email of a user record, falling back to ``user_metadata.email``."""
    email = record.get("email")
    if email is None:
        metadata = record.get("user_metadata")
        if isinstance(metadata, dict):
            email = metadata.get("email")
    return normalize_email(email)


@dataclass
class UniquenessResult:
    """Result of checking whether an email is already registered."""

    email_normalized: str
    exists: bool = False
    error: IdentityError | None = None
    status: int | None = None
    detail: str | None = None
    checked_at: datetime = field(default_factory=datetime.now)

    @property
    def ok(self) -> bool:
        """True when the lookup produced a definitive answer."""
        return self.error is None

    def raise_for_error(self) -> None:
        """Raise the matching exception if the lookup failed."""
        if self.error == IdentityError.NOT_CONFIGURED:
            raise NotConfiguredError(self.detail or "Identity store is not configured")
        if self.error == IdentityError.UPSTREAM_FAILURE:
            raise UpstreamRejectedError(
                self.detail or "Identity store lookup failed", status=self.status
            )

    def to_response(self) -> dict[str, Any]:
        """Wire shape for the gate-facing uniqueness endpoint."""
        if self.error is not None:
            response: dict[str, Any] = {"error": self.error.value}
            if self.status:
                response["status"] = self.status
            return response
        return {"exists": self.exists}

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary."""
        return {
            "email": self.email_normalized,
            "exists": self.exists,
            "error": self.error.value if self.error else None,
            "status": self.status,
            "detail": self.detail,
            "checked_at": self.checked_at.isoformat(),
        }
