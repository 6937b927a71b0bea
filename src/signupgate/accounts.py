"""
Account creation against the external auth service.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

import aiohttp

from signupgate.config import GateConfig
from signupgate.errors import AccountCreationError

if TYPE_CHECKING:
    from signupgate.wizard.models import CredentialCandidate

logger = logging.getLogger(__name__)


@dataclass
class AccountCreationResult:
    """Result of handing a validated candidate to the auth service."""

    created: bool = False
    user_id: str | None = None
    error: str | None = None

    def raise_for_error(self) -> None:
        if not self.created:
            raise AccountCreationError(self.error or "Account creation failed")


class AccountCreator(ABC):
    """External collaborator that turns a candidate into an account."""

    @abstractmethod
    async def create_account(self, candidate: "CredentialCandidate") -> AccountCreationResult:
        """Create the account. Must not raise for upstream rejections."""
        pass


def signup_payload(candidate: "CredentialCandidate") -> dict[str, Any]:
    """Request body for the auth service signup endpoint."""
    first_name = candidate.first_name.strip()
    last_name = candidate.last_name.strip()
    return {
        "email": candidate.email.strip(),
        "password": candidate.password,
        "data": {
            "first_name": first_name,
            "last_name": last_name,
            "full_name": f"{first_name} {last_name}",
            "phone": candidate.phone.strip(),
            "billing_address": {
                "street": candidate.address.strip(),
                "city": candidate.city.strip(),
                "zip": candidate.zip_code.strip(),
            },
        },
    }


def _error_message(data: Any, status: int) -> str:
    if isinstance(data, dict):
        for key in ("msg", "message", "error_description", "error"):
            if data.get(key):
                return str(data[key])
    return f"HTTP {status}"


class SupabaseAccountCreator(AccountCreator):
    """Creates accounts through the Supabase auth signup endpoint."""

    SIGNUP_PATH = "/auth/v1/signup"

    def __init__(
        self,
        base_url: str | None = None,
        api_key: str | None = None,
        timeout: float = 8.0,
        user_agent: str = "SignupGate/1.0",
    ):
        self.base_url = (base_url or "").rstrip("/")
        self.api_key = api_key
        self.timeout = timeout
        self.user_agent = user_agent

    @classmethod
    def from_config(cls, config: GateConfig) -> "SupabaseAccountCreator":
        return cls(
            base_url=config.identity_url,
            api_key=config.identity_anon_key,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )

    async def _post(self, url: str, body: dict[str, Any]) -> tuple[int, Any]:
        headers = {
            "apikey": self.api_key,
            "Authorization": f"Bearer {self.api_key}",
            "Content-Type": "application/json",
            "User-Agent": self.user_agent,
        }
        try:
            async with aiohttp.ClientSession() as session:
                async with session.post(
                    url,
                    json=body,
                    headers=headers,
                    timeout=aiohttp.ClientTimeout(total=self.timeout),
                ) as response:
                    try:
                        data = await response.json(content_type=None)
                    except ValueError:
                        data = None
                    return response.status, data

        except asyncio.TimeoutError:
            return 0, {"error": "Request timeout"}
        except aiohttp.ClientError as e:
            return 0, {"error": f"Request failed: {str(e)}"}

    async def create_account(self, candidate: "CredentialCandidate") -> AccountCreationResult:
        if not self.base_url or not self.api_key:
            return AccountCreationResult(error="Auth service is not configured")

        status, data = await self._post(f"{self.base_url}{self.SIGNUP_PATH}", signup_payload(candidate))

        if status not in (200, 201):
            message = _error_message(data, status)
            logger.warning(f"Account creation rejected: {message}")
            return AccountCreationResult(error=message)

        user_id = None
        if isinstance(data, dict):
            user = data.get("user") if isinstance(data.get("user"), dict) else data
            user_id = user.get("id")

        return AccountCreationResult(created=True, user_id=user_id)
