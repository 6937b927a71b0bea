"""
Identity store client for email uniqueness checks.

Queries the Supabase auth admin listing with the service-role key. The
lookup fails closed: missing credentials or an upstream error produce a
failed result, never ``exists=False``. Results are not cached.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import json
import logging
from typing import Any
from urllib.parse import quote

import aiohttp

from signupgate.config import GateConfig
from signupgate.identity.models import (
    IdentityError,
    UniquenessResult,
    candidate_email,
    extract_candidates,
    normalize_email,
)

logger = logging.getLogger(__name__)


class IdentityStoreClient:
    """Client for the identity store's administrative user listing."""

    ADMIN_USERS_PATH = "/auth/v1/admin/users"

    def __init__(
        self,
        base_url: str | None = None,
        service_key: str | None = None,
        timeout: float = 8.0,
        user_agent: str = "SignupGate/1.0",
    ):
        """Initialize identity client.

        Args:
            base_url: Identity store base URL
            service_key: Service-role key for the admin API
            timeout: Total request timeout in seconds
            user_agent: User-Agent header for requests
        """
        self.base_url = (base_url or "").rstrip("/")
        self.service_key = service_key
        self.timeout = timeout
        self.user_agent = user_agent
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(cls, config: GateConfig) -> "IdentityStoreClient":
        return cls(
            base_url=config.identity_url,
            service_key=config.identity_service_key,
            timeout=config.request_timeout,
            user_agent=config.user_agent,
        )

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.service_key)

    async def _ensure_session(self) -> aiohttp.ClientSession:
        """Ensure HTTP session exists."""
        if self._session is None or self._session.closed:
            self._session = aiohttp.ClientSession()
        return self._session

    async def close(self) -> None:
        """Close HTTP session."""
        if self._session and not self._session.closed:
            await self._session.close()
            self._session = None

    async def __aenter__(self) -> "IdentityStoreClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(self, url: str) -> tuple[int, Any]:
        """Make an authenticated GET against the admin API.

        Returns:
            Tuple of (status_code, response_data). Status 0 means a
            transport error and the data is an error message.
        """
        session = await self._ensure_session()

        headers = {
            "apikey": self.service_key,
            "Authorization": f"Bearer {self.service_key}",
            "User-Agent": self.user_agent,
        }

        try:
            async with session.get(
                url,
                headers=headers,
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                text = await response.text()
                if response.status != 200:
                    return response.status, f"HTTP {response.status}: {text[:200]}"
                try:
                    return response.status, json.loads(text)
                except ValueError:
                    return 0, "Malformed JSON from identity store"

        except asyncio.TimeoutError:
            return 0, "Request timeout"
        except aiohttp.ClientError as e:
            return 0, f"Request failed: {str(e)}"

    async def check_email_exists(self, email: str) -> UniquenessResult:
        """Check whether an email already belongs to a registered account.

        Args:
            email: Email address; trimmed and lowercased before use

        Returns:
            UniquenessResult; ``error`` is set when no answer was obtained
        """
        normalized = normalize_email(email)
        result = UniquenessResult(email_normalized=normalized)

        if not self.configured:
            logger.error("Identity store URL or service key not configured")
            result.error = IdentityError.NOT_CONFIGURED
            result.detail = "Identity store credentials are not configured"
            return result

        url = f"{self.base_url}{self.ADMIN_USERS_PATH}?email={quote(normalized, safe='')}"
        status, data = await self._request(url)

        if status != 200:
            logger.warning(f"Identity lookup failed with status {status}")
            result.error = IdentityError.UPSTREAM_FAILURE
            result.status = status or None
            result.detail = data if isinstance(data, str) else f"HTTP {status}"
            return result

        result.exists = any(
            candidate_email(record) == normalized
            for record in extract_candidates(data)
        )
        return result
