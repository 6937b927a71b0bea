"""
Pwned Passwords range API client.

Implements the k-anonymity range lookup with:
- SHA-1 hashing and prefix/suffix split done locally
- A shared TTL cache of range payloads keyed by prefix
- Fail-open handling when the range API is unreachable

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import asyncio
import logging

import aiohttp

from signupgate.breach.models import BreachHashPair, PasswordCheckResult
from signupgate.cache import TTLCache
from signupgate.config import GateConfig

logger = logging.getLogger(__name__)


def match_suffix(payload: str, suffix: str) -> int | None:
    """Find ``suffix`` in a range payload of ``SUFFIX:COUNT`` lines.

    Returns:
        The count for the matching line (0 if unparseable), or None when
        no line matches.
    """
    suffix = suffix.upper()
    for line in payload.splitlines():
        hash_suffix, _, count = line.strip().partition(":")
        if hash_suffix.upper() != suffix:
            continue
        try:
            return int(count.strip())
        except ValueError:
            return 0
    return None


class PwnedPasswordsClient:
    """Client for the Pwned Passwords range API.

    The range cache is owned by the caller so a single cache can be shared
    by every client in the process while each client keeps its own HTTP
    session.
    """

    PWNED_PASSWORDS_API = "https://api.pwnedpasswords.com"
    RANGE_TTL = 60 * 60 * 24  # 24 hours

    def __init__(
        self,
        cache: TTLCache | None = None,
        base_url: str | None = None,
        user_agent: str = "SignupGate/1.0",
        timeout: float = 8.0,
        cache_ttl: float | None = None,
    ):
        """Initialize range client.

        Args:
            cache: Range payload cache keyed by hash prefix
            base_url: Range API base URL
            user_agent: User-Agent header for requests
            timeout: Total request timeout in seconds
            cache_ttl: Lifetime of a cached range (default: 24 hours)
        """
        self.cache_ttl = self.RANGE_TTL if cache_ttl is None else cache_ttl
        self.cache = cache if cache is not None else TTLCache(default_ttl=self.cache_ttl)
        self.base_url = (base_url or self.PWNED_PASSWORDS_API).rstrip("/")
        self.user_agent = user_agent
        self.timeout = timeout
        self._session: aiohttp.ClientSession | None = None

    @classmethod
    def from_config(
        cls, config: GateConfig, cache: TTLCache | None = None
    ) -> "PwnedPasswordsClient":
        return cls(
            cache=cache,
            base_url=config.pwned_passwords_url,
            user_agent=config.user_agent,
            timeout=config.request_timeout,
            cache_ttl=config.breach_cache_ttl_seconds,
        )

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

    async def __aenter__(self) -> "PwnedPasswordsClient":
        await self._ensure_session()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def _request(self, url: str) -> tuple[int, str | None]:
        """GET a range URL.

        Returns:
            Tuple of (status_code, body). Status 0 means a transport error.
        """
        session = await self._ensure_session()

        try:
            async with session.get(
                url,
                headers={"User-Agent": self.user_agent},
                timeout=aiohttp.ClientTimeout(total=self.timeout),
            ) as response:
                if response.status == 200:
                    return response.status, await response.text()
                text = await response.text()
                return response.status, f"HTTP {response.status}: {text[:200]}"

        except asyncio.TimeoutError:
            return 0, "Request timeout"
        except aiohttp.ClientError as e:
            return 0, f"Request failed: {str(e)}"

    async def fetch_range(self, prefix: str) -> tuple[str | None, bool, str | None]:
        """Get the range payload for a prefix, from cache when live.

        Returns:
            Tuple of (payload, cached, error). ``payload`` is None on failure.
        """
        payload = self.cache.get(prefix)
        if payload is not None:
            return payload, True, None

        status, body = await self._request(f"{self.base_url}/range/{prefix}")
        if status != 200:
            return None, False, body or f"HTTP {status}"

        self.cache.set(prefix, body, self.cache_ttl)
        return body, False, None

    async def check_hash_pair(self, pair: BreachHashPair) -> PasswordCheckResult:
        """Look up a split hash. Fails open when the range is unavailable."""
        result = PasswordCheckResult(hash_prefix=pair.prefix)

        payload, cached, error = await self.fetch_range(pair.prefix)
        if payload is None:
            logger.warning(f"Range lookup for {pair.prefix} failed, treating as not breached: {error}")
            result.failed_open = True
            result.error = error
            return result

        count = match_suffix(payload, pair.suffix)
        result.cached = cached
        if count is not None:
            result.breached = True
            result.count = count

        return result

    async def check_password(self, password: str) -> PasswordCheckResult:
        """Check if a password has been exposed in data breaches.

        Only the first 5 characters of the SHA-1 hash leave this process.

        Args:
            password: Password to check (NOT stored or logged)

        Raises:
            InvalidInputError: if the password is empty
        """
        pair = BreachHashPair.from_password(password)
        return await self.check_hash_pair(pair)

    async def check_hash_parts(self, prefix: str, suffix: str) -> PasswordCheckResult:
        """Check a hash that the caller has already split.

        Raises:
            InvalidInputError: if either part is not hex or the prefix is
                not 5 characters
        """
        return await self.check_hash_pair(BreachHashPair.from_parts(prefix, suffix))

    async def check_password_hash(self, sha1_hash: str) -> PasswordCheckResult:
        """Check a pre-computed full SHA-1 hash."""
        return await self.check_hash_pair(BreachHashPair.from_digest(sha1_hash))
