"""Shared pytest fixtures and fakes for the signup gate."""

from __future__ import annotations

from typing import Any

import pytest

from signupgate.accounts import AccountCreationResult, AccountCreator
from signupgate.breach.client import PwnedPasswordsClient
from signupgate.breach.models import PasswordCheckResult
from signupgate.cache import TTLCache
from signupgate.identity.client import IdentityStoreClient
from signupgate.identity.models import IdentityError, UniquenessResult, normalize_email
from signupgate.strength import StrengthEstimate, StrengthEstimator, StrengthPolicy


class FakeClock:
    """Manually advanced clock for TTL tests."""

    def __init__(self, now: float = 1_000.0):
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class RangeStub:
    """Canned range API response shared by every client built in a test."""

    def __init__(self, status: int = 200, body: str | None = ""):
        self.status = status
        self.body = body
        self.requests: list[str] = []


class StubRangeClient(PwnedPasswordsClient):
    """Range client whose HTTP layer is replaced by a RangeStub."""

    def __init__(self, stub: RangeStub, **kwargs: Any):
        super().__init__(**kwargs)
        self.stub = stub

    async def _ensure_session(self):
        return None

    async def _request(self, url: str) -> tuple[int, str | None]:
        self.stub.requests.append(url)
        return self.stub.status, self.stub.body


class StubIdentityClient(IdentityStoreClient):
    """Identity client returning a canned admin listing."""

    def __init__(self, status: int = 200, data: Any = None, **kwargs: Any):
        kwargs.setdefault("base_url", "https://identity.example.test")
        kwargs.setdefault("service_key", "service-role-key")
        super().__init__(**kwargs)
        self.status = status
        self.data = [] if data is None else data
        self.requests: list[str] = []

    async def _ensure_session(self):
        return None

    async def _request(self, url: str) -> tuple[int, Any]:
        self.requests.append(url)
        return self.status, self.data


class FakeEstimator(StrengthEstimator):
    def __init__(self, score: int = 4, warning: str = "", suggestions: list[str] | None = None):
        self.score = score
        self.warning = warning
        self.suggestions = suggestions or []
        self.calls: list[tuple[str, list[str]]] = []

    def estimate(self, password: str, user_inputs: list[str] | None = None) -> StrengthEstimate:
        self.calls.append((password, list(user_inputs or [])))
        return StrengthEstimate(score=self.score, warning=self.warning, suggestions=self.suggestions)


class FakeIdentityChecker:
    def __init__(self, call_log: list[str], exists: bool = False, error: IdentityError | None = None):
        self.call_log = call_log
        self.exists = exists
        self.error = error
        self.calls: list[str] = []

    async def check_email_exists(self, email: str) -> UniquenessResult:
        self.calls.append(email)
        self.call_log.append("identity")
        return UniquenessResult(
            email_normalized=normalize_email(email),
            exists=self.exists,
            error=self.error,
        )


class FakeBreachChecker:
    def __init__(
        self,
        call_log: list[str],
        breached: bool = False,
        count: int | None = None,
        failed_open: bool = False,
        raises: Exception | None = None,
    ):
        self.call_log = call_log
        self.breached = breached
        self.count = count
        self.failed_open = failed_open
        self.raises = raises
        self.calls = 0

    async def check_password(self, password: str) -> PasswordCheckResult:
        self.calls += 1
        self.call_log.append("breach")
        if self.raises:
            raise self.raises
        return PasswordCheckResult(breached=self.breached, count=self.count, failed_open=self.failed_open)


class FakeAccountCreator(AccountCreator):
    def __init__(self, error: str | None = None):
        self.error = error
        self.candidates: list = []

    async def create_account(self, candidate) -> AccountCreationResult:
        self.candidates.append(candidate)
        if self.error:
            return AccountCreationResult(error=self.error)
        return AccountCreationResult(created=True, user_id="user-1")


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def range_cache(clock: FakeClock) -> TTLCache:
    return TTLCache(default_ttl=60 * 60 * 24, clock=clock)


@pytest.fixture
def range_stub() -> RangeStub:
    return RangeStub()


@pytest.fixture
def range_client(range_stub: RangeStub, range_cache: TTLCache) -> StubRangeClient:
    return StubRangeClient(range_stub, cache=range_cache)


@pytest.fixture
def call_log() -> list[str]:
    return []


@pytest.fixture
def estimator() -> FakeEstimator:
    return FakeEstimator(score=4)


@pytest.fixture
def policy(estimator: FakeEstimator) -> StrengthPolicy:
    return StrengthPolicy(estimator=estimator)
