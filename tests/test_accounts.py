"""Tests for the account creation collaborator."""

from __future__ import annotations

import asyncio

import pytest

from signupgate.accounts import SupabaseAccountCreator, signup_payload
from signupgate.errors import AccountCreationError
from signupgate.wizard import CredentialCandidate

CANDIDATE = CredentialCandidate(
    email="jane@example.com",
    password="tR7#qLm2!vXz9@Pw",
    first_name="Jane",
    last_name="Doe",
    phone="0821234567",
    address="1 Main Road",
    city="Cape Town",
    zip_code="8001",
)


class StubCreator(SupabaseAccountCreator):
    def __init__(self, status, data, **kwargs):
        kwargs.setdefault("base_url", "https://identity.example.test/")
        kwargs.setdefault("api_key", "anon-key")
        super().__init__(**kwargs)
        self.status = status
        self.data = data
        self.posts = []

    async def _post(self, url, body):
        self.posts.append((url, body))
        return self.status, self.data


def test_signup_payload_carries_profile_metadata():
    payload = signup_payload(CANDIDATE)

    assert payload["email"] == "jane@example.com"
    assert payload["password"] == CANDIDATE.password
    assert payload["data"]["full_name"] == "Jane Doe"
    assert payload["data"]["billing_address"] == {
        "street": "1 Main Road",
        "city": "Cape Town",
        "zip": "8001",
    }


def test_candidate_repr_hides_password():
    assert CANDIDATE.password not in repr(CANDIDATE)


def test_successful_signup():
    creator = StubCreator(200, {"user": {"id": "abc-123"}})

    result = asyncio.run(creator.create_account(CANDIDATE))

    assert result.created is True
    assert result.user_id == "abc-123"
    assert creator.posts[0][0] == "https://identity.example.test/auth/v1/signup"


def test_rejected_signup_surfaces_upstream_message():
    creator = StubCreator(422, {"msg": "User already registered"})

    result = asyncio.run(creator.create_account(CANDIDATE))

    assert result.created is False
    assert result.error == "User already registered"
    with pytest.raises(AccountCreationError):
        result.raise_for_error()


def test_unconfigured_creator_does_not_call_out():
    creator = StubCreator(200, {}, api_key=None)

    result = asyncio.run(creator.create_account(CANDIDATE))

    assert result.created is False
    assert creator.posts == []
