"""
Exception taxonomy for the signup gate.

Service clients report transport problems through result objects; these
exceptions exist for local validation failures and for callers that want
a failed result turned into a raise.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""


class GateError(Exception):
    """Base class for signup gate errors."""


class InvalidInputError(GateError, ValueError):
    """Malformed email, malformed hash parts or empty password."""


class UpstreamUnavailableError(GateError):
    """The breach range endpoint could not be reached or returned an error."""


class NotConfiguredError(GateError):
    """Identity store credentials are missing."""


class UpstreamRejectedError(GateError):
    """The identity store answered with a non-success status."""

    def __init__(self, message: str, status: int | None = None):
        super().__init__(message)
        self.status = status


class AccountCreationError(GateError):
    """The auth service refused to create the account."""
