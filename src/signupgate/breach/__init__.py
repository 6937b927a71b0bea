"""
Password breach detection via the Pwned Passwords range API.

Uses k-anonymity: only the first five characters of the password's
SHA-1 digest are sent to the remote service.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from signupgate.breach.models import (
    BreachHashPair,
    PasswordCheckResult,
    RiskLevel,
)
from signupgate.breach.client import PwnedPasswordsClient, match_suffix

__all__ = [
    "PwnedPasswordsClient",
    "BreachHashPair",
    "PasswordCheckResult",
    "RiskLevel",
    "match_suffix",
]
