"""
Email uniqueness checks against the identity store.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

from signupgate.identity.models import (
    IdentityError,
    UniquenessResult,
    candidate_email,
    extract_candidates,
    normalize_email,
)
from signupgate.identity.client import IdentityStoreClient

__all__ = [
    "IdentityStoreClient",
    "IdentityError",
    "UniquenessResult",
    "candidate_email",
    "extract_candidates",
    "normalize_email",
]
