"""
Local schema validation for each wizard step.

These checks run before any network call.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

import re

from signupgate.wizard.models import Feedback, FeedbackKind

EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
MIN_NAME_LENGTH = 2
MIN_PHONE_LENGTH = 10


def _invalid(field: str, message: str) -> Feedback:
    return Feedback(kind=FeedbackKind.VALIDATION, message=message, field=field)


def is_valid_email(email: str) -> bool:
    return bool(EMAIL_PATTERN.match((email or "").strip()))


def validate_security(email: str, password: str, confirm_password: str) -> list[Feedback]:
    """Step 1: well-formed email, non-empty matching passwords."""
    errors = []

    if not is_valid_email(email):
        errors.append(_invalid("email", "Enter a valid email address."))
    if not password:
        errors.append(_invalid("password", "Password is required."))
    if not confirm_password:
        errors.append(_invalid("confirm_password", "Please confirm your password."))
    elif password and password != confirm_password:
        errors.append(_invalid("confirm_password", "Passwords do not match."))

    return errors


def validate_personal(first_name: str, last_name: str) -> list[Feedback]:
    """Step 2: first and last name of minimum length."""
    errors = []

    if len((first_name or "").strip()) < MIN_NAME_LENGTH:
        errors.append(_invalid("first_name", f"First name must be at least {MIN_NAME_LENGTH} characters."))
    if len((last_name or "").strip()) < MIN_NAME_LENGTH:
        errors.append(_invalid("last_name", f"Last name must be at least {MIN_NAME_LENGTH} characters."))

    return errors


def validate_contact(phone: str) -> list[Feedback]:
    """Step 3: phone of minimum length. Address fields are optional."""
    if len((phone or "").strip()) < MIN_PHONE_LENGTH:
        return [_invalid("phone", f"Phone number must be at least {MIN_PHONE_LENGTH} characters.")]
    return []
