"""
SignupGate - credential risk assessment and onboarding gate.

Decides whether a prospective account signup may proceed by composing
password strength, password breach exposure and email uniqueness checks,
sequenced through a gated multi-step wizard.

Copyright (c) 2025 DNS Science.io, an After Dark Systems, LLC company.
All rights reserved.
"""

__version__ = "1.0.0"
