"""Credential hashing and password-strength policy."""

from __future__ import annotations

from .hasher import CredentialHasher
from .policy import PasswordPolicy, StrengthReport, Violation, check_strength

__all__ = [
    "CredentialHasher",
    "PasswordPolicy",
    "StrengthReport",
    "Violation",
    "check_strength",
]
