"""Password-strength policy.

All rules are evaluated on every check so callers can present the complete
list of problems at once.
"""

from __future__ import annotations

import string
from dataclasses import dataclass

DEFAULT_MIN_LENGTH = 6
DEFAULT_MAX_LENGTH = 255

RULE_REQUIRED = "required"
RULE_MIN_LENGTH = "min_length"
RULE_MAX_LENGTH = "max_length"
RULE_LETTER_AND_DIGIT = "letter_and_digit"


@dataclass(frozen=True, slots=True)
class Violation:
    """A broken rule and its client-facing message."""

    rule: str
    message: str


@dataclass(frozen=True, slots=True)
class StrengthReport:
    """Outcome of :meth:`PasswordPolicy.check_strength`."""

    violations: tuple[Violation, ...] = ()

    @property
    def ok(self) -> bool:
        return not self.violations

    @property
    def rules(self) -> list[str]:
        return [v.rule for v in self.violations]

    @property
    def messages(self) -> list[str]:
        return [v.message for v in self.violations]


@dataclass(frozen=True, slots=True)
class PasswordPolicy:
    """
    Length bounds plus a letter-and-digit requirement.

    :param min_length: Shortest accepted password (inclusive).
    :param max_length: Longest accepted password (inclusive).
    """

    min_length: int = DEFAULT_MIN_LENGTH
    max_length: int = DEFAULT_MAX_LENGTH

    def check_strength(self, plaintext: str) -> StrengthReport:
        """
        Evaluate every rule against ``plaintext``.

        Violations are reported in rule order: ``required``, ``min_length``,
        ``max_length``, ``letter_and_digit``.
        """
        value = plaintext if isinstance(plaintext, str) else ""
        found: list[Violation] = []
        if not value:
            found.append(Violation(RULE_REQUIRED, "Password is required"))
        if len(value) < self.min_length:
            found.append(
                Violation(
                    RULE_MIN_LENGTH,
                    f"Password must be at least {self.min_length} characters long",
                )
            )
        if len(value) > self.max_length:
            found.append(
                Violation(
                    RULE_MAX_LENGTH,
                    f"Password must be at most {self.max_length} characters long",
                )
            )
        has_letter = any(ch.isalpha() for ch in value)
        # ASCII only; other scripts' numerals do not count as digits.
        has_digit = any(ch in string.digits for ch in value)
        if not (has_letter and has_digit):
            found.append(
                Violation(
                    RULE_LETTER_AND_DIGIT,
                    "Password must contain at least one letter and one digit",
                )
            )
        return StrengthReport(violations=tuple(found))


def check_strength(plaintext: str) -> StrengthReport:
    """Check ``plaintext`` against the default policy."""
    return PasswordPolicy().check_strength(plaintext)
