# tests/unit/services/test_credentials.py
from __future__ import annotations

import pytest

from sessionauth.services.credentials import (
    CredentialHasher,
    PasswordPolicy,
    check_strength,
)
from sessionauth.services.credentials.policy import (
    RULE_LETTER_AND_DIGIT,
    RULE_MAX_LENGTH,
    RULE_MIN_LENGTH,
    RULE_REQUIRED,
)


@pytest.fixture()
def hasher() -> CredentialHasher:
    return CredentialHasher("pbkdf2:sha256:1000")


# ------------------------------- Hasher ----------------------------------- #
@pytest.mark.parametrize("plaintext", ["secret123", "ñandú-42", " spaced out 9 "])
def test_hash_is_salted_and_both_digests_verify(hasher, plaintext):
    first = hasher.hash(plaintext)
    second = hasher.hash(plaintext)

    assert first != second
    assert plaintext not in first
    assert hasher.verify(plaintext, first)
    assert hasher.verify(plaintext, second)


def test_verify_rejects_wrong_password(hasher):
    digest = hasher.hash("secret123")
    assert hasher.verify("secret124", digest) is False


@pytest.mark.parametrize("digest", ["", None, "garbage", "nosuchmethod$salt$abc"])
def test_verify_returns_false_for_malformed_digests(hasher, digest):
    assert hasher.verify("secret123", digest) is False


def test_hash_rejects_non_string(hasher):
    with pytest.raises(ValueError):
        hasher.hash(None)  # type: ignore[arg-type]


def test_default_method_is_scrypt():
    assert CredentialHasher().hash("abc123").startswith("scrypt:")


# ------------------------------- Policy ----------------------------------- #
@pytest.mark.parametrize(
    "plaintext,rules",
    [
        ("", [RULE_REQUIRED, RULE_MIN_LENGTH, RULE_LETTER_AND_DIGIT]),
        ("abcdef", [RULE_LETTER_AND_DIGIT]),
        ("123456", [RULE_LETTER_AND_DIGIT]),
        ("abc\u0661\u0662\u0663", [RULE_LETTER_AND_DIGIT]),
        ("abc\uff11\uff12\uff13", [RULE_LETTER_AND_DIGIT]),
        ("ab1", [RULE_MIN_LENGTH]),
        ("a" * 255 + "1", [RULE_MAX_LENGTH]),
    ],
)
def test_check_strength_reports_every_violated_rule_in_order(plaintext, rules):
    report = check_strength(plaintext)
    assert report.ok is False
    assert report.rules == rules
    assert len(report.messages) == len(rules)


@pytest.mark.parametrize("plaintext", ["abc123", "A1b2C3d4", "a" * 254 + "1"])
def test_check_strength_accepts_valid_passwords(plaintext):
    report = check_strength(plaintext)
    assert report.ok is True
    assert report.violations == ()


def test_policy_bounds_are_configurable():
    policy = PasswordPolicy(min_length=10, max_length=12)
    assert policy.check_strength("abc123").rules == [RULE_MIN_LENGTH]
    assert policy.check_strength("abcdefghij1234").rules == [RULE_MAX_LENGTH]
    assert policy.check_strength("abcdefgh12").ok
