"""Salted, deliberately slow password hashing."""

from __future__ import annotations

from werkzeug.security import check_password_hash, generate_password_hash

DEFAULT_METHOD = "scrypt"


class CredentialHasher:
    """
    One-way password hashing backed by :mod:`werkzeug.security`.

    Every call to :meth:`hash` draws a fresh salt, so hashing the same
    plaintext twice yields two different digests that both verify.

    :param method: Werkzeug method string, e.g. ``"scrypt"`` or
        ``"pbkdf2:sha256:600000"``.
    :param salt_length: Salt length in characters.
    """

    def __init__(self, method: str = DEFAULT_METHOD, *, salt_length: int = 16) -> None:
        self.method = method
        self.salt_length = salt_length

    def hash(self, plaintext: str) -> str:
        """
        Return a salted digest for ``plaintext``.

        :raises ValueError: If ``plaintext`` is not a string.
        """
        if not isinstance(plaintext, str):
            raise ValueError("Password must be a string.")
        return generate_password_hash(plaintext, method=self.method, salt_length=self.salt_length)

    def verify(self, plaintext: str, digest: str | None) -> bool:
        """
        Check ``plaintext`` against ``digest`` in constant time.

        Malformed, empty or unknown-method digests return ``False``.
        """
        if not digest or not isinstance(plaintext, str):
            return False
        try:
            return bool(check_password_hash(digest, plaintext))
        except (ValueError, TypeError, AttributeError):
            return False
