"""
Domain-level exceptions used within the service layer.

The taxonomy is closed: every failure a service surfaces is one of the
variants below, and each carries an :class:`ErrorKind` tag so callers can
``match exc.kind`` exhaustively instead of probing the class hierarchy.

These exceptions are **framework-agnostic** and never import Flask or HTTP
helpers. The translation to RFC 7807 responses lives in
``sessionauth/core/errors.py``.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import ClassVar, final

GENERIC_AUTH_MESSAGE = "Invalid credentials or session"


class ErrorKind(StrEnum):
    """Tag identifying the variant of a :class:`ServiceError`."""

    AUTHENTICATION = "authentication"
    CONFLICT = "conflict"
    VALIDATION = "validation"
    NOT_FOUND = "not_found"


class ServiceError(Exception):
    """
    Base class for all service-level errors.

    Only the four variants defined in this module subclass it; new failure
    kinds are added to :class:`ErrorKind` first.
    """

    kind: ClassVar[ErrorKind]


class AuthenticationError(ServiceError):
    """
    Bad credentials, disabled account, or an invalid/expired/revoked token.

    ``reason`` is for logs only. Clients always receive
    :data:`GENERIC_AUTH_MESSAGE` so the response never reveals whether an
    account exists or why a token was rejected.

    :param reason: Internal, log-only explanation.
    :type reason: str
    """

    kind = ErrorKind.AUTHENTICATION

    def __init__(self, reason: str = GENERIC_AUTH_MESSAGE) -> None:
        super().__init__(reason)
        self.reason = reason

    @property
    def public_message(self) -> str:
        return GENERIC_AUTH_MESSAGE


@final
class ConflictError(ServiceError):
    """
    Raised when a unique constraint or business rule conflict occurs.

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param detail: Short human-readable explanation.
    :type detail: str
    """

    kind = ErrorKind.CONFLICT

    def __init__(self, entity: str, detail: str) -> None:
        super().__init__(f"Conflict on {entity}: {detail}")
        self.entity = entity
        self.detail = detail


@final
class ValidationError(ServiceError):
    """
    Raised when input violates a policy; carries every violated rule.

    :param message: Summary for the client.
    :type message: str
    :param violations: Full list of violated rule messages.
    :type violations: Sequence[str]
    """

    kind = ErrorKind.VALIDATION

    def __init__(self, message: str, violations: Sequence[str] = ()) -> None:
        super().__init__(message)
        self.message = message
        self.violations: tuple[str, ...] = tuple(violations)


@final
class NotFoundError(ServiceError):
    """
    Raised when an entity is not found (or is not visible to the caller).

    :param entity: Entity name (e.g., "User").
    :type entity: str
    :param key: Identifier or search key.
    :type key: str | int
    """

    kind = ErrorKind.NOT_FOUND

    def __init__(self, entity: str, key: str | int) -> None:
        super().__init__(f"{entity} not found: {key}")
        self.entity = entity
        self.key = key
