"""Tests for service-error translation to problem+json."""

from __future__ import annotations

from http import HTTPStatus

import pytest

from sessionauth.core.errors import (
    Conflict,
    NotFound,
    PolicyViolation,
    Unauthorized,
    translate_service_error,
)
from sessionauth.services._shared.errors import (
    GENERIC_AUTH_MESSAGE,
    AuthenticationError,
    ConflictError,
    NotFoundError,
    ValidationError,
)


@pytest.mark.parametrize(
    ("exc", "api_cls", "status"),
    [
        (AuthenticationError("bad password"), Unauthorized, HTTPStatus.UNAUTHORIZED),
        (ConflictError("User", "email already in use"), Conflict, HTTPStatus.CONFLICT),
        (ValidationError("weak", ["too short"]), PolicyViolation, HTTPStatus.UNPROCESSABLE_ENTITY),
        (NotFoundError("Session", 3), NotFound, HTTPStatus.NOT_FOUND),
    ],
)
def test_each_kind_maps_to_one_status(exc, api_cls, status):
    api_err = translate_service_error(exc)
    assert isinstance(api_err, api_cls)
    assert api_err.status_code == status


def test_authentication_reason_never_reaches_client():
    api_err = translate_service_error(AuthenticationError("account disabled"))
    assert api_err.message == GENERIC_AUTH_MESSAGE


def test_policy_violation_carries_every_rule():
    api_err = translate_service_error(ValidationError("weak", ["a", "b"]))
    assert api_err.details == {"violations": ["a", "b"]}


def test_problem_document_shape(app):
    with app.test_request_context("/api/v1/auth/login"):
        problem = Conflict("Conflict on User: email already in use").to_problem()

    assert problem["status"] == 409
    assert problem["code"] == "conflict"
    assert problem["instance"] == "/api/v1/auth/login"
    assert problem["request_id"]


def test_unknown_route_is_problem_json(client):
    resp = client.get("/api/v1/nope")
    assert resp.status_code == 404
    assert resp.mimetype == "application/problem+json"
    assert resp.get_json()["code"] == "not_found"
