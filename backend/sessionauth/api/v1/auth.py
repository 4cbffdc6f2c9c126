"""Authentication and session endpoints using the service layer."""

from __future__ import annotations

from flask import Blueprint, request

from sessionauth.api.deps import (
    current_owner_id,
    json_response,
    load_json,
    require_admin,
    require_auth,
    timing,
)
from sessionauth.schemas import (
    AccessTokenSchema,
    AuthResultSchema,
    ChangePasswordSchema,
    LoginSchema,
    RefreshSchema,
    RegisterSchema,
    SessionSchema,
    UserPublicSchema,
    ValidateTokenSchema,
)
from sessionauth.services.provider import get_session_service
from sessionauth.services.sessions import ChangePasswordIn, LoginIn, RegisterIn

bp = Blueprint("auth", __name__)

login_schema = LoginSchema()
register_schema = RegisterSchema()
refresh_schema = RefreshSchema()
change_password_schema = ChangePasswordSchema()
validate_token_schema = ValidateTokenSchema()
auth_result_schema = AuthResultSchema()
access_token_schema = AccessTokenSchema()
user_schema = UserPublicSchema()
sessions_schema = SessionSchema(many=True)


@bp.post("/login")
@timing
def login():
    """Authenticate by email or username and issue a token pair."""

    data = load_json(login_schema)
    result = get_session_service().login(LoginIn(**data))
    return json_response({"data": auth_result_schema.dump(result)})


@bp.post("/register")
@timing
def register():
    """Create an account and return the same payload as login."""

    data = load_json(register_schema)
    result = get_session_service().register(RegisterIn(**data))
    return json_response({"data": auth_result_schema.dump(result)}, status=201)


@bp.post("/refresh")
@timing
def refresh():
    """Exchange a refresh token for a new access token."""

    data = load_json(refresh_schema)
    result = get_session_service().refresh(data["refresh_token"])
    return json_response({"data": access_token_schema.dump(result)})


@bp.post("/logout")
@timing
def logout():
    """Revoke the given refresh token. Always succeeds, whatever the body."""

    body = request.get_json(silent=True)
    token = body.get("refresh_token") if isinstance(body, dict) else None
    get_session_service().logout(token if isinstance(token, str) else None)
    return json_response({"data": None})


@bp.post("/logout-all")
@require_auth
@timing
def logout_all():
    get_session_service().logout_all(current_owner_id())
    return json_response({"data": None})


@bp.post("/change-password")
@require_auth
@timing
def change_password():
    """Change the caller's password; every session is revoked afterwards."""

    data = load_json(change_password_schema)
    get_session_service().change_password(ChangePasswordIn(owner_id=current_owner_id(), **data))
    return json_response({"data": None})


@bp.post("/validate-token")
@timing
def validate_token():
    data = load_json(validate_token_schema)
    is_valid = get_session_service().validate_token(data["token"])
    return json_response({"data": {"is_valid": is_valid}})


@bp.get("/me")
@require_auth
@timing
def me():
    """Return the authenticated user profile."""

    profile = get_session_service().get_profile(current_owner_id())
    return json_response({"data": user_schema.dump(profile)})


@bp.get("/sessions")
@require_auth
@timing
def list_sessions():
    """List the caller's active sessions, newest first."""

    rows = get_session_service().list_active_sessions(current_owner_id())
    return json_response({"data": sessions_schema.dump(rows)})


@bp.delete("/sessions/<int:token_id>")
@require_auth
@timing
def revoke_session(token_id: int):
    get_session_service().revoke_session(current_owner_id(), token_id)
    return json_response({"data": None})


@bp.post("/sessions/sweep")
@require_admin
@timing
def sweep_sessions():
    """Delete expired refresh-token records (administrators only)."""

    deleted = get_session_service().sweep_expired_tokens()
    return json_response({"data": {"deleted": deleted}})


@bp.post("/users/<int:user_id>/disable")
@require_admin
@timing
def disable_user(user_id: int):
    """Disable an account and revoke all of its sessions (administrators only)."""

    get_session_service().disable_user(user_id)
    return json_response({"data": None})
