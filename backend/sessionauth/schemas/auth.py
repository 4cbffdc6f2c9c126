"""Authentication-related Marshmallow schemas."""

from __future__ import annotations

from marshmallow import EXCLUDE, Schema, fields, validate

# Password strength is checked by the service; schemas only check shape.


class _Input(Schema):
    class Meta:
        unknown = EXCLUDE


class LoginSchema(_Input):
    """Input payload for authenticating a user by email or username."""

    identifier = fields.String(required=True, validate=validate.Length(min=1, max=254))
    password = fields.String(required=True, validate=validate.Length(min=1))


class RegisterSchema(_Input):
    """Input payload for account registration."""

    email = fields.Email(required=True, validate=validate.Length(max=254))
    password = fields.String(required=True)
    first_name = fields.String(load_default=None, validate=validate.Length(max=100))
    last_name = fields.String(load_default=None, validate=validate.Length(max=100))
    username = fields.String(load_default=None, validate=validate.Length(min=3, max=50))
    profile_picture_url = fields.Url(load_default=None, validate=validate.Length(max=512))


class RefreshSchema(_Input):
    """Input payload carrying a refresh token."""

    refresh_token = fields.String(required=True, validate=validate.Length(min=1))


class ChangePasswordSchema(_Input):
    current_password = fields.String(required=True)
    new_password = fields.String(required=True)


class ValidateTokenSchema(_Input):
    token = fields.String(required=True)


class UserPublicSchema(Schema):
    """Public projection of a user; the password hash is never dumped."""

    id = fields.Integer(required=True)
    email = fields.Email(required=True)
    username = fields.String(allow_none=True)
    first_name = fields.String(allow_none=True)
    last_name = fields.String(allow_none=True)
    profile_picture_url = fields.String(allow_none=True)
    is_admin = fields.Boolean(required=True)
    enabled = fields.Boolean(required=True)


class AuthResultSchema(Schema):
    """Response payload of login and registration."""

    access_token = fields.String(required=True)
    refresh_token = fields.String(required=True)
    token_type = fields.Constant("bearer")
    expires_in = fields.Integer(required=True)
    user = fields.Nested(UserPublicSchema, required=True)


class AccessTokenSchema(Schema):
    """Response payload of a refresh."""

    access_token = fields.String(required=True)
    token_type = fields.Constant("bearer")
    expires_in = fields.Integer(required=True)


class SessionSchema(Schema):
    """One active session; the token digest is never exposed."""

    token_id = fields.Integer(required=True)
    created_at = fields.DateTime(required=True)
    expires_at = fields.DateTime(required=True)
