"""Session and one-time token helpers."""

from __future__ import annotations

import secrets
from datetime import datetime, timedelta

from flask import Response, current_app, request
from flask_jwt_extended import (
    create_access_token,
    decode_token,
    set_access_cookies,
    unset_access_cookies,
)
from flask_jwt_extended.exceptions import JWTExtendedException
from jwt.exceptions import PyJWTError

from models.account import utcnow

EPHEMERAL_TOKEN_BYTES = 32


def issue_session_token(account_id: str, expires_delta: timedelta | None = None) -> str:
    """Sign a session token asserting ``account_id``."""

    return create_access_token(
        identity=str(account_id),
        expires_delta=expires_delta or current_app.config["JWT_ACCESS_TOKEN_EXPIRES"],
    )


def verify_session_token(token: str | None) -> str | None:
    """Return the account id carried by ``token``, or None when it is unusable.

    Bad signatures, malformed payloads and expired tokens all yield None.
    """

    if not token:
        return None
    try:
        claims = decode_token(token)
    except (PyJWTError, JWTExtendedException):
        return None
    if claims.get("type") != "access":
        return None
    subject = claims.get(current_app.config.get("JWT_IDENTITY_CLAIM", "sub"))
    if not isinstance(subject, str) or not subject:
        return None
    return subject


def session_cookie_value() -> str | None:
    return request.cookies.get(current_app.config["JWT_ACCESS_COOKIE_NAME"])


def attach_session_cookie(response: Response, account_id: str) -> Response:
    """Issue a session token for ``account_id`` and set it as the auth cookie."""

    expires = current_app.config["JWT_ACCESS_TOKEN_EXPIRES"]
    token = issue_session_token(account_id, expires)
    set_access_cookies(response, token, max_age=int(expires.total_seconds()))
    return response


def clear_session_cookie(response: Response) -> Response:
    unset_access_cookies(response)
    return response


def generate_ephemeral_token(
    duration_minutes: int, now: datetime | None = None
) -> tuple[str, datetime]:
    """Return a random hex token and the naive UTC time at which it lapses."""

    token = secrets.token_hex(EPHEMERAL_TOKEN_BYTES)
    expiry = (now or utcnow()) + timedelta(minutes=duration_minutes)
    return token, expiry
