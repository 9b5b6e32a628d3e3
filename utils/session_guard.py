"""Cookie-presence gate for page routes."""

from __future__ import annotations

from flask import Flask, current_app, redirect, request

from utils.tokens import session_cookie_value

EXEMPT_PREFIXES = ("/auth", "/health", "/static")


def _matches(path: str, prefixes) -> bool:
    return any(path.startswith(prefix) for prefix in prefixes)


def check_session_presence():
    """Redirect page requests based only on whether a session cookie is sent.

    The cookie is not decoded here; a forged or expired token gets through
    and has to be rejected by whatever serves the page.
    """

    path = request.path
    if _matches(path, EXEMPT_PREFIXES):
        return None

    config = current_app.config
    has_session = bool(session_cookie_value())

    if _matches(path, config.get("PROTECTED_PATH_PREFIXES", ())) and not has_session:
        return redirect(config.get("LOGIN_PATH", "/login"))

    if _matches(path, config.get("AUTH_PAGE_PREFIXES", ())) and has_session:
        return redirect(config.get("LANDING_PATH", "/dashboard"))

    return None


def register_session_guard(app: Flask) -> None:
    app.before_request(check_session_presence)
