"""Tests for the Flask application factory."""
from __future__ import annotations

import sys
from pathlib import Path

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from services.email_service import Mailer  # noqa: E402
from storage import AccountStore  # noqa: E402


def test_health_endpoint_returns_ok(client):
    """The health endpoint should respond with an OK payload."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.get_json() == {"status": "ok"}


def test_blueprints_registered(app):
    """Application factory should register the auth blueprint."""
    assert "auth" in app.blueprints
    rules = {rule.rule for rule in app.url_map.iter_rules()}
    assert {
        "/auth/register",
        "/auth/login",
        "/auth/logout",
        "/auth/me",
        "/auth/forgot-password",
        "/auth/reset-password",
        "/auth/verify-email",
    }.issubset(rules)


def test_collaborators_are_injected(app):
    assert isinstance(app.extensions["account_store"], AccountStore)
    assert isinstance(app.extensions["mailer"], Mailer)
    assert app.extensions["mailer"].suppress is True


def test_session_cookie_settings(app):
    assert app.config["JWT_ACCESS_COOKIE_NAME"] == "authToken"
    assert app.config["JWT_COOKIE_SAMESITE"] == "Lax"
    assert app.config["JWT_ACCESS_TOKEN_EXPIRES"].days == 7
