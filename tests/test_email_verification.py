"""Tests for email verification."""

from __future__ import annotations

from datetime import timedelta

import pytest

from conftest import token_from_message
from models.account import Account, utcnow


def _create_unverified(app, token: str, expires_in_minutes: int) -> str:
    with app.app_context():
        account = Account(email="verify@example.com", first_name="Val", last_name="Idate")
        account.set_password("Valid1Pass!")
        account.set_verification_token(token, utcnow() + timedelta(minutes=expires_in_minutes))
        app.extensions["account_store"].create(account)
        return account.id


def test_validate_verification_token(app, client):
    _create_unverified(app, "v" * 64, 60)

    response = client.get("/auth/verify-email?token=" + "v" * 64)

    assert response.status_code == 200
    assert response.get_json() == {"valid": True, "email": "verify@example.com"}


def test_verify_email_marks_account_and_starts_session(app, client, store):
    account_id = _create_unverified(app, "v" * 64, 60)

    response = client.post("/auth/verify-email", json={"token": "v" * 64})

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["message"] == "Email verified successfully!"
    assert payload["user"]["id"] == account_id
    set_cookies = " ".join(response.headers.getlist("Set-Cookie"))
    assert "authToken=" in set_cookies
    assert "HttpOnly" in set_cookies

    me = client.get("/auth/me")
    assert me.status_code == 200
    assert me.get_json()["user"]["isEmailVerified"] is True

    with app.app_context():
        account = store.get_by_id(account_id, include_hidden=True)
        assert account.is_email_verified is True
        assert account.email_verification_token is None
        assert account.email_verification_expiry is None


def test_verification_token_is_single_use(app, client):
    _create_unverified(app, "v" * 64, 60)

    assert client.post("/auth/verify-email", json={"token": "v" * 64}).status_code == 200
    again = client.post("/auth/verify-email", json={"token": "v" * 64})

    assert again.status_code == 400
    assert client.get("/auth/verify-email?token=" + "v" * 64).status_code == 400


@pytest.mark.parametrize("minutes_ago", [1, 30, 60 * 25])
def test_expired_verification_token_fails_everywhere(app, client, minutes_ago):
    _create_unverified(app, "x" * 64, -minutes_ago)

    assert client.get("/auth/verify-email?token=" + "x" * 64).status_code == 400
    response = client.post("/auth/verify-email", json={"token": "x" * 64})
    assert response.status_code == 400
    assert response.get_json()["detail"] == "Invalid or expired verification token"


def test_verify_email_requires_token(client):
    response = client.post("/auth/verify-email", json={})

    assert response.status_code == 400
    assert response.get_json()["detail"] == "Verification token is required"
    assert client.get("/auth/verify-email").status_code == 400


def test_registration_link_verifies_account(client, mailer):
    client.post(
        "/auth/register",
        json={
            "email": "link@example.com",
            "password": "Valid1Pass!",
            "firstName": "Link",
            "lastName": "Follower",
        },
    )
    token = token_from_message(mailer.outbox[-1])

    check = client.get(f"/auth/verify-email?token={token}")
    assert check.get_json()["email"] == "link@example.com"
    assert client.post("/auth/verify-email", json={"token": token}).status_code == 200
