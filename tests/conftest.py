"""Shared pytest fixtures for the application tests."""

from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest
from flask import Flask
from flask.testing import FlaskClient

ROOT_DIR = Path(__file__).resolve().parent.parent
if str(ROOT_DIR) not in sys.path:
    sys.path.insert(0, str(ROOT_DIR))

from app import create_app  # noqa: E402
from config import Config  # noqa: E402
from models import db  # noqa: E402
from services.email_service import Mailer  # noqa: E402
from storage import SQLAccountStore  # noqa: E402

TOKEN_IN_LINK = re.compile(r"token=([0-9a-f]{64})")


class _BaseTestConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {}
    JWT_SECRET_KEY = "test-signing-secret"
    JWT_COOKIE_SECURE = False
    APP_ENV = "testing"
    APP_URL = "http://quiz.example.com"
    MAIL_SERVER = None
    MAIL_SUPPRESS_SEND = True
    RATE_LIMIT = "1000 per minute"


@pytest.fixture()
def app() -> Flask:
    """Create a Flask application instance for tests."""

    application = create_app(_BaseTestConfig)

    with application.app_context():
        db.create_all()

    yield application

    with application.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app: Flask) -> FlaskClient:
    """Return a test client for the Flask app."""

    return app.test_client()


@pytest.fixture()
def store(app: Flask) -> SQLAccountStore:
    """Return the account store wired into the app; use it inside an app context."""

    return app.extensions["account_store"]


@pytest.fixture()
def mailer(app: Flask) -> Mailer:
    """Return the suppressed mailer; sent messages collect in ``mailer.outbox``."""

    return app.extensions["mailer"]


def html_body(message) -> str:
    return message.get_body(preferencelist=("html",)).get_content()


def token_from_message(message) -> str:
    match = TOKEN_IN_LINK.search(html_body(message))
    assert match is not None, "no token link in message"
    return match.group(1)
