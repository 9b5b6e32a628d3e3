"""Tests for the SMTP mail helpers."""

from __future__ import annotations

import logging
import smtplib

import pytest

from services.email_service import (
    EmailDeliveryError,
    Mailer,
    send_password_reset_email,
    send_verification_email,
)


def test_suppressed_mailer_collects_messages():
    mailer = Mailer(server="smtp.example.com", suppress=True)

    mailer.send("learner@example.com", "Hello", "<p>Hi</p>")

    assert len(mailer.outbox) == 1
    message = mailer.outbox[0]
    assert message["Subject"] == "Hello"
    assert message["From"] == "Quizzit <no-reply@localhost>"
    assert "<p>Hi</p>" in message.get_body(preferencelist=("html",)).get_content()


def test_unconfigured_mailer_logs_and_skips(caplog):
    mailer = Mailer(server=None)

    with caplog.at_level(logging.WARNING, logger="services.email_service"):
        mailer.send("learner@example.com", "Hello", "<p>Hi</p>")

    assert "learner@example.com" in caplog.text
    assert mailer.outbox == []


def test_transport_failure_raises_delivery_error(monkeypatch):
    def _refuse(*args, **kwargs):
        raise OSError("connection refused")

    monkeypatch.setattr(smtplib, "SMTP_SSL", _refuse)
    mailer = Mailer(server="smtp.example.com", port=465)

    with pytest.raises(EmailDeliveryError):
        mailer.send("learner@example.com", "Hello", "<p>Hi</p>")


def test_starttls_transport_logs_in_and_sends(monkeypatch):
    calls = []

    class _FakeSMTP:
        def __init__(self, host, port, timeout):
            calls.append(("connect", host, port, timeout))

        def __enter__(self):
            return self

        def __exit__(self, *exc):
            return False

        def starttls(self):
            calls.append(("starttls",))

        def login(self, user, password):
            calls.append(("login", user))

        def send_message(self, message):
            calls.append(("send", message["To"]))

    monkeypatch.setattr(smtplib, "SMTP", _FakeSMTP)
    mailer = Mailer(
        server="smtp.example.com",
        port=587,
        username="mailer",
        password="secret",
        use_ssl=False,
        timeout=5,
    )

    mailer.send("learner@example.com", "Hello", "<p>Hi</p>")

    assert calls == [
        ("connect", "smtp.example.com", 587, 5),
        ("starttls",),
        ("login", "mailer"),
        ("send", "learner@example.com"),
    ]


def test_from_config_reads_mail_settings():
    mailer = Mailer.from_config(
        {
            "MAIL_SERVER": "smtp.example.com",
            "MAIL_PORT": "2525",
            "MAIL_USE_SSL": False,
            "MAIL_DEFAULT_SENDER": "Quiz <quiz@example.com>",
        }
    )

    assert mailer.port == 2525
    assert mailer.use_ssl is False
    assert mailer.sender == "Quiz <quiz@example.com>"
    assert mailer.suppress is False


def test_templates_escape_names_and_embed_links(app):
    mailer = Mailer(server=None, suppress=True)

    with app.app_context():
        send_verification_email(
            mailer, "https://quiz.example.com", "a@b.com", "t" * 64, "<b>Eve</b>", 1440
        )
        send_password_reset_email(
            mailer, "https://quiz.example.com", "a@b.com", "r" * 64, "Eve", 60
        )

    verify_body = mailer.outbox[0].get_body(preferencelist=("html",)).get_content()
    reset_body = mailer.outbox[1].get_body(preferencelist=("html",)).get_content()

    assert "&lt;b&gt;Eve&lt;/b&gt;" in verify_body
    assert "https://quiz.example.com/verify-email?token=" + "t" * 64 in verify_body
    assert "24 hours" in verify_body
    assert "https://quiz.example.com/reset-password?token=" + "r" * 64 in reset_body
    assert "1 hour" in reset_body
