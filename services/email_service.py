"""
Email Service

Sends account verification and password reset messages over SMTP.
"""

from __future__ import annotations

import logging
import smtplib
from dataclasses import dataclass, field
from email.message import EmailMessage
from typing import Mapping, Optional

from flask import render_template_string

logger = logging.getLogger(__name__)

VERIFICATION_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>Welcome to Quizzit, {{ name }}!</h2>
  <p>Please verify your email address to get started.</p>
  <p><a href="{{ link }}">Verify Email</a></p>
  <p>Or copy this link: {{ link }}</p>
  <p>This link will expire in {{ lifetime }}.</p>
  <p>If you didn't create this account, please ignore this email.</p>
</div>
"""

RESET_TEMPLATE = """\
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
  <h2>Reset Your Quizzit Password</h2>
  <p>Hi {{ name }},</p>
  <p>We received a request to reset your password.</p>
  <p><a href="{{ link }}">Reset Password</a></p>
  <p>Or copy this link: {{ link }}</p>
  <p>This link will expire in {{ lifetime }}.</p>
  <p>If you didn't request a password reset, please ignore this email.</p>
</div>
"""


class EmailDeliveryError(RuntimeError):
    """Raised when the SMTP transport fails to deliver a message."""


@dataclass
class Mailer:
    """Thin SMTP client configured from the Flask config.

    With ``suppress`` set, messages are appended to ``outbox`` instead of
    being sent.
    """

    server: Optional[str]
    port: int = 465
    username: Optional[str] = None
    password: Optional[str] = None
    sender: str = "Quizzit <no-reply@localhost>"
    use_ssl: bool = True
    timeout: float = 10.0
    suppress: bool = False
    outbox: list = field(default_factory=list)

    @classmethod
    def from_config(cls, config: Mapping) -> "Mailer":
        return cls(
            server=config.get("MAIL_SERVER"),
            port=int(config.get("MAIL_PORT", 465)),
            username=config.get("MAIL_USERNAME"),
            password=config.get("MAIL_PASSWORD"),
            sender=config.get("MAIL_DEFAULT_SENDER", cls.sender),
            use_ssl=bool(config.get("MAIL_USE_SSL", True)),
            timeout=float(config.get("MAIL_TIMEOUT", 10)),
            suppress=bool(config.get("MAIL_SUPPRESS_SEND", False)),
        )

    def _build_message(self, to: str, subject: str, html: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("Please view this message in an HTML capable mail client.")
        message.add_alternative(html, subtype="html")
        return message

    def send(self, to: str, subject: str, html: str) -> None:
        """Deliver one HTML message; raise EmailDeliveryError on transport failure."""

        message = self._build_message(to, subject, html)

        if self.suppress:
            self.outbox.append(message)
            return

        if not self.server:
            logger.warning(
                "Email not configured (MAIL_SERVER unset); not sending %r to %s",
                subject,
                to,
            )
            return

        try:
            if self.use_ssl:
                smtp = smtplib.SMTP_SSL(self.server, self.port, timeout=self.timeout)
            else:
                smtp = smtplib.SMTP(self.server, self.port, timeout=self.timeout)
            with smtp:
                if not self.use_ssl:
                    smtp.starttls()
                if self.username and self.password:
                    smtp.login(self.username, self.password)
                smtp.send_message(message)
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("SMTP error sending %r to %s: %s", subject, to, exc)
            raise EmailDeliveryError(f"Could not send email to {to}") from exc

        logger.info("Email %r sent to %s", subject, to)


def _describe_minutes(minutes: int) -> str:
    if minutes % 60 == 0:
        hours = minutes // 60
        return "1 hour" if hours == 1 else f"{hours} hours"
    return "1 minute" if minutes == 1 else f"{minutes} minutes"


def send_verification_email(
    mailer: Mailer, base_url: str, email: str, token: str, name: str, lifetime_minutes: int
) -> None:
    link = f"{base_url}/verify-email?token={token}"
    html = render_template_string(
        VERIFICATION_TEMPLATE,
        name=name,
        link=link,
        lifetime=_describe_minutes(lifetime_minutes),
    )
    mailer.send(email, "Verify your Quizzit Email", html)


def send_password_reset_email(
    mailer: Mailer, base_url: str, email: str, token: str, name: str, lifetime_minutes: int
) -> None:
    link = f"{base_url}/reset-password?token={token}"
    html = render_template_string(
        RESET_TEMPLATE,
        name=name,
        link=link,
        lifetime=_describe_minutes(lifetime_minutes),
    )
    mailer.send(email, "Reset Your Quizzit Password", html)
