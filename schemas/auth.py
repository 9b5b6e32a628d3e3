"""Pydantic models for the auth endpoints."""

from __future__ import annotations

import re
from typing import Literal, Optional

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, ConfigDict, Field, field_validator

MIN_PASSWORD_LENGTH = 8
PASSWORD_SPECIAL_CHARACTERS = '!@#$%^&*(),.?":{}|<>'
_SPECIAL_PATTERN = re.compile("[" + re.escape(PASSWORD_SPECIAL_CHARACTERS) + "]")


def normalize_email(raw_email: str) -> str:
    """Validate an email address and return it stripped and lower-cased."""

    email = (raw_email or "").strip().lower()
    try:
        validate_email(email, check_deliverability=False)
    except EmailNotValidError as exc:
        raise ValueError("Invalid email address") from exc
    return email


def check_password_strength(password: str) -> str:
    """Return ``password`` unchanged or raise ValueError naming the first unmet rule."""

    if len(password) < MIN_PASSWORD_LENGTH:
        raise ValueError(f"Password must be at least {MIN_PASSWORD_LENGTH} characters")
    if not re.search(r"[A-Z]", password):
        raise ValueError("Password must contain at least one uppercase letter")
    if not re.search(r"\d", password):
        raise ValueError("Password must contain at least one number")
    if not _SPECIAL_PATTERN.search(password):
        raise ValueError("Password must contain at least one special character")
    return password


def _required(value: str, message: str) -> str:
    value = (value or "").strip()
    if not value:
        raise ValueError(message)
    return value


class _RequestSchema(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class RegisterRequest(_RequestSchema):
    email: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)
    first_name: str = Field(default="", alias="firstName", validate_default=True)
    last_name: str = Field(default="", alias="lastName", validate_default=True)
    organization_name: Optional[str] = Field(default=None, alias="organizationName")
    phone: Optional[str] = None
    role: Literal["admin", "user", "student"] = "user"

    @field_validator("email")
    @classmethod
    def clean_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def clean_password(cls, value: str) -> str:
        return check_password_strength(value)

    @field_validator("first_name")
    @classmethod
    def clean_first_name(cls, value: str) -> str:
        return _required(value, "First name is required")

    @field_validator("last_name")
    @classmethod
    def clean_last_name(cls, value: str) -> str:
        return _required(value, "Last name is required")

    @field_validator("organization_name", "phone")
    @classmethod
    def clean_optional_text(cls, value: Optional[str]) -> Optional[str]:
        if value is None:
            return None
        return value.strip() or None


class LoginRequest(_RequestSchema):
    email: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    @field_validator("email")
    @classmethod
    def clean_email(cls, value: str) -> str:
        return normalize_email(value)

    @field_validator("password")
    @classmethod
    def clean_password(cls, value: str) -> str:
        if not value:
            raise ValueError("Password is required")
        return value


class ForgotPasswordRequest(_RequestSchema):
    email: str = Field(default="", validate_default=True)

    @field_validator("email")
    @classmethod
    def clean_email(cls, value: str) -> str:
        return normalize_email(value)


class ResetPasswordRequest(_RequestSchema):
    token: str = Field(default="", validate_default=True)
    password: str = Field(default="", validate_default=True)

    @field_validator("token")
    @classmethod
    def clean_token(cls, value: str) -> str:
        return _required(value, "Token is required")

    @field_validator("password")
    @classmethod
    def clean_password(cls, value: str) -> str:
        return check_password_strength(value)


class VerifyEmailRequest(_RequestSchema):
    token: str = Field(default="", validate_default=True)

    @field_validator("token")
    @classmethod
    def clean_token(cls, value: str) -> str:
        return _required(value, "Verification token is required")
