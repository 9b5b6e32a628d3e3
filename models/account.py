"""Account model definition."""

import uuid
from datetime import UTC, datetime

from sqlalchemy.orm import deferred

from utils.security import hash_password, verify_password

from . import db


ROLES = ("admin", "user", "student")
SECRET_GROUP = "secrets"


def utcnow() -> datetime:
    """Return the current UTC time as a naive datetime, the way it is stored."""

    return datetime.now(UTC).replace(tzinfo=None)


def _new_id() -> str:
    return uuid.uuid4().hex


class Account(db.Model):
    """A user account together with its verification and reset state.

    The password hash and both token pairs are deferred with ``raiseload``:
    a default query never loads them and reading them raises until the query
    asks for ``undefer_group(SECRET_GROUP)``.
    """

    __tablename__ = "accounts"

    id = db.Column(db.String(32), primary_key=True, default=_new_id)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = deferred(
        db.Column(db.String(255), nullable=False), group=SECRET_GROUP, raiseload=True
    )
    first_name = db.Column(db.String(120), nullable=False)
    last_name = db.Column(db.String(120), nullable=False)
    organization_name = db.Column(db.String(255), nullable=True)
    phone = db.Column(db.String(64), nullable=True)
    role = db.Column(
        db.Enum(*ROLES, name="account_role_enum"), nullable=False, default="user"
    )
    is_email_verified = db.Column(db.Boolean, nullable=False, default=False)
    email_verification_token = deferred(
        db.Column(db.String(128), nullable=True, index=True),
        group=SECRET_GROUP,
        raiseload=True,
    )
    email_verification_expiry = deferred(
        db.Column(db.DateTime, nullable=True), group=SECRET_GROUP, raiseload=True
    )
    reset_password_token = deferred(
        db.Column(db.String(128), nullable=True, index=True),
        group=SECRET_GROUP,
        raiseload=True,
    )
    reset_password_expiry = deferred(
        db.Column(db.DateTime, nullable=True), group=SECRET_GROUP, raiseload=True
    )
    last_login = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def set_password(self, password: str) -> None:
        """Hash and store the password."""

        self.password_hash = hash_password(password)

    def check_password(self, password: str) -> bool:
        """Verify a password against the stored hash."""

        return verify_password(password, self.password_hash)

    def set_verification_token(self, token: str, expiry: datetime) -> None:
        self.email_verification_token = token
        self.email_verification_expiry = expiry

    def clear_verification_token(self) -> None:
        self.email_verification_token = None
        self.email_verification_expiry = None

    def set_reset_token(self, token: str, expiry: datetime) -> None:
        self.reset_password_token = token
        self.reset_password_expiry = expiry

    def clear_reset_token(self) -> None:
        self.reset_password_token = None
        self.reset_password_expiry = None

    def mark_email_verified(self) -> None:
        """Flip the account to verified and drop the verification token."""

        self.is_email_verified = True
        self.clear_verification_token()

    def record_login(self, now: datetime | None = None) -> None:
        self.last_login = now or utcnow()

    def to_dict(self, include_profile: bool = False) -> dict:
        """Serialize the account without any secret field.

        ``include_profile`` adds contact details and verification state, as
        returned by the current-user endpoint.
        """

        data = {
            "id": self.id,
            "email": self.email,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "role": self.role,
            "organizationName": self.organization_name,
        }
        if include_profile:
            data.update(
                {
                    "phone": self.phone,
                    "isEmailVerified": self.is_email_verified,
                    "lastLogin": self.last_login.isoformat() if self.last_login else None,
                }
            )
        return data

    def __repr__(self) -> str:  # pragma: no cover - debugging helper
        return f"<Account {self.email}>"
