"""Account storage abstraction layer."""

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Optional

from models.account import Account


class DuplicateEmailError(Exception):
    """Raised when an account with the same email already exists."""

    def __init__(self, email: str):
        super().__init__(f"An account with email {email!r} already exists.")
        self.email = email


class AccountStore(ABC):
    """Interface for account persistence.

    Lookups hide the password hash and token fields unless ``include_hidden``
    is set. Token lookups only match tokens that have not yet expired.
    """

    @abstractmethod
    def get_by_id(self, account_id: str, *, include_hidden: bool = False) -> Optional[Account]:
        """Return the account with the given id, if any."""

    @abstractmethod
    def get_by_email(self, email: str, *, include_hidden: bool = False) -> Optional[Account]:
        """Return the account registered under ``email`` (case-insensitive)."""

    @abstractmethod
    def get_by_verification_token(
        self,
        token: str,
        *,
        include_hidden: bool = False,
        now: Optional[datetime] = None,
    ) -> Optional[Account]:
        """Return the unverified account holding an unexpired verification token."""

    @abstractmethod
    def get_by_reset_token(
        self,
        token: str,
        *,
        include_hidden: bool = False,
        now: Optional[datetime] = None,
    ) -> Optional[Account]:
        """Return the account holding an unexpired reset token."""

    @abstractmethod
    def create(self, account: Account) -> Account:
        """Persist a new account; raise DuplicateEmailError on email conflicts."""

    @abstractmethod
    def save(self, account: Account) -> Account:
        """Persist every change made to an existing account."""

    @abstractmethod
    def claim_verification_token(
        self, token: str, *, now: Optional[datetime] = None
    ) -> Optional[Account]:
        """Atomically redeem a verification token.

        Marks the account verified and clears the token in the same write that
        checks it. Returns the account for the single winning caller, None for
        everybody else.
        """

    @abstractmethod
    def claim_reset_token(
        self, token: str, password_hash: str, *, now: Optional[datetime] = None
    ) -> Optional[Account]:
        """Atomically redeem a reset token, replacing the password hash."""
