"""SQLAlchemy-backed account store."""

from __future__ import annotations

import logging
from datetime import datetime
from typing import Optional

from flask_sqlalchemy import SQLAlchemy
from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import undefer_group

from models.account import SECRET_GROUP, Account, utcnow

from .abstract_store import AccountStore, DuplicateEmailError

logger = logging.getLogger(__name__)


class SQLAccountStore(AccountStore):
    """Persist accounts through the application's Flask-SQLAlchemy session."""

    def __init__(self, database: SQLAlchemy):
        self._db = database

    @property
    def session(self):
        return self._db.session

    def _select(self, include_hidden: bool):
        stmt = select(Account)
        if include_hidden:
            stmt = stmt.options(undefer_group(SECRET_GROUP))
        return stmt

    def _first(self, stmt) -> Optional[Account]:
        return self.session.execute(stmt).scalars().first()

    def get_by_id(self, account_id: str, *, include_hidden: bool = False) -> Optional[Account]:
        if not account_id:
            return None
        return self._first(self._select(include_hidden).where(Account.id == account_id))

    def get_by_email(self, email: str, *, include_hidden: bool = False) -> Optional[Account]:
        normalized = (email or "").strip().lower()
        if not normalized:
            return None
        return self._first(
            self._select(include_hidden).where(func.lower(Account.email) == normalized)
        )

    def get_by_verification_token(
        self,
        token: str,
        *,
        include_hidden: bool = False,
        now: Optional[datetime] = None,
    ) -> Optional[Account]:
        if not token:
            return None
        now = now or utcnow()
        return self._first(
            self._select(include_hidden).where(
                Account.email_verification_token == token,
                Account.email_verification_expiry > now,
                Account.is_email_verified.is_(False),
            )
        )

    def get_by_reset_token(
        self,
        token: str,
        *,
        include_hidden: bool = False,
        now: Optional[datetime] = None,
    ) -> Optional[Account]:
        if not token:
            return None
        now = now or utcnow()
        return self._first(
            self._select(include_hidden).where(
                Account.reset_password_token == token,
                Account.reset_password_expiry > now,
            )
        )

    def create(self, account: Account) -> Account:
        account.email = (account.email or "").strip().lower()
        self.session.add(account)
        try:
            self.session.commit()
        except IntegrityError as exc:
            self.session.rollback()
            raise DuplicateEmailError(account.email) from exc
        logger.info("Created account %s", account.id)
        return account

    def save(self, account: Account) -> Account:
        self.session.add(account)
        self.session.commit()
        return account

    def _claim(self, criteria, values: dict) -> bool:
        result = self.session.execute(
            update(Account)
            .where(*criteria)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        if result.rowcount != 1:
            self.session.rollback()
            return False
        self.session.commit()
        return True

    def claim_verification_token(
        self, token: str, *, now: Optional[datetime] = None
    ) -> Optional[Account]:
        now = now or utcnow()
        account = self.get_by_verification_token(token, now=now)
        if account is None:
            return None

        claimed = self._claim(
            (
                Account.id == account.id,
                Account.email_verification_token == token,
                Account.email_verification_expiry > now,
                Account.is_email_verified.is_(False),
            ),
            {
                "is_email_verified": True,
                "email_verification_token": None,
                "email_verification_expiry": None,
                "updated_at": now,
            },
        )
        if not claimed:
            logger.info("Verification token for account %s was already redeemed", account.id)
            return None
        return account

    def claim_reset_token(
        self, token: str, password_hash: str, *, now: Optional[datetime] = None
    ) -> Optional[Account]:
        now = now or utcnow()
        account = self.get_by_reset_token(token, now=now)
        if account is None:
            return None

        claimed = self._claim(
            (
                Account.id == account.id,
                Account.reset_password_token == token,
                Account.reset_password_expiry > now,
            ),
            {
                "password_hash": password_hash,
                "reset_password_token": None,
                "reset_password_expiry": None,
                "updated_at": now,
            },
        )
        if not claimed:
            logger.info("Reset token for account %s was already redeemed", account.id)
            return None
        return account
