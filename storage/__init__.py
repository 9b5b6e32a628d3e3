"""Account storage backends."""

from .abstract_store import AccountStore, DuplicateEmailError
from .sql_store import SQLAccountStore

__all__ = ["AccountStore", "DuplicateEmailError", "SQLAccountStore"]
