"""
repositories/errors.py
----------------------
Exception hierarchy for the data access layer.

All repository exceptions inherit from DataAccessError so callers can
catch broadly or narrowly as needed. "Not found" and "the store failed"
are siblings: a missing account is an answer, not an outage.
"""

from __future__ import annotations


class DataAccessError(Exception):
    """Base exception for all data access errors."""

    def __init__(self, message: str, *, cause: BaseException | None = None) -> None:
        self.message = message
        self.cause = cause
        super().__init__(message)


class AccountNotFoundError(DataAccessError):
    """No account is linked to the given credit card number."""

    def __init__(self, credit_card_number: str) -> None:
        self.credit_card_number = credit_card_number
        super().__init__(f"No account found for credit card '{credit_card_number}'")


class RepositoryError(DataAccessError):
    """The database rejected or failed a statement; `cause` holds the driver error."""
    pass
