"""
repositories/account_repo.py
-----------------------------
Data access layer for Account aggregates.
Loads an account together with its beneficiaries from a single join,
and writes beneficiary savings back after rewards have been credited.
"""

from decimal import InvalidOperation
from typing import Callable, ContextManager, Iterable, Mapping

import psycopg2

from db.connection import connection, cursor
from models.account import Account, Beneficiary
from models.money import MonetaryAmount, Percentage
from repositories.errors import AccountNotFoundError, RepositoryError
from utils.logger import get_logger

logger = get_logger(__name__)

# Decimal columns are read back as text so they are parsed exactly as stored.
FIND_BY_CREDIT_CARD_SQL = """
    SELECT a.id AS id,
           a.number AS account_number,
           a.name AS account_name,
           c.number AS credit_card_number,
           b.name AS beneficiary_name,
           CAST(b.allocation_percentage AS VARCHAR) AS beneficiary_allocation_percentage,
           CAST(b.savings AS VARCHAR) AS beneficiary_savings
    FROM t_account a
    JOIN t_account_credit_card c ON c.account_id = a.id
    LEFT OUTER JOIN t_account_beneficiary b ON b.account_id = a.id
    WHERE c.number = %s
    ORDER BY b.id;
"""

UPDATE_BENEFICIARY_SQL = """
    UPDATE t_account_beneficiary
    SET savings = %s
    WHERE account_id = %s AND name = %s;
"""

COUNT_ACCOUNTS_SQL = "SELECT count(*) FROM t_account;"


def map_account(rows: Iterable[Mapping], credit_card_number: str = "") -> Account:
    """
    Fold the rows of the account/beneficiary join into one Account.

    Account columns repeat on every row and are read from the first one
    only. A row whose beneficiary columns are NULL (account without
    beneficiaries) contributes no Beneficiary.

    Args:
        rows: Join rows in store order, keyed by column alias.
        credit_card_number: Used only to describe a missing account.

    Raises:
        AccountNotFoundError: If `rows` is empty.
    """
    account = None
    for row in rows:
        if account is None:
            account = Account(
                number=row["account_number"],
                name=row["account_name"],
                entity_id=int(row["id"]),
            )
        if row["beneficiary_name"] is not None:
            account.restore_beneficiary(_map_beneficiary(row))
    if account is None:
        raise AccountNotFoundError(credit_card_number)
    return account


def _map_beneficiary(row: Mapping) -> Beneficiary:
    return Beneficiary(
        name=row["beneficiary_name"],
        allocation_percentage=Percentage.value_of(row["beneficiary_allocation_percentage"]),
        savings=MonetaryAmount.value_of(row["beneficiary_savings"]),
    )


class AccountRepository:
    """
    Repository for Account aggregates stored across t_account,
    t_account_credit_card and t_account_beneficiary.

    Args:
        connection_source: Zero-argument callable returning a context
            manager that yields a DB-API connection. Defaults to the
            shared pool in `db.connection`.
    """

    def __init__(self, connection_source: Callable[[], ContextManager] = connection):
        self._connection = connection_source

    # ── READ ──────────────────────────────────────────────

    def find_by_credit_card(self, credit_card_number: str) -> Account:
        """
        Load the account a credit card belongs to, with all its beneficiaries.

        Args:
            credit_card_number: Card number as stored in t_account_credit_card.

        Returns:
            A fully populated Account.

        Raises:
            AccountNotFoundError: If no account uses that card.
            RepositoryError: If the query fails or a stored value cannot be decoded.
        """
        try:
            with self._connection() as conn, cursor(conn) as cur:
                cur.execute(FIND_BY_CREDIT_CARD_SQL, (credit_card_number,))
                account = map_account(cur, credit_card_number)
        except psycopg2.Error as e:
            logger.error(f"Failed to find account by credit card: {e}")
            raise RepositoryError(
                "SQL exception occurred finding by credit card number", cause=e
            ) from e
        except (ValueError, InvalidOperation) as e:
            logger.error(f"Stored account data could not be read: {e}")
            raise RepositoryError(
                "Invalid account data found by credit card number", cause=e
            ) from e
        logger.debug(f"Loaded {account}")
        return account

    # ── UPDATE ────────────────────────────────────────────

    def update_beneficiaries(self, account: Account) -> None:
        """
        Store the current savings of every beneficiary of `account`.

        One UPDATE is issued and committed per beneficiary. A name with no
        stored row updates nothing and is not reported.

        Raises:
            RepositoryError: If any update fails. Updates committed before
                the failing one stay committed.
        """
        try:
            with self._connection() as conn, cursor(conn, cursor_factory=None) as cur:
                for beneficiary in account.beneficiaries:
                    cur.execute(UPDATE_BENEFICIARY_SQL, (
                        beneficiary.savings.as_decimal(),
                        account.entity_id,
                        beneficiary.name,
                    ))
                    if cur.rowcount == 0:
                        logger.debug(
                            f"No stored beneficiary '{beneficiary.name}' on account {account.number}"
                        )
                    conn.commit()
        except psycopg2.Error as e:
            logger.error(f"Failed to update beneficiaries of account {account.number}: {e}")
            raise RepositoryError(
                f"SQL exception occurred updating beneficiaries of account {account.number}",
                cause=e,
            ) from e
        logger.info(
            f"Updated savings of {len(account.beneficiaries)} beneficiaries on account {account.number}"
        )

    def count(self) -> int:
        """Number of accounts in t_account."""
        try:
            with self._connection() as conn, cursor(conn, cursor_factory=None) as cur:
                cur.execute(COUNT_ACCOUNTS_SQL)
                return int(cur.fetchone()[0])
        except psycopg2.Error as e:
            logger.error(f"Failed to count accounts: {e}")
            raise RepositoryError("SQL exception occurred counting accounts", cause=e) from e
