"""
repositories/reward_repo.py
----------------------------
Data access layer for reward confirmations.
Records each reward in the `t_reward` table under a confirmation number
drawn from a database sequence.
"""

from datetime import date
from typing import Callable, ContextManager

import psycopg2

from db.connection import connection, cursor
from models.reward import AccountContribution, Dining, RewardConfirmation
from repositories.errors import RepositoryError
from utils.logger import get_logger

logger = get_logger(__name__)

NEXT_CONFIRMATION_NUMBER_SQL = (
    "SELECT CAST(nextval('s_reward_confirmation_number') AS VARCHAR);"
)

INSERT_REWARD_SQL = """
    INSERT INTO t_reward
        (confirmation_number, reward_amount, reward_date, account_number,
         dining_merchant_number, dining_date, dining_amount)
    VALUES (%s, %s, %s, %s, %s, %s, %s);
"""


class RewardRepository:
    """
    Repository that records the result of a reward transaction.

    Args:
        connection_source: Zero-argument callable returning a context
            manager that yields a DB-API connection. Defaults to the
            shared pool in `db.connection`.
    """

    def __init__(self, connection_source: Callable[[], ContextManager] = connection):
        self._connection = connection_source

    def confirm_reward(
        self, contribution: AccountContribution, dining: Dining
    ) -> RewardConfirmation:
        """
        Insert a reward record and return its confirmation.

        The reward date is today's date; the dining date is stored alongside it.

        Args:
            contribution: Reward amount computed for the account.
            dining: The dining that earned the reward.

        Returns:
            A RewardConfirmation carrying the generated confirmation number.

        Raises:
            RepositoryError: If the sequence or the insert fails. No retry is made.
        """
        try:
            with self._connection() as conn, cursor(conn, cursor_factory=None) as cur:
                confirmation_number = self._next_confirmation_number(cur)
                cur.execute(INSERT_REWARD_SQL, (
                    confirmation_number,
                    contribution.amount.as_decimal(),
                    date.today(),
                    contribution.account_number,
                    dining.merchant_number,
                    dining.date,
                    dining.amount.as_decimal(),
                ))
                conn.commit()
        except psycopg2.Error as e:
            logger.error(
                f"Failed to confirm reward for account {contribution.account_number}: {e}"
            )
            raise RepositoryError(
                f"SQL exception occurred confirming reward for account {contribution.account_number}",
                cause=e,
            ) from e

        confirmation = RewardConfirmation(confirmation_number, contribution)
        logger.info(f"Recorded {confirmation} ({contribution.amount})")
        return confirmation

    # ── HELPERS ───────────────────────────────────────────

    @staticmethod
    def _next_confirmation_number(cur) -> str:
        """Draw the next value of the confirmation number sequence."""
        cur.execute(NEXT_CONFIRMATION_NUMBER_SQL)
        return cur.fetchone()[0]
