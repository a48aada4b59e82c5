"""
db/init_db.py
-------------
Creates the database schema (tables and the confirmation number sequence)
if they do not already exist, and optionally loads the sample account.
Run this module directly to initialize a fresh database:
    python -m db.init_db [--seed]
"""

import sys

from db.connection import connection, cursor
from utils.logger import get_logger

logger = get_logger(__name__)

SCHEMA_SQL = """
-- Accounts: one row per member account
CREATE TABLE IF NOT EXISTS t_account (
    id              SERIAL PRIMARY KEY,
    number          VARCHAR(9) UNIQUE NOT NULL,
    name            VARCHAR(50) NOT NULL
);

-- Credit cards: each card belongs to exactly one account
CREATE TABLE IF NOT EXISTS t_account_credit_card (
    id              SERIAL PRIMARY KEY,
    account_id      INTEGER NOT NULL REFERENCES t_account(id) ON DELETE CASCADE,
    number          VARCHAR(16) UNIQUE NOT NULL
);

-- Beneficiaries: share of each reward and savings accumulated so far
CREATE TABLE IF NOT EXISTS t_account_beneficiary (
    id                      SERIAL PRIMARY KEY,
    account_id              INTEGER NOT NULL REFERENCES t_account(id) ON DELETE CASCADE,
    name                    VARCHAR(50) NOT NULL,
    allocation_percentage   NUMERIC(5,2) NOT NULL
                            CHECK (allocation_percentage BETWEEN 0 AND 1),
    savings                 NUMERIC(8,2) NOT NULL DEFAULT 0,
    UNIQUE(account_id, name)
);

-- Rewards: one row per confirmed reward
CREATE TABLE IF NOT EXISTS t_reward (
    id                      SERIAL PRIMARY KEY,
    confirmation_number     VARCHAR(25) UNIQUE NOT NULL,
    reward_amount           NUMERIC(8,2) NOT NULL,
    reward_date             DATE NOT NULL,
    account_number          VARCHAR(9) NOT NULL,
    dining_merchant_number  VARCHAR(10) NOT NULL,
    dining_date             DATE NOT NULL,
    dining_amount           NUMERIC(8,2) NOT NULL
);

CREATE SEQUENCE IF NOT EXISTS s_reward_confirmation_number START WITH 1;

CREATE INDEX IF NOT EXISTS idx_beneficiary_account ON t_account_beneficiary(account_id);
"""

SAMPLE_DATA_SQL = """
WITH acct AS (
    INSERT INTO t_account (number, name)
    VALUES ('123456789', 'Keith and Keri Donald')
    ON CONFLICT (number) DO NOTHING
    RETURNING id
),
card AS (
    INSERT INTO t_account_credit_card (account_id, number)
    SELECT id, '1234123412341234' FROM acct
)
INSERT INTO t_account_beneficiary (account_id, name, allocation_percentage, savings)
SELECT id, b.name, b.pct, 0.00
FROM acct, (VALUES ('Annabelle', 0.50, 1), ('Corgan', 0.50, 2)) AS b(name, pct, pos)
ORDER BY b.pos;
"""


def create_tables() -> None:
    """
    Execute the schema SQL to create all tables and the sequence.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    with connection() as conn, cursor(conn, cursor_factory=None) as cur:
        cur.execute(SCHEMA_SQL)
        conn.commit()
    logger.info("Database schema initialized successfully.")


def seed_sample_data() -> None:
    """
    Insert the sample account 123456789 with card 1234123412341234 and
    beneficiaries Annabelle and Corgan (50% each). Does nothing if the
    account already exists.
    """
    with connection() as conn, cursor(conn, cursor_factory=None) as cur:
        cur.execute(SAMPLE_DATA_SQL)
        conn.commit()
    logger.info("Sample account data loaded.")


if __name__ == "__main__":
    from db.connection import init_pool, close_pool
    init_pool()
    try:
        create_tables()
        if "--seed" in sys.argv[1:]:
            seed_sample_data()
    finally:
        close_pool()
    print("Database schema created successfully.")
