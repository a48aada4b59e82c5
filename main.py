"""
main.py
-------
Entry point for the rewards data-access layer.

Responsibilities:
    - Initialize the database connection pool and schema.
    - Optionally load the sample account (``--seed``).
    - Report how many accounts the database holds.
"""

import argparse

from db.connection import init_pool, close_pool
from db.init_db import create_tables, seed_sample_data
from repositories.account_repo import AccountRepository
from utils.logger import get_logger

logger = get_logger(__name__)


def main(argv: list[str] | None = None) -> int:
    """Initialize the database and log a short status report."""
    parser = argparse.ArgumentParser(description="Initialize the rewards database.")
    parser.add_argument("--seed", action="store_true", help="load the sample account")
    args = parser.parse_args(argv)

    # ── 1. Database setup ─────────────────────────────────
    logger.info("Initializing database...")
    init_pool()
    try:
        create_tables()
        if args.seed:
            seed_sample_data()

        # ── 2. Status report ──────────────────────────────
        number_of_accounts = AccountRepository().count()
        logger.info(f"Hello, there are {number_of_accounts} accounts")
    finally:
        # ── 3. Cleanup ────────────────────────────────────
        close_pool()
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
