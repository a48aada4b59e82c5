from __future__ import annotations

from decimal import Decimal

import psycopg2
from psycopg2.pool import PoolError
import pytest

import db.connection
from repositories.account_repo import (
    COUNT_ACCOUNTS_SQL,
    FIND_BY_CREDIT_CARD_SQL,
    UPDATE_BENEFICIARY_SQL,
)
from repositories.reward_repo import INSERT_REWARD_SQL, NEXT_CONFIRMATION_NUMBER_SQL


class FakeStore:
    """In-memory stand-in for the rewards tables, answering the repositories' SQL."""

    def __init__(self) -> None:
        self.accounts: dict[int, dict] = {}
        self.cards: dict[str, int] = {}
        self.beneficiaries: list[dict] = []
        self.rewards: list[dict] = []
        self.sequence = 0
        self.executed: list[tuple[str, tuple]] = []
        self.acquired = 0
        self.released = 0
        self.cursors_closed = 0
        self.commits = 0
        self.rollbacks = 0
        self.fail_sql: str | None = None
        self.fail_at = 1
        self.fail_close = False
        self.fail_release = False
        self.events: list[str] = []

    def add_account(self, number: str, name: str, card: str, beneficiaries=()) -> int:
        account_id = len(self.accounts) + 1
        self.accounts[account_id] = {"number": number, "name": name}
        self.cards[card] = account_id
        for ben_name, pct, savings in beneficiaries:
            self.beneficiaries.append({
                "account_id": account_id,
                "name": ben_name,
                "allocation_percentage": Decimal(pct),
                "savings": Decimal(savings),
            })
        return account_id

    def savings_of(self, account_id: int) -> dict[str, Decimal]:
        return {b["name"]: b["savings"] for b in self.beneficiaries if b["account_id"] == account_id}

    def count(self, sql: str) -> int:
        return sum(1 for executed, _ in self.executed if executed == sql)

    def run(self, sql: str, params: tuple) -> tuple[list[dict], int]:
        self.executed.append((sql, params))
        if sql == self.fail_sql and self.count(sql) >= self.fail_at:
            raise psycopg2.OperationalError("server closed the connection unexpectedly")

        if sql == FIND_BY_CREDIT_CARD_SQL:
            account_id = self.cards.get(params[0])
            if account_id is None:
                return [], 0
            account = self.accounts[account_id]
            base = {
                "id": account_id,
                "account_number": account["number"],
                "account_name": account["name"],
                "credit_card_number": params[0],
            }
            rows = [
                {
                    **base,
                    "beneficiary_name": b["name"],
                    "beneficiary_allocation_percentage": str(b["allocation_percentage"]),
                    "beneficiary_savings": str(b["savings"]),
                }
                for b in self.beneficiaries
                if b["account_id"] == account_id
            ]
            if not rows:
                rows = [{
                    **base,
                    "beneficiary_name": None,
                    "beneficiary_allocation_percentage": None,
                    "beneficiary_savings": None,
                }]
            return rows, len(rows)

        if sql == UPDATE_BENEFICIARY_SQL:
            savings, account_id, name = params
            matched = 0
            for b in self.beneficiaries:
                if b["account_id"] == account_id and b["name"] == name:
                    b["savings"] = Decimal(savings)
                    matched += 1
            return [], matched

        if sql == COUNT_ACCOUNTS_SQL:
            return [{"count": len(self.accounts)}], 1

        if sql == NEXT_CONFIRMATION_NUMBER_SQL:
            self.sequence += 1
            return [{"nextval": str(self.sequence)}], 1

        if sql == INSERT_REWARD_SQL:
            columns = (
                "confirmation_number", "reward_amount", "reward_date", "account_number",
                "dining_merchant_number", "dining_date", "dining_amount",
            )
            row = dict(zip(columns, params))
            if any(r["confirmation_number"] == row["confirmation_number"] for r in self.rewards):
                raise psycopg2.IntegrityError("duplicate key value violates unique constraint")
            self.rewards.append(row)
            return [], 1

        raise AssertionError(f"Unexpected SQL: {sql}")


class FakeCursor:
    def __init__(self, store: FakeStore, dict_rows: bool) -> None:
        self._store = store
        self._dict_rows = dict_rows
        self._rows: list = []
        self.rowcount = -1

    def execute(self, sql, params=()):
        rows, self.rowcount = self._store.run(sql, tuple(params))
        self._rows = rows if self._dict_rows else [tuple(r.values()) for r in rows]

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows

    def __iter__(self):
        while self._rows:
            yield self._rows.pop(0)

    def close(self):
        self._store.cursors_closed += 1
        self._store.events.append("cursor closed")
        if self._store.fail_close:
            raise psycopg2.InterfaceError("cursor already closed")


class FakeConnection:
    def __init__(self, store: FakeStore) -> None:
        self._store = store

    def cursor(self, cursor_factory=None):
        return FakeCursor(self._store, dict_rows=cursor_factory is not None)

    def commit(self):
        self._store.commits += 1

    def rollback(self):
        self._store.rollbacks += 1


@pytest.fixture
def store(monkeypatch) -> FakeStore:
    """A FakeStore wired in behind db.connection's pool functions."""
    fake = FakeStore()

    def get_connection():
        fake.acquired += 1
        return FakeConnection(fake)

    def release_connection(conn):
        fake.released += 1
        fake.events.append("connection released")
        if fake.fail_release:
            raise PoolError("trying to put unkeyed connection")

    monkeypatch.setattr(db.connection, "get_connection", get_connection)
    monkeypatch.setattr(db.connection, "release_connection", release_connection)
    return fake


@pytest.fixture
def donald_account(store: FakeStore) -> int:
    """The sample account: 123456789 / card 1234123412341234 / Annabelle + Corgan."""
    return store.add_account(
        "123456789",
        "Keith and Keri Donald",
        "1234123412341234",
        [("Annabelle", "0.50", "0.00"), ("Corgan", "0.50", "0.00")],
    )
