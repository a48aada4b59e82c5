"""
models/reward.py
----------------
Value objects that flow through a reward: the dining that triggered it,
the contribution computed for an account, and the confirmation recorded
for it. All are immutable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from models.money import MonetaryAmount, Percentage


@dataclass(frozen=True)
class Dining:
    """
    A meal charged to a member's credit card at a partner restaurant.

    Attributes:
        amount: Total dining bill.
        credit_card_number: Card the meal was charged to.
        merchant_number: Restaurant's merchant number.
        date: Day the meal took place.
    """
    amount: MonetaryAmount
    credit_card_number: str
    merchant_number: str
    date: date = field(default_factory=date.today)

    @classmethod
    def create(
        cls,
        amount: str,
        credit_card_number: str,
        merchant_number: str,
        dining_date: Optional[date] = None,
    ) -> Dining:
        """Build a Dining from a decimal string amount, defaulting to today."""
        return cls(
            MonetaryAmount.value_of(amount),
            credit_card_number,
            merchant_number,
            dining_date or date.today(),
        )


@dataclass(frozen=True)
class Distribution:
    """One beneficiary's share of a contribution."""
    beneficiary: str
    amount: MonetaryAmount
    percentage: Percentage
    total_savings: MonetaryAmount


@dataclass(frozen=True)
class AccountContribution:
    """
    The reward amount an account earned, and how it was split.

    Attributes:
        account_number: Account that earned the reward.
        amount: Total reward amount.
        distributions: Per-beneficiary split (may be empty).
    """
    account_number: str
    amount: MonetaryAmount
    distributions: tuple[Distribution, ...] = ()


@dataclass(frozen=True)
class RewardConfirmation:
    """
    Proof that a reward was recorded.

    Attributes:
        confirmation_number: Generated by the database sequence.
        account_contribution: The contribution that was recorded.
    """
    confirmation_number: str
    account_contribution: AccountContribution

    def __str__(self) -> str:
        return f"Reward #{self.confirmation_number} for account {self.account_contribution.account_number}"
