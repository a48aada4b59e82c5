"""
models/account.py
-----------------
Domain model for reward accounts and their beneficiaries.
An Account is the aggregate root; Beneficiaries are only reached through it.
"""

from dataclasses import dataclass, field
from typing import Optional

from models.money import MonetaryAmount, Percentage
from models.reward import AccountContribution, Distribution


@dataclass
class Beneficiary:
    """
    Someone who receives a share of every reward made to an account.

    Attributes:
        name: Unique within the owning account.
        allocation_percentage: Fraction of each reward this beneficiary gets.
        savings: Total amount credited so far.
    """
    name: str
    allocation_percentage: Percentage
    savings: MonetaryAmount = field(default_factory=MonetaryAmount.zero)

    def credit(self, amount: MonetaryAmount) -> None:
        """Add `amount` to this beneficiary's savings."""
        self.savings = self.savings + amount

    def __str__(self) -> str:
        return f"{self.name} ({self.allocation_percentage}) savings={self.savings}"


@dataclass
class Account:
    """
    A member account that earns rewards for dining at partner restaurants.

    Attributes:
        number: Business account number, unique across accounts.
        name: Display name of the account holder(s).
        entity_id: Database primary key; None until loaded from storage.
        beneficiaries: Beneficiaries in the order they were added.
    """
    number: str
    name: str
    entity_id: Optional[int] = field(default=None, compare=False)
    beneficiaries: list[Beneficiary] = field(default_factory=list)

    def add_beneficiary(
        self, name: str, allocation_percentage: Percentage = Percentage.zero()
    ) -> Beneficiary:
        """Add a new beneficiary with no savings yet."""
        beneficiary = Beneficiary(name, allocation_percentage)
        self.restore_beneficiary(beneficiary)
        return beneficiary

    def restore_beneficiary(self, beneficiary: Beneficiary) -> None:
        """
        Attach a beneficiary rebuilt from storage.

        Raises:
            ValueError: If a beneficiary with the same name is already attached.
        """
        if self.has_beneficiary(beneficiary.name):
            raise ValueError(
                f"Account {self.number} already has a beneficiary named '{beneficiary.name}'"
            )
        self.beneficiaries.append(beneficiary)

    def has_beneficiary(self, name: str) -> bool:
        return any(b.name == name for b in self.beneficiaries)

    def get_beneficiary(self, name: str) -> Beneficiary:
        """
        Raises:
            KeyError: If no beneficiary has that name.
        """
        for b in self.beneficiaries:
            if b.name == name:
                return b
        raise KeyError(f"No beneficiary named '{name}' on account {self.number}")

    def is_valid(self) -> bool:
        """True when the allocation percentages add up to exactly 100%."""
        total = sum(
            (b.allocation_percentage.as_decimal() for b in self.beneficiaries),
            start=Percentage.zero().as_decimal(),
        )
        return total == Percentage.one().as_decimal()

    def make_contribution(self, amount: MonetaryAmount) -> AccountContribution:
        """
        Split `amount` between the beneficiaries by allocation and credit each one.

        Returns:
            The AccountContribution describing how the amount was distributed.
        """
        distributions = []
        for b in self.beneficiaries:
            share = amount * b.allocation_percentage
            b.credit(share)
            distributions.append(
                Distribution(b.name, share, b.allocation_percentage, b.savings)
            )
        return AccountContribution(self.number, amount, tuple(distributions))

    def __str__(self) -> str:
        return f"Account {self.number} '{self.name}' with {len(self.beneficiaries)} beneficiaries"
