"""Ledger: the records loaded for one signed-in session."""

from dataclasses import dataclass, field
from typing import List, Optional

from models.cart import ShoppingCart
from models.expense import Expense
from models.salary_period import SalaryPeriod
from models.settings import UserSettings


@dataclass
class Ledger:
    """Session-scoped collections mirrored from the document store.

    Services mutate the lists only after the matching store write succeeded.

    Attributes:
        owner_id: ID of the signed-in user.
        settings: The user's settings document.
        expenses: Sorted expenses, in insertion order.
        unsorted: Expenses not yet assigned a category, in insertion order.
        carts: Shopping carts, in insertion order.
        periods: Salary periods, in insertion order.
    """

    owner_id: str
    settings: UserSettings
    expenses: List[Expense] = field(default_factory=list)
    unsorted: List[Expense] = field(default_factory=list)
    carts: List[ShoppingCart] = field(default_factory=list)
    periods: List[SalaryPeriod] = field(default_factory=list)

    def find_expense(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.expenses if e.id == expense_id), None)

    def find_unsorted(self, expense_id: str) -> Optional[Expense]:
        return next((e for e in self.unsorted if e.id == expense_id), None)

    def find_cart(self, cart_id: str) -> Optional[ShoppingCart]:
        return next((c for c in self.carts if c.id == cart_id), None)

    def find_period(self, period_id: str) -> Optional[SalaryPeriod]:
        return next((p for p in self.periods if p.id == period_id), None)
