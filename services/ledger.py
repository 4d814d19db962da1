"""Ledger service: loads a user's records for a session."""

from models.cart import ShoppingCart
from models.expense import Expense
from models.ledger import Ledger
from models.salary_period import SalaryPeriod
from services.documents import (
    CARTS,
    EXPENSES,
    SALARY_PERIODS,
    UNSORTED_EXPENSES,
    persistence_errors,
)
from logger import get_logger

logger = get_logger()


class LedgerService:
    """Service assembling a Ledger from the document store."""

    def __init__(self, documents, settings):
        """Initialize the ledger service.

        Args:
            documents: DocumentService used for storage.
            settings: SettingsService providing the user's settings.
        """
        self.documents = documents
        self.settings = settings

    def load(self, owner_id: str) -> Ledger:
        """Load every record owned by a user.

        Args:
            owner_id: ID of the signed-in user.

        Returns:
            Ledger with collections in insertion order.

        Raises:
            PersistenceError: If the store can't be read.
        """
        settings = self.settings.get_or_create(owner_id)

        with persistence_errors("load your data"):
            expenses = [
                Expense.from_dict(r) for r in self.documents.list(EXPENSES, owner_id)
            ]
            unsorted = [
                Expense.from_dict(r)
                for r in self.documents.list(UNSORTED_EXPENSES, owner_id)
            ]
            carts = [
                ShoppingCart.from_dict(r) for r in self.documents.list(CARTS, owner_id)
            ]
            periods = [
                SalaryPeriod.from_dict(r)
                for r in self.documents.list(SALARY_PERIODS, owner_id)
            ]

        logger.debug(
            f"Loaded {len(expenses)} expenses, {len(unsorted)} unsorted, "
            f"{len(carts)} carts, {len(periods)} periods for user {owner_id}"
        )
        return Ledger(
            owner_id=owner_id,
            settings=settings,
            expenses=expenses,
            unsorted=unsorted,
            carts=carts,
            periods=periods,
        )
