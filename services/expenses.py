"""Expense service: adding, editing and sorting expenses."""

from dataclasses import dataclass, replace
from datetime import datetime
from typing import Optional

from errors import NotFoundError, PersistenceError
from models.expense import Expense
from models.forms import ExpenseForm, SortForm
from models.ledger import Ledger
from services.documents import EXPENSES, UNSORTED_EXPENSES, persistence_errors
from logger import get_logger

logger = get_logger()


@dataclass
class SortOutcome:
    """Result of sorting an expense.

    Attributes:
        expense: The newly sorted expense.
        next_unsorted: Next expense waiting to be sorted, when moving on was
            requested and one is left.
    """

    expense: Expense
    next_unsorted: Optional[Expense] = None


class ExpenseService:
    """Service for managing sorted and unsorted expenses."""

    def __init__(self, documents):
        """Initialize the expense service.

        Args:
            documents: DocumentService used for storage.
        """
        self.documents = documents

    def add(self, ledger: Ledger, form: ExpenseForm) -> Expense:
        """Add an expense.

        Expenses with a primary category are stored as sorted; the rest wait in
        the unsorted collection.

        Args:
            ledger: Ledger of the signed-in user.
            form: Validated expense input.

        Returns:
            The created Expense with id populated.

        Raises:
            PersistenceError: If the expense couldn't be stored.
        """
        expense = Expense(
            id=None,
            owner_id=ledger.owner_id,
            name=form.name,
            full_price=form.full_price,
            date=form.date,
            primary_category=form.primary_category,
            category_match=form.category_match,
            secondary_category=form.secondary_category,
            is_recurring=form.is_recurring,
            created_at=datetime.now(),
        )
        entity_type = EXPENSES if expense.is_sorted else UNSORTED_EXPENSES

        with persistence_errors("add expense"):
            expense.id = self.documents.create(entity_type, expense.to_dict())

        if expense.is_sorted:
            ledger.expenses.append(expense)
        else:
            ledger.unsorted.append(expense)
        logger.info(f"Added {entity_type} record '{expense.name}' ({expense.id})")
        return expense

    def update(self, ledger: Ledger, expense_id: str, form: ExpenseForm) -> Expense:
        """Replace the editable fields of a sorted expense.

        Cart linkage and creation time are kept.

        Raises:
            NotFoundError: If the expense isn't in the ledger.
            ValueError: If the form has no primary category.
            PersistenceError: If the update couldn't be stored.
        """
        current = ledger.find_expense(expense_id)
        if current is None:
            raise NotFoundError(f"Expense with ID {expense_id} not found")
        if not form.primary_category:
            raise ValueError("A sorted expense needs a primary category")

        updated = replace(
            current,
            name=form.name,
            full_price=form.full_price,
            date=form.date,
            primary_category=form.primary_category,
            category_match=form.category_match,
            secondary_category=form.secondary_category,
            is_recurring=form.is_recurring,
            updated_at=datetime.now(),
        )
        fields = updated.to_dict()
        partial = {
            key: fields[key]
            for key in (
                "name",
                "full_price",
                "date",
                "primary_category",
                "category_match",
                "secondary_category",
                "is_recurring",
                "updated_at",
            )
        }

        with persistence_errors("update expense"):
            found = self.documents.update(EXPENSES, expense_id, partial)
        if not found:
            raise NotFoundError(f"Expense with ID {expense_id} not found in store")

        index = ledger.expenses.index(current)
        ledger.expenses[index] = updated
        logger.info(f"Updated expense '{updated.name}' ({expense_id})")
        return updated

    def delete(self, ledger: Ledger, expense_id: str) -> bool:
        """Delete a sorted expense.

        Returns:
            True if the expense was deleted, False if not found.

        Raises:
            PersistenceError: If the record was already gone from the store.
        """
        return self._delete(ledger.expenses, EXPENSES, expense_id)

    def delete_unsorted(self, ledger: Ledger, expense_id: str) -> bool:
        """Discard an unsorted expense.

        Returns:
            True if the expense was deleted, False if not found.

        Raises:
            PersistenceError: If the record was already gone from the store.
        """
        return self._delete(ledger.unsorted, UNSORTED_EXPENSES, expense_id)

    def sort(
        self,
        ledger: Ledger,
        unsorted_id: str,
        form: SortForm,
        move_to_next: bool = False,
    ) -> SortOutcome:
        """Move an unsorted expense into the sorted collection.

        The sorted copy is created and the unsorted record deleted in one
        store transaction, so a failure leaves both collections unchanged.

        Args:
            ledger: Ledger of the signed-in user.
            unsorted_id: ID of the unsorted expense.
            form: Category split to attach.
            move_to_next: Also return the next unsorted expense, in insertion order.

        Returns:
            SortOutcome with the sorted expense.

        Raises:
            NotFoundError: If the unsorted expense isn't in the ledger.
            PersistenceError: If the move couldn't be stored.
        """
        unsorted = ledger.find_unsorted(unsorted_id)
        if unsorted is None:
            raise NotFoundError(f"Unsorted expense with ID {unsorted_id} not found")

        sorted_expense = replace(
            unsorted,
            id=None,
            primary_category=form.primary_category,
            category_match=form.category_match,
            secondary_category=form.secondary_category,
            created_at=datetime.now(),
            updated_at=None,
        )

        with persistence_errors("sort expense"):
            with self.documents.atomic():
                new_id = self.documents.create(EXPENSES, sorted_expense.to_dict())
                if not self.documents.delete(UNSORTED_EXPENSES, unsorted_id):
                    raise PersistenceError(
                        f"Unsorted expense {unsorted_id} is missing from the store"
                    )
        sorted_expense.id = new_id

        ledger.unsorted.remove(unsorted)
        ledger.expenses.append(sorted_expense)
        logger.info(
            f"Sorted '{sorted_expense.name}' into {sorted_expense.primary_category} "
            f"({sorted_expense.category_match}%)"
        )

        next_unsorted = None
        if move_to_next and ledger.unsorted:
            next_unsorted = ledger.unsorted[0]
        return SortOutcome(expense=sorted_expense, next_unsorted=next_unsorted)

    def _delete(self, collection, entity_type, expense_id) -> bool:
        expense = next((e for e in collection if e.id == expense_id), None)
        if expense is None:
            return False

        with persistence_errors("delete expense"):
            deleted = self.documents.delete(entity_type, expense_id)
        if not deleted:
            raise PersistenceError(
                f"Expense {expense_id} is missing from the store"
            )

        collection.remove(expense)
        logger.info(f"Deleted {entity_type} record '{expense.name}' ({expense_id})")
        return True
