"""Shopping cart service."""

import uuid
from dataclasses import replace
from datetime import datetime
from typing import List

from errors import NotFoundError, PersistenceError
from models.cart import CartItem, ShoppingCart
from models.expense import Expense
from models.forms import CartForm, CartItemForm, SortForm
from models.ledger import Ledger
from services.documents import CARTS, EXPENSES, persistence_errors
from logger import get_logger

logger = get_logger()


class CartService:
    """Service for shopping carts and their line items."""

    def __init__(self, documents):
        """Initialize the cart service.

        Args:
            documents: DocumentService used for storage.
        """
        self.documents = documents

    def create(self, ledger: Ledger, form: CartForm) -> ShoppingCart:
        """Create a cart whose line items all start unsorted.

        Returns:
            The created ShoppingCart with id populated.

        Raises:
            PersistenceError: If the cart couldn't be stored.
        """
        cart = ShoppingCart(
            id=None,
            owner_id=ledger.owner_id,
            name=form.name,
            date=form.date,
            total_price=form.total_price,
            items=[
                CartItem(id=uuid.uuid4().hex, name=item.name, price=item.price)
                for item in form.items
            ],
            created_at=datetime.now(),
        )

        with persistence_errors("create cart"):
            cart.id = self.documents.create(CARTS, cart.to_dict())

        ledger.carts.append(cart)
        logger.info(f"Created cart '{cart.name}' with {len(cart.items)} item(s)")
        return cart

    def sort_item(
        self, ledger: Ledger, cart_id: str, item_id: str, form: SortForm
    ) -> Expense:
        """Sort a cart line item into a standalone expense.

        The expense carries the cart's date and a reference back to the cart.
        The cart's own copy of the line item receives the same split fields.
        Both writes happen in one store transaction.

        Returns:
            The created Expense.

        Raises:
            NotFoundError: If the cart or line item doesn't exist.
            ValueError: If the line item was already sorted.
            PersistenceError: If the writes couldn't be stored.
        """
        cart = self._find_cart(ledger, cart_id)
        item = self._find_item(cart, item_id)
        if item.is_sorted:
            raise ValueError(f"Cart item '{item.name}' is already sorted")

        expense = Expense(
            id=None,
            owner_id=ledger.owner_id,
            name=item.name,
            full_price=item.price,
            date=cart.date,
            primary_category=form.primary_category,
            category_match=form.category_match,
            secondary_category=form.secondary_category,
            is_recurring=False,
            cart_id=cart.id,
            cart_name=cart.name,
            created_at=datetime.now(),
        )
        sorted_item = replace(
            item,
            primary_category=form.primary_category,
            category_match=form.category_match,
            secondary_category=form.secondary_category,
        )
        items = [sorted_item if i.id == item_id else i for i in cart.items]
        now = datetime.now()

        with persistence_errors("sort cart item"):
            with self.documents.atomic():
                expense_id = self.documents.create(EXPENSES, expense.to_dict())
                self._write_items(cart.id, items, now)
        expense.id = expense_id

        cart.items = items
        cart.updated_at = now
        ledger.expenses.append(expense)
        logger.info(
            f"Sorted cart item '{item.name}' from '{cart.name}' "
            f"into {form.primary_category}"
        )
        return expense

    def update_item(
        self, ledger: Ledger, cart_id: str, item_id: str, form: CartItemForm
    ) -> CartItem:
        """Change a line item's name and price.

        Expenses already sorted out of the item are left as they are.
        """
        cart = self._find_cart(ledger, cart_id)
        item = self._find_item(cart, item_id)

        updated = replace(item, name=form.name, price=form.price)
        items = [updated if i.id == item_id else i for i in cart.items]
        now = datetime.now()

        with persistence_errors("update cart item"):
            self._write_items(cart.id, items, now)

        cart.items = items
        cart.updated_at = now
        logger.info(f"Updated cart item '{updated.name}' in '{cart.name}'")
        return updated

    def delete_item(self, ledger: Ledger, cart_id: str, item_id: str) -> bool:
        """Remove a line item from a cart.

        Returns:
            True if the item was removed, False if the cart has no such item.

        Raises:
            NotFoundError: If the cart doesn't exist.
        """
        cart = self._find_cart(ledger, cart_id)
        if cart.find_item(item_id) is None:
            return False

        items = [i for i in cart.items if i.id != item_id]
        now = datetime.now()

        with persistence_errors("delete cart item"):
            self._write_items(cart.id, items, now)

        cart.items = items
        cart.updated_at = now
        logger.info(f"Deleted item {item_id} from cart '{cart.name}'")
        return True

    def _write_items(self, cart_id: str, items: List[CartItem], now: datetime) -> None:
        found = self.documents.update(
            CARTS,
            cart_id,
            {"items": [i.to_dict() for i in items], "updated_at": now.isoformat()},
        )
        if not found:
            raise PersistenceError(f"Cart {cart_id} is missing from the store")

    @staticmethod
    def _find_cart(ledger: Ledger, cart_id: str) -> ShoppingCart:
        cart = ledger.find_cart(cart_id)
        if cart is None:
            raise NotFoundError(f"Cart with ID {cart_id} not found")
        return cart

    @staticmethod
    def _find_item(cart: ShoppingCart, item_id: str) -> CartItem:
        item = cart.find_item(item_id)
        if item is None:
            raise NotFoundError(f"Item {item_id} not found in cart '{cart.name}'")
        return item
