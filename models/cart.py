"""Shopping cart model: a batch of line items bought together."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import List, Optional


@dataclass
class CartItem:
    """A line item inside a shopping cart.

    The split fields stay empty until the item is sorted on its own.
    """

    id: str
    name: str
    price: Decimal
    primary_category: str = ""
    category_match: int = 100
    secondary_category: str = ""

    @property
    def is_sorted(self) -> bool:
        return bool(self.primary_category)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "price": str(self.price),
            "primary_category": self.primary_category,
            "category_match": self.category_match,
            "secondary_category": self.secondary_category,
        }

    @classmethod
    def from_dict(cls, record: dict) -> "CartItem":
        return cls(
            id=record["id"],
            name=record["name"],
            price=Decimal(str(record["price"])),
            primary_category=record.get("primary_category") or "",
            category_match=int(record.get("category_match", 100)),
            secondary_category=record.get("secondary_category") or "",
        )


@dataclass
class ShoppingCart:
    """A shopping cart with an independently entered total price.

    Attributes:
        id: Unique identifier (assigned by the document store).
        owner_id: ID of the user owning the cart.
        name: Cart name, e.g. the shop.
        date: Purchase date shared by all line items.
        total_price: Price entered by the user; never recomputed from items.
        items: Line items in entry order.
    """

    id: Optional[str]
    owner_id: str
    name: str
    date: date
    total_price: Decimal
    items: List[CartItem] = field(default_factory=list)
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def items_total(self) -> Decimal:
        """Sum of line item prices, for display next to total_price."""
        return sum((item.price for item in self.items), Decimal("0"))

    def find_item(self, item_id: str) -> Optional[CartItem]:
        for item in self.items:
            if item.id == item_id:
                return item
        return None

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "name": self.name,
            "date": self.date.isoformat(),
            "total_price": str(self.total_price),
            "items": [item.to_dict() for item in self.items],
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, record: dict) -> "ShoppingCart":
        created_at = record.get("created_at")
        updated_at = record.get("updated_at")
        return cls(
            id=record.get("id"),
            owner_id=record["owner_id"],
            name=record["name"],
            date=date.fromisoformat(record["date"]),
            total_price=Decimal(str(record["total_price"])),
            items=[CartItem.from_dict(item) for item in record.get("items", [])],
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
