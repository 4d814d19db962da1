from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class Expense:
    id: Optional[str]  # assigned by the document store
    owner_id: str
    name: str
    full_price: Decimal  # always positive
    date: date
    primary_category: str = ""  # empty while unsorted
    category_match: int = 100  # percent of full_price for primary_category
    secondary_category: str = ""
    is_recurring: bool = False
    cart_id: Optional[str] = None  # set when sorted out of a shopping cart
    cart_name: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_sorted(self) -> bool:
        return bool(self.primary_category)

    @property
    def secondary_percentage(self) -> int:
        """Share of full_price for secondary_category; derived, never stored."""
        return 100 - self.category_match

    def to_dict(self) -> dict:
        """Convert expense to dictionary for document storage."""
        return {
            "owner_id": self.owner_id,
            "name": self.name,
            "full_price": str(self.full_price),
            "date": self.date.isoformat(),
            "primary_category": self.primary_category,
            "category_match": self.category_match,
            "secondary_category": self.secondary_category,
            "is_recurring": self.is_recurring,
            "cart_id": self.cart_id,
            "cart_name": self.cart_name,
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, record: dict) -> "Expense":
        """Build an expense from a stored document."""
        created_at = record.get("created_at")
        updated_at = record.get("updated_at")
        return cls(
            id=record.get("id"),
            owner_id=record["owner_id"],
            name=record["name"],
            full_price=Decimal(str(record["full_price"])),
            date=date.fromisoformat(record["date"]),
            primary_category=record.get("primary_category") or "",
            category_match=int(record.get("category_match", 100)),
            secondary_category=record.get("secondary_category") or "",
            is_recurring=bool(record.get("is_recurring", False)),
            cart_id=record.get("cart_id"),
            cart_name=record.get("cart_name"),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
