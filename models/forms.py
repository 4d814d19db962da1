"""Input forms validated before any store call.

Building a form raises pydantic.ValidationError on bad input, so a rejected
action never leaves partial state behind.
"""

from datetime import date
from decimal import Decimal
from typing import List

from pydantic import BaseModel, Field, field_validator, model_validator

from models.category import CATEGORIES, is_category


def normalize_name(value: str) -> str:
    """Strip whitespace and capitalise the first letter."""
    value = value.strip()
    if not value:
        raise ValueError("Name cannot be empty")
    return value[0].upper() + value[1:]


def _check_category(value: str) -> str:
    if value and not is_category(value):
        raise ValueError(
            f"Unknown category '{value}'. Must be one of: {', '.join(CATEGORIES)}"
        )
    return value


class _SplitFields(BaseModel):
    """Category split shared by expenses, sort targets and cart items."""

    primary_category: str = ""
    category_match: int = Field(default=100, ge=0, le=100)
    secondary_category: str = ""

    @field_validator("primary_category", "secondary_category")
    @classmethod
    def known_category(cls, value: str) -> str:
        return _check_category(value.strip())

    @model_validator(mode="after")
    def distinct_categories(self):
        if self.secondary_category and self.secondary_category == self.primary_category:
            raise ValueError("Secondary category must differ from primary category")
        return self


class ExpenseForm(_SplitFields):
    """A new or edited expense. Without a primary category it is unsorted."""

    name: str
    full_price: Decimal = Field(gt=0)
    date: date
    is_recurring: bool = False

    @field_validator("name")
    @classmethod
    def clean_name(cls, value: str) -> str:
        return normalize_name(value)


class SortForm(_SplitFields):
    """Category assignment applied when sorting an expense or cart item."""

    primary_category: str

    @field_validator("primary_category")
    @classmethod
    def required_primary(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("A primary category is required to sort")
        return value


class CartItemForm(BaseModel):
    name: str
    price: Decimal = Field(gt=0)

    @field_validator("name")
    @classmethod
    def clean_name(cls, value: str) -> str:
        return normalize_name(value)


class CartForm(BaseModel):
    name: str
    total_price: Decimal = Field(gt=0)
    date: date
    items: List[CartItemForm] = Field(min_length=1)

    @field_validator("name")
    @classmethod
    def clean_name(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("Cart name cannot be empty")
        return value


class BudgetForm(BaseModel):
    monthly_budget: Decimal = Field(gt=0)
