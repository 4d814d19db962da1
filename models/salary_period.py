"""SalaryPeriod model: a user-defined reporting window."""

from dataclasses import dataclass
from datetime import date, datetime
from decimal import Decimal
from typing import Optional


@dataclass
class SalaryPeriod:
    """Represents a salary period used instead of a calendar month.

    Attributes:
        id: Unique identifier (assigned by the document store).
        owner_id: ID of the user owning the period.
        name: Display name, e.g. "2024. January - February period".
        start_date: First day of the period (inclusive).
        end_date: Last day of the period (inclusive), None while the period is open.
        monthly_budget: Budget override for this period, None to use the default.
    """

    id: Optional[str]
    owner_id: str
    name: str
    start_date: date
    end_date: Optional[date] = None
    monthly_budget: Optional[Decimal] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @property
    def is_open(self) -> bool:
        return self.end_date is None

    def contains(self, day: date, today: date) -> bool:
        """Check whether a day falls inside the period; open periods end today."""
        end = self.end_date if self.end_date is not None else today
        return self.start_date <= day <= end

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "name": self.name,
            "start_date": self.start_date.isoformat(),
            "end_date": self.end_date.isoformat() if self.end_date else None,
            "monthly_budget": (
                str(self.monthly_budget) if self.monthly_budget is not None else None
            ),
            "created_at": self.created_at.isoformat() if self.created_at else None,
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, record: dict) -> "SalaryPeriod":
        end_date = record.get("end_date")
        monthly_budget = record.get("monthly_budget")
        created_at = record.get("created_at")
        updated_at = record.get("updated_at")
        return cls(
            id=record.get("id"),
            owner_id=record["owner_id"],
            name=record["name"],
            start_date=date.fromisoformat(record["start_date"]),
            end_date=date.fromisoformat(end_date) if end_date else None,
            monthly_budget=(
                Decimal(str(monthly_budget)) if monthly_budget is not None else None
            ),
            created_at=datetime.fromisoformat(created_at) if created_at else None,
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
