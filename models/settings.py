"""Per-user settings: the default budget and the active report filter."""

from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Optional

MONTH = "month"
PERIOD = "period"


@dataclass
class ReportFilter:
    """Selects the reporting window.

    Attributes:
        mode: "month" or "period".
        month: Any day of the selected calendar month (normalised to the 1st).
        period_id: ID of the selected salary period.
    """

    mode: str = MONTH
    month: Optional[date] = None
    period_id: Optional[str] = None

    def __post_init__(self):
        if self.mode not in (MONTH, PERIOD):
            raise ValueError(f"Unknown filter mode: {self.mode}")
        if self.month is not None:
            self.month = self.month.replace(day=1)

    @classmethod
    def for_month(cls, year: int, month: int) -> "ReportFilter":
        return cls(mode=MONTH, month=date(year, month, 1))

    @classmethod
    def for_period(cls, period_id: str) -> "ReportFilter":
        return cls(mode=PERIOD, period_id=period_id)

    def to_dict(self) -> dict:
        return {
            "mode": self.mode,
            "month": self.month.isoformat() if self.month else None,
            "period_id": self.period_id,
        }

    @classmethod
    def from_dict(cls, record: Optional[dict]) -> "ReportFilter":
        if not record:
            return cls()
        month = record.get("month")
        return cls(
            mode=record.get("mode", MONTH),
            month=date.fromisoformat(month) if month else None,
            period_id=record.get("period_id"),
        )


@dataclass
class UserSettings:
    """Settings document, one per user; its document ID is the owner ID."""

    owner_id: str
    monthly_budget: Decimal
    report_filter: ReportFilter = field(default_factory=ReportFilter)
    updated_at: Optional[datetime] = None

    def to_dict(self) -> dict:
        return {
            "owner_id": self.owner_id,
            "monthly_budget": str(self.monthly_budget),
            "report_filter": self.report_filter.to_dict(),
            "updated_at": self.updated_at.isoformat() if self.updated_at else None,
        }

    @classmethod
    def from_dict(cls, record: dict) -> "UserSettings":
        updated_at = record.get("updated_at")
        return cls(
            owner_id=record["owner_id"],
            monthly_budget=Decimal(str(record["monthly_budget"])),
            report_filter=ReportFilter.from_dict(record.get("report_filter")),
            updated_at=datetime.fromisoformat(updated_at) if updated_at else None,
        )
