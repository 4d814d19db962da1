"""Date filtering by calendar month or salary period."""

from datetime import date
from typing import List, Optional, Sequence, TypeVar

from models.salary_period import SalaryPeriod
from models.settings import MONTH, PERIOD, ReportFilter

Dated = TypeVar("Dated")


def find_period(
    periods: Sequence[SalaryPeriod], period_id: Optional[str]
) -> Optional[SalaryPeriod]:
    """Find a period by ID.

    Args:
        periods: Known salary periods.
        period_id: ID to look up, may be None.

    Returns:
        The matching period, or None if the ID is unset or unknown.
    """
    if not period_id:
        return None
    for period in periods:
        if period.id == period_id:
            return period
    return None


def filter_by_date(
    records: Sequence[Dated],
    report_filter: ReportFilter,
    periods: Sequence[SalaryPeriod],
    today: Optional[date] = None,
) -> List[Dated]:
    """Keep the records falling inside the selected reporting window.

    Works for any record with a ``date`` attribute (expenses, carts). The
    function has no side effects, so applying it twice gives the same result
    as applying it once.

    Args:
        records: Records to filter.
        report_filter: Active filter mode and selection.
        periods: Known salary periods, used to resolve the selected period.
        today: End date of an open period. Defaults to date.today().

    Returns:
        A new list with the matching records, in their original order. An
        unset selection or a period ID that no longer exists keeps everything.
    """
    if report_filter.mode == MONTH and report_filter.month is not None:
        year, month = report_filter.month.year, report_filter.month.month
        return [r for r in records if r.date.year == year and r.date.month == month]

    if report_filter.mode == PERIOD:
        period = find_period(periods, report_filter.period_id)
        if period is not None:
            today = today or date.today()
            return [r for r in records if period.contains(r.date, today)]

    return list(records)
