"""Salary period service, including the rollover of the open period."""

from datetime import date, datetime, timedelta
from decimal import Decimal

from dateutil.relativedelta import relativedelta

from errors import NotFoundError, PersistenceError
from models.forms import BudgetForm
from models.ledger import Ledger
from models.salary_period import SalaryPeriod
from models.settings import PERIOD, ReportFilter
from services.documents import SALARY_PERIODS, persistence_errors
from tools.budget import effective_monthly_budget
from tools.filters import find_period
from logger import get_logger

logger = get_logger()

# Period names stay English whatever the process locale is
_MONTH_NAMES = (
    "January",
    "February",
    "March",
    "April",
    "May",
    "June",
    "July",
    "August",
    "September",
    "October",
    "November",
    "December",
)


def period_name(start_date: date) -> str:
    """Name a period after its start month and the month after.

    Example: "2024. January - February period".
    """
    next_month = start_date + relativedelta(months=1)
    return (
        f"{start_date.year}. {_MONTH_NAMES[start_date.month - 1]} - "
        f"{_MONTH_NAMES[next_month.month - 1]} period"
    )


class SalaryPeriodService:
    """Service for salary periods."""

    def __init__(self, documents, settings):
        """Initialize the salary period service.

        Args:
            documents: DocumentService used for storage.
            settings: SettingsService, used to activate new periods and to
                update the default budget.
        """
        self.documents = documents
        self.settings = settings

    def create(self, ledger: Ledger, start_date: date) -> SalaryPeriod:
        """Start a new salary period and select it.

        The period with the latest start date, if still open, is closed the day
        before start_date. The new period is open and copies the budget in
        force at creation time. Closing, creating and selecting happen in one
        store transaction.

        Periods created out of chronological order are not checked.

        Args:
            ledger: Ledger of the signed-in user.
            start_date: First day of the new period.

        Returns:
            The created SalaryPeriod.

        Raises:
            PersistenceError: If the rollover couldn't be stored.
        """
        latest = max(ledger.periods, key=lambda p: p.start_date, default=None)
        to_close = latest if latest is not None and latest.is_open else None
        close_on = start_date - timedelta(days=1)

        period = SalaryPeriod(
            id=None,
            owner_id=ledger.owner_id,
            name=period_name(start_date),
            start_date=start_date,
            end_date=None,
            monthly_budget=effective_monthly_budget(
                ledger.settings.monthly_budget,
                ledger.settings.report_filter,
                ledger.periods,
            ),
            created_at=datetime.now(),
        )

        with persistence_errors("create period"):
            with self.documents.atomic():
                if to_close is not None:
                    closed = self.documents.update(
                        SALARY_PERIODS,
                        to_close.id,
                        {"end_date": close_on.isoformat()},
                    )
                    if not closed:
                        raise PersistenceError(
                            f"Period {to_close.id} is missing from the store"
                        )
                period_id = self.documents.create(SALARY_PERIODS, period.to_dict())
                report_filter = ReportFilter.for_period(period_id)
                self.settings.write_filter(ledger.owner_id, report_filter)
        period.id = period_id

        if to_close is not None:
            to_close.end_date = close_on
            logger.info(f"Closed period '{to_close.name}' on {close_on.isoformat()}")
        ledger.periods.append(period)
        ledger.settings.report_filter = report_filter
        logger.info(f"Created period '{period.name}' starting {start_date.isoformat()}")
        return period

    def set_budget(self, ledger: Ledger, period_id: str, form: BudgetForm) -> SalaryPeriod:
        """Override the monthly budget of one period.

        Raises:
            NotFoundError: If the period doesn't exist.
        """
        period = ledger.find_period(period_id)
        if period is None:
            raise NotFoundError(f"Salary period with ID {period_id} not found")

        now = datetime.now()
        with persistence_errors("save period budget"):
            found = self.documents.update(
                SALARY_PERIODS,
                period_id,
                {"monthly_budget": str(form.monthly_budget), "updated_at": now.isoformat()},
            )
        if not found:
            raise NotFoundError(f"Salary period with ID {period_id} not found in store")

        period.monthly_budget = form.monthly_budget
        period.updated_at = now
        logger.info(f"Budget of '{period.name}' set to {form.monthly_budget}")
        return period

    def set_active_budget(self, ledger: Ledger, form: BudgetForm) -> Decimal:
        """Set the budget for whatever the active filter shows.

        A selected, known period gets its own budget; otherwise the default
        budget changes.

        Returns:
            The new budget.
        """
        report_filter = ledger.settings.report_filter
        if report_filter.mode == PERIOD and find_period(ledger.periods, report_filter.period_id):
            self.set_budget(ledger, report_filter.period_id, form)
        else:
            self.settings.set_monthly_budget(ledger, form)
        return form.monthly_budget
