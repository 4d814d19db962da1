"""User settings service: default budget and the active report filter."""

from datetime import datetime

from errors import PersistenceError
from models.forms import BudgetForm
from models.ledger import Ledger
from models.settings import ReportFilter, UserSettings
from services.documents import USER_SETTINGS, persistence_errors
from logger import get_logger

logger = get_logger()


class SettingsService:
    """Service for the per-user settings document."""

    def __init__(self, documents, config):
        """Initialize the settings service.

        Args:
            documents: DocumentService used for storage.
            config: Application configuration, source of the default budget.
        """
        self.documents = documents
        self.config = config

    def get_or_create(self, owner_id: str) -> UserSettings:
        """Load a user's settings, creating them on first use.

        New settings start from the configured default monthly budget and an
        unfiltered month view.
        """
        with persistence_errors("load settings"):
            record = self.documents.find(USER_SETTINGS, owner_id)
            if record is not None:
                return UserSettings.from_dict(record)

            settings = UserSettings(
                owner_id=owner_id,
                monthly_budget=self.config.default_monthly_budget,
                updated_at=datetime.now(),
            )
            self.documents.create(USER_SETTINGS, settings.to_dict(), doc_id=owner_id)

        logger.info(f"Created settings for user {owner_id}")
        return settings

    def set_monthly_budget(self, ledger: Ledger, form: BudgetForm) -> UserSettings:
        """Update the default monthly budget."""
        now = datetime.now()
        with persistence_errors("save budget"):
            found = self.documents.update(
                USER_SETTINGS,
                ledger.owner_id,
                {"monthly_budget": str(form.monthly_budget), "updated_at": now.isoformat()},
            )
        if not found:
            raise PersistenceError("Settings document is missing. Please sign in again.")

        ledger.settings.monthly_budget = form.monthly_budget
        ledger.settings.updated_at = now
        logger.info(f"Default monthly budget set to {form.monthly_budget}")
        return ledger.settings

    def set_filter(self, ledger: Ledger, report_filter: ReportFilter) -> UserSettings:
        """Persist the active report filter."""
        with persistence_errors("save filter"):
            self.write_filter(ledger.owner_id, report_filter)

        ledger.settings.report_filter = report_filter
        return ledger.settings

    def write_filter(self, owner_id: str, report_filter: ReportFilter) -> None:
        """Store the filter without touching any ledger.

        Used inside larger store transactions; the caller updates its ledger
        once the transaction committed.

        Raises:
            PersistenceError: If the settings document doesn't exist.
        """
        found = self.documents.update(
            USER_SETTINGS,
            owner_id,
            {
                "report_filter": report_filter.to_dict(),
                "updated_at": datetime.now().isoformat(),
            },
        )
        if not found:
            raise PersistenceError("Settings document is missing. Please sign in again.")
