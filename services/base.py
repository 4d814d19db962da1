"""Base services container for dependency injection."""

from config import Config
from db.manager import DatabaseManager


class Services:
    """Container for all application services.

    This class provides a centralized way to access all services and makes
    it easy to inject a test database.

    Args:
        config: Application configuration object.
        db_manager: Optional database manager for testing. If None, one is
            created from config.
        remember_session: Keep the signed-in user in config.session_path
            between runs. Tests pass False to keep sessions in memory.
    """

    def __init__(self, config: Config, db_manager=None, remember_session: bool = True):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        # Lazy import to avoid circular dependencies
        from services.documents import DocumentService
        from services.identity import IdentityService
        from services.settings import SettingsService
        from services.ledger import LedgerService
        from services.expenses import ExpenseService
        from services.carts import CartService
        from services.periods import SalaryPeriodService

        self.documents = DocumentService(self.db_manager)
        self.identity = IdentityService(
            self.db_manager,
            session_path=config.session_path if remember_session else None,
        )
        self.settings = SettingsService(self.documents, config)
        self.ledgers = LedgerService(self.documents, self.settings)
        self.expenses = ExpenseService(self.documents)
        self.carts = CartService(self.documents)
        self.periods = SalaryPeriodService(self.documents, self.settings)

    def load_ledger(self):
        """Load the ledger of the signed-in user.

        Raises:
            AuthenticationError: If nobody is signed in.
        """
        session = self.identity.require_session()
        return self.ledgers.load(session.user_id)
