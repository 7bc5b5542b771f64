"""Services container shared by the CLI, report runs and tests."""

from config import Config
from db.manager import DatabaseManager
from services.budgets import BudgetService
from services.categories import CategoryService
from services.goals import GoalService
from services.tracking import TrackingService
from services.transactions import TransactionService
from services.users import UserService


class Services:
    """Stores plus the tracking API, wired to one database.

    Transactions and budgets validate their categories through the shared
    CategoryService. Tools receive the whole container so they can read
    config (timezone, currency) alongside the stores.

    Args:
        config: Application configuration object.
        db_manager: Database manager to use instead of one built from config.
            Tests pass an in-memory manager here.
    """

    def __init__(self, config: Config, db_manager=None):
        self.config = config
        self.db_manager = db_manager or DatabaseManager(config)

        self.users = UserService(self.db_manager)
        self.categories = CategoryService(self.db_manager)
        self.transactions = TransactionService(self.db_manager, self.categories)
        self.budgets = BudgetService(self.db_manager, self.categories)
        self.goals = GoalService(self.db_manager)
        self.tracking = TrackingService(self)
