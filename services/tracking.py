"""Budget and goal tracking operations exposed to the API layer.

This service stitches the pure tracking tools to the stores: it loads
records with ownership checks, runs the evaluation and persists any state
that comes back. The current time is sampled here and nowhere deeper.
"""

from datetime import datetime
from typing import List, Optional
from models.budget import Budget
from models.category import EXPENSE
from models.transaction import Transaction
from notifications.builders import budget_alert_request, goal_achieved_request
from errors import NotFoundError
from tools import breach, budgets, goals
from tools.breach import BreachDecision
from tools.goals import ContributionResult
from tools.periods import DateRange, resolve_period
from logger import get_logger

logger = get_logger()


class TrackingService:
    """Budget status, breach checks, period resolution and goal progress."""

    def __init__(self, services):
        """Initialize the tracking service.

        Args:
            services: Services container providing config and the stores.
        """
        self.services = services

    @property
    def tz(self):
        return self.services.config.tzinfo

    def _now(self, now: Optional[datetime]) -> datetime:
        return now if now is not None else datetime.now(self.tz)

    def resolve_period(
        self,
        token: Optional[str],
        custom_start=None,
        custom_end=None,
        now: Optional[datetime] = None,
    ) -> DateRange:
        """Resolve a period token in the configured timezone."""
        return resolve_period(
            token, self._now(now), custom_start, custom_end, tz=self.tz
        )

    def evaluate_budget(self, user_id: int, budget_id: int):
        """Current BudgetStatus of one of a user's budgets.

        Raises:
            NotFoundError: If the budget is missing or owned by another user.
        """
        budget = self.services.budgets.get_owned(user_id, budget_id)
        return budgets.evaluate(self.services, budget, self.tz)

    def list_budgets_with_status(self, user_id: int) -> list:
        """BudgetStatus for each of a user's budgets, newest anchor first."""
        return [
            budgets.evaluate(self.services, budget, self.tz)
            for budget in self.services.budgets.find_by_user(user_id)
        ]

    def check_budget_breach(self, user_id: int, budget_id: int) -> BreachDecision:
        """Evaluate a budget, decide which alerts fire and persist the new state.

        Raises:
            NotFoundError: If the budget is missing or owned by another user.
            ConcurrentModificationError: If the budget changed mid-check.
        """
        budget = self.services.budgets.get_owned(user_id, budget_id)
        decision, _ = self._check(budget)
        self._persist(budget, decision)
        return decision

    def notify_budget_breach(self, user_id: int, budget_id: int, dispatcher) -> BreachDecision:
        """Check a budget and hand any new alerts to the dispatcher.

        Crossing state is persisted even when delivery is suppressed by the
        budget's or the user's preferences, but only after the alert was
        handed off: a dispatcher error leaves the state untouched so the
        next check fires again.
        """
        budget = self.services.budgets.get_owned(user_id, budget_id)
        return self._check_and_notify(budget, dispatcher)

    def notify_breaches_for_transaction(
        self, transaction: Transaction, dispatcher
    ) -> List[BreachDecision]:
        """Check every budget a newly recorded expense counts against."""
        if transaction.type != EXPENSE:
            return []

        day = transaction.date.astimezone(self.tz).date()
        decisions = []
        for budget in self.services.budgets.find_covering_expense(
            transaction.user_id, transaction.category_id, day
        ):
            if not budgets.current_instance_range(budget, self.tz).contains(
                transaction.date
            ):
                continue
            decisions.append(self._check_and_notify(budget, dispatcher))
        return decisions

    def record_goal_contribution(
        self, user_id: int, goal_id: int, amount, dispatcher=None
    ) -> ContributionResult:
        """Set a goal's saved amount and persist it.

        The goal achieved notification is handed off before the goal is
        saved, so a failed delivery leaves the goal unachieved and the
        next contribution reports the transition again.

        Args:
            user_id: Owner of the goal.
            goal_id: Goal to update.
            amount: New total saved so far.
            dispatcher: If given, receives the one-time goal achieved notification.

        Raises:
            InvalidAmountError: If the amount is not finite or is negative.
            NotFoundError: If the goal is missing or owned by another user.
            ConcurrentModificationError: If another writer updated the goal first.
        """
        goal = self.services.goals.get_owned(user_id, goal_id)
        return self._save_goal(goal, goals.apply_contribution(goal, amount), dispatcher)

    def update_goal(
        self, user_id: int, goal_id: int, dispatcher=None, **changes
    ) -> ContributionResult:
        """Change a goal's name, target, deadline or description.

        Lowering the target below the saved amount achieves the goal and
        is notified like a contribution would be.

        Raises:
            ValueError: If unsupported fields are given.
            InvalidAmountError: If the target is invalid.
            NotFoundError: If the goal is missing or owned by another user.
            ConcurrentModificationError: If another writer updated the goal first.
        """
        goal = self.services.goals.get_owned(user_id, goal_id)
        result = self.services.goals.apply_changes(goal, **changes)
        return self._save_goal(goal, result, dispatcher)

    def _save_goal(self, goal, result: ContributionResult, dispatcher) -> ContributionResult:
        if result.just_achieved:
            logger.info(f"Goal '{result.goal.name}' achieved by user {goal.user_id}")
            if dispatcher is not None:
                self._deliver_goal_achieved(goal.user_id, result.goal, dispatcher)

        saved = self.services.goals.save(goal, result.goal)
        return ContributionResult(goal=saved, just_achieved=result.just_achieved)

    def _check(self, budget: Budget):
        status = budgets.evaluate(self.services, budget, self.tz)
        decision = breach.should_notify(budget.breach_state, status.percentage_used)
        return decision, status

    def _persist(self, budget: Budget, decision: BreachDecision) -> None:
        if decision.new_state != budget.breach_state:
            self.services.budgets.save_breach_state(budget, decision.new_state)

    def _check_and_notify(self, budget: Budget, dispatcher) -> BreachDecision:
        decision, status = self._check(budget)
        if decision.fired:
            self._deliver_budget_alert(budget, status, decision, dispatcher)

        # Only record the crossing once the alert has been handed off.
        self._persist(budget, decision)
        return decision

    def _deliver_budget_alert(self, budget: Budget, status, decision, dispatcher) -> None:
        threshold = 100 if decision.fire_100 else 80
        logger.info(
            f"Budget alert ({threshold}%): {budget.name} for user {budget.user_id}"
        )

        user = self.services.users.find(budget.user_id)
        if user is None:
            raise NotFoundError("User", budget.user_id)

        if not (budget.notifications_enabled and user.budget_alerts and user.email):
            logger.debug(f"Skipping budget alert delivery for budget {budget.id}")
            return

        if dispatcher is not None:
            dispatcher.dispatch(
                budget_alert_request(
                    user,
                    budget,
                    status,
                    threshold,
                    self.services.config.currency_symbol,
                )
            )

    def _deliver_goal_achieved(self, user_id: int, goal, dispatcher) -> None:
        user = self.services.users.find(user_id)
        if user is None or not user.email:
            return
        dispatcher.dispatch(
            goal_achieved_request(user, goal, self.services.config.currency_symbol)
        )
