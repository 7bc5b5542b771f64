"""Budget threshold breach detection.

Pure edge detection over explicit state: callers pass the state they
persisted last time and store the state returned here. Delivery policy
(budget or user opt-outs) is the caller's concern.
"""

from dataclasses import dataclass
from decimal import Decimal
from models.budget import BreachState

WARNING_THRESHOLD = Decimal(80)
LIMIT_THRESHOLD = Decimal(100)


@dataclass(frozen=True)
class BreachDecision:
    fire_80: bool
    fire_100: bool
    new_state: BreachState

    @property
    def fired(self) -> bool:
        return self.fire_80 or self.fire_100


def should_notify(prior_state: BreachState, percentage_used) -> BreachDecision:
    """Decide which threshold alerts a new evaluation triggers.

    Each threshold fires at most once until the state is reset. Jumping
    straight past 100% fires only the 100% alert and marks the 80%
    threshold as passed.

    Args:
        prior_state: Alert state persisted after the previous evaluation.
        percentage_used: Current consumption percentage.

    Returns:
        BreachDecision with the state to persist.
    """
    pct = Decimal(str(percentage_used))

    fire_100 = pct >= LIMIT_THRESHOLD and not prior_state.notified_at_100
    fire_80 = (
        WARNING_THRESHOLD <= pct < LIMIT_THRESHOLD
        and not prior_state.notified_at_80
    )

    new_state = BreachState(
        notified_at_80=prior_state.notified_at_80 or pct >= WARNING_THRESHOLD,
        notified_at_100=prior_state.notified_at_100 or pct >= LIMIT_THRESHOLD,
    )

    return BreachDecision(fire_80=fire_80, fire_100=fire_100, new_state=new_state)
