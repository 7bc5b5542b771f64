"""Tests for budget threshold breach detection."""

from decimal import Decimal

import pytest

from models.budget import BreachState
from tools.breach import should_notify


def run_sequence(percentages, state=None):
    state = state or BreachState()
    fired = []
    for pct in percentages:
        decision = should_notify(state, pct)
        if decision.fire_80:
            fired.append(("80", pct))
        if decision.fire_100:
            fired.append(("100", pct))
        state = decision.new_state
    return fired, state


class TestShouldNotify:
    """Tests for should_notify."""

    def test_sequence_fires_each_threshold_once(self):
        fired, state = run_sequence([50, 79, 81, 95, 101])

        assert fired == [("80", 81), ("100", 101)]
        assert state == BreachState(notified_at_80=True, notified_at_100=True)

    def test_repeat_at_limit_does_not_refire(self):
        _, state = run_sequence([50, 79, 81, 95, 101])

        decision = should_notify(state, 101)

        assert not decision.fired
        assert decision.new_state == state

    def test_below_warning_keeps_state(self):
        decision = should_notify(BreachState(), Decimal("79.99"))

        assert not decision.fired
        assert decision.new_state == BreachState()

    def test_exactly_80_fires_warning(self):
        decision = should_notify(BreachState(), Decimal("80.00"))

        assert decision.fire_80
        assert not decision.fire_100
        assert decision.new_state == BreachState(notified_at_80=True)

    def test_jump_past_limit_fires_only_limit_alert(self):
        """Going straight to 100% also marks the warning threshold as passed."""
        decision = should_notify(BreachState(), Decimal("100"))

        assert decision.fire_100
        assert not decision.fire_80
        assert decision.new_state == BreachState(notified_at_80=True, notified_at_100=True)

    def test_state_is_not_cleared_when_spending_drops(self):
        """Deleting expenses does not re-arm an alert within the same instance."""
        decision = should_notify(BreachState(notified_at_80=True), 40)

        assert decision.new_state == BreachState(notified_at_80=True)

    def test_limit_fires_after_warning(self):
        decision = should_notify(BreachState(notified_at_80=True), 100)

        assert decision.fire_100
        assert not decision.fire_80

    def test_prior_state_is_not_modified(self):
        prior = BreachState()

        should_notify(prior, 100)

        assert prior == BreachState()

    @pytest.mark.parametrize("pct", [0, 10, "50.5", Decimal("79.999")])
    def test_nothing_fires_below_warning(self, pct):
        assert not should_notify(BreachState(), pct).fired
