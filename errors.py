"""Error types raised by the budget tracking core.

Validation errors subclass ValueError so callers that only care about
"bad input" can catch them generically. NotFoundError maps to a 404 in the
REST layer; DivisionInvariantError signals a programming error upstream.
"""


class SpendwiseError(Exception):
    """Base class for all Spendwise errors."""


class InvalidPeriodError(SpendwiseError, ValueError):
    """A period token or custom range is malformed or incomplete."""


class InvalidAmountError(SpendwiseError, ValueError):
    """An amount is non-numeric, non-finite, or negative where disallowed."""


class InvalidCategoryError(SpendwiseError, ValueError):
    """A category does not fit the record it is attached to."""


class DivisionInvariantError(SpendwiseError, RuntimeError):
    """A non-positive budget amount or goal target reached evaluation."""


class NotFoundError(SpendwiseError, LookupError):
    """A budget, goal, category or user is missing or not owned by the caller."""

    def __init__(self, entity: str, entity_id):
        super().__init__(f"{entity} with ID {entity_id} not found")
        self.entity = entity
        self.entity_id = entity_id


class ConcurrentModificationError(SpendwiseError, RuntimeError):
    """A versioned write lost a race with another writer."""

    def __init__(self, entity: str, entity_id, expected_version: int):
        super().__init__(
            f"{entity} {entity_id} was modified concurrently "
            f"(expected version {expected_version})"
        )
        self.entity = entity
        self.entity_id = entity_id
        self.expected_version = expected_version
