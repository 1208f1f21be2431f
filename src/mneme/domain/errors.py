"""Error taxonomy for the scheduling core and its collaborators."""


class ValidationError(ValueError):
    """A review event field lies outside its declared domain."""

    def __init__(self, field: str, value: object, expected: str):
        self.field = field
        self.value = value
        super().__init__(f"Invalid {field}={value!r}: expected {expected}")


class PersistenceError(Exception):
    """Raised by history providers and schedule stores when I/O fails."""


class StaleScheduleError(PersistenceError):
    """
    A conditional upsert lost against a newer schedule.

    The writer expected the stored record to be at ``expected_repetitions``
    but found something else; the caller should re-read and recompute.
    """

    def __init__(self, user_id: str, concept_id: str, expected_repetitions: int):
        self.user_id = user_id
        self.concept_id = concept_id
        self.expected_repetitions = expected_repetitions
        super().__init__(
            f"Schedule for user={user_id} concept={concept_id} changed "
            f"(expected repetitions={expected_repetitions})"
        )
