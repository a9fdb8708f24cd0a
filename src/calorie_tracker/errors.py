"""Error types shared across the calorie tracker core."""


class CalorieTrackerError(Exception):
    """Base error for the calorie tracker."""


class ValidationError(CalorieTrackerError, ValueError):
    """Raised when input is rejected before any state is mutated."""


class PersistenceError(CalorieTrackerError):
    """Raised when a store snapshot could not be loaded or saved."""

    def __init__(self, message: str, key: str | None = None) -> None:
        super().__init__(message)
        self.key = key


class MealAnalysisError(CalorieTrackerError):
    """Raised when the meal analysis service cannot produce a meal.

    ``code`` is one of NETWORK, SERVER, DECODE or NOT_FOOD. For NOT_FOOD,
    ``validation_error`` holds the service's explanation, if any.
    """

    NETWORK = "NETWORK"
    SERVER = "SERVER"
    DECODE = "DECODE"
    NOT_FOOD = "NOT_FOOD"

    def __init__(
        self, message: str, code: str, validation_error: str | None = None
    ) -> None:
        super().__init__(message)
        self.code = code
        self.validation_error = validation_error
