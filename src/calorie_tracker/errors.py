"""Application error types."""


class CalorieTrackerError(Exception):
    """Base error carrying a user-facing message."""

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ProfileValidationError(CalorieTrackerError):
    """Raised when submitted biometrics are out of range."""

    def __init__(self, message: str = "invalid age/weight/height") -> None:
        super().__init__(message)


class MealInputError(CalorieTrackerError):
    """Raised when an analysis request has no usable input."""

    def __init__(
        self, message: str = "Please describe your meal or upload an image."
    ) -> None:
        super().__init__(message)


class MealAnalysisError(CalorieTrackerError):
    """Raised when the analysis gateway fails for any reason."""


class ProfileMissingError(CalorieTrackerError):
    """Raised when an operation needs a profile and none is set."""

    def __init__(self, message: str = "No profile has been set up yet.") -> None:
        super().__init__(message)
