"""
Error taxonomy for the calculator.

Client errors (400/404) carry a specific message for the caller.
Internal errors (500) carry detail for the log only; the HTTP layer
replaces it with GENERIC_ERROR_MESSAGE.
"""

GENERIC_ERROR_MESSAGE = "Subsidy calculation failed. Please try again later."


class SubsidyError(Exception):
    """Base class for everything the calculator raises on purpose."""

    status_code = 500
    public = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def public_message(self) -> str:
        return self.message if self.public else GENERIC_ERROR_MESSAGE


class InvalidRequestError(SubsidyError):
    """Input rejected before any lookup or computation."""

    status_code = 400
    public = True

    def __init__(self, field: str, message: str):
        super().__init__(message)
        self.field = field


class MissingFieldError(InvalidRequestError):
    def __init__(self, field: str):
        super().__init__(field, f"Field '{field}' is required")


class OutOfDomainError(InvalidRequestError):
    def __init__(self, field: str, reason: str):
        super().__init__(field, f"Field '{field}' {reason}")
        self.reason = reason


class RegionNotFoundError(SubsidyError):
    status_code = 404
    public = True

    def __init__(self, region_id):
        super().__init__(f"Region '{region_id}' not found")
        self.region_id = region_id


class RegionDataError(SubsidyError):
    """Reference data is malformed or lacks the constants the active formula needs."""


class StoreUnavailableError(SubsidyError):
    """The reference store could not be read."""


class CalculationFailedError(SubsidyError):
    """Anything unexpected raised while computing; detail is logged, not returned."""
