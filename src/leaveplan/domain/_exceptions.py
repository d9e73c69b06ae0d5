class LeavePlanError(Exception):
    """Base exception for all leave-plan errors."""


class InvalidFractionError(LeavePlanError, ValueError):
    pass


class InvalidDayTypeError(LeavePlanError, ValueError):
    pass


class InvalidDateError(LeavePlanError, ValueError):
    pass


class PlanImportError(LeavePlanError):
    """Raised when an imported or stored plan payload is malformed."""
