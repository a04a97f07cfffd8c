"""Domain-specific exceptions for the SpendWise record store and engines."""


class SpendWiseError(Exception):
    """Base class for every error raised by SpendWise itself."""


class ValidationError(SpendWiseError, ValueError):
    """Raised when expense fields or engine arguments are malformed."""


class NotFoundError(SpendWiseError, LookupError):
    """Raised when an expense id is not present in the store."""


class NoBaselineError(SpendWiseError, ArithmeticError):
    """Raised when a month-over-month change is requested against a zero previous month."""


class ExternalServiceError(SpendWiseError, RuntimeError):
    """Raised when the insight service fails or answers with an unexpected shape."""
