# errors.py
"""
Error kinds raised by the log parser and the wish fetcher.

Every error carries a stable ``kind`` so the command layer can tell an
expired authkey apart from a generic API failure.
"""


class WishError(Exception):
    """Base exception for wish history errors."""
    kind = "WishError"


class MissingEnvironmentError(WishError):
    """Raised when the home/profile directory cannot be determined."""
    kind = "EnvironmentError"


class LogNotFoundError(WishError):
    """Raised when no candidate log file exists."""
    kind = "NotFound"


class LogReadError(WishError):
    """Raised when the log file exists but cannot be read."""
    kind = "ReadError"


class PatternNotFoundError(WishError):
    """Raised when the log file holds no wish history URL."""
    kind = "PatternNotFound"


class InvalidUrlError(WishError):
    kind = "InvalidUrl"


class TransportError(WishError):
    """Network failure or non-success HTTP status."""
    kind = "TransportError"


class AuthExpiredError(WishError):
    """Provider answered retcode -101."""
    kind = "AuthExpired"


class ApiError(WishError):
    """Any other non-zero provider retcode."""
    kind = "ApiError"

    def __init__(self, retcode: int, message: str | None = None):
        self.retcode = retcode
        super().__init__(message or f"API error: {retcode}")


class DecodeError(WishError):
    """Response body does not have the expected shape."""
    kind = "DecodeError"
