"""
FOCUSFLOW Analytics API - Analytics Errors

Error taxonomy shared by the event stores, the caches and the engine.
An empty dataset is not an error; it is reported as a general insight.
"""


class AnalyticsError(Exception):
    """Base class for analytics failures."""


class InvalidRange(AnalyticsError, ValueError):
    """Raised for a range token outside 7days/30days/90days/all."""

    def __init__(self, token: object):
        self.token = token
        super().__init__(f"Unrecognized time range: {token!r}")


class StoreUnavailable(AnalyticsError):
    """Raised when the event store or the cache store cannot be reached."""

    def __init__(self, operation: str, cause: Exception | None = None):
        self.operation = operation
        self.cause = cause
        message = f"Store unavailable during {operation}"
        if cause is not None:
            message = f"{message}: {cause}"
        super().__init__(message)
