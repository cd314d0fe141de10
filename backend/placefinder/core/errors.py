"""
Error taxonomy for the Place Finder backend.
Request validation failures are FastAPI's own RequestValidationError.
"""


class PlaceFinderError(Exception):
    """Base class for all application errors"""


class UpstreamError(PlaceFinderError):
    """An LLM or Places call failed. Never surfaced verbatim to the client."""

    def __init__(self, message: str, status: str | None = None):
        super().__init__(message)
        self.status = status


class RateLimitError(PlaceFinderError):
    def __init__(self, retry_after: float, limit: int):
        super().__init__("Too many requests")
        self.retry_after = retry_after
        self.limit = limit


class ConfigurationError(PlaceFinderError):
    """A key required by the requested feature is not configured"""

