"""
Custom exceptions for the F1 history API.
"""


class F1HistoryError(Exception):
    """Base exception for F1 history retrieval."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR"):
        self.message = message
        self.code = code
        super().__init__(self.message)


class ApiNotReachableError(F1HistoryError):
    """Raised when the Ergast API cannot be reached or answers with an error status."""

    def __init__(self, message: str, status_code: int = 0):
        self.status_code = status_code
        super().__init__(message, "API_NOT_REACHABLE")


class JsonDeserializationError(F1HistoryError):
    """Raised when an Ergast payload does not have the expected shape."""

    def __init__(self, message: str):
        super().__init__(message, "JSON_DESERIALIZATION")


class ResourceNotFoundError(ApiNotReachableError):
    """Raised when the Ergast API answers 404 for a logical resource."""

    def __init__(self, message: str):
        super().__init__(message, 404)
        self.code = "RESOURCE_NOT_FOUND"


class RoundNotFoundError(JsonDeserializationError):
    """Raised when the race table of a round lists no race."""

    def __init__(self, year: int, round: int):
        self.year = year
        self.round = round
        super().__init__(f"No race listed for {year}/{round}")
        self.code = "ROUND_NOT_FOUND"


class CacheError(F1HistoryError):
    """Raised when cache operations fail."""

    def __init__(self, operation: str, error: str):
        self.operation = operation
        self.error = error
        super().__init__(f"Cache {operation} failed: {error}", "CACHE_ERROR")


class LapTimeParseError(F1HistoryError, ValueError):
    """Raised when a lap time string cannot be turned into a time of day."""

    def __init__(self, raw: str, reason: str):
        self.raw = raw
        self.reason = reason
        super().__init__(f"Invalid lap time {raw!r}: {reason}", "LAP_TIME_PARSE_ERROR")
