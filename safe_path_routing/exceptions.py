"""
Error kinds raised by the safety-aware routing pipeline.
"""


class SafePathError(Exception):
    """Base class for routing failures that are reported back to the caller."""

    kind = "InternalError"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class InvalidInputError(SafePathError):
    """Missing or malformed origin, destination or profile."""

    kind = "InvalidInput"


class RouteNotFoundError(SafePathError):
    """The path provider found no path between the requested coordinates."""

    kind = "RouteNotFound"


class UpstreamUnavailableError(SafePathError):
    """An external service was unreachable, timed out or is mis-configured."""

    kind = "UpstreamUnavailable"
