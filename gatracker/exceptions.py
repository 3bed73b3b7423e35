class TrackingError(Exception):
    """Base class for errors raised by the tracker."""


class InvalidRequestError(TrackingError, ValueError):
    """The tracking call is missing data required to build a beacon."""


class NotInitializedError(TrackingError, RuntimeError):
    """The tracker has no URL builder bound."""
