from abc import ABC, abstractmethod

from gatracker.exceptions import InvalidRequestError
from gatracker.models.config import ConfigData
from gatracker.models.request import RequestData


class URLBuilder(ABC):
    """Builds tracking URLs for one wire-protocol version.

    A builder is bound to a single ConfigData and owns the session cookie
    state stored on it.
    """

    def __init__(self, config: ConfigData) -> None:
        self.config = config

    @property
    @abstractmethod
    def version(self) -> str:
        """Protocol version string sent with every beacon."""

    @abstractmethod
    def build_url(self, request: RequestData) -> str:
        """Return the full beacon URL for ``request``.

        Raises InvalidRequestError if the request cannot produce a valid beacon.
        """

    @abstractmethod
    def reset_session(self) -> None:
        """Start a new session for the next built URL."""

    def validate(self, request: RequestData) -> None:
        if request is None:
            raise InvalidRequestError("Request data cannot be None")
        has_category = request.event_category is not None
        has_action = request.event_action is not None
        if has_category != has_action:
            raise InvalidRequestError("Event tracking must have both a category and an action")
        if request.page_url is None and not request.is_event:
            raise InvalidRequestError(
                "Request needs a page URL or an event category and action"
            )
        if request.event_value is not None:
            try:
                int(request.event_value)
            except (TypeError, ValueError):
                raise InvalidRequestError(
                    f"Event value must be an integer, got {request.event_value!r}"
                ) from None

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} v{self.version} ({self.config.tracking_code})>"
