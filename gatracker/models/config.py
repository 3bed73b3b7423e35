import random
import time
from dataclasses import dataclass, field
from typing import Optional, TYPE_CHECKING

if TYPE_CHECKING:
    from gatracker.schemas.settings import TrackerSettings


_ID_MAX = 0x7FFFFFFF


def random_id() -> int:
    return random.randint(1, _ID_MAX)


def _now() -> int:
    return int(time.time())


@dataclass
class ConfigData:
    """Tracking parameters shared by every request a tracker sends.

    The visitor id and timestamps are generated on construction. Session
    fields are rotated by the URL builder when a session is reset.
    """

    tracking_code: str
    user_agent: Optional[str] = None
    user_language: Optional[str] = None
    screen_resolution: Optional[str] = None
    color_depth: Optional[str] = None
    encoding: Optional[str] = "UTF-8"
    flash_version: Optional[str] = None
    visitor_id: int = field(default_factory=random_id)
    session_id: int = field(default_factory=random_id)
    timestamp_first: int = field(default_factory=_now)
    timestamp_previous: int = 0
    timestamp_current: int = 0
    visits: int = 1

    def __post_init__(self) -> None:
        if not self.tracking_code:
            raise ValueError("tracking_code is required")
        if not self.timestamp_previous:
            self.timestamp_previous = self.timestamp_first
        if not self.timestamp_current:
            self.timestamp_current = self.timestamp_first

    @classmethod
    def from_settings(cls, settings: "TrackerSettings") -> "ConfigData":
        return cls(tracking_code=settings.tracking_code, user_agent=settings.user_agent)
