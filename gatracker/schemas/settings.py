import os
from functools import lru_cache
from typing import Optional

from dotenv import load_dotenv
from pydantic import BaseModel, ConfigDict, Field


class TrackerSettings(BaseModel):
    tracking_code: str
    user_agent: Optional[str] = None
    enabled: bool = True
    asynchronous: bool = True
    connect_timeout: float = Field(default=5.0, gt=0)
    read_timeout: float = Field(default=10.0, gt=0)
    max_workers: int = Field(default=4, ge=1)
    auto_configure: bool = True

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "tracking_code": "UA-12345-1",
                "user_agent": "my-app/1.0",
                "enabled": True,
                "asynchronous": True,
                "connect_timeout": 5.0,
                "read_timeout": 10.0,
                "max_workers": 4,
                "auto_configure": True,
            }
        }
    )

    @property
    def timeout(self) -> tuple:
        return (self.connect_timeout, self.read_timeout)


_ENV_FIELDS = {
    "GA_USER_AGENT": "user_agent",
    "GA_ENABLED": "enabled",
    "GA_ASYNCHRONOUS": "asynchronous",
    "GA_CONNECT_TIMEOUT": "connect_timeout",
    "GA_READ_TIMEOUT": "read_timeout",
    "GA_MAX_WORKERS": "max_workers",
    "GA_AUTO_CONFIGURE": "auto_configure",
}


def settings_from_env() -> TrackerSettings:
    load_dotenv()
    tracking_code = os.getenv("GA_TRACKING_CODE", "").strip()
    if not tracking_code:
        raise RuntimeError("GA_TRACKING_CODE is required")
    values = {"tracking_code": tracking_code}
    for env_name, field_name in _ENV_FIELDS.items():
        raw = os.getenv(env_name)
        if raw is not None and raw.strip():
            values[field_name] = raw.strip()
    return TrackerSettings(**values)


@lru_cache(maxsize=1)
def load_settings() -> TrackerSettings:
    return settings_from_env()
