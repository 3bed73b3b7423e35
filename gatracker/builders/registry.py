from enum import Enum
from typing import Dict, Type, Union

from gatracker.builders.base import URLBuilder
from gatracker.builders.v4_7_2 import GoogleAnalyticsV4_7_2
from gatracker.models.config import ConfigData


class GoogleAnalyticsVersion(Enum):
    V_4_7_2 = "4.7.2"


_BUILDERS: Dict[GoogleAnalyticsVersion, Type[URLBuilder]] = {
    GoogleAnalyticsVersion.V_4_7_2: GoogleAnalyticsV4_7_2,
}


def resolve_version(version: Union[GoogleAnalyticsVersion, str]) -> GoogleAnalyticsVersion:
    """Look up a supported version by enum member or version string."""
    try:
        resolved = GoogleAnalyticsVersion(version)
    except ValueError:
        resolved = None
    if resolved not in _BUILDERS:
        available = ", ".join(v.value for v in _BUILDERS)
        raise ValueError(f"Unknown Google Analytics version: {version!r}. Available: {available}")
    return resolved


def create_builder(version: Union[GoogleAnalyticsVersion, str], config: ConfigData) -> URLBuilder:
    """Instantiate the URL builder for ``version`` bound to ``config``."""
    return _BUILDERS[resolve_version(version)](config)
