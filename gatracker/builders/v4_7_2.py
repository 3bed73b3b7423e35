import logging
import random
import time
from typing import List, Optional, Tuple
from urllib.parse import urlencode

from gatracker.builders.base import URLBuilder
from gatracker.models.config import ConfigData, random_id
from gatracker.models.request import RequestData


logger = logging.getLogger(__name__)

URL_PREFIX = "http://www.google-analytics.com/__utm.gif"

# utme values use GA's own escaping for its delimiters
_X10_ESCAPES = (("'", "'0"), (")", "'1"), ("*", "'2"), ("!", "'3"))


def domain_hash(host_name: Optional[str]) -> int:
    """Classic ga.js hash of the cookie domain, 1 when there is no domain."""
    if not host_name:
        return 1
    value = 0
    for char in reversed(host_name):
        code = ord(char)
        value = ((value << 6) & 0xFFFFFFF) + code + (code << 14)
        high = value & 0xFE00000
        if high:
            value ^= high >> 21
    return value


def _escape_x10(value: str) -> str:
    for raw, escaped in _X10_ESCAPES:
        value = value.replace(raw, escaped)
    return value


class GoogleAnalyticsV4_7_2(URLBuilder):
    """``__utm.gif`` layout used by ga.js 4.7.2."""

    version = "4.7.2"

    def __init__(self, config: ConfigData, rng: Optional[random.Random] = None) -> None:
        super().__init__(config)
        self._random = rng or random.Random()

    def reset_session(self) -> None:
        config = self.config
        now = int(time.time())
        config.session_id = random_id()
        config.timestamp_previous = config.timestamp_current
        config.timestamp_current = now
        config.visits += 1
        logger.debug("Reset analytics session for %s, visit %d", config.tracking_code, config.visits)

    def build_url(self, request: RequestData) -> str:
        self.validate(request)
        return f"{URL_PREFIX}?{urlencode(self.build_params(request))}"

    def build_params(self, request: RequestData) -> List[Tuple[str, str]]:
        config = self.config
        params: List[Tuple[str, str]] = [
            ("utmwv", self.version),
            ("utmn", str(self._random.randint(1, 0x7FFFFFFF))),
        ]
        if request.host_name is not None:
            params.append(("utmhn", request.host_name))
        if request.is_event:
            params.append(("utmt", "event"))
            params.append(("utme", self._event_value(request)))
        params.append(("utmcs", config.encoding or "-"))
        if config.screen_resolution is not None:
            params.append(("utmsr", config.screen_resolution))
        if config.color_depth is not None:
            params.append(("utmsc", config.color_depth))
        if config.user_language is not None:
            params.append(("utmul", config.user_language))
        params.append(("utmje", "1"))
        if config.flash_version is not None:
            params.append(("utmfl", config.flash_version))
        if request.page_title is not None:
            params.append(("utmdt", request.page_title))
        params.append(("utmhid", str(config.session_id)))
        params.append(("utmr", request.referrer or "-"))
        if request.page_url is not None:
            params.append(("utmp", request.page_url))
        params.append(("utmac", config.tracking_code))
        params.append(("utmcc", self._cookie_value(request)))
        return params

    def _event_value(self, request: RequestData) -> str:
        parts = [request.event_category, request.event_action]
        if request.event_label is not None:
            parts.append(request.event_label)
        value = "5(" + "*".join(_escape_x10(str(part)) for part in parts) + ")"
        if request.event_value is not None:
            value += f"({int(request.event_value)})"
        return value

    def _cookie_value(self, request: RequestData) -> str:
        config = self.config
        host_hash = domain_hash(request.host_name)
        utma = ".".join(
            str(part)
            for part in (
                host_hash,
                config.visitor_id,
                config.timestamp_first,
                config.timestamp_previous,
                config.timestamp_current,
                config.visits,
            )
        )
        campaign = [
            f"utmcsr={request.campaign_source}",
            f"utmccn={request.campaign_name}",
            f"utmcmd={request.campaign_medium}",
        ]
        if request.campaign_term is not None:
            campaign.append(f"utmctr={request.campaign_term}")
        if request.campaign_content is not None:
            campaign.append(f"utmcct={request.campaign_content}")
        utmz = f"{host_hash}.{config.timestamp_current}.{config.visits}.1." + "|".join(campaign)
        return f"__utma={utma};+__utmz={utmz};"
