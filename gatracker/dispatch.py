import logging
from typing import Optional, Tuple

import requests


logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: Tuple[float, float] = (5.0, 10.0)


class Dispatcher:
    """Sends built beacon URLs with a GET and logs the outcome.

    Failures are never raised: a tracking beacon must not break its host.
    """

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        timeout: Tuple[float, float] = DEFAULT_TIMEOUT,
        user_agent: Optional[str] = None,
    ) -> None:
        self._owns_session = session is None
        self._session = session or requests.Session()
        self._timeout = timeout
        self._headers = {"User-Agent": user_agent} if user_agent else {}

    def dispatch(self, url: str, user_agent: Optional[str] = None) -> bool:
        headers = dict(self._headers)
        if user_agent:
            headers["User-Agent"] = user_agent
        try:
            response = self._session.get(
                url,
                headers=headers,
                timeout=self._timeout,
                allow_redirects=True,
            )
        except requests.RequestException as exc:
            logger.warning("Error making tracking request to %s: %s", url, exc)
            return False
        if 200 <= response.status_code < 300:
            logger.debug("Tracking success for url %s", url)
            return True
        logger.warning(
            "Error requesting url %s, received response code %s", url, response.status_code
        )
        return False

    def close(self) -> None:
        if self._owns_session:
            self._session.close()
