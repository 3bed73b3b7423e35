import atexit
import logging
import weakref
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from concurrent.futures import wait as wait_for_futures
from threading import Lock
from typing import Optional, Set

from gatracker.builders.base import URLBuilder
from gatracker.builders.registry import GoogleAnalyticsVersion, create_builder, resolve_version
from gatracker.dispatch import Dispatcher
from gatracker.environment import populate_from_system
from gatracker.exceptions import InvalidRequestError, NotInitializedError
from gatracker.models.config import ConfigData
from gatracker.models.request import RequestData
from gatracker.schemas.settings import TrackerSettings, load_settings


logger = logging.getLogger(__name__)

DEFAULT_REFERRER_PAGE = "/"

_live_trackers: "weakref.WeakSet[Tracker]" = weakref.WeakSet()


class Tracker:
    """Turns page views and events into Google Analytics tracking beacons.

    If you are making custom calls through make_custom_request, an event needs
    both a category and an action; anything else needs a page URL.

    Requests are built on the calling thread, so invalid input raises right
    away. Sending happens inline or on a background worker depending on the
    ``asynchronous`` flag, and send failures are only ever logged.
    """

    def __init__(
        self,
        config: ConfigData,
        version: GoogleAnalyticsVersion = GoogleAnalyticsVersion.V_4_7_2,
        *,
        asynchronous: bool = True,
        enabled: bool = True,
        dispatcher: Optional[Dispatcher] = None,
        executor: Optional[Executor] = None,
        max_workers: int = 4,
    ) -> None:
        self._config = config
        self._version = resolve_version(version)
        self._builder: Optional[URLBuilder] = create_builder(self._version, config)
        self._dispatcher = dispatcher or Dispatcher()
        self._executor = executor
        self._owns_executor = executor is None
        self._max_workers = max_workers
        self._asynchronous = asynchronous
        self._enabled = enabled
        self._build_lock = Lock()
        self._pending_lock = Lock()
        self._pending: Set[Future] = set()
        self._closed = False
        _live_trackers.add(self)

    @classmethod
    def from_settings(cls, settings: Optional[TrackerSettings] = None, **kwargs) -> "Tracker":
        settings = settings or load_settings()
        config = ConfigData.from_settings(settings)
        if settings.auto_configure:
            populate_from_system(config)
        if "dispatcher" not in kwargs:
            kwargs["dispatcher"] = Dispatcher(timeout=settings.timeout)
        kwargs.setdefault("max_workers", settings.max_workers)
        return cls(
            config,
            asynchronous=settings.asynchronous,
            enabled=settings.enabled,
            **kwargs,
        )

    @property
    def config(self) -> ConfigData:
        return self._config

    @property
    def version(self) -> GoogleAnalyticsVersion:
        return self._version

    @property
    def asynchronous(self) -> bool:
        """If requests are dispatched on a background worker (True by default)."""
        return self._asynchronous

    @asynchronous.setter
    def asynchronous(self, value: bool) -> None:
        self._asynchronous = bool(value)

    @property
    def enabled(self) -> bool:
        """If the tracker dispatches requests at all (True by default)."""
        return self._enabled

    @enabled.setter
    def enabled(self, value: bool) -> None:
        self._enabled = bool(value)

    def reset_session(self) -> None:
        """Start a new analytics session for the following requests."""
        if self._builder is None:
            raise NotInitializedError("Tracker has no URL builder")
        with self._build_lock:
            self._builder.reset_session()

    def track_page_view(
        self, page_url: str, page_title: Optional[str] = None, host_name: Optional[str] = None
    ) -> None:
        self.track_page_view_from_referrer(page_url, page_title, host_name, None, DEFAULT_REFERRER_PAGE)

    def track_page_view_from_referrer(
        self,
        page_url: str,
        page_title: Optional[str],
        host_name: Optional[str],
        referrer_site: Optional[str],
        referrer_page: Optional[str],
    ) -> None:
        """Track a page view reached from ``referrer_site`` + ``referrer_page``."""
        if page_url is None:
            raise InvalidRequestError("Page URL cannot be None, Google will not track the data")
        data = RequestData(page_url=page_url, page_title=page_title, host_name=host_name)
        data.set_referrer(referrer_site, referrer_page)
        self.make_custom_request(data)

    def track_page_view_from_search(
        self,
        page_url: str,
        page_title: Optional[str],
        host_name: Optional[str],
        search_source: Optional[str],
        search_keywords: Optional[str],
    ) -> None:
        """Track a page view reached from a search engine, e.g. ``("google", "python analytics")``."""
        if page_url is None:
            raise InvalidRequestError("Page URL cannot be None, Google will not track the data")
        data = RequestData(page_url=page_url, page_title=page_title, host_name=host_name)
        data.set_search_referrer(search_source, search_keywords)
        self.make_custom_request(data)

    def track_event(
        self,
        category: str,
        action: str,
        label: Optional[str] = None,
        value: Optional[int] = None,
    ) -> None:
        if category is None or action is None:
            raise InvalidRequestError("Events need both a category and an action")
        data = RequestData(
            event_category=category,
            event_action=action,
            event_label=label,
            event_value=value,
        )
        self.make_custom_request(data)

    def make_custom_request(self, data: RequestData) -> None:
        if not self._enabled:
            logger.debug("Tracker is disabled, ignoring tracking request")
            return
        if data is None:
            raise InvalidRequestError("Request data cannot be None")
        if self._builder is None:
            raise NotInitializedError("Tracker has no URL builder")
        with self._build_lock:
            url = self._builder.build_url(data)
            user_agent = self._config.user_agent

        if self._asynchronous:
            self._submit(url, user_agent)
        else:
            self._dispatch(url, user_agent)

    def flush(self, timeout: Optional[float] = None) -> bool:
        """Wait for background dispatches. False if some are still running."""
        with self._pending_lock:
            pending = list(self._pending)
        if not pending:
            return True
        _, not_done = wait_for_futures(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait: bool = True) -> None:
        with self._pending_lock:
            if self._closed:
                return
            self._closed = True
        if wait:
            self.flush()
        if self._owns_executor and self._executor is not None:
            self._executor.shutdown(wait=wait)
        self._executor = None
        self._dispatcher.close()
        _live_trackers.discard(self)

    def __enter__(self) -> "Tracker":
        return self

    def __exit__(self, *args) -> None:
        self.shutdown()

    def _get_executor(self) -> Optional[Executor]:
        with self._pending_lock:
            if self._closed:
                return None
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=self._max_workers, thread_name_prefix="AnalyticsThread"
                )
            return self._executor

    def _submit(self, url: str, user_agent: Optional[str]) -> None:
        executor = self._get_executor()
        if executor is None:
            logger.warning("Tracker is shut down, dispatching request inline")
            self._dispatch(url, user_agent)
            return
        try:
            future = executor.submit(self._dispatch, url, user_agent)
        except RuntimeError:
            logger.warning("Executor rejected tracking request, dispatching inline")
            self._dispatch(url, user_agent)
            return
        with self._pending_lock:
            self._pending.add(future)
        future.add_done_callback(self._discard_pending)

    def _discard_pending(self, future: Future) -> None:
        with self._pending_lock:
            self._pending.discard(future)

    def _dispatch(self, url: str, user_agent: Optional[str]) -> bool:
        try:
            return self._dispatcher.dispatch(url, user_agent=user_agent)
        except Exception:
            logger.exception("Error making tracking request")
            return False

    def __repr__(self) -> str:
        mode = "async" if self._asynchronous else "sync"
        state = "enabled" if self._enabled else "disabled"
        return f"<Tracker {self._config.tracking_code} v{self._version.value} ({mode}, {state})>"


def _shutdown_all() -> None:
    for tracker in list(_live_trackers):
        tracker.shutdown(wait=True)


atexit.register(_shutdown_all)
