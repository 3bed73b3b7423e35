import locale
import logging
import os
import sys
import threading
from typing import List, Tuple

from screeninfo import get_monitors

from gatracker.models.config import ConfigData


logger = logging.getLogger(__name__)

DEFAULT_RESOLUTION = "1024x768"
DEFAULT_COLOR_DEPTH = "32"


def _system_encoding() -> str:
    return locale.getpreferredencoding(False) or sys.getdefaultencoding()


def _user_language() -> str:
    lang, _ = locale.getlocale()
    if not lang:
        lang = os.environ.get("LC_ALL") or os.environ.get("LANG") or ""
    lang = lang.split(".")[0]
    if not lang or lang in ("C", "POSIX"):
        return "en-US"
    parts = lang.replace("-", "_").split("_")
    language = parts[0].lower()
    if len(parts) == 1:
        return language
    return f"{language}-{parts[1].upper()}"


def _screen_depth() -> int:
    """Bit depth reported by Tk for the default screen.

    Tk is only asked from the main thread; creating a root window elsewhere
    aborts the process on macOS.
    """
    if threading.current_thread() is not threading.main_thread():
        return int(DEFAULT_COLOR_DEPTH)
    import tkinter

    root = tkinter.Tk()
    try:
        root.withdraw()
        return root.winfo_screendepth()
    finally:
        root.destroy()


def _read_displays() -> List[Tuple[int, int, int]]:
    """Return ``(width, height, depth)`` for every attached monitor.

    Raises if there is no windowing environment to ask.
    """
    monitors = get_monitors()
    if not monitors:
        return []
    try:
        depth = _screen_depth()
    except Exception as exc:
        logger.debug("Could not read screen depth, using %s: %s", DEFAULT_COLOR_DEPTH, exc)
        depth = int(DEFAULT_COLOR_DEPTH)
    return [(monitor.width, monitor.height, depth) for monitor in monitors]


def populate_from_system(config: ConfigData) -> ConfigData:
    """Fill encoding, language, screen resolution and color depth from the host.

    Flash version cannot be detected and is left alone.
    """
    config.encoding = _system_encoding()
    config.user_language = _user_language()

    try:
        displays = _read_displays()
    except Exception as exc:
        logger.debug("No display available, using default screen metrics: %s", exc)
        displays = []

    width = sum(display[0] for display in displays)
    height = sum(display[1] for display in displays)
    if displays and width and height:
        config.screen_resolution = f"{width}x{height}"
        config.color_depth = ", ".join(str(display[2]) for display in displays)
    else:
        config.screen_resolution = DEFAULT_RESOLUTION
        config.color_depth = DEFAULT_COLOR_DEPTH
    return config
