import os
import sys
import threading
from types import SimpleNamespace
from unittest.mock import MagicMock

sys.path.append(os.path.dirname(os.path.dirname(__file__)))

from gatracker import environment
from gatracker.models.config import ConfigData


def _no_display():
    raise RuntimeError("no display name and no $DISPLAY environment variable")


def test_populate_uses_display_metrics(monkeypatch):
    monkeypatch.setattr(environment, "_read_displays", lambda: [(1920, 1080, 24)])
    config = ConfigData(tracking_code="UA-1-1")

    environment.populate_from_system(config)

    assert config.screen_resolution == "1920x1080"
    assert config.color_depth == "24"
    assert config.encoding
    assert config.user_language


def test_populate_sums_multiple_displays(monkeypatch):
    monkeypatch.setattr(
        environment, "_read_displays", lambda: [(1920, 1080, 24), (1280, 1024, 32)]
    )
    config = ConfigData(tracking_code="UA-1-1")

    environment.populate_from_system(config)

    assert config.screen_resolution == "3200x2104"
    assert config.color_depth == "24, 32"


def test_populate_falls_back_without_display(monkeypatch, caplog):
    monkeypatch.setattr(environment, "_read_displays", _no_display)
    config = ConfigData(tracking_code="UA-1-1")

    with caplog.at_level("DEBUG", logger="gatracker.environment"):
        environment.populate_from_system(config)

    assert config.screen_resolution == environment.DEFAULT_RESOLUTION
    assert config.color_depth == environment.DEFAULT_COLOR_DEPTH
    assert any("No display" in message for message in caplog.messages)


def test_populate_leaves_flash_and_identity_alone(monkeypatch):
    monkeypatch.setattr(environment, "_read_displays", _no_display)
    config = ConfigData(tracking_code="UA-1-1", flash_version="10.1", user_agent="pytest")
    visitor_id = config.visitor_id

    environment.populate_from_system(config)

    assert config.flash_version == "10.1"
    assert config.user_agent == "pytest"
    assert config.visitor_id == visitor_id


def test_user_language_from_locale(monkeypatch):
    monkeypatch.setattr(environment.locale, "getlocale", lambda: ("de_DE", "UTF-8"))
    assert environment._user_language() == "de-DE"

    monkeypatch.setattr(environment.locale, "getlocale", lambda: ("C", None))
    assert environment._user_language() == "en-US"


def test_user_language_from_environment(monkeypatch):
    monkeypatch.setattr(environment.locale, "getlocale", lambda: (None, None))
    monkeypatch.delenv("LC_ALL", raising=False)
    monkeypatch.setenv("LANG", "fr_CA.UTF-8")

    assert environment._user_language() == "fr-CA"


def _monitor(width: int, height: int) -> SimpleNamespace:
    return SimpleNamespace(x=0, y=0, width=width, height=height, is_primary=False)


def test_read_displays_lists_every_monitor(monkeypatch):
    monkeypatch.setattr(
        environment, "get_monitors", lambda: [_monitor(2560, 1440), _monitor(1920, 1080)]
    )
    monkeypatch.setattr(environment, "_screen_depth", lambda: 24)

    assert environment._read_displays() == [(2560, 1440, 24), (1920, 1080, 24)]


def test_populate_aggregates_real_monitor_list(monkeypatch):
    monkeypatch.setattr(
        environment, "get_monitors", lambda: [_monitor(2560, 1440), _monitor(1920, 1080)]
    )
    monkeypatch.setattr(environment, "_screen_depth", lambda: 30)
    config = ConfigData(tracking_code="UA-1-1")

    environment.populate_from_system(config)

    assert config.screen_resolution == "4480x2520"
    assert config.color_depth == "30, 30"


def test_read_displays_without_monitors(monkeypatch):
    monkeypatch.setattr(environment, "get_monitors", lambda: [])
    depth = MagicMock()
    monkeypatch.setattr(environment, "_screen_depth", depth)

    assert environment._read_displays() == []
    depth.assert_not_called()


def test_monitor_lookup_failure_falls_back(monkeypatch):
    monkeypatch.setattr(environment, "get_monitors", _no_display)
    config = ConfigData(tracking_code="UA-1-1")

    environment.populate_from_system(config)

    assert config.screen_resolution == environment.DEFAULT_RESOLUTION
    assert config.color_depth == environment.DEFAULT_COLOR_DEPTH


def test_depth_failure_keeps_monitor_sizes(monkeypatch):
    monkeypatch.setattr(environment, "get_monitors", lambda: [_monitor(1280, 800)])

    def _broken_depth():
        raise RuntimeError("couldn't connect to display")

    monkeypatch.setattr(environment, "_screen_depth", _broken_depth)

    assert environment._read_displays() == [(1280, 800, int(environment.DEFAULT_COLOR_DEPTH))]


def test_screen_depth_asks_tk_on_main_thread(monkeypatch):
    fake_tk = MagicMock()
    root = fake_tk.Tk.return_value
    root.winfo_screendepth.return_value = 24
    monkeypatch.setitem(sys.modules, "tkinter", fake_tk)

    assert environment._screen_depth() == 24
    root.destroy.assert_called_once_with()


def test_screen_depth_never_creates_tk_off_main_thread(monkeypatch):
    fake_tk = MagicMock()
    monkeypatch.setitem(sys.modules, "tkinter", fake_tk)
    results = []

    worker = threading.Thread(target=lambda: results.append(environment._screen_depth()))
    worker.start()
    worker.join(timeout=5)

    assert results == [int(environment.DEFAULT_COLOR_DEPTH)]
    fake_tk.Tk.assert_not_called()
