import logging
import time

import pytest

from namaz_timer.core import db
from namaz_timer.core.config import Config
from namaz_timer.engine.builder import ScheduleBuilder

from tests.helpers import make_base_times


@pytest.fixture(autouse=True)
def restore_root_logging():
    """NamazTimerApp attaches handlers to the root logger; drop them after each test."""
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield
    for handler in root.handlers[:]:
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    root.setLevel(level)


@pytest.fixture
def base_times():
    return make_base_times()


@pytest.fixture
def schedule(base_times):
    return ScheduleBuilder().build(base_times)


@pytest.fixture
def database(tmp_path):
    db.init_db(db_url=f"sqlite:///{tmp_path / 'test.db'}")
    yield
    db.close_db()


@pytest.fixture
def app_config(tmp_path):
    return Config(data={
        "location": {"latitude": 21.4225, "longitude": 39.8262, "utc_offset": 3},
        "source": {"backend": "astronomical"},
        "cache": {"directory": str(tmp_path / "cache")},
        "database": {"enabled": True, "path": str(tmp_path / "app.db")},
        "logging": {"level": "WARNING"},
    })


@pytest.fixture
def app(app_config):
    from namaz_timer.core.app import NamazTimerApp

    namaz_app = NamazTimerApp(config=app_config)
    yield namaz_app
    db.close_db()


@pytest.fixture
def device_timezone(monkeypatch):
    """Switch this process's local clock to a POSIX TZ rule, e.g. "PKT-5"."""
    if not hasattr(time, "tzset"):
        pytest.skip("time.tzset is not available on this platform")

    def switch(rule):
        monkeypatch.setenv("TZ", rule)
        time.tzset()

    yield switch
    monkeypatch.undo()
    time.tzset()
