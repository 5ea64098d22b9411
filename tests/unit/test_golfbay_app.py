import asyncio
import json
import logging
import random

import pytest

import tracking
from golfbay_app import build_services, configure_runtime, run
from logging_config import SESSION_LOGGERS
from tests.helpers import FrozenClock, make_settings


@pytest.fixture
def restore_runtime():
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    yield
    tracking.configure(False)
    for handler in list(root.handlers):
        root.removeHandler(handler)
        if handler not in saved_handlers:
            handler.close()
    for handler in saved_handlers:
        root.addHandler(handler)
    root.setLevel(saved_level)
    for name in SESSION_LOGGERS:
        component = logging.getLogger(name)
        for handler in list(component.handlers):
            component.removeHandler(handler)
            handler.close()


def test_build_services_shares_collaborators():
    clock = FrozenClock()
    services = build_services(make_settings(), clock=clock, rng=random.Random(5))

    assert services.sessions.bay_manager is services.bays
    assert services.bays.clock is clock
    assert services.booking.clock is clock
    assert len(services.bays.bays) == 21


def test_configure_runtime_turns_on_tracking_from_settings(tmp_path, restore_runtime):
    counts = tmp_path / "counts.json"
    settings = make_settings(LOG_DIRECTORY=str(tmp_path / "logs"), FUNCTION_TRACKING_PERSIST="true")

    log_dir = configure_runtime(settings, tracking_file=str(counts))

    assert log_dir == str(tmp_path / "logs")
    assert tracking.is_persisting() is True
    assert "golfbay_app.configure_runtime" in json.loads(counts.read_text())


def test_configure_runtime_leaves_tracking_in_memory_by_default(tmp_path, restore_runtime):
    counts = tmp_path / "counts.json"

    configure_runtime(make_settings(LOG_DIRECTORY=str(tmp_path / "logs")), tracking_file=str(counts))

    assert tracking.is_persisting() is False
    assert not counts.exists()


@pytest.mark.asyncio
async def test_run_starts_and_stops_periodic_tasks():
    settings = make_settings(BAY_UPDATE_INTERVAL="0", SESSION_POLL_INTERVAL="0")
    services = build_services(settings, clock=FrozenClock(), rng=random.Random(5))
    stop_event = asyncio.Event()

    runner = asyncio.ensure_future(run(services, stop_event))
    for _ in range(5):
        await asyncio.sleep(0)
    stop_event.set()
    await runner

    assert services.bays._task.iterations >= 1
    assert services.bays._task.running is False
    assert services.sessions._task.running is False
