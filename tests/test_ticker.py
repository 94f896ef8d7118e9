import asyncio
import threading
from contextlib import asynccontextmanager
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from focusloop.config import Settings
from focusloop.main import create_store, init_sentry, lifespan, run
from focusloop.schemas.timer import TimerStatus
from focusloop.services.ticker import Ticker


@pytest.mark.asyncio
async def test_ticker_calls_back_until_stopped():
    calls = []
    ticker = Ticker(lambda: calls.append(1), interval=0.01)

    ticker.start()
    ticker.start()
    await asyncio.sleep(0.1)
    await ticker.stop()
    seen = len(calls)
    await asyncio.sleep(0.05)

    assert seen > 0
    assert len(calls) == seen
    assert ticker.is_running is False


@pytest.mark.asyncio
async def test_ticker_survives_callback_errors():
    calls = []

    def flaky():
        calls.append(1)
        if len(calls) == 1:
            raise RuntimeError("boom")

    ticker = Ticker(flaky, interval=0.01)
    ticker.start()
    await asyncio.sleep(0.1)
    await ticker.stop()

    assert len(calls) > 1


@pytest.mark.asyncio
async def test_stop_without_start():
    await Ticker(lambda: None).stop()


@pytest.mark.asyncio
async def test_lifespan_drives_store():
    config = Settings(STORAGE_BACKEND="memory", TICK_INTERVAL_SECONDS=0.01)
    store = create_store(config)
    store.update_settings({"focus_duration": 2, "short_break_duration": 60})
    store.reset_timer()
    store.start_timer()

    async with lifespan(store, config) as ticker:
        assert ticker.is_running
        await asyncio.sleep(0.2)

    assert len(store.sessions) == 1
    assert store.timer_status == TimerStatus.IDLE
    assert ticker.is_running is False


def test_init_sentry_requires_dsn():
    with patch("focusloop.main.sentry_sdk.init") as init:
        assert init_sentry(Settings(SENTRY_DSN="")) is False
        init.assert_not_called()

        assert init_sentry(Settings(SENTRY_DSN="https://key@example.com/1")) is True
        assert init.call_args.kwargs["dsn"] == "https://key@example.com/1"


def test_create_store_uses_configured_key():
    store = create_store(Settings(STORAGE_BACKEND="memory", SNAPSHOT_KEY="custom-slot"))
    store.add_task({"title": "Persisted"})
    assert store.storage.load("custom-slot") is not None


def test_complete_session_ends_running_focus_early(store):
    store.start_timer()
    session = store.complete_session()

    assert session.duration == store.settings.focus_duration
    assert store.current_session_type.value == "shortBreak"


@pytest.mark.asyncio
async def test_ticker_calls_back_on_loop_thread():
    threads = []
    ticker = Ticker(lambda: threads.append(threading.get_ident()), interval=0.01)
    ticker.start()
    await asyncio.sleep(0.05)
    await ticker.stop()

    assert threads
    assert set(threads) == {threading.get_ident()}


@pytest.mark.parametrize("field", ["DAILY_SESSION_GOAL", "TICK_INTERVAL_SECONDS"])
def test_settings_reject_non_positive_values(field):
    with pytest.raises(ValidationError):
        Settings(**{field: 0})


@pytest.mark.asyncio
async def test_run_keeps_restored_timer_status():
    config = Settings(STORAGE_BACKEND="memory")
    store = create_store(config)
    store.start_timer()
    store.pause_timer()

    class Stop(Exception):
        pass

    @asynccontextmanager
    async def stopped_lifespan(store, config):
        raise Stop()
        yield

    with (
        patch("focusloop.main.create_store", return_value=store),
        patch("focusloop.main.lifespan", stopped_lifespan),
        patch("focusloop.main.configure_logging"),
        pytest.raises(Stop),
    ):
        await run(config)

    assert store.timer_status == TimerStatus.PAUSED
