import asyncio
import logging
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

import sentry_sdk

from focusloop.config import Settings, settings
from focusloop.services.notification_service import AudioPlayer, LoggingNotifier, Notifier
from focusloop.services.storage_service import build_snapshot_store
from focusloop.services.ticker import Ticker
from focusloop.store import AppStore

logger = logging.getLogger(__name__)


def configure_logging(config: Settings = settings) -> None:
    logging.basicConfig(
        level=config.LOG_LEVEL.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def init_sentry(config: Settings = settings) -> bool:
    if not config.SENTRY_DSN:
        return False
    sentry_sdk.init(
        dsn=config.SENTRY_DSN,
        environment=config.ENVIRONMENT,
        traces_sample_rate=0.2 if config.ENVIRONMENT == "production" else 1.0,
        send_default_pii=False,
    )
    return True


def create_store(
    config: Settings = settings,
    notifier: Notifier | None = None,
    audio: AudioPlayer | None = None,
) -> AppStore:
    """Build a store backed by the configured snapshot storage."""
    return AppStore(
        storage=build_snapshot_store(config),
        notifier=notifier,
        audio=audio,
        key=config.SNAPSHOT_KEY,
    )


@asynccontextmanager
async def lifespan(store: AppStore, config: Settings = settings) -> AsyncIterator[Ticker]:
    """Drive ``store.tick`` once per configured interval for the duration of the block."""
    ticker = Ticker(store.tick, config.TICK_INTERVAL_SECONDS)
    ticker.start()
    logger.info("Timer driver started (every %ss)", config.TICK_INTERVAL_SECONDS)
    try:
        yield ticker
    finally:
        await ticker.stop()
        logger.info("Timer driver stopped")


async def run(config: Settings = settings) -> None:
    configure_logging(config)
    init_sentry(config)
    store = create_store(config, notifier=LoggingNotifier())
    store.request_notification_permission()
    async with lifespan(store, config):
        while True:
            await asyncio.sleep(3600)


if __name__ == "__main__":
    asyncio.run(run())
