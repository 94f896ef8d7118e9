import logging

import sentry_sdk

logger = logging.getLogger(__name__)


def report_side_effect_failure(action: str, exc: BaseException) -> None:
    """Log and report a failed advisory side effect without re-raising.

    Notification, audio and storage failures never undo the state change
    that triggered them.
    """
    logger.warning("%s failed: %s", action, exc, exc_info=exc)
    sentry_sdk.capture_exception(exc)
