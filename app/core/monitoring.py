import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from app.core.config import settings

logger = logging.getLogger(__name__)

_initialized = False


def init_monitoring() -> None:
    global _initialized
    if _initialized:
        return
    dsn = settings.SENTRY_DSN
    if dsn:
        try:
            sentry_sdk.init(
                dsn=dsn,
                integrations=[FastApiIntegration()],
                traces_sample_rate=0.1,
                profiles_sample_rate=0.0,
                environment=settings.ENV,
                release=f"inventory-api@{settings.ENV}",
            )
            logger.info("Sentry initialized")
        except Exception as exc:  # noqa: BLE001
            logger.warning("Failed to init Sentry: %s", exc)
    _initialized = True
