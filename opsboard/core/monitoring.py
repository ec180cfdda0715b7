import logging

import sentry_sdk
from sentry_sdk.integrations.fastapi import FastApiIntegration

from opsboard.core.config import settings

_initialized = False


def init_monitoring() -> None:
    global _initialized
    if _initialized:
        return
    dsn = settings.SENTRY_DSN
    if dsn:
        sentry_sdk.init(
            dsn=dsn,
            integrations=[FastApiIntegration()],
            traces_sample_rate=0.1,
            profiles_sample_rate=0.0,
            environment=settings.ENV,
            release=f"opsboard@{settings.ENV}",
        )
        logging.getLogger(__name__).info("Sentry initialized")
    _initialized = True
