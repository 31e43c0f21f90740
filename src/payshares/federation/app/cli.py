import os
import logging
from logging.config import dictConfig
import json

import sentry_sdk

from payshares.federation.app.config import Settings


def configure_logging(settings: Settings) -> None:
    logging_config_file = os.getenv("LOGGING_CONFIG_FILE", "")

    if len(logging_config_file) > 0:
        with open(logging_config_file) as fl:
            dictConfig(json.load(fl))
        return

    logging.basicConfig()
    logging.getLogger().setLevel(logging.DEBUG if settings.debug else logging.INFO)


def configure_sentry(settings: Settings) -> bool:
    """Initialise error reporting when a Sentry DSN is configured."""
    if settings.sentry_dsn is None:
        return False
    sentry_sdk.init(dsn=settings.sentry_dsn, send_default_pii=False)
    return True
