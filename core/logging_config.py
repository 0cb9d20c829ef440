"""Root logger setup shared by the backend, the UI and the launcher."""

import logging

from core.settings import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def configure_logging(level: str = None) -> None:
    global _configured
    if _configured:
        return
    level_name = (level or get_settings().log_level).upper()
    logging.basicConfig(level=getattr(logging, level_name, logging.INFO), format=LOG_FORMAT)
    _configured = True
