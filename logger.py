# logger.py
import logging
import os
import sys
from logging.handlers import RotatingFileHandler

import settings

_configured = False


def setup_logging():
    global _configured
    if _configured:
        return

    level = getattr(logging, settings.LOG_LEVEL, logging.INFO)
    root = logging.getLogger()
    root.setLevel(level)

    formatter = logging.Formatter(
        "%(asctime)s %(levelname)s [%(name)s] %(message)s"
    )

    # Avoid duplicate handlers when embedded (tests, flask reloader)
    if not root.handlers:
        if settings.LOG_TO_STDOUT:
            ch = logging.StreamHandler(sys.stdout)
            ch.setLevel(level)
            ch.setFormatter(formatter)
            root.addHandler(ch)

        if settings.LOG_TO_FILE:
            try:
                os.makedirs(os.path.dirname(settings.LOG_FILE) or ".", exist_ok=True)
                fh = RotatingFileHandler(
                    settings.LOG_FILE,
                    maxBytes=settings.LOG_MAX_BYTES,
                    backupCount=settings.LOG_BACKUPS,
                    encoding="utf-8",
                )
                fh.setLevel(level)
                fh.setFormatter(formatter)
                root.addHandler(fh)
            except OSError as e:
                root.warning("Failed to initialize file logging: %s", e)

    _configured = True


def get_logger(name: str | None = None) -> logging.Logger:
    setup_logging()
    return logging.getLogger(name)
