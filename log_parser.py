# log_parser.py
import os, re, sys
from pathlib import Path

import settings
from errors import (
    LogNotFoundError, LogReadError, MissingEnvironmentError, PatternNotFoundError,
)
from logger import get_logger

logger = get_logger(__name__)

NOT_FOUND_MESSAGE = (
    "Genshin Impact log file not found. Make sure the game is installed "
    "and you've opened wish history at least once."
)
NO_URL_MESSAGE = (
    "Could not find wish history URL in log file. Please open the wish history "
    "in-game, wait for it to load, then try again."
)

# Tried in order; the first pattern with any match wins.
URL_PATTERNS = [
    re.compile(r'https://gs\.hoyoverse\.com/genshin/event/e20190909gacha-v3/(?:log|index\.html)\?[^\s"]+'),
    re.compile(r'https://hk4e-api[^\s"]*gacha[^\s"]+'),
]


def _platform_key(platform: str | None = None) -> str:
    platform = platform or sys.platform
    if platform.startswith("linux"):
        return "linux"
    return platform


def candidate_log_paths(platform: str | None = None, environ=None) -> list:
    """Expand the log path templates for a platform, in probe order."""
    environ = os.environ if environ is None else environ
    key = _platform_key(platform)
    templates = settings.LOG_PATH_CANDIDATES.get(key)
    if templates is None:
        raise LogNotFoundError(f"Unsupported operating system: {key}")

    home_var = settings.HOME_ENV[key]
    home = environ.get(home_var)
    if not home:
        raise MissingEnvironmentError(f"Could not find {home_var} environment variable")
    user = environ.get("USER") or settings.DEFAULT_WINE_USER

    return [Path(t.format(home=home, user=user)) for t in templates]


def find_log_file(platform: str | None = None, environ=None) -> Path:
    # override needs neither a known platform nor HOME
    if settings.LOG_PATH_OVERRIDE:
        override = Path(settings.LOG_PATH_OVERRIDE)
        if override.exists():
            logger.debug("Using log file override %s", override)
            return override
        logger.debug("No log file at override %s", override)
    for path in candidate_log_paths(platform, environ):
        if path.exists():
            logger.debug("Using log file %s", path)
            return path
        logger.debug("No log file at %s", path)
    raise LogNotFoundError(NOT_FOUND_MESSAGE)


def normalize_wish_url(url: str) -> str:
    """Rewrite the /index.html? page variant to the canonical /log? form."""
    return url.replace("/index.html?", "/log?")


def find_latest_url(content: str) -> str | None:
    for pattern in URL_PATTERNS:
        last = None
        for last in pattern.finditer(content):
            pass
        if last is not None:
            return normalize_wish_url(last.group(0))
    return None


def extract_wish_url(log_path) -> str:
    try:
        content = Path(log_path).read_text(encoding="utf-8", errors="replace")
    except OSError as e:
        raise LogReadError(f"Failed to read log file: {e}") from e

    url = find_latest_url(content)
    if url is None:
        raise PatternNotFoundError(NO_URL_MESSAGE)
    logger.info("Found wish history URL in %s", log_path)
    return url


def auto_extract_wish_url() -> str:
    """Locate the game log and pull the most recent wish history URL out of it."""
    return extract_wish_url(find_log_file())
