# postgen/logger.py
import logging
import sys
from typing import Optional

from postgen.config import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

# follow the configured level
_SERVER_LOGGERS = ("uvicorn", "uvicorn.error", "uvicorn.access", "gunicorn.error", "gunicorn.access", "asyncio")
# request-level chatter from the Gemini SDK and its transport; WARNING at least
_CHATTY_LOGGERS = ("httpx", "httpcore", "google_genai")

_configured = False


def _level_from_name(name: str) -> int:
    value = logging.getLevelName(name.upper())
    return value if isinstance(value, int) else logging.INFO


def _install_stdout_handler(root: logging.Logger, level: int, fmt: str) -> None:
    if root.handlers:
        # gunicorn/uvicorn may have attached handlers already; adopt them
        for handler in root.handlers:
            handler.setLevel(level)
            if handler.formatter is None:
                handler.setFormatter(logging.Formatter(fmt))
        return
    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def configure_logging(level: Optional[str] = None, fmt: str = LOG_FORMAT) -> None:
    """Set up stdout logging once per process. LOG_LEVEL decides the level."""
    global _configured
    if _configured:
        return

    level_value = _level_from_name(level or config.log_level)
    root = logging.getLogger()
    root.setLevel(level_value)
    _install_stdout_handler(root, level_value, fmt)

    for name in _SERVER_LOGGERS:
        logging.getLogger(name).setLevel(level_value)
    for name in _CHATTY_LOGGERS:
        logging.getLogger(name).setLevel(max(level_value, logging.WARNING))

    _configured = True


def get_logger(name: Optional[str] = None) -> logging.Logger:
    configure_logging()
    return logging.getLogger(name or "postgen")
