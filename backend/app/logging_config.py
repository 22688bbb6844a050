import logging

from .config import LOG_LEVEL


def configure_logging() -> None:
    """Configure process-wide logging once.

    Format carries time, level, logger name and message. Uvicorn installs its own
    handlers on its loggers, so only the root logger is touched here.
    """
    if logging.getLogger().handlers:
        # Already configured (avoid duplicate handlers on reload)
        return
    fmt = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
    logging.basicConfig(level=LOG_LEVEL, format=fmt)
