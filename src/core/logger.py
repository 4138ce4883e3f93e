import logging
import sys
from typing import Optional

LOG_FORMAT = "[%(asctime)s] [%(levelname)s] [%(name)s] %(message)s"
DATE_FORMAT = "%H:%M:%S"


def configure_logging(level: str = "INFO") -> None:
    """Install a single stdout handler on the root logger."""
    root = logging.getLogger()
    root.setLevel(level.upper())

    for handler in root.handlers:
        if getattr(handler, "_posts_api", False):
            return

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(logging.Formatter(LOG_FORMAT, DATE_FORMAT))
    handler._posts_api = True  # type: ignore[attr-defined]
    root.addHandler(handler)


def get_logger(name: str, logger: Optional[logging.Logger] = None) -> logging.Logger:
    """Return the injected logger, or a module logger when none was given."""
    return logger if logger is not None else logging.getLogger(name)
