import os
import logging
from typing import Optional

from ..errors import ConfigError

LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_logging(name: str = "gibberish_detector", level: Optional[str] = None) -> logging.Logger:
    level = (level or os.getenv("GIBDETECT_LOG_LEVEL", "INFO")).upper()
    if level not in LEVELS:
        raise ConfigError(f"Unknown log level {level!r}; expected one of {', '.join(LEVELS)}")
    logging.basicConfig(
        level=level,
        format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    )
    logging.getLogger("gibberish_detector").setLevel(level)
    return logging.getLogger(name)
