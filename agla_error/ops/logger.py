import logging
import sys
from pathlib import Path
from datetime import datetime

from ..config import LoggingConfig

LOGGER_NAME = "agla_error"


def setup_logger(config: LoggingConfig) -> logging.Logger:
    """
    Configures the package logger:
    - Console: configured level
    - File: DEBUG level (<logs_dir>/agla_error_{timestamp}.log), only when logs_dir is set
    """
    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG if config.logs_dir else config.level)

    # Clear existing handlers to avoid duplicates during re-runs or tests
    if logger.handlers:
        for handler in list(logger.handlers):
            handler.close()
        logger.handlers.clear()

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(config.level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if config.logs_dir:
        log_path = Path(config.logs_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        filename = f"{LOGGER_NAME}_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"
        file_handler = logging.FileHandler(log_path / filename, encoding="utf-8")
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
