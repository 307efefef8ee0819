# dashboard_api/logger.py
import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from .config import settings

LOG_FORMAT = '%(asctime)s | %(levelname)-8s | %(name)s | %(message)s'
LOG_DATEFMT = '%Y-%m-%d %H:%M:%S'


def setup_logger(
        name: str = "dashboard_api",
        level: str = "INFO",
        log_dir: Optional[str] = None,
        log_file: str = "dashboard_api.log",
        max_bytes: int = 10 * 1024 * 1024,  # 10 MB
        backup_count: int = 5,
) -> logging.Logger:
    """
    Configures the application logger: console output always, plus a
    rotating file when a log directory is given.
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    formatter = logging.Formatter(LOG_FORMAT, LOG_DATEFMT)

    # Re-importing the module must not stack duplicate handlers
    logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if log_dir:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            filename=Path(log_dir) / log_file,
            maxBytes=max_bytes,
            backupCount=backup_count,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


logger = setup_logger(level=settings.LOG_LEVEL, log_dir=settings.LOG_DIR)
