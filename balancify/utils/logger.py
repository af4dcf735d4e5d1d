import logging
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

from ..config import get_settings


def setup_logger(name: str = "balancify", log_file: Optional[str] = None, level: str = "INFO") -> logging.Logger:
    """Configures and returns a logger with a console handler and an optional rotating file handler."""

    logger = logging.getLogger(name)
    logger.setLevel(level)

    if logger.hasHandlers():
        return logger

    formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Console Handler
    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    # File Handler (Rotating), only when LOG_FILE is configured
    if log_file:
        file_handler = RotatingFileHandler(
            log_file,
            maxBytes=5*1024*1024, # 5 MB
            backupCount=3,
            encoding='utf-8'
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


_settings = get_settings()

# Global application logger
app_logger = setup_logger("balancify", log_file=_settings.log_file, level=_settings.log_level)
