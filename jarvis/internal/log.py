# jarvis/internal/log.py
import logging
from logging.handlers import RotatingFileHandler
from enum import Enum
from jarvis.config import config
from sys import stdout
from os import path, makedirs


class LogLevel(Enum):
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL


def factory_logger(
    name: str,
    level: LogLevel = LogLevel.INFO,
    file: bool = False,
    max_file_size: int = 10 * 1024 * 1024,
    backup_count: int = 5,
):
    """
    Builds a logger that writes to stdout and, optionally, to a size-rotated file.

    Args:
        name: Logger name, also used as the log file name
        level: Logging level
        file: If True, also log to file in production
        max_file_size: Max bytes per file before rotating (default: 10MB)
        backup_count: Rotated files to keep (default: 5)
    """
    logger = logging.getLogger(name)
    logger.setLevel(level.value)

    # Loggers are process-wide, do not stack handlers
    if logger.handlers:
        return logger

    formatter = logging.Formatter(
        fmt='\n%(asctime)s - %(name)s - %(levelname)s - %(pathname)s:%(lineno)d\n%(message)s\n'
    )

    console_handler = logging.StreamHandler(stdout)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    if not config.production or file:
        logs_dir = config.logs_dir
        if not path.exists(logs_dir):
            makedirs(logs_dir)

        log_filename = path.join(logs_dir, f'{name}.log')

        file_handler = RotatingFileHandler(
            filename=log_filename,
            maxBytes=max_file_size,
            backupCount=backup_count,
            encoding='utf-8',
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
