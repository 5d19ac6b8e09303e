# peonline/utils/logger.py
"""
Logging setup for the peonline package.

Every module logs through logging.getLogger(__name__), so configuring the
'peonline' logger once covers the clients, the normalizer and the utilities.
"""

import logging
import sys
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .config_loader import PeOnlineConfig

PACKAGE_LOGGER_NAME: str = 'peonline'

LOG_FORMAT: str = '%(asctime)s - %(levelname)-8s - [%(name)s] - %(message)s'
LOG_DATE_FORMAT: str = '%Y-%m-%d %H:%M:%S'


def _make_handler(handler: logging.Handler, level: int) -> logging.Handler:
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
    handler.setLevel(level)
    return handler


def setup_logger(
    logging_level: int = logging.INFO,
    log_file_path: Path | None = None,
    config: 'PeOnlineConfig | None' = None,
) -> logging.Logger:
    """
    Configure the 'peonline' package logger.

    The first call installs a stdout handler and, if a path is given, a file
    handler (its directory is created). Later calls only adjust the levels of
    the installed handlers, so calling this more than once never duplicates
    log lines.

    Args:
        logging_level: Console level. Defaults to INFO.
        log_file_path: Optional log file, written at logging_level.
        config: Loaded configuration. When given, its 'logging' section
               replaces logging_level and log_file_path.

    Returns:
        The logger of this module.

    Example:
        >>> setup_logger(logging.DEBUG)
        >>> setup_logger(config=load_config())
    """
    console_level: int = logging_level
    file_level: int = logging_level

    if config is not None:
        console_level = config.logging.get_console_level_int()
        log_file_path = config.logging.file_path
        file_level = config.logging.get_file_level_int() or console_level

    package_logger: logging.Logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    package_logger.setLevel(min(console_level, file_level))

    if package_logger.handlers:
        for handler in package_logger.handlers:
            is_file: bool = isinstance(handler, logging.FileHandler)
            handler.setLevel(file_level if is_file else console_level)
        return logging.getLogger(__name__)

    package_logger.addHandler(_make_handler(logging.StreamHandler(sys.stdout), console_level))

    if log_file_path is not None:
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        package_logger.addHandler(
            _make_handler(logging.FileHandler(log_file_path, encoding='utf-8'), file_level)
        )
        package_logger.info('Logging to file: %s', log_file_path)

    return logging.getLogger(__name__)
