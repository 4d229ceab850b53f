"""Centralized logging configuration for the lineup bot."""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional


def setup_logging(
    log_dir: Optional[Path] = None,
    level: int = logging.INFO,
    log_to_file: bool = True,
    log_to_console: bool = True,
    http_level: int = logging.WARNING,
) -> logging.Logger:
    """
    Configure the 'fba_lineup' logger tree.

    File output uses a detailed format with source locations; console
    output is kept short.

    Args:
        log_dir: Directory for log files (default: ./logs)
        level: Logging level (default: INFO)
        log_to_file: Whether to log to a timestamped file (default: True)
        log_to_console: Whether to log to stdout (default: True)
        http_level: Level for urllib3, which requests logs through
            (default: WARNING, so --verbose shows our debug lines only)

    Returns:
        Configured logger instance

    Example:
        from fba_lineup.logging_config import setup_logging
        logger = setup_logging(log_to_file=False)
        logger.info("Starting season setup")
    """
    logging.getLogger('urllib3').setLevel(http_level)

    logger = logging.getLogger('fba_lineup')
    logger.setLevel(level)
    logger.handlers = []

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S',
    )
    simple_formatter = logging.Formatter('%(levelname)s: %(message)s')

    if log_to_file:
        log_dir = Path(log_dir) if log_dir is not None else Path('logs')
        log_dir.mkdir(parents=True, exist_ok=True)

        log_file = log_dir / f'lineup_{datetime.now().strftime("%Y%m%d_%H%M%S")}.log'
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(level)
        file_handler.setFormatter(detailed_formatter)
        logger.addHandler(file_handler)

    if log_to_console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(level)
        console_handler.setFormatter(simple_formatter)
        logger.addHandler(console_handler)

    return logger
