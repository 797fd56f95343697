import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

from cpboard.config import Config

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _daily_log_file(log_dir: str) -> Path:
    path = Path(log_dir)
    path.mkdir(parents=True, exist_ok=True)
    return path / f'cpboard_{datetime.now().strftime("%Y%m%d")}.log'


def setup_logger(name: str, log_dir: Optional[str] = None) -> logging.Logger:
    """
    Setup a logger with consistent formatting.

    Console output goes to stderr so stdout stays free for command output.
    A daily file under LOG_DIR is added unless LOG_DIR is empty.
    """
    logger = logging.getLogger(name)

    if logger.handlers:
        return logger

    log_level = logging.DEBUG if Config.DEBUG else logging.INFO
    logger.setLevel(log_level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    logger.addHandler(console_handler)

    log_dir = Config.LOG_DIR if log_dir is None else log_dir
    if log_dir:
        file_handler = logging.FileHandler(_daily_log_file(log_dir), encoding='utf-8')
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
