"""
Logging setup and timing helpers shared by calibration, projection and
zone analysis.
"""

import functools
import json
import logging
import logging.config
import sys
import time
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

PACKAGE_LOGGER = 'court_analysis'
LOG_FORMAT = '%(asctime)s | %(levelname)8s | %(name)s | %(message)s'
LOG_DATE_FORMAT = '%H:%M:%S'


def _read_logging_config(config_path: str) -> Dict[str, Any]:
    with open(config_path, 'r') as f:
        if str(config_path).endswith(('.yaml', '.yml')):
            return yaml.safe_load(f) or {}
        return json.load(f)


def _relocate_log_files(config: Dict[str, Any], log_dir: str):
    # Relative handler filenames are placed under log_dir
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    for handler in config.get('handlers', {}).values():
        filename = handler.get('filename')
        if filename and not Path(filename).is_absolute():
            handler['filename'] = str(Path(log_dir) / Path(filename).name)


def setup_logging(config_path: Optional[str] = None, log_dir: Optional[str] = None,
                  level: str = "INFO") -> logging.Logger:
    """
    Configure logging for the package.

    Args:
        config_path: JSON or YAML ``logging.config.dictConfig`` file
        log_dir: Directory for file handlers named in the config
        level: Level used when no configuration file is found

    Returns:
        The package logger
    """
    if config_path and Path(config_path).exists():
        config = _read_logging_config(config_path)
        if log_dir is not None:
            _relocate_log_files(config, log_dir)
        logging.config.dictConfig(config)
    else:
        logging.basicConfig(
            level=getattr(logging, level.upper(), logging.INFO),
            format=LOG_FORMAT,
            datefmt=LOG_DATE_FORMAT,
            stream=sys.stderr
        )

    return logging.getLogger(PACKAGE_LOGGER)


def get_logger(name: str) -> logging.Logger:
    """Logger below the package namespace, e.g. ``court_analysis.dominance``."""
    return logging.getLogger(f'{PACKAGE_LOGGER}.{name}')


def log_performance(operation: str):
    """Decorator that logs the wall time of every call at DEBUG."""
    def decorator(func):
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            logger = get_logger('performance')
            started = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.debug(f"{operation} | {time.perf_counter() - started:.3f}s | "
                             f"status=error | error={type(e).__name__}")
                raise
            logger.debug(f"{operation} | {time.perf_counter() - started:.3f}s | status=success")
            return result
        return wrapper
    return decorator


@contextmanager
def log_operation(operation: str, logger: Optional[logging.Logger] = None, critical: bool = False):
    """Time a block, logging completion at INFO and failures with traceback."""
    logger = logger or logging.getLogger(PACKAGE_LOGGER)
    started = time.perf_counter()
    logger.debug(f"Starting operation: {operation}")

    try:
        yield logger
    except Exception as e:
        elapsed = time.perf_counter() - started
        report = logger.critical if critical else logger.error
        report(f"Operation failed: {operation} ({elapsed:.3f}s) | Error: {e}", exc_info=True)
        raise

    logger.info(f"Operation completed: {operation} ({time.perf_counter() - started:.3f}s)")
