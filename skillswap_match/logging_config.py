"""
Logging setup for SkillSwap Match Engine

Handlers live on the package logger; module loggers propagate to it, so a
log file is opened and rotated by exactly one handler.
"""

import logging
import sys
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

from .config.settings import SERVICE_CONFIG

PACKAGE_LOGGER = "skillswap_match"


def get_formatter(use_json: bool, service: str) -> logging.Formatter:
    if use_json:
        return JsonFormatter(
            "%(asctime)s %(levelname)s %(name)s %(message)s",
            rename_fields={"levelname": "level"},
            static_fields={
                "service": service,
                "environment": SERVICE_CONFIG["environment"],
            },
        )
    return logging.Formatter(
        fmt=f"%(asctime)s | %(levelname)s | %(name)s | [svc={service}] | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_package_logger(
    log_file: Optional[str] = SERVICE_CONFIG["log_file"],
    level: str = SERVICE_CONFIG["log_level"],
    use_json: bool = SERVICE_CONFIG["use_json_logging"],
    service: str = SERVICE_CONFIG["name"],
) -> logging.Logger:
    """
    (Re)builds the package logger: a stdout handler and an optional rotating file handler
    """
    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(level)
    logger.propagate = False

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = get_formatter(use_json, service)

    stream_handler = logging.StreamHandler(sys.stdout)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_file:
        log_dir = Path(SERVICE_CONFIG["log_dir"])
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = RotatingFileHandler(
            str(log_dir / log_file), maxBytes=10 * 1024 * 1024, backupCount=5
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger


def setup_logger(name: str, level: str = SERVICE_CONFIG["log_level"]) -> logging.Logger:
    """
    Returns a module logger under the package logger, configuring the latter on first use
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    if not package_logger.handlers:
        configure_package_logger()

    if name != PACKAGE_LOGGER and not name.startswith(PACKAGE_LOGGER + "."):
        name = f"{PACKAGE_LOGGER}.{name}"

    logger = logging.getLogger(name)
    if logger is not package_logger:
        logger.setLevel(level)
        logger.propagate = True
    return logger
