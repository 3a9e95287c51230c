"""
Logging setup for zyxel-ies.

Every module logger (zyxel_ies.port, zyxel_ies.slot, ...) and the LogManager
event stream (zyxel_ies.events) sits below the "zyxel_ies" logger, so the
handlers are installed there once. The console handler writes to stderr
because the CLI prints its JSON results on stdout.
"""
import logging
import sys
from pathlib import Path
from logging.handlers import RotatingFileHandler

PACKAGE_LOGGER = "zyxel_ies"
DEFAULT_LOG_FILE = "zyxel_ies.log"
DEFAULT_LOG_DIR = "logs"

CONSOLE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
FILE_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(filename)s:%(lineno)d - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def resolve_level(level) -> int:
    """
    Accepts a logging level number or name ("debug", "INFO", ...).
    """
    if isinstance(level, int) and not isinstance(level, bool):
        return level
    value = logging.getLevelName(str(level).upper())
    if not isinstance(value, int):
        raise ValueError(f"Unknown log level: {level!r}")
    return value


def setup_logging(log_level=logging.INFO, log_file=DEFAULT_LOG_FILE, log_dir=DEFAULT_LOG_DIR,
                  max_bytes=10*1024*1024, backup_count=5):
    """
    Installs a console handler at log_level and a rotating file handler that
    keeps everything down to DEBUG, including the SNMP command lines.
    """
    log_level = resolve_level(log_level)
    log_dir = Path(log_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(PACKAGE_LOGGER)
    logger.setLevel(logging.DEBUG)

    # Replace handlers from an earlier call
    for handler in logger.handlers:
        handler.close()
    logger.handlers = []

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(logging.Formatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))

    file_handler = RotatingFileHandler(log_dir / log_file, maxBytes=max_bytes, backupCount=backup_count)
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(logging.Formatter(FILE_FORMAT, datefmt=DATE_FORMAT))

    logger.addHandler(console_handler)
    logger.addHandler(file_handler)

    return logger


def setup_logging_from_config(config):
    """
    Configures logging from the "logging" section of a ConfigLoader.
    """
    return setup_logging(
        log_level=config.get('logging.level', 'INFO'),
        log_file=config.get('logging.file', DEFAULT_LOG_FILE),
        log_dir=config.get('logging.dir', DEFAULT_LOG_DIR),
        max_bytes=config.get('logging.max_bytes', 10*1024*1024),
        backup_count=config.get('logging.backup_count', 5)
    )
