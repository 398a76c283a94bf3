"""Logging configuration for insolvency document extraction."""
import logging
import logging.config
from pathlib import Path
from typing import Dict, Any

DEFAULT_LOG_FILENAME = "insolvex_extraction.log"

# Client libraries that log every HTTP request at INFO.
NOISY_LOGGERS = ("google_genai", "httpx", "httpcore")


def get_logging_config(
    logs_folder: Path,
    log_filename: str = DEFAULT_LOG_FILENAME,
    console_level: str = "INFO"
) -> Dict[str, Any]:
    """Build the dictConfig for console (stderr) and file logging.

    The file receives DEBUG output of the ``insolvex`` package; stdout is
    left free for command results.
    """
    logs_folder.mkdir(parents=True, exist_ok=True)

    loggers: Dict[str, Any] = {
        "insolvex": {"level": "DEBUG", "handlers": ["console", "file"], "propagate": False},
    }
    for name in NOISY_LOGGERS:
        loggers[name] = {"level": "WARNING"}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "standard": {"format": "%(asctime)s - %(levelname)s - %(message)s"},
            "detailed": {
                "format": "%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s"
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "level": console_level,
                "formatter": "standard",
                "stream": "ext://sys.stderr",
            },
            "file": {
                "class": "logging.FileHandler",
                "level": "DEBUG",
                "formatter": "detailed",
                "filename": str(logs_folder / log_filename),
                "encoding": "utf-8",
            },
        },
        "root": {"level": "INFO", "handlers": ["console", "file"]},
        "loggers": loggers,
    }


def setup_logging(
    logs_folder: Path,
    log_filename: str = DEFAULT_LOG_FILENAME,
    console_level: str = "INFO"
) -> None:
    """Apply the logging configuration, replacing any root handlers."""
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()

    logging.config.dictConfig(get_logging_config(logs_folder, log_filename, console_level))
