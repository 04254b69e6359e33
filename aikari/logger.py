"""Coloured console logging shared by all modules."""

from __future__ import annotations

import logging
import sys

TRACE = 5
logging.addLevelName(TRACE, "TRACE")

LOGGER_NAME = "aikari"

_HEAD = "\033[0;36m<Aikari>\033[0m"
_LOCATION_COLOR = "\033[0;33m"
_RESET = "\033[0m"
_LEVEL_TAGS = {
    TRACE: "\033[0;30m\033[42m|TRACE|\033[0m",
    logging.DEBUG: "\033[0;30m\033[47m|DEBUG|\033[0m",
    logging.INFO: "\033[0;37m\033[46m|INFO|\033[0m",
    logging.WARNING: "\033[0;30m\033[43m|WARN|\033[0m",
    logging.ERROR: "\033[0;37m\033[41m|ERROR|\033[0m",
    logging.CRITICAL: "\033[0;37m\033[45m|CRITICAL|\033[0m",
}


def module_section(module_name: str, text_color: int, bg_color: int) -> str:
    """Build the coloured tag that names the logging module."""
    return f"\033[0;{text_color}m\033[{bg_color}m|{module_name}|\033[0m"


class AikariFormatter(logging.Formatter):
    """Formats records with a coloured level tag and the module section.

    Records whose level is not one of the six known levels format to an
    empty string.
    """

    def __init__(self, module_section: str) -> None:
        super().__init__(datefmt="%Y-%m-%d %H:%M:%S")
        self.module_section = module_section

    def format(self, record: logging.LogRecord) -> str:
        level_tag = _LEVEL_TAGS.get(record.levelno)
        if level_tag is None:
            return ""
        timestamp = self.formatTime(record, self.datefmt)
        text = (
            f"{_HEAD} [{timestamp}] {self.module_section} {level_tag} "
            f"@ {_LOCATION_COLOR}/{record.filename}:{record.lineno}/{_RESET} "
            f"{record.getMessage()}"
        )
        if record.exc_info:
            text += "\n" + self.formatException(record.exc_info)
        return text


def get_logger() -> logging.Logger:
    """Return the shared logger."""
    return logging.getLogger(LOGGER_NAME)


def init_logger(module_name: str, text_color: int, bg_color: int) -> logging.Logger:
    """Configure the shared logger to write coloured lines to stdout."""
    logger = get_logger()
    for handler in list(logger.handlers):
        logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stdout)
    handler.setLevel(TRACE)
    handler.setFormatter(
        AikariFormatter(module_section(module_name, text_color, bg_color))
    )
    logger.addHandler(handler)
    logger.setLevel(TRACE)
    logger.propagate = False

    logger.info("📃 Logger for module %s initialized!", module_name)
    return logger