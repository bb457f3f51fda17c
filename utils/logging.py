"""
Logging for the modeling primer.

Every module asks for its logger through ``setup_logger(__name__)``. The
loggers share one colored stdout format and can be switched to another
level together with ``set_log_level``, which the CLI uses for ``--verbose``.
"""
import logging
import sys
from typing import Dict, Union
import colorlog
from config.config import config

LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "red,bg_white",
}

# Loggers handed out by setup_logger, by name
_loggers: Dict[str, logging.Logger] = {}


def _parse_level(level: Union[str, int]) -> int:
    if isinstance(level, int):
        return level
    return getattr(logging, str(level).upper(), logging.INFO)


def _make_formatter(logging_config) -> logging.Formatter:
    if logging_config["use_color"]:
        return colorlog.ColoredFormatter(
            "%(log_color)s" + logging_config["format"],
            datefmt=logging_config["datefmt"],
            reset=True,
            log_colors=LOG_COLORS,
        )
    return logging.Formatter(logging_config["format"], datefmt=logging_config["datefmt"])


def setup_logger(name):
    """
    Set up and return a logger with the given name.

    pulp's own logger is kept at WARNING unless ``solver.msg`` is enabled,
    so solver chatter only shows up when asked for.

    Args:
        name (str): Name of the logger, usually the module's ``__name__``.

    Returns:
        logging.Logger: Configured logger instance.
    """
    logger = logging.getLogger(name)

    logging_config = config.get_logging_config()
    logger.setLevel(_parse_level(logging_config["level"]))

    if not logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(_make_formatter(logging_config))
        logger.addHandler(handler)

    if not config.get_solver_config()["msg"]:
        logging.getLogger("pulp").setLevel(logging.WARNING)

    _loggers[name] = logger
    return logger


def set_log_level(level: Union[str, int]) -> int:
    """
    Change the level of every logger created so far.

    Args:
        level: Level name ("DEBUG", "info", ...) or numeric level.

    Returns:
        int: The numeric level applied.
    """
    numeric = _parse_level(level)
    for logger in _loggers.values():
        logger.setLevel(numeric)
    return numeric
