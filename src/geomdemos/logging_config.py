"""
Logging Configuration
=====================
Turns the ``--log-level`` / ``--log-file`` command-line options into handlers
on the ``geomdemos`` logger.

Why is this file needed?
------------------------
1. One entry point: ``main`` passes the option strings straight through;
   tests call it with plain ``logging`` levels.
2. Library noise: PyVista and VTK log through their own loggers and raise
   deprecation warnings on rendering paths that run every frame. Those
   loggers are held at WARNING unless the app itself runs at DEBUG, and
   Python warnings are routed into the same handlers so they end up in the
   log file instead of on stderr only.
"""
import logging
import sys
from typing import Optional, Union

APP_LOGGER = "geomdemos"
LIBRARY_LOGGERS = ("pyvista", "pyvistaqt", "vtkmodules")
WARNINGS_LOGGER = "py.warnings"

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%H:%M:%S'


def resolve_level(level: Union[int, str]) -> int:
    """Accept ``logging.DEBUG`` as well as ``"debug"`` / ``"DEBUG"``."""
    if isinstance(level, int):
        return level
    mapping = logging.getLevelNamesMapping()
    try:
        return mapping[level.upper()]
    except KeyError:
        raise ValueError(f"Unknown log level {level!r}, expected one of {sorted(mapping)}.") from None


def _reset(logger: logging.Logger) -> None:
    # Re-running the app in the same interpreter must not duplicate output
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


def setup_logging(level: Union[int, str] = logging.INFO, log_file: Optional[str] = None) -> logging.Logger:
    """
    Configure the application logger.

    Args:
        level: Logging level, as a number or a level name.
        log_file: Optional path; the file is truncated on every start.

    Returns:
        The ``geomdemos`` logger.
    """
    level = resolve_level(level)
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    handlers: list[logging.Handler] = [logging.StreamHandler(sys.stdout)]
    if log_file:
        handlers.append(logging.FileHandler(log_file, mode='w', encoding='utf-8'))
    for handler in handlers:
        handler.setLevel(level)
        handler.setFormatter(formatter)

    logger = logging.getLogger(APP_LOGGER)
    _reset(logger)
    logger.setLevel(level)
    for handler in handlers:
        logger.addHandler(handler)

    library_level = level if level <= logging.DEBUG else max(level, logging.WARNING)
    for name in LIBRARY_LOGGERS:
        logging.getLogger(name).setLevel(library_level)

    logging.captureWarnings(True)
    warnings_logger = logging.getLogger(WARNINGS_LOGGER)
    _reset(warnings_logger)
    for handler in handlers:
        warnings_logger.addHandler(handler)

    logger.info(f"Logging initialized at {logging.getLevelName(level)}"
                f"{f', writing to {log_file}' if log_file else ''}.")
    return logger
