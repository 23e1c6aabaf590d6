import logging
import warnings

import numpy as np
import pytest

from geomdemos.errors import InvalidParameterError, require_int
from geomdemos.logging_config import (
    APP_LOGGER, LIBRARY_LOGGERS, WARNINGS_LOGGER, resolve_level, setup_logging
)


@pytest.fixture
def clean_logging():
    yield
    logging.captureWarnings(False)
    for name in (APP_LOGGER, WARNINGS_LOGGER):
        logger = logging.getLogger(name)
        for handler in list(logger.handlers):
            logger.removeHandler(handler)
            handler.close()
    for name in (APP_LOGGER, *LIBRARY_LOGGERS):
        logging.getLogger(name).setLevel(logging.NOTSET)


def test_setup_logging_does_not_duplicate_handlers(tmp_path, clean_logging):
    log_file = tmp_path / "demo.log"
    setup_logging(level=logging.DEBUG)
    logger = setup_logging(level=logging.DEBUG, log_file=str(log_file))
    assert logger is logging.getLogger(APP_LOGGER)
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG
    logging.getLogger("geomdemos.model").debug("hello from the model")
    for handler in logger.handlers:
        handler.flush()
    assert "hello from the model" in log_file.read_text(encoding="utf-8")


@pytest.mark.parametrize("name, level", [
    ("DEBUG", logging.DEBUG), ("info", logging.INFO), ("Warning", logging.WARNING), (logging.ERROR, logging.ERROR),
])
def test_resolve_level(name, level):
    assert resolve_level(name) == level


def test_resolve_level_rejects_unknown_name():
    with pytest.raises(ValueError):
        resolve_level("chatty")


def test_level_name_from_command_line(clean_logging):
    logger = setup_logging("warning")
    assert logger.level == logging.WARNING


def test_library_loggers_held_at_warning(clean_logging):
    setup_logging("INFO")
    for name in LIBRARY_LOGGERS:
        assert logging.getLogger(name).level == logging.WARNING


def test_library_loggers_follow_debug(clean_logging):
    setup_logging("DEBUG")
    for name in LIBRARY_LOGGERS:
        assert logging.getLogger(name).level == logging.DEBUG


def test_python_warnings_reach_the_log_file(tmp_path, clean_logging):
    log_file = tmp_path / "demo.log"
    setup_logging("INFO", log_file=str(log_file))
    with warnings.catch_warnings():
        warnings.simplefilter("always")
        warnings.warn("render path is deprecated", DeprecationWarning)
    for handler in logging.getLogger(WARNINGS_LOGGER).handlers:
        handler.flush()
    assert "render path is deprecated" in log_file.read_text(encoding="utf-8")


def test_invalid_parameter_error_message():
    error = InvalidParameterError("base", 1, "base must be at least 2")
    assert isinstance(error, ValueError)
    assert error.name == "base"
    assert error.value == 1
    assert str(error) == "Invalid base=1: base must be at least 2"


@pytest.mark.parametrize("value", [3, np.int64(3)])
def test_require_int_accepts_integers(value):
    assert require_int("n", value) == 3


@pytest.mark.parametrize("value", [2.5, 3.0, True, "3", None])
def test_require_int_rejects_other_types(value):
    with pytest.raises(InvalidParameterError) as info:
        require_int("n", value)
    assert info.value.name == "n"
