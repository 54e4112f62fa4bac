"""Tests for logging setup."""

import json
import logging

from heuristic_planner.config import LoggingConfig
from heuristic_planner.utils.logging import (
    PACKAGE_LOGGER,
    StandardFormatter,
    StructuredFormatter,
    get_contextual_logger,
    setup_logging,
    setup_logging_from_config,
)


def make_record(**extra) -> logging.LogRecord:
    record = logging.LogRecord(
        name="heuristic_planner.optimizer",
        level=logging.INFO,
        pathname=__file__,
        lineno=10,
        msg="Collected %d relations",
        args=(3,),
        exc_info=None,
    )
    for key, value in extra.items():
        setattr(record, key, value)
    return record


def test_structured_formatter_emits_json():
    output = StructuredFormatter().format(make_record(extra_fields={"call_id": "abc"}))
    data = json.loads(output)

    assert data["level"] == "INFO"
    assert data["logger"] == "heuristic_planner.optimizer"
    assert data["message"] == "Collected 3 relations"
    assert data["call_id"] == "abc"
    assert "timestamp" in data


def test_standard_formatter_is_readable():
    output = StandardFormatter().format(make_record())
    assert "heuristic_planner.optimizer - INFO - Collected 3 relations" in output


def test_setup_logging_configures_package_logger():
    setup_logging(level="debug", structured=True)
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    assert package_logger.level == logging.DEBUG
    assert package_logger.propagate is False
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, StructuredFormatter)


def test_setup_logging_replaces_previous_handlers(tmp_path):
    log_file = tmp_path / "planner.log"
    setup_logging(level="INFO")
    setup_logging_from_config(LoggingConfig(level="WARNING", log_file=str(log_file)))
    package_logger = logging.getLogger(PACKAGE_LOGGER)

    assert package_logger.level == logging.WARNING
    assert len(package_logger.handlers) == 2

    logging.getLogger("heuristic_planner.test").warning("written to file")
    for handler in package_logger.handlers:
        handler.flush()
    assert "written to file" in log_file.read_text()


def test_unknown_level_falls_back_to_info():
    setup_logging(level="chatty")
    assert logging.getLogger(PACKAGE_LOGGER).level == logging.INFO


def test_contextual_logger_attaches_fields(caplog):
    caplog.set_level(logging.INFO, logger=PACKAGE_LOGGER)
    log = get_contextual_logger("heuristic_planner.test", {"call_id": "1234"})

    log.info("hello")

    record = caplog.records[-1]
    assert record.getMessage() == "hello"
    assert record.extra_fields == {"call_id": "1234"}
