# File: tests/test_logger.py
import logging

from favicon_stats.logger import LOGGER_NAME, configure, logger


def test_module_logger_is_the_pipeline_logger():
    assert logger.name == LOGGER_NAME
    assert logger.propagate is False


def test_configure_writes_to_log_file(tmp_path):
    log_file = tmp_path / "favicon_stats.log"
    lg = configure(level="DEBUG", log_file=log_file, log_format="%(levelname)s %(message)s")
    assert lg is logging.getLogger(LOGGER_NAME)
    assert len(lg.handlers) == 2

    lg.warning("Could not parse URL for entry: %s", "not a url")
    for handler in lg.handlers:
        handler.flush()
    assert log_file.read_text(encoding="utf-8").strip() == "WARNING Could not parse URL for entry: not a url"


def test_configure_replaces_handlers(tmp_path):
    configure(level="INFO", log_file=tmp_path / "a.log")
    lg = configure(level="ERROR")
    assert len(lg.handlers) == 1
    assert lg.level == logging.ERROR
