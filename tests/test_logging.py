"""Tests for the package logging helpers"""

import logging

from finetune_studio.utils.logging import ROOT_LOGGER_NAME, get_logger, set_level, setup_logger


def test_setup_logger_adds_handlers_once(tmp_path):
    log_file = tmp_path / "service.log"

    logger = setup_logger("finetune_studio_test", level="DEBUG", log_file=str(log_file))
    again = setup_logger("finetune_studio_test", level="DEBUG", log_file=str(log_file))

    assert logger is again
    assert len(logger.handlers) == 2
    assert logger.level == logging.DEBUG

    logger.info("hello")
    for handler in logger.handlers:
        handler.flush()
    assert " - finetune_studio_test - INFO - hello" in log_file.read_text()

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_get_logger_is_child_of_package_logger():
    assert get_logger("finetune_studio.core.files").name == "finetune_studio.core.files"
    assert get_logger("scripts.job").name == f"{ROOT_LOGGER_NAME}.scripts.job"


def test_set_level():
    package_logger = logging.getLogger(ROOT_LOGGER_NAME)
    previous = package_logger.level
    try:
        set_level("warning")
        assert package_logger.level == logging.WARNING
    finally:
        package_logger.setLevel(previous)
