import logging

import pytest

from transaction_processor.logging_config import ROOT_LOGGER_NAME


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Undo whatever setup_logging attached during a test"""
    yield
    logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in logger.handlers[:]:
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    logger.propagate = True
