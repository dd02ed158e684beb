import logging

import pytest

from attain._core.actions.loggers import ObjectFormatter


@pytest.fixture(autouse=True)
def _caplog_all_levels(caplog):
    caplog.set_level(0)


@pytest.fixture(autouse=True)
def _clear_own_handlers():
    logger = logging.getLogger()
    original_level = logger.level
    logger.handlers[:] = [
        handler for handler in logger.handlers
        if not isinstance(handler, logging.StreamHandler) or
           not isinstance(handler.formatter, ObjectFormatter)
    ]
    original_handlers = logger.handlers[:]
    asyncio_logger = logging.getLogger('asyncio')
    asyncio_propagate = asyncio_logger.propagate
    asyncio_handlers = asyncio_logger.handlers[:]
    yield
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)
    asyncio_logger.propagate = asyncio_propagate
    asyncio_logger.handlers[:] = asyncio_handlers
