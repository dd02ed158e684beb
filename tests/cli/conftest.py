import functools
import logging

import click.testing
import pytest

from attain.cli import main


@pytest.fixture(autouse=True)
def _restore_logging():
    logger = logging.getLogger()
    original_level = logger.level
    original_handlers = logger.handlers[:]
    asyncio_logger = logging.getLogger('asyncio')
    asyncio_propagate = asyncio_logger.propagate
    asyncio_handlers = asyncio_logger.handlers[:]
    yield
    logger.handlers[:] = original_handlers
    logger.setLevel(original_level)
    asyncio_logger.propagate = asyncio_propagate
    asyncio_logger.handlers[:] = asyncio_handlers


@pytest.fixture()
def runner():
    runner = click.testing.CliRunner()
    return runner


@pytest.fixture()
def invoke(runner):
    return functools.partial(runner.invoke, main)


@pytest.fixture()
def real_wait(mocker):
    return mocker.patch('attain._core.engines.conditions.wait_for_condition')


@pytest.fixture()
def real_scale(mocker):
    return mocker.patch('attain._core.engines.scaling.scale_and_converge')
