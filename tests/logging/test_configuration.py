import logging
from typing import Collection

import pytest

from attain._core.actions.loggers import LogFormat, ObjectFormatter, ObjectJsonFormatter, \
                                         ObjectPrefixingJsonFormatter, \
                                         ObjectPrefixingTextFormatter, ObjectTextFormatter, \
                                         configure, make_formatter


def _get_own_handlers(logger: logging.Logger) -> Collection[logging.Handler]:
    return [
        handler for handler in logger.handlers
        if isinstance(handler, logging.StreamHandler) and
           isinstance(handler.formatter, ObjectFormatter)
    ]


def test_own_formatter_is_used():
    configure()
    logger = logging.getLogger()
    own_handlers = _get_own_handlers(logger)
    assert len(own_handlers) == 1


@pytest.mark.parametrize('log_format, log_prefix, expected_cls', [
    (LogFormat.FULL, False, ObjectTextFormatter),
    (LogFormat.PLAIN, False, ObjectTextFormatter),
    ('%(message)s', False, ObjectTextFormatter),
    (LogFormat.FULL, True, ObjectPrefixingTextFormatter),
    (LogFormat.PLAIN, True, ObjectPrefixingTextFormatter),
    ('%(message)s', True, ObjectPrefixingTextFormatter),
    (LogFormat.JSON, False, ObjectJsonFormatter),
    (LogFormat.JSON, True, ObjectPrefixingJsonFormatter),
])
def test_formatter_classes(log_format, log_prefix, expected_cls):
    configure(log_format=log_format, log_prefix=log_prefix)
    logger = logging.getLogger()
    own_handlers = _get_own_handlers(logger)
    assert len(own_handlers) == 1
    assert type(own_handlers[0].formatter) is expected_cls


@pytest.mark.parametrize('log_format, expected_cls', [
    (LogFormat.FULL, ObjectPrefixingTextFormatter),
    (LogFormat.PLAIN, ObjectPrefixingTextFormatter),
    (LogFormat.JSON, ObjectJsonFormatter),
])
def test_default_prefixing_depends_on_the_format(log_format, expected_cls):
    formatter = make_formatter(log_format=log_format, log_prefix=None)
    assert type(formatter) is expected_cls


def test_unsupported_format():
    with pytest.raises(ValueError, match=r"Unsupported log format"):
        make_formatter(log_format=123)


@pytest.mark.parametrize('kwargs, expected_level', [
    (dict(), logging.INFO),
    (dict(quiet=True), logging.WARNING),
    (dict(verbose=True), logging.DEBUG),
    (dict(debug=True), logging.DEBUG),
])
def test_levels(kwargs, expected_level):
    configure(**kwargs)
    assert logging.getLogger().level == expected_level


def test_no_lowlevel_dumps_in_nondebug():
    configure(debug=False)
    asyncio_logger = logging.getLogger('asyncio')
    assert not asyncio_logger.propagate


def test_lowlevel_dumps_in_debug_mode():
    configure(debug=True)
    asyncio_logger = logging.getLogger('asyncio')
    assert asyncio_logger.propagate


def test_log_formats_are_distinct_strings():
    values = [log_format.value for log_format in LogFormat]
    assert all(isinstance(value, str) for value in values)
    assert len(set(values)) == len(values)
    assert LogFormat['JSON'].value == '-json-'
