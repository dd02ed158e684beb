import json
import logging
import re
from unittest.mock import AsyncMock, MagicMock

import pytest

from attain._cogs.clients.auth import APIContext, context_var
from attain._cogs.configs.configuration import AttainSettings
from attain._cogs.structs.credentials import ConnectionInfo
from attain._cogs.structs.references import Locator, NamespaceName, Resource


@pytest.fixture()
def settings():
    return AttainSettings()


@pytest.fixture()
def logger():
    return logging.getLogger('attain.tests.fake.logger')


@pytest.fixture()
def resource():
    """ The resource used in the tests. Usually mocked, so it does not matter. """
    return Resource('extensions.gardener.cloud', 'v1alpha1', 'infrastructures',
                    kind='Infrastructure', namespaced=True)


@pytest.fixture()
def cluster_resource():
    """ The resource used in the tests. Usually mocked, so it does not matter. """
    return Resource('extensions.gardener.cloud', 'v1alpha1', 'clusters',
                    kind='Cluster', namespaced=False)


@pytest.fixture()
def namespace():
    return NamespaceName('shoot--dev--local')


@pytest.fixture()
def locator(resource, namespace):
    return Locator(resource=resource, namespace=namespace, name='local')


@pytest.fixture()
def sequence():
    """
    A factory of side effects for the mocks: return/raise the values in order.

    The last value is repeated forever, so that the polled mocks never run out
    of values regardless of how many poll attempts are made.

    Sample usage::

        def test_me(sequence):
            reader = Mock(read_obj=AsyncMock(side_effect=sequence(body1, error, body2)))
    """
    def sequence_maker(*values):
        remaining = list(values)

        def effect(*_, **__):
            value = remaining.pop(0) if len(remaining) > 1 else remaining[0]
            if isinstance(value, BaseException):
                raise value
            return value

        return effect
    return sequence_maker


#
# Mocks for Kubernetes API clients. Reasons:
# 1. We do not test the aiohttp client, we test the layers on top of it,
#    so everything low-level should be mocked and assumed to be functional.
# 2. No external calls must be made under any circumstances.
#    The unit-tests must be fully isolated from the environment.
#

@pytest.fixture()
def hostname():
    """ A fake hostname to be used in all aiohttp/aresponses tests. """
    return 'fake-host'


@pytest.fixture()
def fake_context(hostname):
    """
    Provide a freshly created API context for every test, as `connected()` does.

    The fixture is synchronous, so that the context var is visible in the tests.
    The session is closed by `api_context` (it needs the event loop for that).
    """
    info = ConnectionInfo(server=f'https://{hostname}')
    context = APIContext(info)
    token = context_var.set(context)
    try:
        yield context
    finally:
        context_var.reset(token)


@pytest.fixture()
async def api_context(fake_context):
    yield fake_context
    await fake_context.close()


@pytest.fixture()
def resp_mocker(api_context, aresponses):
    """
    A factory of server-side callbacks for `aresponses` with mocking/spying.

    The value of the fixture is a function, which return a coroutine mock.
    That coroutine mock should be passed to `aresponses.add` as a response
    callback function. When called, it calls the mock defined by the function's
    arguments (specifically, return_value or side_effects).

    The difference from passing the responses directly to `aresponses.add`
    is that it is possible to assert on whether the response was handled
    by that callback at all (i.e. HTTP URL & method matched), especially
    if there are multiple responses registered. The request payloads
    are preserved in the ``payloads`` attribute of the mock.

    Sample usage::

        def test_me(resp_mocker):
            response = aiohttp.web.json_response({'a': 'b'})
            callback = resp_mocker(return_value=response)
            aresponses.add(hostname, '/path/', 'get', callback)
            do_something()
            assert callback.called
            assert callback.call_count == 1
    """
    def resp_maker(*args, **kwargs):
        actual_response = MagicMock(*args, **kwargs)
        payloads = []

        async def resp_mock_effect(request):
            # The request's content can be read inside of the handler only.
            text = await request.text()
            payloads.append(json.loads(text) if text else None)

            # Get a response/error as it was intended (via return_value/side_effect).
            return actual_response()

        mock = AsyncMock(side_effect=resp_mock_effect)
        mock.payloads = payloads
        return mock
    return resp_maker


@pytest.fixture()
def no_retries(settings):
    settings.networking.error_backoffs = []


#
# Helpers for the logging checks.
#

@pytest.fixture()
def assert_logs(caplog):
    """
    A function to assert the logs are present (by pattern).

    The listed message patterns MUST be present, in the order specified.
    Some other log messages can also be present, but they are ignored.
    """
    def assert_logs_fn(patterns, prohibited=[], strict=False):
        __traceback_hide__ = True
        remaining_patterns = list(patterns)
        for message in caplog.messages:
            # The expected pattern is at position 0.
            # Looking-ahead: if one of the following patterns matches, while the
            # 0th does not, then the log message is missing, and we fail the test.
            for idx, pattern in enumerate(remaining_patterns):
                m = re.search(pattern, message)
                if m:
                    if idx == 0:
                        remaining_patterns[:1] = []
                        break  # out of `remaining_patterns` cycle
                    else:
                        skipped_patterns = remaining_patterns[:idx]
                        raise AssertionError(f"Few patterns were skipped: {skipped_patterns!r}")
                elif strict:
                    raise AssertionError(f"Unexpected log message: {message!r}")

            # Check that the prohibited patterns do not appear in any message.
            for pattern in prohibited:
                m = re.search(pattern, message)
                if m:
                    raise AssertionError(f"Prohibited log pattern found: {message!r} ~ {pattern!r}")

        # If all patterns have been matched in order, we are done.
        # if some are left, but the messages are over, then we fail.
        if remaining_patterns:
            raise AssertionError(f"Few patterns were missed: {remaining_patterns!r}")

    return assert_logs_fn
