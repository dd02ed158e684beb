import aiohttp.web
import pytest

from attain._cogs.clients.errors import APIError, APINotFoundError
from attain._cogs.clients.fetching import read_obj
from attain._cogs.structs.references import Locator


async def test_when_present_namespaced(
        resp_mocker, aresponses, hostname, settings, logger, locator):

    get_mock = resp_mocker(return_value=aiohttp.web.json_response({'a': 'b'}))
    aresponses.add(hostname, locator.get_url(), 'get', get_mock)

    body = await read_obj(locator=locator, settings=settings, logger=logger)
    assert body == {'a': 'b'}

    assert get_mock.called
    assert get_mock.call_count == 1


async def test_when_present_clustered(
        resp_mocker, aresponses, hostname, settings, logger, cluster_resource):

    locator = Locator(resource=cluster_resource, namespace=None, name='shoot--dev--local')
    get_mock = resp_mocker(return_value=aiohttp.web.json_response({'a': 'b'}))
    aresponses.add(hostname, '/apis/extensions.gardener.cloud/v1alpha1/clusters/shoot--dev--local',
                   'get', get_mock)

    body = await read_obj(locator=locator, settings=settings, logger=logger)
    assert body == {'a': 'b'}
    assert get_mock.call_count == 1


async def test_when_absent(
        resp_mocker, aresponses, hostname, settings, logger, locator):

    get_mock = resp_mocker(return_value=aresponses.Response(status=404, reason="boo!"))
    aresponses.add(hostname, locator.get_url(), 'get', get_mock)

    with pytest.raises(APINotFoundError):
        await read_obj(locator=locator, settings=settings, logger=logger)


@pytest.mark.parametrize('status', [400, 401, 403, 500, 666])
async def test_raises_api_errors(
        resp_mocker, aresponses, hostname, settings, logger, locator, no_retries, status):

    get_mock = resp_mocker(return_value=aresponses.Response(status=status, reason="boo!"))
    aresponses.add(hostname, locator.get_url(), 'get', get_mock)

    with pytest.raises(APIError) as e:
        await read_obj(locator=locator, settings=settings, logger=logger)
    assert e.value.status == status
