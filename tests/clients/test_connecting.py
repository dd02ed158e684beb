import base64

import aiohttp
import pytest

from attain._cogs.clients.auth import APIContext, connected, context_var, decode_to_pem
from attain._cogs.structs.credentials import ConnectionInfo

PEM = '-----BEGIN CERTIFICATE-----\nMIIfake\n-----END CERTIFICATE-----\n'


async def test_context_is_set_and_reset():
    info = ConnectionInfo(server='https://fake-host')
    async with connected(info) as context:
        assert context_var.get() is context
        assert context.server == 'https://fake-host'
    with pytest.raises(LookupError):
        context_var.get()


async def test_session_is_closed_on_exit():
    info = ConnectionInfo(server='https://fake-host')
    async with connected(info) as context:
        session = context.session
        assert not session.closed
    assert session.closed


async def test_session_is_created_once():
    context = APIContext(ConnectionInfo(server='https://fake-host'))
    try:
        assert context.session is context.session
    finally:
        await context.close()


async def test_closing_without_a_session():
    context = APIContext(ConnectionInfo(server='https://fake-host'))
    await context.close()


@pytest.mark.parametrize('info, expected', [
    pytest.param(ConnectionInfo(server='s', token='tkn'), 'Bearer tkn', id='token'),
    pytest.param(ConnectionInfo(server='s', scheme='Digest', token='tkn'), 'Digest tkn',
                 id='scheme-and-token'),
    pytest.param(ConnectionInfo(server='s', scheme='Digest xyz'), 'Digest xyz', id='scheme'),
])
async def test_authorization_header(info, expected):
    context = APIContext(info)
    try:
        assert context.session.headers['Authorization'] == expected
    finally:
        await context.close()


async def test_basic_auth():
    context = APIContext(ConnectionInfo(server='s', username='usr', password='pwd'))
    try:
        assert context.session.auth == aiohttp.BasicAuth('usr', 'pwd')
        assert 'Authorization' not in context.session.headers
    finally:
        await context.close()


async def test_user_agent():
    context = APIContext(ConnectionInfo(server='s'))
    try:
        assert context.session.headers['User-Agent'].startswith('attain/')
    finally:
        await context.close()


async def test_default_namespace():
    context = APIContext(ConnectionInfo(server='s', default_namespace='garden'))
    assert context.default_namespace == 'garden'


@pytest.mark.parametrize('data', [
    pytest.param(PEM, id='str-pem'),
    pytest.param(PEM.encode('ascii'), id='bytes-pem'),
    pytest.param(base64.b64encode(PEM.encode('ascii')).decode('ascii'), id='str-base64'),
    pytest.param(base64.b64encode(PEM.encode('ascii')), id='bytes-base64'),
])
def test_decoding_to_pem(data):
    assert decode_to_pem(data) == PEM
