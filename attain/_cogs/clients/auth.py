import base64
import contextlib
import functools
import os
import ssl
import tempfile
from contextvars import ContextVar
from typing import Any, AsyncIterator, Callable, Dict, List, Optional, TypeVar, Union, cast

import aiohttp

from attain._cogs.helpers import versions
from attain._cogs.structs import credentials

# Per-task storage of the API context (the session and the server info).
# Used by the client wrappers to perform the requests. Set by `connected()`.
context_var: ContextVar['APIContext'] = ContextVar('context_var')

# A typevar to show that we return a function with the same signature as given.
_F = TypeVar('_F', bound=Callable[..., Any])


def authenticated(fn: _F) -> _F:
    """
    A decorator to inject a pre-authenticated session to a requesting routine.

    If the context is explicitly passed, it is used as is. Otherwise,
    the context of the current task (see :func:`connected`) is injected.
    """
    @functools.wraps(fn)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        if kwargs.get('context') is None:
            try:
                kwargs['context'] = context_var.get()
            except LookupError:
                raise RuntimeError("No API context is set. Use `attain.connected()`.") from None
        response = await fn(*args, **kwargs)
        if isinstance(response, aiohttp.ClientResponse):
            # Keep track of responses which are using this context.
            kwargs['context'].add_response(response)
        return response

    return cast(_F, wrapper)


@contextlib.asynccontextmanager
async def connected(info: credentials.ConnectionInfo) -> AsyncIterator['APIContext']:
    """
    Connect to the API for the duration of the ``async with`` block.

    All the API calls inside of the block (including in the sub-tasks
    started from it) use this connection unless specified otherwise.
    """
    context = APIContext(info)
    token = context_var.set(context)
    try:
        yield context
    finally:
        context_var.reset(token)
        await context.close()


class APIContext:
    """
    A container for an aiohttp session and the caches of the environment info.

    We assume that all the waiting runs in the same event loop, so there is
    no need to split the sessions for multiple loops. The session is created
    on the first use, i.e. in the event loop, while the context itself
    can be created and set outside of it.
    """

    # The main contained object used by the API methods (created on demand).
    _session: Optional[aiohttp.ClientSession]

    # Contextual information for URL building.
    server: str
    default_namespace: Optional[str]

    # List of open responses.
    responses: List[aiohttp.ClientResponse]

    def __init__(
            self,
            info: credentials.ConnectionInfo,
    ) -> None:
        super().__init__()
        self._info = info
        self._session = None

        self.server = info.server
        self.default_namespace = info.default_namespace

        self.responses = []

    @property
    def session(self) -> aiohttp.ClientSession:
        if self._session is None:
            self._session = self.make_aiohttp_session(self._info)

            # It is a good practice to self-identify a bit.
            if self._session.headers.get('User-Agent') is None:
                self._session.headers['User-Agent'] = f'attain/{versions.version or "unknown"}'

        return self._session

    def make_aiohttp_session(self, info: credentials.ConnectionInfo) -> aiohttp.ClientSession:

        # Some SSL data are not accepted directly, so we have to use temp files.
        # Do not even create temporary files if there is no need. It can be a readonly filesystem.
        with contextlib.ExitStack() as stack:

            cert_path: Union[str, bytes, os.PathLike, None]
            if info.certificate_path:
                cert_path = info.certificate_path
            elif info.certificate_data:
                cert_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                cert_file.write(decode_to_pem(info.certificate_data).encode('ascii'))
                cert_path = cert_file.name
            else:
                cert_path = None

            pkey_path: Union[str, bytes, os.PathLike, None]
            if info.private_key_path:
                pkey_path = info.private_key_path
            elif info.private_key_data:
                pkey_file = stack.enter_context(tempfile.NamedTemporaryFile(buffering=0))
                pkey_file.write(decode_to_pem(info.private_key_data).encode('ascii'))
                pkey_path = pkey_file.name
            else:
                pkey_path = None

            # The SSL part (both client certificate auth and CA verification).
            context = ssl.create_default_context(
                purpose=ssl.Purpose.SERVER_AUTH,
                cafile=info.ca_path,
                cadata=decode_to_pem(info.ca_data) if info.ca_data is not None else None,
            )
            if cert_path and pkey_path:
                context.load_cert_chain(certfile=cert_path, keyfile=pkey_path)

        if info.insecure:
            context.check_hostname = False
            context.verify_mode = ssl.CERT_NONE

        # The token auth part.
        headers: Dict[str, str] = {}
        if info.scheme and info.token:
            headers['Authorization'] = f'{info.scheme} {info.token}'
        elif info.scheme:
            headers['Authorization'] = f'{info.scheme}'
        elif info.token:
            headers['Authorization'] = f'Bearer {info.token}'

        # The basic auth part.
        auth: Optional[aiohttp.BasicAuth]
        if info.username and info.password:
            auth = aiohttp.BasicAuth(info.username, info.password)
        else:
            auth = None

        return aiohttp.ClientSession(
            connector=aiohttp.TCPConnector(
                limit=0,
                ssl=context,
            ),
            headers=headers,
            auth=auth,
        )

    def flush_closed_responses(self) -> None:
        # There's no point keeping references to already closed responses.
        self.responses[:] = [_response for _response in self.responses if not _response.closed]

    def add_response(self, response: aiohttp.ClientResponse) -> None:
        # Keep track of responses so they can be closed later when the session is closed.
        self.flush_closed_responses()
        if not response.closed:
            self.responses.append(response)

    def close_open_responses(self) -> None:
        for response in self.responses:
            if not response.closed:
                response.close()
        self.responses.clear()

    async def close(self) -> None:
        # Close all open responses that use this session before closing the session itself.
        self.close_open_responses()
        if self._session is not None:
            await self._session.close()
            self._session = None


def decode_to_pem(data: Union[str, bytes]) -> str:
    match data:
        case str() if data.startswith('-----BEGIN '):
            return data
        case bytes() if data.startswith(b'-----BEGIN '):
            return data.decode('ascii')
        case _:
            return base64.b64decode(data).decode('ascii')
