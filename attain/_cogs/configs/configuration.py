"""
All configuration flags, options, settings to fine-tune the waiting & scaling.

All settings are grouped semantically just for convenience
(instead of a flat mega-object with all the values in it).

The settings are passed explicitly to the engines and the API clients,
there is no global state. When not passed, the defaults are used.
Some of the settings are optional, but all of them have reasonable defaults.
"""
import dataclasses
from typing import Iterable, Optional


@dataclasses.dataclass
class PollingSettings:

    interval: float = 2.0
    """
    How long (in seconds) to sleep between the poll attempts
    after an attempt has signalled that the condition is not reached yet.

    The sleep is interrupted immediately on cancellation or by a stopper.
    """

    timeout: Optional[float] = None
    """
    The default deadline (in seconds) for the condition waiting
    when no explicit timeout is passed by the caller.

    ``None`` means that the waiting is unbounded (until cancelled).
    """


@dataclasses.dataclass
class ScalingSettings:

    setup_timeout: Optional[float] = 60.0
    """
    The time limit (in seconds) for every segment of the scaling protocol:
    the initial read of the replica count, the write, and the verification.

    Every segment is limited independently, not the whole call.
    Wrap the call into your own ``asyncio.wait_for()`` for an overall deadline.
    """


@dataclasses.dataclass
class NetworkingSettings:

    request_timeout: Optional[float] = 5 * 60  # == aiohttp.client.DEFAULT_TIMEOUT
    """
    A timeout for the API requests (in seconds).
    This is the total time of a single request, including the response reading.
    """

    connect_timeout: Optional[float] = None
    """
    A timeout for establishing a connection to the API server (in seconds).
    ``None`` means it is limited only by the ``request_timeout``.
    """

    error_backoffs: Iterable[float] = (1, 2, 4)
    """
    Backoffs (in seconds) for the retries of a single API request
    on the connection errors, the server-side errors (HTTP 5xx), and timeouts.

    The number of backoffs is the number of retries, i.e. the attempts
    besides the first one. An empty list disables the retrying.

    These retries are local to one request: the poll attempts go on top of them.
    """


@dataclasses.dataclass
class AttainSettings:
    polling: PollingSettings = dataclasses.field(default_factory=PollingSettings)
    scaling: ScalingSettings = dataclasses.field(default_factory=ScalingSettings)
    networking: NetworkingSettings = dataclasses.field(default_factory=NetworkingSettings)
