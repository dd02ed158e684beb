"""
The poll-until-satisfied engine: the core of all the waiting.

A probe is a coroutine function that looks at the remote state once
and classifies what it has seen into one of three outcomes:

* :class:`Done` -- the goal is reached, the polling is over;
* :class:`Retryable` -- not yet; the probe is invoked again after a sleep;
* :class:`Fatal` -- the goal can never be reached; the polling is over.

The engine owns the timing: it invokes the probe immediately, sleeps
between the attempts, and gives up when the deadline comes or when
the stopper is set. The sleep is interrupted immediately in both cases,
as well as on the task cancellation. The probe is never invoked concurrently
with itself, but it can be invoked many times, so it must be safe to repeat.

The last retryable reason is exposed in the deadline/stopping errors,
so that the caller could see *why* the goal was not reached,
not only *that* it was not reached.
"""
import asyncio
import dataclasses
from typing import Awaitable, Callable, Optional, Union

from attain._cogs.aiokits import aiotime
from attain._cogs.helpers import typedefs
from attain._core.actions import errors


@dataclasses.dataclass(frozen=True)
class Done:
    pass


@dataclasses.dataclass(frozen=True)
class Retryable:
    error: errors.ConvergenceError

    @property
    def reason(self) -> str:
        return str(self.error)


@dataclasses.dataclass(frozen=True)
class Fatal:
    error: BaseException


PollOutcome = Union[Done, Retryable, Fatal]
Probe = Callable[[], Awaitable[PollOutcome]]


async def poll(
        probe: Probe,
        *,
        interval: float,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: typedefs.Logger,
) -> None:
    """
    Invoke the probe until it is done, fails fatally, or the time is over.

    ``timeout`` is the overall deadline of the polling, including the time
    of the probes themselves: a probe running past the deadline is cancelled.
    ``None`` means no deadline (only the cancellation or the stopper).
    """
    if interval <= 0:
        raise ValueError(f"The polling interval must be positive, got {interval!r}.")

    loop = asyncio.get_running_loop()
    deadline = loop.time() + timeout if timeout is not None else None
    last: Optional[errors.ConvergenceError] = None
    attempt = 0
    while True:
        attempt += 1
        if stopper is not None and stopper.is_set():
            raise errors.PollingStopped(last=last)

        logger.debug(f"Poll attempt #{attempt} is starting.")
        remaining = deadline - loop.time() if deadline is not None else None
        task = asyncio.create_task(probe())
        try:
            # Even with no time left, the probe makes its first steps before the deadline check.
            done, _ = await asyncio.wait({task}, timeout=remaining)
        finally:
            await _cancel(task)
        if not done:
            logger.warning(f"Poll attempt #{attempt} is interrupted by the deadline.")
            raise errors.DeadlineExceeded(timeout or 0, last=last) from last

        outcome = task.result()  # the probe's own errors escalate as they are.

        match outcome:
            case Done():
                logger.debug(f"Poll attempt #{attempt} has reached the goal.")
                return
            case Fatal(error=fatal_error):
                logger.error(f"Poll attempt #{attempt} has failed fatally: {fatal_error}")
                raise fatal_error
            case Retryable(error=retry_error):
                logger.info(f"Poll attempt #{attempt} has not reached the goal: {retry_error}")
                last = retry_error
            case _:
                raise TypeError(f"Unsupported poll outcome: {outcome!r}")

        remaining = deadline - loop.time() if deadline is not None else None
        if remaining is not None and remaining <= 0:
            raise errors.DeadlineExceeded(timeout or 0, last=last) from last

        await aiotime.sleep([interval, remaining], wakeup=stopper)

        if stopper is not None and stopper.is_set():
            raise errors.PollingStopped(last=last) from last
        if deadline is not None and loop.time() >= deadline:
            raise errors.DeadlineExceeded(timeout or 0, last=last) from last


async def _cancel(task: "asyncio.Task[PollOutcome]") -> None:
    """ Cancel the unfinished probe and let it exit before going further. """
    if not task.done():
        task.cancel()
        await asyncio.wait({task})
