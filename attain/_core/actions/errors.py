"""
The errors of the convergence: both the retryable and the fatal ones.

The same error class can be retryable or fatal depending on where it happens:
e.g. a failed read is "not yet" inside of a polling cycle, where the resource
can be absent or the API can be temporarily unavailable, but it is fatal
for the one-shot read before the scaling. The decision is made by the engines;
the errors only describe what happened and with which resource.

The retryable errors never reach the callers directly: they are absorbed
by the polling cycles and are only exposed as the last known reason
of the deadline or of the stopping (see :class:`PollingAborted`).
"""
from typing import Optional, Sequence

from attain._cogs.structs import conditions, references


class ConvergenceError(Exception):
    """ The base for all the errors of waiting & scaling. """

    def __init__(
            self,
            message: str,
            *,
            locator: Optional[references.Locator] = None,
    ) -> None:
        super().__init__(message)
        self.locator = locator


class ReadFailure(ConvergenceError):
    """ The resource could not be fetched: absent or unreachable. """

    def __init__(
            self,
            locator: references.Locator,
            cause: BaseException,
            *,
            what: Optional[str] = None,
    ) -> None:
        subject = f"the {what} of {locator}" if what else f"{locator}"
        super().__init__(f"Unable to retrieve {subject}: {cause}", locator=locator)
        self.cause = cause


class DecodeFailure(ConvergenceError):
    """ The resource was fetched, but its status is malformed or partial. """

    def __init__(
            self,
            locator: references.Locator,
            cause: BaseException,
    ) -> None:
        super().__init__(f"Unable to decode the conditions of {locator}: {cause}", locator=locator)
        self.cause = cause


class ConditionMismatch(ConvergenceError):
    """ The resource was fetched and decoded, but the condition is not there yet. """

    def __init__(
            self,
            locator: references.Locator,
            *,
            expected: conditions.ConditionTriple,
            observed: Sequence[conditions.Condition],
    ) -> None:
        type_, status, reason = expected
        observed_text = ', '.join(str(condition) for condition in observed) or 'no conditions'
        super().__init__(
            f"{locator} does not yet contain the expected condition. "
            f"Expected: type={type_!r}, status={status!r}, reason={reason!r}. "
            f"Observed: {observed_text}.",
            locator=locator)
        self.expected = expected
        self.observed = list(observed)


class ReplicaMismatch(ConvergenceError):
    """ The replica count is readable, but is not the desired one yet. """

    def __init__(
            self,
            locator: references.Locator,
            *,
            desired: int,
            observed: Optional[int],
    ) -> None:
        observed_text = 'not reported' if observed is None else str(observed)
        super().__init__(
            f"{locator} is not yet scaled: desired {desired} replicas, observed {observed_text}.",
            locator=locator)
        self.desired = desired
        self.observed = observed


class WriteFailure(ConvergenceError):
    """ The mutation of the resource was rejected. Never retried. """

    def __init__(
            self,
            locator: references.Locator,
            cause: BaseException,
            *,
            what: Optional[str] = None,
    ) -> None:
        subject = f"the {what} of {locator}" if what else f"{locator}"
        super().__init__(f"Unable to modify {subject}: {cause}", locator=locator)
        self.cause = cause


class PollingAborted(ConvergenceError):
    """ The polling has ended before the goal was reached. """

    def __init__(
            self,
            message: str,
            *,
            last: Optional[ConvergenceError] = None,
    ) -> None:
        locator = last.locator if last is not None else None
        reason = f" Last reason: {last}" if last is not None else ""
        super().__init__(f"{message}{reason}", locator=locator)
        self.last = last


class DeadlineExceeded(PollingAborted):
    """ The polling has reached its deadline. """

    def __init__(
            self,
            timeout: float,
            *,
            last: Optional[ConvergenceError] = None,
    ) -> None:
        super().__init__(f"The goal is not reached in {timeout}s.", last=last)
        self.timeout = timeout


class PollingStopped(PollingAborted):
    """ The polling was stopped from outside via the stopper. """

    def __init__(
            self,
            *,
            last: Optional[ConvergenceError] = None,
    ) -> None:
        super().__init__("The polling is stopped before the goal is reached.", last=last)
