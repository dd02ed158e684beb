"""
Waiting for a resource to report a specific condition.

It is an observe-only protocol: the resource is fetched fresh on every attempt,
its conditions are decoded and scanned in their natural order. The first
condition with the exact expected (type, status, reason) wins.

Everything that prevents seeing the condition -- the absence of the resource,
the API unavailability, a malformed status, a mismatching condition --
is "not yet", never "never": the resources are expected to be created,
populated, and processed by their controllers while we are waiting.
Only the deadline, the stopper, or the cancellation end the waiting.
"""
import asyncio
import dataclasses
from typing import Optional

from attain._cogs.configs import configuration
from attain._cogs.helpers import typedefs
from attain._cogs.structs import conditions, references
from attain._core.actions import errors, loggers
from attain._core.engines import polling
from attain._core.intents import accessors


@dataclasses.dataclass(frozen=True)
class ConditionQuery:
    """
    What to wait for: one resource and one condition in it.
    """
    resource: references.Resource
    namespace: references.Namespace
    name: str
    type: str
    status: str
    reason: str

    @property
    def locator(self) -> references.Locator:
        return references.Locator(resource=self.resource, namespace=self.namespace, name=self.name)

    @property
    def expected(self) -> conditions.ConditionTriple:
        return (self.type, self.status, self.reason)


async def wait_for_condition(
        query: ConditionQuery,
        *,
        reader: accessors.ResourceReader,
        extractor: accessors.ConditionExtractor = conditions.extract_conditions,
        settings: Optional[configuration.AttainSettings] = None,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> None:
    """
    Wait until the resource has the expected condition.

    Returns when the condition is observed. Raises `DeadlineExceeded`
    (with the last observed state as the reason) if it is not observed
    within ``timeout`` seconds (by default, as in the settings).
    """
    settings = settings if settings is not None else configuration.AttainSettings()
    timeout = timeout if timeout is not None else settings.polling.timeout
    locator = query.locator
    logger = logger if logger is not None else loggers.ObjectLogger(locator=locator)

    async def probe() -> polling.PollOutcome:
        return await check_condition(query, reader=reader, extractor=extractor, logger=logger)

    await polling.poll(
        probe,
        interval=settings.polling.interval,
        timeout=timeout,
        stopper=stopper,
        logger=logger,
    )


async def check_condition(
        query: ConditionQuery,
        *,
        reader: accessors.ResourceReader,
        extractor: accessors.ConditionExtractor,
        logger: typedefs.Logger,
) -> polling.PollOutcome:
    """
    Look at the resource once and classify what is seen. One poll attempt.
    """
    locator = query.locator

    # Any failure is retryable: the resource can be not created yet, or the API is flaky.
    try:
        body = await reader.read_obj(locator)
    except Exception as e:
        logger.info(f"Unable to retrieve {locator}: {e}")
        return polling.Retryable(errors.ReadFailure(locator, e))

    # The object can be fetched while being written, so the partial status is "not yet".
    try:
        observed = extractor(body)
    except ValueError as e:
        logger.info(f"Unable to decode the conditions of {locator}: {e}")
        return polling.Retryable(errors.DecodeFailure(locator, e))

    for condition in observed:
        logger.debug(f"{locator} has a condition: {condition}")
        if condition.triple == query.expected:
            logger.info(f"{locator} has the expected condition: {condition}")
            return polling.Done()

    mismatch = errors.ConditionMismatch(locator, expected=query.expected, observed=observed)
    logger.info(str(mismatch))
    return polling.Retryable(mismatch)
