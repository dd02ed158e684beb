"""
Scaling a resource to the desired replica count and confirming it.

It is a read-compare-mutate-verify protocol, expressed as a state machine::

    IDLE -> READ -> SKIPPED
                 -> MUTATE -> VERIFY -> DONE
    (any step) -> FAILED

* READ: the current replica count is read once. The absent resource
  is not an error: there is nothing to scale, so nothing is done.
  Other read failures are fatal, as this is a one-shot read, not a poll.
* SKIPPED: the current replica count is already the desired one;
  no writes are done at all.
* MUTATE: the desired replica count is written once. A failed write
  is fatal: it is not expected to be transient, so it is not retried.
* VERIFY: the reported replica count is polled until it is the desired one;
  read failures are retryable here.

Each step is limited by the setup timeout on its own, not the whole protocol.
The previous replica count is returned, so that the caller could restore it.
"""
import asyncio
import dataclasses
import enum
from typing import Optional

from attain._cogs.configs import configuration
from attain._cogs.helpers import typedefs
from attain._cogs.structs import references
from attain._core.actions import errors, loggers
from attain._core.engines import polling
from attain._core.intents import accessors

RESOURCE_MANAGER_NAME = 'gardener-resource-manager'


class ScalingPhase(str, enum.Enum):
    IDLE = 'idle'
    READ = 'read'
    SKIPPED = 'skipped'
    MUTATE = 'mutate'
    VERIFY = 'verify'
    DONE = 'done'
    FAILED = 'failed'

    @property
    def final(self) -> bool:
        return self in {ScalingPhase.SKIPPED, ScalingPhase.DONE, ScalingPhase.FAILED}


@dataclasses.dataclass
class ScalingState:
    locator: references.Locator
    desired: int
    current: Optional[int] = None
    phase: ScalingPhase = ScalingPhase.IDLE


class ReplicaScaler:
    """
    The state machine of one scaling call. Not reusable across calls.

    Every step method does its i/o, updates the state, and returns
    the next phase, or raises if the step has failed fatally.
    """

    def __init__(
            self,
            state: ScalingState,
            *,
            accessor: accessors.ReplicaAccessor,
            settings: configuration.AttainSettings,
            setup_timeout: Optional[float],
            stopper: Optional[asyncio.Event] = None,
            logger: typedefs.Logger,
    ) -> None:
        super().__init__()
        self.state = state
        self.accessor = accessor
        self.settings = settings
        self.setup_timeout = setup_timeout
        self.stopper = stopper
        self.logger = logger

    async def run(self) -> Optional[int]:
        """ Drive the steps until a final phase, and return the previous replica count. """
        self.state.phase = ScalingPhase.READ
        try:
            while not self.state.phase.final:
                if self.state.phase is ScalingPhase.READ:
                    self.state.phase = await self.read()
                elif self.state.phase is ScalingPhase.MUTATE:
                    self.state.phase = await self.mutate()
                elif self.state.phase is ScalingPhase.VERIFY:
                    self.state.phase = await self.verify()
                else:
                    raise RuntimeError(f"Unexpected scaling phase: {self.state.phase!r}")
        except BaseException:
            self.state.phase = ScalingPhase.FAILED
            raise
        return self.state.current

    async def read(self) -> ScalingPhase:
        locator = self.state.locator
        try:
            current = await asyncio.wait_for(self.accessor.get_replicas(locator),
                                             timeout=self.setup_timeout)
        except Exception as e:
            self.logger.error(f"Failed to retrieve the replica count of {locator}: {e}")
            raise errors.ReadFailure(locator, e, what="replica count") from e

        self.state.current = current
        if current is None:
            self.logger.info(f"{locator} is absent; nothing to scale.")
            return ScalingPhase.SKIPPED
        return self.compare()

    def compare(self) -> ScalingPhase:
        if self.state.current == self.state.desired:
            self.logger.info(f"{self.state.locator} is already at {self.state.desired} replicas.")
            return ScalingPhase.SKIPPED
        return ScalingPhase.MUTATE

    async def mutate(self) -> ScalingPhase:
        locator = self.state.locator
        desired = self.state.desired
        self.logger.info(f"Scaling {locator} from {self.state.current} to {desired} replicas.")
        try:
            await asyncio.wait_for(self.accessor.set_replicas(locator, desired),
                                   timeout=self.setup_timeout)
        except Exception as e:
            self.logger.error(f"Failed to scale {locator} to {desired} replicas: {e}")
            raise errors.WriteFailure(locator, e, what="replica count") from e
        return ScalingPhase.VERIFY

    async def verify(self) -> ScalingPhase:
        await wait_for_replicas(
            self.state.locator,
            self.state.desired,
            accessor=self.accessor,
            settings=self.settings,
            timeout=self.setup_timeout,
            stopper=self.stopper,
            logger=self.logger,
        )
        return ScalingPhase.DONE


async def scale_and_converge(
        locator: references.Locator,
        desired: Optional[int],
        *,
        accessor: accessors.ReplicaAccessor,
        settings: Optional[configuration.AttainSettings] = None,
        setup_timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[int]:
    """
    Scale the resource to the desired replica count and wait until it is scaled.

    Returns the previous replica count, or ``None`` if nothing was desired
    or if the resource is absent.
    """
    if desired is None:
        return None

    settings = settings if settings is not None else configuration.AttainSettings()
    setup_timeout = setup_timeout if setup_timeout is not None else settings.scaling.setup_timeout
    logger = logger if logger is not None else loggers.ObjectLogger(locator=locator)
    scaler = ReplicaScaler(
        ScalingState(locator=locator, desired=desired),
        accessor=accessor,
        settings=settings,
        setup_timeout=setup_timeout,
        stopper=stopper,
        logger=logger,
    )
    return await scaler.run()


async def wait_for_replicas(
        locator: references.Locator,
        desired: int,
        *,
        accessor: accessors.ReplicaAccessor,
        settings: Optional[configuration.AttainSettings] = None,
        timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> None:
    """
    Wait until the reported replica count of the resource is the desired one.
    """
    settings = settings if settings is not None else configuration.AttainSettings()
    logger = logger if logger is not None else loggers.ObjectLogger(locator=locator)

    async def probe() -> polling.PollOutcome:
        return await check_replicas(locator, desired, accessor=accessor, logger=logger)

    await polling.poll(
        probe,
        interval=settings.polling.interval,
        timeout=timeout,
        stopper=stopper,
        logger=logger,
    )


async def check_replicas(
        locator: references.Locator,
        desired: int,
        *,
        accessor: accessors.ReplicaAccessor,
        logger: typedefs.Logger,
) -> polling.PollOutcome:
    try:
        observed = await accessor.get_observed_replicas(locator)
    except Exception as e:
        logger.info(f"Unable to retrieve the replica count of {locator}: {e}")
        return polling.Retryable(errors.ReadFailure(locator, e, what="replica count"))

    if observed != desired:
        mismatch = errors.ReplicaMismatch(locator, desired=desired, observed=observed)
        logger.info(str(mismatch))
        return polling.Retryable(mismatch)

    logger.info(f"{locator} is scaled to {desired} replicas.")
    return polling.Done()


async def scale_deployment(
        namespace: str,
        name: str,
        desired: Optional[int],
        *,
        accessor: accessors.ReplicaAccessor,
        settings: Optional[configuration.AttainSettings] = None,
        setup_timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[int]:
    """ Same as `scale_and_converge`, but for a deployment by its name. """
    locator = references.Locator(
        resource=references.DEPLOYMENTS,
        namespace=references.NamespaceName(namespace),
        name=name,
    )
    return await scale_and_converge(
        locator, desired,
        accessor=accessor,
        settings=settings,
        setup_timeout=setup_timeout,
        stopper=stopper,
        logger=logger,
    )


async def scale_resource_manager(
        namespace: str,
        desired: Optional[int],
        *,
        accessor: accessors.ReplicaAccessor,
        settings: Optional[configuration.AttainSettings] = None,
        setup_timeout: Optional[float] = None,
        stopper: Optional[asyncio.Event] = None,
        logger: Optional[typedefs.Logger] = None,
) -> Optional[int]:
    """ Scale the resource manager's deployment, e.g. to pause its reconciliation. """
    return await scale_deployment(
        namespace, RESOURCE_MANAGER_NAME, desired,
        accessor=accessor,
        settings=settings,
        setup_timeout=setup_timeout,
        stopper=stopper,
        logger=logger,
    )
