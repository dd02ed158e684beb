"""
The collaborators of the engines: how the remote state is read and written.

The engines do not know how the resources are stored or transported.
They only need a few operations, declared here as protocols, so that
any implementation could be used: the bundled API client, a client
of another library, or a fake one in the tests.

The bundled implementation (:class:`APIAccessor`) works over the K8s API
via the connection of the current task (see :func:`attain.connected`).
"""
from typing import List, Optional

from typing_extensions import Protocol

from attain._cogs.clients import fetching, scaling
from attain._cogs.configs import configuration
from attain._cogs.helpers import typedefs
from attain._cogs.structs import bodies, conditions, references


class ResourceReader(Protocol):
    async def read_obj(self, locator: references.Locator) -> bodies.RawBody:
        """ Fetch the object, or raise if it cannot be fetched (incl. absence). """


class ConditionExtractor(Protocol):
    def __call__(self, body: bodies.RawBody) -> List[conditions.Condition]:
        """ Decode the conditions, or raise `ValueError` if they are malformed. """


class ReplicaAccessor(Protocol):
    async def get_replicas(self, locator: references.Locator) -> Optional[int]:
        """ Get the desired replica count; ``None`` if the object is absent. """

    async def get_observed_replicas(self, locator: references.Locator) -> Optional[int]:
        """ Get the replica count as reported by the object's controller. """

    async def set_replicas(self, locator: references.Locator, replicas: int) -> None:
        """ Set the desired replica count, or raise if it cannot be set. """


class APIAccessor:
    """
    The resource reader & replica accessor over the K8s API.

    The replicas are read & written via the ``scale`` subresource, so that
    any scalable resource is supported (deployments, statefulsets, custom ones).

    The replica counts are omitted by the API when they are zero,
    so the absent counts of an existing object are zeros, not unknowns.
    """

    def __init__(
            self,
            *,
            settings: Optional[configuration.AttainSettings] = None,
            logger: typedefs.Logger,
    ) -> None:
        super().__init__()
        self.settings = settings if settings is not None else configuration.AttainSettings()
        self.logger = logger

    async def read_obj(self, locator: references.Locator) -> bodies.RawBody:
        return await fetching.read_obj(locator=locator, settings=self.settings, logger=self.logger)

    async def get_replicas(self, locator: references.Locator) -> Optional[int]:
        scale = await scaling.read_scale(locator=locator,
                                         settings=self.settings, logger=self.logger)
        return None if scale is None else scale.get('spec', {}).get('replicas', 0)

    async def get_observed_replicas(self, locator: references.Locator) -> Optional[int]:
        scale = await scaling.read_scale(locator=locator,
                                         settings=self.settings, logger=self.logger)
        return None if scale is None else scale.get('status', {}).get('replicas', 0)

    async def set_replicas(self, locator: references.Locator, replicas: int) -> None:
        await scaling.patch_scale(locator=locator, replicas=replicas,
                                  settings=self.settings, logger=self.logger)
