from typing import Optional

from attain._cogs.clients import api, errors
from attain._cogs.configs import configuration
from attain._cogs.helpers import typedefs
from attain._cogs.structs import bodies, references


async def read_scale(
        *,
        settings: configuration.AttainSettings,
        locator: references.Locator,
        logger: typedefs.Logger,
) -> Optional[bodies.RawScale]:
    """
    Read the ``scale`` subresource of an object (e.g. of a deployment).

    Returns ``None`` if the underlying object is absent (HTTP 404).
    All other errors are escalated to the caller.
    """
    try:
        scale: bodies.RawScale = await api.get(
            url=locator.get_url(subresource='scale'),
            settings=settings,
            logger=logger,
        )
    except errors.APINotFoundError:
        return None
    return scale


async def patch_scale(
        *,
        settings: configuration.AttainSettings,
        locator: references.Locator,
        replicas: int,
        logger: typedefs.Logger,
) -> bodies.RawScale:
    """
    Set the desired replica count via the ``scale`` subresource of an object.

    Unlike reading, the object's absence is an error here, as there is
    nothing to scale, and the caller expects the scaling to happen.
    """
    scale: bodies.RawScale = await api.patch(
        url=locator.get_url(subresource='scale'),
        headers={'Content-Type': 'application/merge-patch+json'},
        payload={'spec': {'replicas': replicas}},
        settings=settings,
        logger=logger,
    )
    return scale
