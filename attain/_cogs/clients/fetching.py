from attain._cogs.clients import api
from attain._cogs.configs import configuration
from attain._cogs.helpers import typedefs
from attain._cogs.structs import bodies, references


async def read_obj(
        *,
        settings: configuration.AttainSettings,
        locator: references.Locator,
        logger: typedefs.Logger,
) -> bodies.RawBody:
    """
    Read one object of a specific resource kind by its namespace & name.

    The object is returned as a raw (unparsed) body. All the API errors,
    including the object's absence (HTTP 404), are escalated to the caller:
    it is the caller's decision what to do with them.
    """
    body: bodies.RawBody = await api.get(
        url=locator.get_url(),
        settings=settings,
        logger=logger,
    )
    return body
