import asyncio
import os

import attain

NAMESPACE = 'shoot--dev--local'


async def main() -> None:
    attain.configure(verbose=True)  # log formatting

    info = attain.ConnectionInfo(
        server=os.environ.get('ATTAIN_SERVER', 'https://localhost:6443'),
        token=os.environ.get('ATTAIN_TOKEN'),
        insecure=True,
    )
    settings = attain.AttainSettings()
    settings.scaling.setup_timeout = 120

    async with attain.connected(info):
        accessor = attain.APIAccessor(settings=settings, logger=attain.ObjectLogger(
            locator=attain.Locator(attain.DEPLOYMENTS, attain.NamespaceName(NAMESPACE),
                                   'gardener-resource-manager'),
        ))

        # Pause the reconciliation of the managed resources while doing the manual changes.
        previous = await attain.scale_resource_manager(NAMESPACE, 0,
                                                       accessor=accessor, settings=settings)
        try:
            print("The resource manager is paused. Do the manual changes here.")
            await asyncio.sleep(10)
        finally:
            # Restore the replicas as they were, if there was anything to restore.
            await attain.scale_resource_manager(NAMESPACE, previous,
                                                accessor=accessor, settings=settings)


if __name__ == '__main__':
    asyncio.run(main())
