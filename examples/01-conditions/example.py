import asyncio
import os

import attain


async def main() -> None:
    attain.configure(verbose=True)  # log formatting

    info = attain.ConnectionInfo(
        server=os.environ.get('ATTAIN_SERVER', 'https://localhost:6443'),
        token=os.environ.get('ATTAIN_TOKEN'),
        insecure=True,
    )
    query = attain.ConditionQuery(
        resource=attain.parse_resource('extensions.gardener.cloud/v1alpha1/infrastructures',
                                       kind='Infrastructure'),
        namespace=attain.NamespaceName('shoot--dev--local'),
        name='local',
        type='Ready',
        status='True',
        reason='Provisioned',
    )

    logger = attain.ObjectLogger(locator=query.locator)
    async with attain.connected(info):
        reader = attain.APIAccessor(logger=logger)
        try:
            await attain.wait_for_condition(query, reader=reader, timeout=60, logger=logger)
        except attain.DeadlineExceeded as e:
            print(f"Not ready: {e}")
        else:
            print("Ready!")


if __name__ == '__main__':
    asyncio.run(main())
