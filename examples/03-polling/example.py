import asyncio
import logging
import random

import attain

logger = logging.getLogger('example')


class NotLucky(attain.ConvergenceError):
    pass


async def roll_the_dice() -> attain.PollOutcome:
    value = random.randint(1, 6)
    if value == 6:
        return attain.Done()
    elif value == 1:
        return attain.Fatal(RuntimeError("Snake eyes! Giving up."))
    else:
        return attain.Retryable(NotLucky(f"Rolled {value}, waiting for 6."))


async def main() -> None:
    attain.configure(verbose=True)  # log formatting

    # Stop the polling from outside, e.g. when the app is shutting down.
    stopper = asyncio.Event()
    asyncio.get_running_loop().call_later(8, stopper.set)
    try:
        await attain.poll(roll_the_dice, interval=0.5, timeout=10, stopper=stopper, logger=logger)
    except attain.PollingAborted as e:
        print(f"No luck: {e}")
    except RuntimeError as e:
        print(f"Failed: {e}")
    else:
        print("Lucky!")


if __name__ == '__main__':
    asyncio.run(main())
