"""
Example: register two listeners, emit a few events and remove them again.

The first listener takes only the payload, the second takes one extra
argument (the counter) placed before the payload. After each listener is
removed, further emits still count but no longer run it.
"""

from __future__ import annotations

import asyncio
import logging

from nodeify import EventEmitter
from nodeify.logging_setup import configure_logging

logger = logging.getLogger(__name__)


def test(data=None):
    print("Hello world.")


def test1(counter, data=None):
    print(f"{data} has been called {counter} times.")


async def main() -> None:
    async with EventEmitter() as evt:
        # no extra args, only the payload is passed
        evt.on("test", test)

        # one extra arg for the counter parameter
        evt.on("test1", test1, [5])

        await evt.emit("test")
        await evt.emit("test")
        await evt.drain()
        evt.remove_listener("test", test)
        await evt.emit("test")
        await evt.drain()
        print(
            "test listener has been removed - 3 emits were called, "
            "but only 2 were executed because of remove_listener()"
        )

        for _ in range(3):
            await evt.emit("test1")
        await evt.drain()
        evt.remove_listener("test1", test1)
        await evt.emit("test1")
        await evt.drain()
        print(
            "test1 listener has been removed - 4 emits were called, "
            "but only 3 were executed because of remove_listener()"
        )
        logger.info("%r", evt)


if __name__ == "__main__":
    configure_logging()
    asyncio.run(main())
