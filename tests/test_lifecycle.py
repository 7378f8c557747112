"""Shutdown coordinator tests."""

import asyncio

from agency.lifecycle import GracefulShutdown


def test_trigger_releases_waiter() -> None:
    """Waiting returns once shutdown is triggered."""

    async def scenario() -> None:
        shutdown = GracefulShutdown(timeout=5.0)
        waiter = asyncio.create_task(shutdown.wait_for_trigger())
        await asyncio.sleep(0)
        assert not waiter.done()

        shutdown.trigger()
        await asyncio.wait_for(waiter, timeout=1.0)

    asyncio.run(scenario())


def test_trigger_is_idempotent() -> None:
    """A second signal changes nothing."""

    async def scenario() -> None:
        shutdown = GracefulShutdown()
        shutdown.trigger()
        shutdown.trigger()
        await asyncio.wait_for(shutdown.wait_for_trigger(), timeout=1.0)
        assert shutdown.timeout == 30.0

    asyncio.run(scenario())
