"""Test helpers."""
import asyncio
import time


async def drain_callbacks(rounds: int = 3):
    """Let callbacks scheduled with call_soon_threadsafe run."""
    for _ in range(rounds):
        await asyncio.sleep(0)


async def wait_until(predicate, timeout: float = 1.0):
    """Poll until `predicate()` is true; work handed to threads needs real time."""
    deadline = time.monotonic() + timeout
    while not predicate():
        if time.monotonic() > deadline:
            raise AssertionError("condition not met within timeout")
        await asyncio.sleep(0.01)
