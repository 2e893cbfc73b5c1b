"""Polling primitives for waiting on chain conditions.

All loops tick at a fixed interval (no backoff) and yield to the event loop
between attempts, so cancelling the calling task stops them promptly.
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable, Optional

import aiohttp

from ..exceptions import BeaconAPIError, NotReadyError, PollTimeoutError

logger = logging.getLogger(__name__)

# Failures that mean "ask again later" while a node is coming up
TRANSIENT_ERRORS = (NotReadyError, BeaconAPIError, aiohttp.ClientError, asyncio.TimeoutError)


async def retry_until_ready(
    request: Callable[[], Awaitable[Any]],
    interval: float,
    what: str = "resource",
    retry_on: tuple = TRANSIENT_ERRORS,
) -> Any:
    """Call request() every `interval` seconds until it returns a value.

    None results and exceptions in `retry_on` are retried; any other
    exception propagates. Runs until cancelled.
    """
    attempts = 0
    while True:
        attempts += 1
        try:
            result = await request()
            if result is not None:
                if attempts > 1:
                    logger.debug(f"{what} ready after {attempts} attempts")
                return result
        except retry_on as e:
            logger.debug(f"{what} not ready (attempt {attempts}): {e}")
        await asyncio.sleep(interval)


async def resolve_all(
    *aws: Awaitable[Any],
    timeout: Optional[float] = None,
    what: str = "tasks",
) -> list:
    """Run awaitables concurrently and wait for every one of them.

    Results come back in argument order. If any failed, the first failure in
    argument order is raised once all have finished. On timeout the pending
    ones are cancelled and PollTimeoutError is raised.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []
    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            results = await asyncio.gather(*tasks, return_exceptions=True)
    except TimeoutError as e:
        if deadline.expired():
            raise PollTimeoutError(what, timeout) from e
        raise
    for result in results:
        if isinstance(result, BaseException):
            raise result
    return results


async def poll_until(
    query: Callable[[], Awaitable[Any]],
    interval: float,
    timeout: Optional[float] = None,
    what: str = "condition",
    retry_on: tuple = (),
) -> Any:
    """Issue one query() per tick until it returns something other than None.

    The first query runs one interval after the call. Exceptions listed in
    `retry_on` count as "not yet"; anything else propagates immediately.

    Raises:
        PollTimeoutError: if `timeout` seconds pass first
    """
    deadline = asyncio.timeout(timeout)
    try:
        async with deadline:
            while True:
                await asyncio.sleep(interval)
                try:
                    result = await query()
                except retry_on as e:
                    logger.debug(f"{what}: not yet ({e})")
                    continue
                if result is not None:
                    return result
    except TimeoutError as e:
        if deadline.expired():
            raise PollTimeoutError(what, timeout) from e
        raise
