"""Structured fan-out/join for independent awaitables.

gather_or_cancel() runs every awaitable as its own task and waits for all
of them. The first failure cancels whatever is still running, waits for
those cancellations to settle, and is re-raised. There is no timeout here;
timeouts belong to the awaited operations themselves.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable
from typing import Any


async def gather_or_cancel(*aws: Awaitable[Any]) -> list[Any]:
    """Await all of ``aws`` concurrently and return results in argument order.

    Raises:
        The exception of the earliest-listed awaitable that failed. Siblings
        still pending at that point are cancelled, not awaited to completion.
    """
    tasks = [asyncio.ensure_future(aw) for aw in aws]
    if not tasks:
        return []

    try:
        done, pending = await asyncio.wait(tasks, return_when=asyncio.FIRST_EXCEPTION)
    except asyncio.CancelledError:
        for task in tasks:
            task.cancel()
        await asyncio.gather(*tasks, return_exceptions=True)
        raise

    if pending:
        for task in pending:
            task.cancel()
        await asyncio.gather(*pending, return_exceptions=True)

    # Retrieve every exception so none is reported as "never retrieved"
    failures = [
        task.exception()
        for task in tasks
        if task in done and not task.cancelled() and task.exception() is not None
    ]
    if failures:
        raise failures[0]

    return [task.result() for task in tasks]
