# This Source Code Form is subject to the terms of the Mozilla Public
# License, v. 2.0. If a copy of the MPL was not distributed with this
# file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""Host-side dispatch of hook invocations.

Blocking hooks are awaited and their result returned to the caller.
Non-blocking hooks run as background tasks whose outcome is discarded.
"""
import asyncio

from loguru import logger

from idhooks.core.results import HookResult
from idhooks.core.types import InvocationContext
from idhooks.hooks.base import Hook


class HookRunner:
    """Dispatches invocations the way the identity platform does.

    Background tasks are kept in a set until they finish so they are not
    garbage collected mid-flight.
    """

    def __init__(self) -> None:
        self._background_tasks: set[asyncio.Task[HookResult | None]] = set()

    @property
    def pending(self) -> int:
        """Number of non-blocking invocations still running."""
        return len(self._background_tasks)

    async def dispatch(self, hook: Hook, context: InvocationContext) -> HookResult | None:
        """Run one invocation of a hook.

        Args:
            hook: The hook to invoke.
            context: Snapshot of the flow for this invocation.

        Returns:
            The hook's result for blocking hooks; None for non-blocking hooks,
            which keep running in the background.
        """
        if hook.kind.blocking:
            return await hook.invoke(context)

        task = asyncio.create_task(hook.invoke(context), name=f"hook:{hook.name}")
        self._background_tasks.add(task)
        task.add_done_callback(self._handle_background_done)
        return None

    def _handle_background_done(self, task: asyncio.Task[HookResult | None]) -> None:
        """Drop a finished task from tracking and log any failure it raised."""
        self._background_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "Background hook failed",
                task=task.get_name(),
                error=str(exc),
                error_type=type(exc).__name__,
            )

    async def drain(self) -> None:
        """Wait for all background invocations to finish.

        Call at shutdown so notifications are not cut off.
        """
        if self._background_tasks:
            await asyncio.gather(*self._background_tasks, return_exceptions=True)
