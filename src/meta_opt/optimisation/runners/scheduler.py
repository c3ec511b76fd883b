"""
Deferred, cancellable scheduling of run iterations.

The run controller never loops over iterations itself. After each step it
asks a scheduler to call it again after ``delay`` seconds, which hands
control back to whatever drives the application (an event loop, a UI, a
test) between iterations. A scheduled call can be cancelled through the
token returned by ``schedule``.

Two implementations:

- ``ManualScheduler``: callbacks wait in a queue until ``run_pending`` or
  ``run_next`` is called. Delays are recorded but not waited for, which
  makes runs fully deterministic (tests, headless batch runs).
- ``AsyncioScheduler``: callbacks are registered with ``loop.call_later``
  and run on the event loop thread, one at a time.
"""

import asyncio
import itertools
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

logger = logging.getLogger(__name__)

_token_ids = itertools.count(1)


@dataclass(eq=False)
class CancellationToken:
    """Handle to one scheduled callback."""

    id: int = field(default_factory=lambda: next(_token_ids))
    delay: float = 0.0
    cancelled: bool = False
    handle: Any = None


class Scheduler(ABC):
    """Interface used by the run controller to defer its next step."""

    @abstractmethod
    def schedule(self, callback: Callable[[], Any], delay: float = 0.0) -> CancellationToken:
        """Arrange for ``callback`` to run once after ``delay`` seconds."""
        pass

    @abstractmethod
    def cancel(self, token: CancellationToken) -> bool:
        """
        Cancel a scheduled callback.

        Returns:
            bool: True if the callback was still pending and will not run.
        """
        pass


class ManualScheduler(Scheduler):
    """
    Scheduler driven explicitly by its owner.

    Example:
        ```python
        scheduler = ManualScheduler()
        controller = RunController(scheduler=scheduler)
        controller.configure(PSOConfig(num_particles=5, dimensions=2))
        controller.start(seed=42)
        scheduler.run_pending()       # runs the run to completion
        ```
    """

    def __init__(self):
        self._queue: list[tuple[CancellationToken, Callable[[], Any]]] = []

    @property
    def pending_count(self) -> int:
        return len(self._queue)

    def schedule(self, callback, delay=0.0):
        token = CancellationToken(delay=delay)
        self._queue.append((token, callback))
        return token

    def cancel(self, token):
        for idx, (queued, _) in enumerate(self._queue):
            if queued is token:
                del self._queue[idx]
                token.cancelled = True
                return True
        return False

    def run_next(self) -> bool:
        """Run the oldest pending callback. Returns False when none is pending."""
        if not self._queue:
            return False
        _, callback = self._queue.pop(0)
        callback()
        return True

    def run_pending(self, max_callbacks: int | None = None) -> int:
        """
        Run callbacks, including ones scheduled while running, until the
        queue is empty or ``max_callbacks`` have run.

        Returns:
            int: Number of callbacks executed.
        """
        executed = 0
        while self._queue and (max_callbacks is None or executed < max_callbacks):
            self.run_next()
            executed += 1
        return executed


class AsyncioScheduler(Scheduler):
    """
    Scheduler backed by an asyncio event loop.

    Without an explicit ``loop`` it must be created from inside a coroutine,
    and uses the running loop.
    """

    def __init__(self, loop: asyncio.AbstractEventLoop | None = None):
        self.loop = loop if loop is not None else asyncio.get_running_loop()

    def schedule(self, callback, delay=0.0):
        token = CancellationToken(delay=delay)
        token.handle = self.loop.call_later(delay, callback)
        return token

    def cancel(self, token):
        if token.cancelled or token.handle is None:
            return False
        token.handle.cancel()
        token.cancelled = True
        logger.debug("Cancelled scheduled callback %d", token.id)
        return True
