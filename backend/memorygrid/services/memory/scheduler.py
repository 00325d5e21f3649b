"""One-shot delayed callbacks for the game engine.

The engine only needs ``call_later``. Nothing is ever cancelled: a task that
was queued always fires, and the engine decides whether it is still relevant.
"""

import heapq
import itertools
from typing import Callable, List, Tuple


class Scheduler:
    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        raise NotImplementedError


class ManualScheduler(Scheduler):
    """Virtual clock; time only moves when ``advance`` is called.

    Tasks due at the same instant fire in the order they were queued.
    """

    def __init__(self):
        self.now_ms = 0
        self._queue: List[Tuple[int, int, Callable[[], None]]] = []
        self._counter = itertools.count()

    @property
    def pending(self) -> int:
        return len(self._queue)

    def call_later(self, delay_ms: int, callback: Callable[[], None]) -> None:
        due = self.now_ms + max(0, int(delay_ms))
        heapq.heappush(self._queue, (due, next(self._counter), callback))

    def advance(self, delay_ms: int) -> int:
        """Move the clock forward, firing every task that falls due. Returns the count fired."""
        target = self.now_ms + delay_ms
        fired = 0
        while self._queue and self._queue[0][0] <= target:
            due, _, callback = heapq.heappop(self._queue)
            self.now_ms = due
            callback()
            fired += 1
        self.now_ms = target
        return fired

    def run_until_idle(self, limit: int = 10000) -> int:
        fired = 0
        while self._queue and fired < limit:
            due = self._queue[0][0]
            fired += self.advance(due - self.now_ms)
        return fired
