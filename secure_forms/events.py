"""
Event plumbing for a secured page.

A browser delivers `submit`, `blur`, `input`, `change` and `click` events to
handlers registered on elements, one at a time. `EventSource` reproduces that
contract for elements of a `Document`: handlers are registered against a
target and an event type and are called synchronously, in registration order,
when the event is dispatched.

Deferred work (the notification auto-dismiss) runs on an `EventLoop`, a small
cooperative loop with a virtual clock. Time only moves when the host calls
`advance()`, which keeps timer behaviour deterministic in tests and inside a
single HTTP request.
"""

import heapq
import itertools
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Handler = Callable[['Event'], None]


@dataclass
class Event:
    """A single dispatched event."""

    type: str
    target: Any
    default_prevented: bool = False

    def prevent_default(self) -> None:
        self.default_prevented = True


class EventSource:
    """Registry of handlers keyed by (target, event type)."""

    def __init__(self):
        # Keyed by id(); the target itself is kept alive alongside its handlers
        self._handlers: Dict[int, Dict[str, List[Handler]]] = {}
        self._targets: Dict[int, Any] = {}

    def on(self, target: Any, event_type: str, handler: Handler) -> None:
        key = id(target)
        self._targets[key] = target
        self._handlers.setdefault(key, {}).setdefault(event_type, []).append(handler)

    def handlers(self, target: Any, event_type: str) -> List[Handler]:
        return list(self._handlers.get(id(target), {}).get(event_type, []))

    def is_wired(self, target: Any, event_type: str) -> bool:
        return bool(self.handlers(target, event_type))

    def dispatch(self, target: Any, event_type: str) -> Event:
        """Deliver an event to every handler registered for it and return it.

        The caller inspects `default_prevented` to decide whether the default
        action (e.g. sending the form) may go ahead.
        """
        event = Event(event_type, target)
        for handler in self.handlers(target, event_type):
            handler(event)
        return event


@dataclass(order=True)
class TimerHandle:
    when: float
    seq: int
    callback: Callable[..., None] = field(compare=False)
    args: tuple = field(compare=False, default=())


class EventLoop:
    """Cooperative event loop with a virtual clock.

    The scheduling surface mirrors `asyncio.AbstractEventLoop.call_later` so
    components only depend on `time()` and `call_later()`. Timers are never
    cancelled; deferred work must be safe to run after it became moot.
    """

    def __init__(self, start: float = 0.0):
        self._now = start
        self._queue: List[TimerHandle] = []
        self._seq = itertools.count()

    def time(self) -> float:
        return self._now

    def call_later(self, delay: float, callback: Callable[..., None], *args: Any) -> TimerHandle:
        handle = TimerHandle(self._now + max(delay, 0.0), next(self._seq), callback, args)
        heapq.heappush(self._queue, handle)
        return handle

    def advance(self, seconds: float) -> int:
        """Move the clock forward, running callbacks as their deadline passes."""
        if seconds < 0:
            raise ValueError('cannot move the clock backwards')
        target = self._now + seconds
        ran = 0
        while self._queue and self._queue[0].when <= target:
            handle = heapq.heappop(self._queue)
            self._now = handle.when
            handle.callback(*handle.args)
            ran += 1
        self._now = target
        if ran:
            logger.debug('Ran %d deferred callback(s); clock at %.3f', ran, self._now)
        return ran
