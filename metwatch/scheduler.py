"""
Periodic tasks fired from the app's rerun loop.

Streamlit has one script thread per session, so timers are modelled as
handles that the dashboard drains on every rerun instead of background threads.
"""
import time
from typing import Callable

# A stalled session should not replay a burst of ticks when it wakes up.
MAX_CATCH_UP = 4


class PeriodicHandle:
    def __init__(self, scheduler: "CooperativeScheduler", interval_s: float, callback: Callable[[], None], start: float):
        self._scheduler = scheduler
        self.interval_s = interval_s
        self.callback = callback
        self.next_due = start + interval_s
        self.cancelled = False

    def cancel(self) -> None:
        if self.cancelled:
            return
        self.cancelled = True
        self._scheduler._forget(self)

    @property
    def active(self) -> bool:
        return not self.cancelled


class CooperativeScheduler:
    def __init__(self, clock: Callable[[], float] = time.monotonic):
        self._clock = clock
        self._handles: list[PeriodicHandle] = []

    def call_every(self, interval_s: float, callback: Callable[[], None]) -> PeriodicHandle:
        if interval_s <= 0:
            raise ValueError("interval must be positive")
        handle = PeriodicHandle(self, interval_s, callback, self._clock())
        self._handles.append(handle)
        return handle

    def _forget(self, handle: PeriodicHandle) -> None:
        if handle in self._handles:
            self._handles.remove(handle)

    @property
    def active_count(self) -> int:
        return len(self._handles)

    def next_delay(self) -> float | None:
        """Seconds until the next task is due, or None when idle."""
        if not self._handles:
            return None
        now = self._clock()
        return max(0.0, min(h.next_due for h in self._handles) - now)

    def run_pending(self) -> int:
        """Fire every due task once per elapsed interval. Returns ticks fired."""
        now = self._clock()
        fired = 0
        for handle in list(self._handles):
            runs = 0
            while not handle.cancelled and handle.next_due <= now:
                if runs >= MAX_CATCH_UP:
                    handle.next_due = now + handle.interval_s
                    break
                handle.next_due += handle.interval_s
                handle.callback()
                runs += 1
                fired += 1
        return fired
