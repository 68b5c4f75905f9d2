"""Cancellable periodic tickers that drive test-mode highlighting.

WHY: Test mode advances the highlight on a fixed interval without any
audio. The session must own that timer and release it synchronously when
test mode stops, and it must not care which scheduler delivers the ticks —
a background thread in a plain process, the event loop in an async app, or
a test harness firing ticks by hand.

HOW: Ticker is an ABC with start()/cancel()/active. Three implementations:
  ThreadingTicker — re-arms a daemon threading.Timer after every fire
  AsyncioTicker   — re-arms loop.call_later on a running event loop
  ManualTicker    — never fires on its own; fire() delivers ticks on demand
A TickerFactory (interval_s, callback) → Ticker lets callers choose.

RULES:
- start() is idempotent; cancel() is idempotent and synchronous
- After cancel() no further callback is scheduled
- A callback already in flight may still run; the session guards it with
  a generation check
- Exceptions raised by the callback are logged and do not stop the ticker
"""

from __future__ import annotations

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from typing import Callable, Optional

logger = logging.getLogger(__name__)

TickCallback = Callable[[], None]


class Ticker(ABC):
    """A periodic callback that can be started and cancelled."""

    def __init__(self, interval_s: float, callback: TickCallback) -> None:
        self.interval_s = interval_s
        self.callback = callback

    @property
    @abstractmethod
    def active(self) -> bool:
        """True between start() and cancel()."""

    @abstractmethod
    def start(self) -> None:
        """Begin delivering ticks every interval_s seconds."""

    @abstractmethod
    def cancel(self) -> None:
        """Stop delivering ticks."""

    def _run_callback(self) -> None:
        try:
            self.callback()
        except Exception:
            logger.exception("Tick callback failed")


TickerFactory = Callable[[float, TickCallback], Ticker]


class ThreadingTicker(Ticker):
    """Ticker backed by a chain of daemon threading.Timer objects."""

    def __init__(self, interval_s: float, callback: TickCallback) -> None:
        super().__init__(interval_s, callback)
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._active = False

    @property
    def active(self) -> bool:
        with self._lock:
            return self._active

    def start(self) -> None:
        with self._lock:
            if self._active:
                return
            self._active = True
            self._arm()

    def cancel(self) -> None:
        with self._lock:
            self._active = False
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None

    def _arm(self) -> None:
        timer = threading.Timer(self.interval_s, self._fire)
        timer.daemon = True
        self._timer = timer
        timer.start()

    def _fire(self) -> None:
        with self._lock:
            if not self._active:
                return
        self._run_callback()
        with self._lock:
            if self._active:
                self._arm()


class AsyncioTicker(Ticker):
    """Ticker driven by an asyncio event loop.

    Must be started from inside the loop (or given the loop explicitly).
    """

    def __init__(
        self,
        interval_s: float,
        callback: TickCallback,
        loop: Optional[asyncio.AbstractEventLoop] = None,
    ) -> None:
        super().__init__(interval_s, callback)
        self._loop = loop
        self._handle: Optional[asyncio.TimerHandle] = None
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        if self._active:
            return
        if self._loop is None:
            self._loop = asyncio.get_running_loop()
        self._active = True
        self._handle = self._loop.call_later(self.interval_s, self._fire)

    def cancel(self) -> None:
        self._active = False
        if self._handle is not None:
            self._handle.cancel()
            self._handle = None

    def _fire(self) -> None:
        if not self._active:
            return
        self._run_callback()
        if self._active and self._loop is not None:
            self._handle = self._loop.call_later(self.interval_s, self._fire)


class ManualTicker(Ticker):
    """Ticker that only fires when told to. Used by tests and simulations."""

    def __init__(self, interval_s: float, callback: TickCallback) -> None:
        super().__init__(interval_s, callback)
        self._active = False
        self.fired = 0

    @property
    def active(self) -> bool:
        return self._active

    def start(self) -> None:
        self._active = True

    def cancel(self) -> None:
        self._active = False

    def fire(self, times: int = 1) -> None:
        """Deliver ``times`` ticks, or none while the ticker is inactive."""
        for _ in range(times):
            if not self._active:
                return
            self.fired += 1
            self._run_callback()
