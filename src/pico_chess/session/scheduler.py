"""
Delayed-call scheduling for the session layer.

Bot thinking time, bot substitution and the idle sweep are all "run this
synchronous call later". The engine never waits or sleeps itself.
"""

from __future__ import annotations

import logging
import threading
from abc import ABC, abstractmethod
from typing import Any, Callable, List

logger = logging.getLogger(__name__)


class Scheduler(ABC):

    @abstractmethod
    def call_later(self, delay: float, fn: Callable[..., Any], *args: Any) -> Any:
        """Run fn(*args) after `delay` seconds. Returns a handle with ``cancel()``."""
        pass

    @abstractmethod
    def shutdown(self) -> None:
        """Cancel everything still pending."""
        pass


class TimerScheduler(Scheduler):
    """threading.Timer per call; timers are daemons and tracked for shutdown."""

    def __init__(self):
        self._timers: List[threading.Timer] = []
        self._lock = threading.Lock()
        self._closed = False

    def _run(self, fn: Callable[..., Any], *args: Any) -> None:
        try:
            fn(*args)
        except Exception:
            logger.exception("Scheduled call %s failed", getattr(fn, "__name__", fn))
        finally:
            # Runs on the timer's own thread
            timer = threading.current_thread()
            with self._lock:
                if timer in self._timers:
                    self._timers.remove(timer)

    def call_later(self, delay: float, fn: Callable[..., Any], *args: Any) -> threading.Timer:
        timer = threading.Timer(delay, self._run, args=(fn, *args))
        timer.daemon = True
        with self._lock:
            if self._closed:
                raise RuntimeError("Scheduler is shut down")
            self._timers.append(timer)
        timer.start()
        return timer

    @property
    def pending(self) -> int:
        with self._lock:
            return len(self._timers)

    def shutdown(self) -> None:
        with self._lock:
            self._closed = True
            timers, self._timers = self._timers, []
        for timer in timers:
            timer.cancel()

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.shutdown()
        return False
