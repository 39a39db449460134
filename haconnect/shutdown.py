"""
haconnect.shutdown
~~~~~~~~~~~~~~~~~~
Process-wide stop broadcast plus a count of cleanup obligations that must
be released before the process may exit.  Pass one instance around
explicitly; tests create their own.
"""

from __future__ import annotations

import signal
import threading
from typing import Optional

from .logger import ConfigLogger

_log = ConfigLogger()


class Shutdown:
    def __init__(self) -> None:
        self.stop = threading.Event()
        self._cond = threading.Condition()
        self._pending = 0

    # ------------------------------------------------------------------ #
    # obligations
    # ------------------------------------------------------------------ #

    def add(self, n: int = 1) -> None:
        with self._cond:
            self._pending += n

    def done(self) -> None:
        with self._cond:
            if self._pending <= 0:
                raise ValueError("done() called more times than add()")
            self._pending -= 1
            if self._pending == 0:
                self._cond.notify_all()

    @property
    def pending(self) -> int:
        with self._cond:
            return self._pending

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until every obligation is released.  False on timeout."""
        with self._cond:
            return self._cond.wait_for(lambda: self._pending == 0, timeout)

    # ------------------------------------------------------------------ #
    # stop broadcast
    # ------------------------------------------------------------------ #

    def request_stop(self, reason: str) -> None:
        with self._cond:
            if self.stop.is_set():
                return
            _log.stop(reason)
            self.stop.set()

    @property
    def stopped(self) -> bool:
        return self.stop.is_set()


def install_signal_handlers(sd: Shutdown) -> None:
    """Turn SIGINT/SIGTERM into a stop request.  Main thread only."""

    def _handler(signum, _frame):
        sd.request_stop(f"got signal {signal.Signals(signum).name}")

    signal.signal(signal.SIGINT, _handler)
    signal.signal(signal.SIGTERM, _handler)
