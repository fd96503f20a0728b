from __future__ import annotations

import threading
from typing import Callable, Optional


class RepeatingTimer:
    """Calls ``callback`` every ``interval`` seconds on a daemon thread.

    ``cancel`` is idempotent and safe to call from inside the callback.
    """

    def __init__(self, interval: float, callback: Callable[[], None], *, name: str = "scan-timer"):
        self._interval = float(interval)
        self._callback = callback
        self._name = name
        self._stopped = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def interval(self) -> float:
        return self._interval

    @property
    def is_running(self) -> bool:
        return self._thread is not None and not self._stopped.is_set()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._thread = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._thread.start()

    def _run(self) -> None:
        while not self._stopped.wait(self._interval):
            self._callback()

    def cancel(self) -> None:
        self._stopped.set()
        thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=self._interval + 1.0)

    def join(self, timeout: Optional[float] = None) -> bool:
        """Wait for the timer thread to exit. Returns True once it has."""
        thread = self._thread
        if thread is None:
            return True
        thread.join(timeout)
        return not thread.is_alive()
