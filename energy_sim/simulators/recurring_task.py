"""Cancellable recurring task that drives the simulation ticks"""

import threading


class RecurringTask:
    """
    Calls `callback` every `interval` seconds on a daemon thread.

    cancel() is synchronous: once it returns, the callback will not run
    again. A callback already in progress finishes first, because each call
    happens while holding the task lock and cancel() takes the same lock.
    A task is single-use: start() after cancel() does nothing, so create a
    new one to run again.
    """

    def __init__(self, interval, callback, name='energy-tick'):
        self.interval = float(interval)
        self.callback = callback
        self.name = name

        self._lock = threading.RLock()
        self._wakeup = threading.Event()
        self._cancelled = False
        self._thread = None

    def start(self):
        with self._lock:
            if self._cancelled or self._thread is not None:
                return
            self._thread = threading.Thread(target=self._loop, name=self.name, daemon=True)
            self._thread.start()

    def _loop(self):
        while not self._wakeup.wait(self.interval):
            with self._lock:
                if self._cancelled:
                    break
                self.callback()

    def cancel(self, timeout=1.0):
        with self._lock:
            self._cancelled = True
            self._wakeup.set()
            thread = self._thread
        if thread is not None and thread is not threading.current_thread():
            thread.join(timeout=timeout)

    @property
    def cancelled(self):
        return self._cancelled

    def is_alive(self):
        return self._thread is not None and self._thread.is_alive()
