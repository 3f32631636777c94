"""A thread-safe queue of unbounded size with a readiness signal."""

from __future__ import annotations

import threading


class Channel:
    """An unbounded channel.

    Values are added with put and drained all at once with get.  A signal
    is raised whenever the channel goes from empty to non-empty; wait
    blocks until that signal is raised and then consumes it.
    """

    def __init__(self):
        self._cond = threading.Condition(threading.Lock())
        self._queue = []
        self._signalled = False

    def put(self, value):
        """Append value, signalling if the channel was empty."""
        with self._cond:
            empty = not self._queue
            self._queue.append(value)
            if empty and not self._signalled:
                self._signalled = True
                self._cond.notify_all()

    def get(self):
        """Remove and return every queued value, oldest first."""
        with self._cond:
            queue = self._queue
            self._queue = []
            return queue

    def wait(self, timeout=None):
        """Wait for the signal and consume it; return False on timeout."""
        with self._cond:
            if not self._cond.wait_for(lambda: self._signalled, timeout):
                return False
            self._signalled = False
            return True