#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Various helper functions that are used across the library.
"""
import itertools
import re
import threading

from pycolord.errors import CancelledError
from pycolord.log import Log


_logger = Log.get('pycolord.util')


def camel_to_snake(name: str) -> str:
    """
    Returns a snake_case_name from a CamelCaseName
    """
    s1 = re.sub('(.)([A-Z][a-z]+)', r'\1_\2', name)
    return re.sub('([a-z0-9])([A-Z])', r'\1_\2', s1).lower()


class Signal:
    """
    A simple signalling construct.

    Listeners may connect() to this signal, and their handlers will
    be invoked when fire() is called. Handlers run on the thread
    which fires the signal, in the order they were connected. A
    handler which raises is logged and does not stop delivery to
    the others.
    """

    def __init__(self):
        self._handlers = []
        self._lock = threading.Lock()

    def connect(self, handler):
        """
        Connect a handler to this signal

        :param handler: Function to invoke when the signal fires
        """
        with self._lock:
            if handler not in self._handlers:
                self._handlers.append(handler)

    def disconnect(self, handler) -> bool:
        """
        Disconnect a handler from this signal

        :return: True if the handler was connected
        """
        with self._lock:
            try:
                self._handlers.remove(handler)
            except ValueError:
                return False
            return True

    def __len__(self):
        with self._lock:
            return len(self._handlers)

    def fire(self, *args, **kwargs):
        """
        Fire the signal, invoking all connected handlers

        :params args: Arguments to call handlers with
        """
        with self._lock:
            handlers = list(self._handlers)

        for handler in handlers:
            try:
                handler(*args, **kwargs)
            except Exception as e:  # pylint: disable=broad-except
                _logger.warning("Signal handler %r failed: %s", handler, e)


class Cancellable:
    """
    Thread-safe cancellation token for blocking calls.

    Callbacks connected with connect() run exactly once, on the
    thread which calls cancel(), or immediately if the token was
    already cancelled.
    """

    def __init__(self):
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks = {}
        self._ids = itertools.count(1)

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self):
        """
        Trigger the token. Safe to call more than once.
        """
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks = list(self._callbacks.values())
            self._callbacks.clear()

        for callback in callbacks:
            callback()

    def reset(self):
        """
        Return a cancelled token to the uncancelled state.
        """
        with self._lock:
            self._event.clear()

    def raise_if_cancelled(self, operation: str | None = None):
        if self._event.is_set():
            raise CancelledError(operation)

    def connect(self, callback) -> int:
        """
        Run callback when the token is cancelled.

        :return: An id for disconnect(), 0 if the callback already ran
        """
        with self._lock:
            if not self._event.is_set():
                handler_id = next(self._ids)
                self._callbacks[handler_id] = callback
                return handler_id

        callback()
        return 0

    def disconnect(self, handler_id: int):
        with self._lock:
            self._callbacks.pop(handler_id, None)

    def wait(self, timeout: float | None = None) -> bool:
        """
        Block until cancelled or timeout elapses.
        """
        return self._event.wait(timeout)
