#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Exceptions raised by the colord client.

Everything raised out of the public API derives from ColordError. The
transport layer has its own two exceptions (TransportError, RemoteError)
which the client wraps before they reach a caller.
"""


class ColordError(Exception):
    """Base class for all client errors."""


class ConfigError(ColordError):
    """Raised when the client configuration is invalid."""


class NotConnectedError(ColordError):
    """Raised when an operation needs a connection that does not exist yet."""

    def __init__(self, operation: str | None = None):
        message = "Not connected to colord"
        if operation:
            message += f" (cannot {operation})"
        super().__init__(message)
        self.operation = operation


class AlreadyConnectedError(ColordError):
    """Raised when connect() is called on a connected client."""

    def __init__(self):
        super().__init__("Already connected to colord")


class ConnectionFailedError(ColordError):
    """Raised when the bus connection to the daemon cannot be established."""

    def __init__(self, detail: str):
        super().__init__(f"Failed to connect to colord: {detail}")
        self.detail = detail


class RequestFailedError(ColordError):
    """Raised when a remote method call fails."""

    def __init__(self, operation: str, message: str, error_name: str | None = None):
        super().__init__(f"Failed to {operation}: {message}")
        self.operation = operation
        self.remote_message = message
        self.error_name = error_name


class NotFoundError(RequestFailedError):
    """Raised when a lookup by id finds no matching object."""


class BindFailedError(ColordError):
    """Raised when a handle cannot be bound to a remote object path."""

    def __init__(self, object_path: str, message: str, not_found: bool = False):
        super().__init__(f"Failed to bind {object_path}: {message}")
        self.object_path = object_path
        self.remote_message = message
        self.not_found = not_found


class NotBoundError(ColordError):
    """Raised when a remote operation is attempted on an unbound handle."""

    def __init__(self, operation: str):
        super().__init__(f"Cannot {operation}: object is not bound")
        self.operation = operation


class CancelledError(ColordError):
    """Raised when a blocking call is cancelled through its token."""

    def __init__(self, operation: str | None = None):
        message = "Operation was cancelled"
        if operation:
            message = f"{operation} was cancelled"
        super().__init__(message)
        self.operation = operation


class DecodeError(ColordError):
    """Raised when a reply does not have the shape the method declares."""

    def __init__(self, operation: str, message: str):
        super().__init__(f"Unexpected reply to {operation}: {message}")
        self.operation = operation


class TransportError(ColordError):
    """Raised by a transport when the bus itself fails (timeout, disconnect)."""


class RemoteError(ColordError):
    """Raised by a transport when the service answers with an error reply."""

    def __init__(self, error_name: str, message: str):
        super().__init__(f"{error_name}: {message}" if message else error_name)
        self.error_name = error_name
        self.message = message


def is_not_found(error_name: str, message: str) -> bool:
    """
    True if a remote error reports a missing object
    """
    return error_name.endswith('.NotFound') or error_name.endswith('.UnknownObject') \
            or 'does not exist' in (message or '')
