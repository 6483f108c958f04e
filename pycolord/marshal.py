#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Turns method replies into bound handles.

Lists are built all-or-nothing: if any element fails to bind, every
handle bound so far is released and the whole request fails.
"""
from pycolord.config import ClientConfig
from pycolord.dbus_utils import Reply, expect_object_path, expect_object_path_array
from pycolord.errors import BindFailedError, RequestFailedError
from pycolord.log import Log
from pycolord.objects import ColorObject, Device
from pycolord.transport import Transport
from pycolord.util import Cancellable


_logger = Log.get('pycolord.marshal')


def _noun(handle_type) -> str:
    return 'device' if issubclass(handle_type, Device) else 'profile'


class ResultMarshaler:
    """
    Binds object paths from a reply into handles of a given type.

    :param transport: Transport used for the per-object bind calls
    :param config: Client configuration, passed on to each handle
    """

    def __init__(self, transport: Transport, config: ClientConfig):
        self._transport = transport
        self._config = config

    def new_handle(self, handle_type) -> ColorObject:
        return handle_type(self._transport, self._config)

    def bind_one(self, operation: str, reply: Reply, handle_type,
                 cancellable: Cancellable | None = None) -> ColorObject:
        """
        Bind the single object path in a '(o)' reply.
        """
        path = expect_object_path(operation, reply)

        handle = self.new_handle(handle_type)
        try:
            handle.bind(path, cancellable=cancellable)
        except BindFailedError as err:
            handle.release()
            raise RequestFailedError(operation, f"Failed to set {_noun(handle_type)} "
                                     f"object path: {err.remote_message}") from err
        return handle

    def bind_array(self, operation: str, reply: Reply, handle_type,
                   cancellable: Cancellable | None = None) -> list:
        """
        Bind every object path in an '(ao)' reply, preserving order.
        """
        paths = expect_object_path_array(operation, reply)

        handles = []
        try:
            for path in paths:
                _logger.debug("%s: binding %s", operation, path)
                handle = self.new_handle(handle_type)
                handles.append(handle)
                handle.bind(path, cancellable=cancellable)
        except BaseException as err:
            for handle in handles:
                handle.release()
            handles.clear()
            if isinstance(err, BindFailedError):
                raise RequestFailedError(operation, f"Failed to set {_noun(handle_type)} "
                                         f"object path: {err.remote_message}") from err
            raise

        return handles
