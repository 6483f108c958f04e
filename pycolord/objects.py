#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Local handles for remote colord objects.

A handle starts out unbound. bind() fetches the remote object's
properties once and keeps them as a snapshot; nothing refreshes it
afterwards. Dropping a handle never touches the remote object.
"""
from abc import ABC, abstractmethod

from pycolord.config import ClientConfig
from pycolord.dbus_utils import expect_empty, is_object_path
from pycolord.errors import BindFailedError, NotBoundError, RemoteError, \
        RequestFailedError, TransportError, is_not_found
from pycolord.log import Log
from pycolord.transport import Transport
from pycolord.types import DeviceKind, ProfileKind
from pycolord.util import Cancellable, camel_to_snake


_logger = Log.get('pycolord.objects')


class ColorObject(ABC):
    """
    Base class for Device and Profile handles
    """

    KIND_TYPE = None

    def __init__(self, transport: Transport, config: ClientConfig | None = None):
        self._transport = transport
        self._config = config or ClientConfig()
        self._object_path = None
        self._props = {}

    @property
    @abstractmethod
    def interface(self) -> str:
        """
        D-Bus interface the remote object is read through
        """

    @property
    def object_path(self) -> str | None:
        return self._object_path

    @property
    def bound(self) -> bool:
        return self._object_path is not None

    @property
    def object_id(self) -> str | None:
        return self._props.get('id')

    @property
    def kind(self):
        return self.KIND_TYPE.from_string(self._props.get('kind'))

    @property
    def title(self) -> str | None:
        return self._props.get('title')

    @property
    def properties(self) -> dict:
        """
        Copy of the bound snapshot, keyed by snake_case property name
        """
        return dict(self._props)

    def bind(self, object_path: str, cancellable: Cancellable | None = None):
        """
        Bind this handle to a remote object and snapshot its properties.

        :param object_path: Path of the remote object
        :param cancellable: Optional cancellation token

        :raises BindFailedError: if the object cannot be read
        """
        if self._object_path is not None:
            raise BindFailedError(object_path,
                                  f"handle is already bound to {self._object_path}")

        if not is_object_path(object_path):
            raise BindFailedError(str(object_path), "not a valid object path")

        try:
            props = self._transport.get_all_properties(object_path, self.interface,
                                                       cancellable=cancellable)
        except RemoteError as err:
            raise BindFailedError(object_path, err.message or err.error_name,
                                  not_found=is_not_found(err.error_name, err.message)) \
                    from err
        except TransportError as err:
            raise BindFailedError(object_path, str(err)) from err

        self._props = {camel_to_snake(k): v for k, v in props.items()}
        self._object_path = object_path
        _logger.debug("Bound %s to %s", self.__class__.__name__, object_path)

    def release(self):
        """
        Drop the snapshot and return to the unbound state.

        Local only; the remote object is left alone.
        """
        self._props = {}
        self._object_path = None

    def _remote_call(self, operation: str, signature: str = '', body=(),
                     cancellable: Cancellable | None = None):
        if not self.bound:
            raise NotBoundError(operation)

        try:
            reply = self._transport.call(self._object_path, self.interface, operation,
                                         signature, body, cancellable=cancellable)
        except RemoteError as err:
            raise RequestFailedError(operation, err.message or err.error_name,
                                     error_name=err.error_name) from err
        except TransportError as err:
            raise RequestFailedError(operation, str(err)) from err

        expect_empty(operation, reply)

    def _fields(self) -> list:
        return [('object-path', self._object_path),
                ('id', self.object_id),
                ('kind', self.kind),
                ('title', self.title)]

    def to_string(self) -> str:
        """
        Multi-line human readable summary
        """
        lines = [f"{self.__class__.__name__}:"]
        for name, value in self._fields():
            if value is None:
                continue
            lines.append(f"  {name + ':':<14}{value}")
        return '\n'.join(lines)

    def __str__(self):
        return self.to_string()

    def __repr__(self):
        if not self.bound:
            return f"<{self.__class__.__name__} (unbound)>"
        return f"<{self.__class__.__name__} {self.object_id} at {self._object_path}>"


class Device(ColorObject):
    """
    A color managed device such as a display or printer
    """

    KIND_TYPE = DeviceKind

    @property
    def interface(self) -> str:
        return self._config.device_interface

    @property
    def title(self) -> str | None:
        return self._props.get('title', self._props.get('model'))

    @property
    def model(self) -> str | None:
        return self._props.get('model')

    @property
    def created(self) -> int | None:
        return self._props.get('created')

    @property
    def profile_paths(self) -> list:
        return list(self._props.get('profiles', []))

    def _fields(self) -> list:
        return super()._fields() + [('model', self.model),
                                    ('created', self.created),
                                    ('profiles', ', '.join(self.profile_paths) or None)]


class Profile(ColorObject):
    """
    An ICC profile registered with the daemon
    """

    KIND_TYPE = ProfileKind

    @property
    def interface(self) -> str:
        return self._config.profile_interface

    @property
    def filename(self) -> str | None:
        return self._props.get('filename')

    @property
    def qualifier(self) -> str | None:
        return self._props.get('qualifier')

    def set_filename(self, value: str, cancellable: Cancellable | None = None):
        """
        Set the ICC file backing this profile.
        """
        self._remote_call('SetFilename', 's', [value], cancellable)
        self._props['filename'] = value

    def set_qualifier(self, value: str, cancellable: Cancellable | None = None):
        """
        Set the qualifier, e.g. 'RGB.Plain.300dpi'.
        """
        self._remote_call('SetQualifier', 's', [value], cancellable)
        self._props['qualifier'] = value

    def install_system_wide(self, cancellable: Cancellable | None = None):
        """
        Ask the daemon to copy the profile into the system profile store.
        """
        self._remote_call('InstallSystemWide', cancellable=cancellable)

    def _fields(self) -> list:
        return super()._fields() + [('filename', self.filename),
                                    ('qualifier', self.qualifier)]
