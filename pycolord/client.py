#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Synchronous client for the colord daemon.

    client = get_client()
    client.connect()
    for device in client.list_devices():
        print(device)

Every operation blocks until the daemon answers, the call times out,
or the optional Cancellable fires.
"""
import threading
import weakref

from wrapt import synchronized

from pycolord.config import ClientConfig
from pycolord.dbus_utils import Reply, expect_empty
from pycolord.errors import AlreadyConnectedError, ConnectionFailedError, NotConnectedError, \
        NotFoundError, RemoteError, RequestFailedError, TransportError, is_not_found
from pycolord.log import Log
from pycolord.marshal import ResultMarshaler
from pycolord.objects import Device, Profile
from pycolord.signals import SignalRouter
from pycolord.transport import DBusTransport, Transport
from pycolord.types import CreateOptions, DeviceKind
from pycolord.util import Cancellable, Signal


_logger = Log.get('pycolord.client')


def _weak_signal_handler(client):
    # The transport holds only this closure, never the client
    client_ref = weakref.ref(client)

    def _handler(member, signature, body):
        target = client_ref()
        if target is not None:
            target._on_signal(member, signature, body)  # pylint: disable=protected-access

    return _handler


class Client:
    """
    Connection to the colord daemon.

    :param config: Client configuration, loaded from file/environment if omitted
    :param transport_factory: Callable(config, cancellable) returning a connected
                              Transport. Defaults to DBusTransport.open
    """

    def __init__(self, config: ClientConfig | None = None, transport_factory=None):
        if config is None:
            config = ClientConfig.load()
        if transport_factory is None:
            transport_factory = DBusTransport.open

        self._config = config
        self._transport_factory = transport_factory
        self._lock = threading.RLock()
        self._transport = None
        self._marshaler = None
        self._daemon_version = None
        self._router = SignalRouter()
        self._observers = Signal()
        self._signal_handler = _weak_signal_handler(self)

    @property
    def config(self) -> ClientConfig:
        return self._config

    @property
    def connected(self) -> bool:
        with self._lock:
            return self._transport is not None

    def connect(self, cancellable: Cancellable | None = None):
        """
        Connect to the daemon, read its version and subscribe to its signals.

        :raises AlreadyConnectedError: if this client is already connected
        :raises ConnectionFailedError: if the bus or daemon cannot be reached
        """
        with self._lock:
            if self._transport is not None:
                raise AlreadyConnectedError()

            if cancellable is not None:
                cancellable.raise_if_cancelled('connect')

            try:
                transport = self._transport_factory(self._config, cancellable)
            except (TransportError, RemoteError) as err:
                raise ConnectionFailedError(str(err)) from err

            version = None
            for name in self._config.version_properties:
                value = transport.get_cached_property(name)
                if isinstance(value, str):
                    version = value
                    break

            transport.add_signal_handler(self._signal_handler)

            self._transport = transport
            self._marshaler = ResultMarshaler(transport, self._config)
            self._daemon_version = version

        _logger.debug("Connected to colord daemon version %s", version)

    def close(self):
        """
        Release the transport. The client can be connected again afterwards.
        """
        with self._lock:
            transport = self._transport
            self._transport = None
            self._marshaler = None
            self._daemon_version = None

        if transport is not None:
            transport.remove_signal_handler(self._signal_handler)
            transport.close()

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.close()

    def __del__(self):
        # __init__ may not have finished
        if getattr(self, '_lock', None) is not None:
            self.close()

    def _require(self, operation: str) -> tuple:
        with self._lock:
            if self._transport is None:
                raise NotConnectedError(operation)
            return self._transport, self._marshaler

    def _call(self, transport: Transport, operation: str, signature: str = '', body=(),
              cancellable: Cancellable | None = None, lookup: bool = False) -> Reply:
        try:
            return transport.call(self._config.object_path, self._config.interface,
                                  operation, signature, body, cancellable=cancellable)
        except RemoteError as err:
            message = err.message or err.error_name
            if lookup and is_not_found(err.error_name, err.message):
                raise NotFoundError(operation, message, error_name=err.error_name) from err
            raise RequestFailedError(operation, message, error_name=err.error_name) from err
        except TransportError as err:
            raise RequestFailedError(operation, str(err)) from err

    def _list(self, operation: str, handle_type, signature: str = '', body=(),
              cancellable: Cancellable | None = None) -> list:
        transport, marshaler = self._require(operation)
        reply = self._call(transport, operation, signature, body, cancellable)
        return marshaler.bind_array(operation, reply, handle_type, cancellable)

    def _single(self, operation: str, handle_type, signature: str = '', body=(),
                cancellable: Cancellable | None = None, lookup: bool = False):
        transport, marshaler = self._require(operation)
        reply = self._call(transport, operation, signature, body, cancellable, lookup)
        return marshaler.bind_one(operation, reply, handle_type, cancellable)

    def _delete(self, operation: str, object_id: str,
                cancellable: Cancellable | None = None):
        transport, _ = self._require(operation)
        reply = self._call(transport, operation, 's', [object_id], cancellable)
        expect_empty(operation, reply)

    def list_devices(self, cancellable: Cancellable | None = None) -> list:
        """
        Get every device known to the daemon, in the daemon's order.
        """
        return self._list('GetDevices', Device, cancellable=cancellable)

    def list_devices_by_kind(self, kind: DeviceKind | str,
                             cancellable: Cancellable | None = None) -> list:
        """
        Get the devices of one kind, e.g. DeviceKind.DISPLAY.

        :raises RequestFailedError: if kind is not a known device kind,
                                    before any remote call
        """
        if not isinstance(kind, DeviceKind):
            try:
                kind = DeviceKind(kind)
            except ValueError as err:
                raise RequestFailedError('GetDevicesByKind',
                                         f"unknown device kind '{kind}'") from err
        return self._list('GetDevicesByKind', Device, 's', [kind.value],
                          cancellable=cancellable)

    def list_profiles(self, cancellable: Cancellable | None = None) -> list:
        """
        Get every profile known to the daemon, in the daemon's order.
        """
        return self._list('GetProfiles', Profile, cancellable=cancellable)

    def create_device(self, device_id: str, options: CreateOptions | int = CreateOptions.NONE,
                      cancellable: Cancellable | None = None) -> Device:
        return self._single('CreateDevice', Device, 'su', [device_id, int(options)],
                            cancellable=cancellable)

    def create_profile(self, profile_id: str,
                       options: CreateOptions | int = CreateOptions.NONE,
                       cancellable: Cancellable | None = None) -> Profile:
        return self._single('CreateProfile', Profile, 'su', [profile_id, int(options)],
                            cancellable=cancellable)

    def delete_device(self, device_id: str, cancellable: Cancellable | None = None):
        self._delete('DeleteDevice', device_id, cancellable)

    def delete_profile(self, profile_id: str, cancellable: Cancellable | None = None):
        self._delete('DeleteProfile', profile_id, cancellable)

    def find_device(self, device_id: str, cancellable: Cancellable | None = None) -> Device:
        """
        Look up a device by id.

        :raises NotFoundError: if the daemon has no such device
        """
        return self._single('FindDeviceById', Device, 's', [device_id],
                            cancellable=cancellable, lookup=True)

    def find_profile(self, profile_id: str,
                     cancellable: Cancellable | None = None) -> Profile:
        """
        Look up a profile by id.

        :raises NotFoundError: if the daemon has no such profile
        """
        return self._single('FindProfileById', Profile, 's', [profile_id],
                            cancellable=cancellable, lookup=True)

    def bind_device(self, object_path: str, cancellable: Cancellable | None = None) -> Device:
        """
        Bind a device handle from a path, e.g. one carried by DeviceAdded.

        :raises BindFailedError: if the object cannot be read
        """
        _, marshaler = self._require('bind device')
        device = marshaler.new_handle(Device)
        device.bind(object_path, cancellable=cancellable)
        return device

    def bind_profile(self, object_path: str,
                     cancellable: Cancellable | None = None) -> Profile:
        """
        Bind a profile handle from a path, e.g. one carried by ProfileAdded.

        :raises BindFailedError: if the object cannot be read
        """
        _, marshaler = self._require('bind profile')
        profile = marshaler.new_handle(Profile)
        profile.bind(object_path, cancellable=cancellable)
        return profile

    def daemon_version(self) -> str | None:
        """
        The daemon version read at connect time. Never refreshed.
        """
        with self._lock:
            if self._transport is None:
                raise NotConnectedError('get daemon version')
            return self._daemon_version

    def subscribe(self, observer):
        """
        Call observer(event) for every ClientEvent.

        Observers run on the transport's delivery thread and must not
        block or make blocking calls on this client.
        """
        self._observers.connect(observer)

    def unsubscribe(self, observer) -> bool:
        return self._observers.disconnect(observer)

    def _on_signal(self, member: str, signature: str, body: list):
        event = self._router.decode(member, signature, body)
        if event is not None:
            self._observers.fire(event)


_shared_client = None


@synchronized
def get_client(config: ClientConfig | None = None, transport_factory=None) -> Client:
    """
    Get the process-wide shared client.

    While any reference to the shared client is alive, the same
    instance is returned and the arguments are ignored. Once the last
    reference is dropped it is closed, and the next call creates a
    fresh, unconnected client.
    """
    global _shared_client  # pylint: disable=global-statement

    client = _shared_client() if _shared_client is not None else None
    if client is None:
        client = Client(config, transport_factory)
        _shared_client = weakref.ref(client)
    return client
