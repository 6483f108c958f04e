#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Bus transport.

DBusTransport gives the synchronous client a blocking call surface on
top of dbus-fast. The bus connection lives on a private asyncio loop
running in its own thread; callers submit coroutines to it and wait
for the result. Signals are delivered on that thread.
"""
import asyncio
import concurrent.futures
import threading

from abc import ABC, abstractmethod

from dbus_fast import BusType, Message, MessageType
from dbus_fast.aio import MessageBus

from pycolord.config import ClientConfig
from pycolord.dbus_utils import Reply, unwrap_variants
from pycolord.errors import CancelledError, RemoteError, TransportError
from pycolord.log import LOG_TRACE, Log
from pycolord.util import Cancellable, Signal


DBUS_NAME = 'org.freedesktop.DBus'
DBUS_PATH = '/org/freedesktop/DBus'
DBUS_INTERFACE = 'org.freedesktop.DBus'
PROPERTIES_INTERFACE = 'org.freedesktop.DBus.Properties'

_logger = Log.get('pycolord.transport')


class Transport(ABC):
    """
    Blocking remote call surface bound to one service.

    Implementations must allow calls from several threads at once,
    and deliver signals emitted by the service on its root object to
    every handler added with add_signal_handler().
    """

    @abstractmethod
    def call(self, path: str, interface: str, member: str, signature: str = '',
             body=(), cancellable: Cancellable | None = None,
             timeout: float | None = None) -> Reply:
        """
        Invoke a method and wait for the reply.

        :raises RemoteError: the service answered with an error
        :raises TransportError: the bus failed or the call timed out
        :raises CancelledError: the cancellable fired first
        """

    @abstractmethod
    def get_all_properties(self, path: str, interface: str,
                           cancellable: Cancellable | None = None,
                           timeout: float | None = None) -> dict:
        """
        Fetch every property of an interface on an object.
        """

    @abstractmethod
    def get_cached_property(self, name: str):
        """
        Value of a root object property read at connect time, or None.
        """

    @abstractmethod
    def add_signal_handler(self, handler):
        """
        handler(member, signature, body) is called for each signal.
        """

    @abstractmethod
    def remove_signal_handler(self, handler):
        pass

    @abstractmethod
    def close(self):
        """
        Release the connection. Safe to call more than once.
        """


class DBusTransport(Transport):
    """
    Transport over a dbus-fast MessageBus.

    Use open() to get a connected instance.
    """

    def __init__(self, config: ClientConfig):
        self._config = config
        self._bus = None
        self._properties = {}
        self._signals = Signal()
        self._lock = threading.Lock()
        self._closed = False

        self._loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self._run_loop, name='pycolord-bus',
                                        daemon=True)
        self._thread.start()

    @classmethod
    def open(cls, config: ClientConfig, cancellable: Cancellable | None = None) \
            -> 'DBusTransport':
        """
        Connect to the bus, cache the service's root properties and
        subscribe to its signals.
        """
        transport = cls(config)
        try:
            transport._run(transport._connect(), 'connect', cancellable, config.timeout)
        except BaseException:
            transport.close()
            raise
        return transport

    @property
    def closed(self) -> bool:
        return self._closed

    def _run_loop(self):
        asyncio.set_event_loop(self._loop)
        try:
            self._loop.run_forever()
        finally:
            pending = asyncio.all_tasks(self._loop)
            for task in pending:
                task.cancel()
            if pending:
                self._loop.run_until_complete(
                    asyncio.gather(*pending, return_exceptions=True))
            self._loop.close()

    def _run(self, coro, operation: str, cancellable: Cancellable | None,
             timeout: float | None):
        """
        Run a coroutine on the bus loop and block until it finishes.
        """
        if self._closed:
            coro.close()
            raise TransportError('transport is closed')

        if threading.current_thread() is self._thread:
            coro.close()
            raise TransportError(f"{operation} would block the signal delivery thread")

        if cancellable is not None and cancellable.cancelled:
            coro.close()
            raise CancelledError(operation)

        try:
            future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        except RuntimeError as err:
            # close() on another thread got to the loop first
            coro.close()
            raise TransportError('transport is closed') from err
        handler_id = None
        if cancellable is not None:
            handler_id = cancellable.connect(future.cancel)

        try:
            return future.result(timeout)
        except concurrent.futures.CancelledError as err:
            if self._closed and not (cancellable is not None and cancellable.cancelled):
                raise TransportError('transport closed during call') from err
            raise CancelledError(operation) from err
        except concurrent.futures.TimeoutError as err:
            future.cancel()
            raise TransportError(f"{operation} timed out after {timeout:g}s") from err
        finally:
            if handler_id:
                cancellable.disconnect(handler_id)

    def _make_bus(self) -> MessageBus:
        if self._config.bus_address:
            return MessageBus(bus_address=self._config.bus_address)
        if self._config.bus == 'session':
            return MessageBus(bus_type=BusType.SESSION)
        return MessageBus(bus_type=BusType.SYSTEM)

    async def _connect(self):
        try:
            self._bus = await self._make_bus().connect()
        except Exception as err:
            raise TransportError(f"cannot connect to the {self._config.bus} bus: {err}") \
                    from err

        self._bus.add_message_handler(self._on_message)

        rule = "type='signal',sender='%s',path='%s',interface='%s'" % \
                (self._config.service_name, self._config.object_path, self._config.interface)
        await self._send(DBUS_NAME, DBUS_PATH, DBUS_INTERFACE, 'AddMatch', 's', [rule])

        reply = await self._send(self._config.service_name, self._config.object_path,
                                 PROPERTIES_INTERFACE, 'GetAll', 's',
                                 [self._config.interface])
        if reply.signature == 'a{sv}':
            self._properties = unwrap_variants(reply.body[0])

        _logger.debug("Connected to %s on the %s bus", self._config.service_name,
                      self._config.bus_address or self._config.bus)

    async def _send(self, destination: str, path: str, interface: str, member: str,
                    signature: str = '', body=()) -> Reply:
        if self._bus is None:
            raise TransportError('not connected')

        _logger.log(LOG_TRACE, "--> %s %s.%s(%s) %r", path, interface, member,
                    signature, body)
        try:
            reply = await self._bus.call(Message(destination=destination, path=path,
                                                 interface=interface, member=member,
                                                 signature=signature, body=list(body)))
        except Exception as err:
            raise TransportError(f"{member} failed: {err}") from err

        if reply is None:
            raise TransportError(f"no reply to {member}")

        _logger.log(LOG_TRACE, "<-- %s %s %s %r", member, reply.message_type.name,
                    reply.signature, reply.body)

        if reply.message_type == MessageType.ERROR:
            message = ''
            if reply.body and isinstance(reply.body[0], str):
                message = reply.body[0]
            raise RemoteError(reply.error_name, message)

        return Reply(reply.signature, list(reply.body))

    def _on_message(self, msg: Message):
        if msg.message_type != MessageType.SIGNAL:
            return
        if msg.path != self._config.object_path or msg.interface != self._config.interface:
            return

        _logger.log(LOG_TRACE, "<-- signal %s %s %r", msg.member, msg.signature, msg.body)
        self._signals.fire(msg.member, msg.signature, list(msg.body))

    def call(self, path: str, interface: str, member: str, signature: str = '',
             body=(), cancellable: Cancellable | None = None,
             timeout: float | None = None) -> Reply:
        if timeout is None:
            timeout = self._config.timeout
        return self._run(self._send(self._config.service_name, path, interface, member,
                                    signature, body),
                         member, cancellable, timeout)

    def get_all_properties(self, path: str, interface: str,
                           cancellable: Cancellable | None = None,
                           timeout: float | None = None) -> dict:
        reply = self.call(path, PROPERTIES_INTERFACE, 'GetAll', 's', [interface],
                          cancellable=cancellable, timeout=timeout)
        if reply.signature != 'a{sv}':
            raise TransportError(f"GetAll on {path} returned '{reply.signature}'")
        return unwrap_variants(reply.body[0])

    def get_cached_property(self, name: str):
        return self._properties.get(name)

    def add_signal_handler(self, handler):
        self._signals.connect(handler)

    def remove_signal_handler(self, handler):
        self._signals.disconnect(handler)

    def _shutdown(self):
        if self._bus is not None:
            self._bus.remove_message_handler(self._on_message)
            self._bus.disconnect()
            self._bus = None
        self._loop.stop()

    def close(self):
        with self._lock:
            if self._closed:
                return
            self._closed = True

        try:
            self._loop.call_soon_threadsafe(self._shutdown)
        except RuntimeError:
            # loop already stopped and closed
            self._bus = None
        if threading.current_thread() is not self._thread:
            self._thread.join(self._config.timeout)

        _logger.debug("Transport closed")
