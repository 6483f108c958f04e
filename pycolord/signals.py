#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Signal events emitted by the daemon.

Events carry object paths only. An observer that wants a handle binds
one itself, for example with Client.bind_device().
"""
from dataclasses import dataclass

from pycolord.dbus_utils import is_object_path
from pycolord.errors import DecodeError
from pycolord.log import Log


_logger = Log.get('pycolord.signals')


@dataclass(frozen=True)
class ClientEvent:
    """
    Base class for all events
    """
    name = None


@dataclass(frozen=True)
class Changed(ClientEvent):
    """
    Something in the daemon changed
    """
    name = 'Changed'


@dataclass(frozen=True)
class ObjectEvent(ClientEvent):
    object_path: str


@dataclass(frozen=True)
class DeviceAdded(ObjectEvent):
    name = 'DeviceAdded'


@dataclass(frozen=True)
class DeviceRemoved(ObjectEvent):
    name = 'DeviceRemoved'


@dataclass(frozen=True)
class ProfileAdded(ObjectEvent):
    name = 'ProfileAdded'


@dataclass(frozen=True)
class ProfileRemoved(ObjectEvent):
    name = 'ProfileRemoved'


def _decode_changed(signature: str, body: list) -> ClientEvent:
    return Changed()


def _path_decoder(event_type):
    def _decode(signature: str, body: list) -> ClientEvent:
        if signature != 'o' or len(body) != 1 or not is_object_path(body[0]):
            raise DecodeError(event_type.name,
                              f"expected one object path, got '{signature}' {body!r}")
        return event_type(body[0])
    return _decode


class SignalRouter:
    """
    Decodes raw signal frames into ClientEvents.

    Each signal name maps to one decoder. Unknown names and malformed
    payloads are logged and dropped.
    """

    DECODERS = {
        'Changed': _decode_changed,
        'DeviceAdded': _path_decoder(DeviceAdded),
        'DeviceRemoved': _path_decoder(DeviceRemoved),
        'ProfileAdded': _path_decoder(ProfileAdded),
        'ProfileRemoved': _path_decoder(ProfileRemoved),
    }

    def decode(self, member: str, signature: str = '', body=()) -> ClientEvent | None:
        """
        Decode one signal frame.

        :return: The event, or None if the frame should be ignored
        """
        decoder = self.DECODERS.get(member)
        if decoder is None:
            _logger.warning("Unhandled signal '%s'", member)
            return None

        try:
            event = decoder(signature, list(body))
        except DecodeError as err:
            _logger.warning("Dropping malformed signal: %s", err)
            return None

        _logger.debug("Signal: %s", event)
        return event
