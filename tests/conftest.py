# pycolord test configuration and shared fixtures
from __future__ import annotations

import re
import threading

import pytest

import pycolord.client
import pycolord.config
from pycolord.client import Client
from pycolord.config import ClientConfig
from pycolord.dbus_utils import Reply
from pycolord.errors import RemoteError
from pycolord.transport import Transport


ROOT = "/org/freedesktop/ColorManager"
DEVICES = ROOT + "/devices"
PROFILES = ROOT + "/profiles"


def object_path_element(object_id: str) -> str:
    """Path element the daemon derives from an object id."""
    return re.sub(r"[^A-Za-z0-9_]", "_", object_id)


# ─────────────────────────────────────────────────────────────────────────────
# Fake transport
# ─────────────────────────────────────────────────────────────────────────────


class FakeTransport(Transport):
    """
    Scripted in-memory transport.

    replies: method name -> Reply, exception instance, or callable(body)
    objects: object path -> property dict (or exception instance)
    cached:  root properties returned by get_cached_property()
    """

    def __init__(self, cached=None):
        self.calls = []
        self.property_reads = []
        self.replies = {}
        self.objects = {}
        self.cached = dict(cached or {})
        self.handlers = []
        self.close_count = 0
        self._lock = threading.Lock()

    def call(self, path, interface, member, signature="", body=(), cancellable=None,
             timeout=None):
        if cancellable is not None:
            cancellable.raise_if_cancelled(member)

        with self._lock:
            self.calls.append((path, interface, member, signature, list(body)))

        reply = self.replies.get(member)
        if callable(reply) and not isinstance(reply, Reply):
            reply = reply(list(body))
        if isinstance(reply, Exception):
            raise reply
        if reply is None:
            return Reply("", [])
        return reply

    def get_all_properties(self, path, interface, cancellable=None, timeout=None):
        if cancellable is not None:
            cancellable.raise_if_cancelled("GetAll")

        with self._lock:
            self.property_reads.append((path, interface))

        props = self.objects.get(path)
        if props is None:
            raise RemoteError("org.freedesktop.DBus.Error.UnknownObject",
                              f"Unknown object '{path}'")
        if isinstance(props, Exception):
            raise props
        return dict(props)

    def get_cached_property(self, name):
        return self.cached.get(name)

    def add_signal_handler(self, handler):
        self.handlers.append(handler)

    def remove_signal_handler(self, handler):
        if handler in self.handlers:
            self.handlers.remove(handler)

    def close(self):
        self.close_count += 1

    def emit(self, member, signature="", body=()):
        for handler in list(self.handlers):
            handler(member, signature, list(body))

    def add_device(self, name, kind="display", **extra):
        path = f"{DEVICES}/{object_path_element(name)}"
        self.objects[path] = {"Id": name, "Kind": kind, **extra}
        return path

    def add_profile(self, name, kind="display-device", **extra):
        path = f"{PROFILES}/{object_path_element(name)}"
        self.objects[path] = {"Id": name, "Kind": kind, **extra}
        return path

    def member_calls(self, member):
        return [c for c in self.calls if c[2] == member]


class FakeFactory:
    """
    transport_factory which hands out one FakeTransport and counts opens
    """

    def __init__(self, transport):
        self.transport = transport
        self.opened = 0
        self.error = None

    def __call__(self, config, cancellable):
        if self.error is not None:
            raise self.error
        self.opened += 1
        return self.transport


# ─────────────────────────────────────────────────────────────────────────────
# Fixtures
# ─────────────────────────────────────────────────────────────────────────────


@pytest.fixture(autouse=True)
def isolated_config(monkeypatch, tmp_path):
    """Keep the user's configuration and environment out of tests."""
    for name in ("PYCOLORD_CONFIG", "PYCOLORD_BUS", "PYCOLORD_BUS_ADDRESS",
                 "PYCOLORD_TIMEOUT"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setattr(pycolord.config, "CONFFILE", str(tmp_path / "missing.yaml"))
    yield
    pycolord.client._shared_client = None


@pytest.fixture
def config() -> ClientConfig:
    return ClientConfig()


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport(cached={"DaemonVersion": "0.1.0"})


@pytest.fixture
def factory(transport) -> FakeFactory:
    return FakeFactory(transport)


@pytest.fixture
def client(config, factory) -> Client:
    return Client(config, factory)


@pytest.fixture
def connected(client) -> Client:
    client.connect()
    return client
