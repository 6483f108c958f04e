#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""Tests for loading the client configuration."""

import pytest

import pycolord.config
from pycolord.config import ClientConfig
from pycolord.errors import ConfigError
from pycolord.types import SERVICE_NAME, SERVICE_PATH


def test_defaults():
    config = ClientConfig()

    assert config.bus == "system"
    assert config.bus_address is None
    assert config.service_name == SERVICE_NAME
    assert config.object_path == SERVICE_PATH
    assert config.timeout == 25.0
    assert config.version_properties == ("DaemonVersion", "Title")


def test_load_without_file_gives_defaults():
    assert ClientConfig.load(environ={}) == ClientConfig()


def test_load_yaml(tmp_path):
    path = tmp_path / "client.yaml"
    path.write_text("bus: session\ntimeout: 5\nversion_properties: [Version]\n")

    config = ClientConfig.load(str(path), environ={})

    assert config.bus == "session"
    assert config.timeout == 5.0
    assert config.version_properties == ("Version",)


def test_load_default_conffile(tmp_path, monkeypatch):
    path = tmp_path / "client.yaml"
    path.write_text("timeout: 3\n")
    monkeypatch.setattr(pycolord.config, "CONFFILE", str(path))

    assert ClientConfig.load(environ={}).timeout == 3.0


def test_load_config_from_environment_path(tmp_path):
    path = tmp_path / "other.yaml"
    path.write_text("bus: session\n")

    config = ClientConfig.load(environ={"PYCOLORD_CONFIG": str(path)})

    assert config.bus == "session"


def test_environment_overrides_yaml(tmp_path):
    path = tmp_path / "client.yaml"
    path.write_text("bus: system\ntimeout: 5\n")

    config = ClientConfig.load(str(path), environ={
        "PYCOLORD_BUS": "session",
        "PYCOLORD_BUS_ADDRESS": "unix:path=/tmp/test-bus",
        "PYCOLORD_TIMEOUT": "1.5",
    })

    assert config.bus == "session"
    assert config.bus_address == "unix:path=/tmp/test-bus"
    assert config.timeout == 1.5


def test_empty_yaml(tmp_path):
    path = tmp_path / "client.yaml"
    path.write_text("")
    assert ClientConfig.load(str(path), environ={}) == ClientConfig()


@pytest.mark.parametrize("text", [
    "- just\n- a list\n",
    "bus: [unterminated\n",
    "colour: blue\n",
])
def test_bad_yaml(tmp_path, text):
    path = tmp_path / "client.yaml"
    path.write_text(text)

    with pytest.raises(ConfigError):
        ClientConfig.load(str(path), environ={})


def test_missing_explicit_file(tmp_path):
    with pytest.raises(ConfigError):
        ClientConfig.load(str(tmp_path / "nope.yaml"), environ={})


@pytest.mark.parametrize("kwargs", [
    {"bus": "starter"},
    {"timeout": 0},
    {"timeout": -1},
    {"timeout": "soon"},
    {"service_name": ""},
    {"object_path": None},
])
def test_invalid_values(kwargs):
    with pytest.raises(ConfigError):
        ClientConfig(**kwargs)


def test_from_dict_rejects_unknown_keys():
    with pytest.raises(ConfigError) as excinfo:
        ClientConfig.from_dict({"bus": "session", "colour": "blue"})
    assert "colour" in str(excinfo.value)


def test_replace():
    config = ClientConfig().replace(bus="session")
    assert config.bus == "session"
    with pytest.raises(ConfigError):
        config.replace(timeout=-2)
