#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Client configuration.

Defaults point at the system colord daemon. They can be overridden
from a YAML file and then from the environment:

    bus: session
    timeout: 5
    service_name: org.freedesktop.ColorManager
"""
import dataclasses
import os

from dataclasses import dataclass, field

from ruamel.yaml import YAML
from ruamel.yaml.error import YAMLError

from pycolord.errors import ConfigError
from pycolord.types import DEVICE_INTERFACE, PROFILE_INTERFACE, SERVICE_INTERFACE, \
        SERVICE_NAME, SERVICE_PATH


CONFDIR = os.path.join(os.path.expanduser('~'), '.config', 'pycolord')
CONFFILE = os.path.join(CONFDIR, 'client.yaml')

ENV_CONFIG = 'PYCOLORD_CONFIG'
ENV_BUS = 'PYCOLORD_BUS'
ENV_BUS_ADDRESS = 'PYCOLORD_BUS_ADDRESS'
ENV_TIMEOUT = 'PYCOLORD_TIMEOUT'

BUS_TYPES = ('system', 'session')

# Same as the libdbus default reply timeout
DEFAULT_TIMEOUT = 25.0


@dataclass(frozen=True)
class ClientConfig:
    """
    Where the daemon lives and how long to wait for it.
    """
    bus: str = 'system'
    bus_address: str | None = None
    service_name: str = SERVICE_NAME
    object_path: str = SERVICE_PATH
    interface: str = SERVICE_INTERFACE
    device_interface: str = DEVICE_INTERFACE
    profile_interface: str = PROFILE_INTERFACE
    timeout: float = DEFAULT_TIMEOUT
    version_properties: tuple = field(default=('DaemonVersion', 'Title'))

    def __post_init__(self):
        if self.bus not in BUS_TYPES:
            raise ConfigError(f"Invalid bus '{self.bus}', expected one of {BUS_TYPES}")

        try:
            timeout = float(self.timeout)
        except (TypeError, ValueError) as err:
            raise ConfigError(f"Invalid timeout: {self.timeout!r}") from err
        if timeout <= 0:
            raise ConfigError(f"Timeout must be positive, got {timeout}")
        object.__setattr__(self, 'timeout', timeout)

        if isinstance(self.version_properties, str):
            object.__setattr__(self, 'version_properties', (self.version_properties,))
        else:
            object.__setattr__(self, 'version_properties', tuple(self.version_properties))

        for name in ('service_name', 'object_path', 'interface',
                     'device_interface', 'profile_interface'):
            value = getattr(self, name)
            if not isinstance(value, str) or not value:
                raise ConfigError(f"Invalid {name}: {value!r}")

    @classmethod
    def from_dict(cls, values: dict) -> 'ClientConfig':
        """
        Build a config from a mapping, rejecting unknown keys.
        """
        known = {f.name for f in dataclasses.fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ConfigError(f"Unknown configuration keys: {', '.join(sorted(unknown))}")
        return cls(**values)

    @staticmethod
    def _read_yaml(path: str) -> dict:
        try:
            with open(path, encoding='utf-8') as stream:
                data = YAML(typ='safe').load(stream)
        except OSError as err:
            raise ConfigError(f"Unable to read {path}: {err}") from err
        except YAMLError as err:
            raise ConfigError(f"Malformed configuration in {path}: {err}") from err

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigError(f"{path} must contain a mapping")
        return dict(data)

    @staticmethod
    def _read_env(environ) -> dict:
        values = {}
        if environ.get(ENV_BUS):
            values['bus'] = environ[ENV_BUS]
        if environ.get(ENV_BUS_ADDRESS):
            values['bus_address'] = environ[ENV_BUS_ADDRESS]
        if environ.get(ENV_TIMEOUT):
            values['timeout'] = environ[ENV_TIMEOUT]
        return values

    @classmethod
    def load(cls, path: str | None = None, environ=None) -> 'ClientConfig':
        """
        Load configuration: defaults, then YAML, then environment.

        :param path: Explicit YAML file. When omitted, $PYCOLORD_CONFIG
                     or ~/.config/pycolord/client.yaml is used if present.
        :param environ: Mapping used instead of os.environ
        """
        if environ is None:
            environ = os.environ

        values = {}
        if path is None:
            path = environ.get(ENV_CONFIG)
            if path is None and os.path.isfile(CONFFILE):
                path = CONFFILE
        if path is not None:
            values.update(cls._read_yaml(path))

        values.update(cls._read_env(environ))
        return cls.from_dict(values)

    def replace(self, **changes) -> 'ClientConfig':
        return dataclasses.replace(self, **changes)
