from .client import Client, get_client
from .config import ClientConfig
from .errors import AlreadyConnectedError, BindFailedError, CancelledError, ColordError, \
        ConnectionFailedError, DecodeError, NotBoundError, NotConnectedError, NotFoundError, \
        RequestFailedError
from .objects import Device, Profile
from .signals import Changed, ClientEvent, DeviceAdded, DeviceRemoved, ProfileAdded, \
        ProfileRemoved
from .types import CreateOptions, DeviceKind, ProfileKind
from .util import Cancellable
from .version import __version__
