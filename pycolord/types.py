#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Common types and enumerations which are used by everything.
"""

from enum import Enum, IntFlag


SERVICE_NAME = "org.freedesktop.ColorManager"
SERVICE_PATH = "/org/freedesktop/ColorManager"
SERVICE_INTERFACE = "org.freedesktop.ColorManager"
DEVICE_INTERFACE = "org.freedesktop.ColorManager.Device"
PROFILE_INTERFACE = "org.freedesktop.ColorManager.Profile"


class _WireEnum(Enum):
    """
    Base class for enumerations which travel over the bus as strings
    """

    @classmethod
    def from_string(cls, value):
        """
        Look up a member by its wire name, UNKNOWN if there is none.
        """
        for member in cls:
            if member.value == value:
                return member
        return cls.UNKNOWN

    def __str__(self):
        return self.value


class DeviceKind(_WireEnum):
    """
    Categories of color managed devices
    """
    UNKNOWN = "unknown"
    DISPLAY = "display"
    SCANNER = "scanner"
    PRINTER = "printer"
    CAMERA = "camera"
    WEBCAM = "webcam"


class ProfileKind(_WireEnum):
    """
    ICC profile classes known to the daemon
    """
    UNKNOWN = "unknown"
    INPUT_DEVICE = "input-device"
    DISPLAY_DEVICE = "display-device"
    OUTPUT_DEVICE = "output-device"
    DEVICELINK = "devicelink"
    COLORSPACE_CONVERSION = "colorspace-conversion"
    ABSTRACT = "abstract"
    NAMED_COLOR = "named-color"


class CreateOptions(IntFlag):
    """
    Options bitmask for CreateDevice and CreateProfile
    """
    NONE = 0
    TEMP = 1
    DISK = 2
