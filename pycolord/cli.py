#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Command line access to the colord daemon.

    pycolord get-devices
    pycolord create-profile icc-001 --temp
    pycolord monitor
"""
import logging
import sys
import threading

from argparse import ArgumentParser, RawDescriptionHelpFormatter

from argcomplete import autocomplete

from pycolord.client import get_client
from pycolord.config import ClientConfig
from pycolord.errors import ColordError
from pycolord.log import LOG_TRACE, Log
from pycolord.types import CreateOptions, DeviceKind
from pycolord.version import __version__


PYTHON_ARGCOMPLETE_OK = 1


def _print_objects(objects, noun: str):
    if not objects:
        print(f"No {noun}s")
        return
    for obj in objects:
        print(obj.to_string())
        print()


def _options(args) -> CreateOptions:
    options = CreateOptions.NONE
    if args.temp:
        options |= CreateOptions.TEMP
    if args.disk:
        options |= CreateOptions.DISK
    return options


def cmd_get_devices(client, args):
    _print_objects(client.list_devices(), 'device')


def cmd_get_devices_by_kind(client, args):
    _print_objects(client.list_devices_by_kind(DeviceKind(args.kind)), 'device')


def cmd_get_profiles(client, args):
    _print_objects(client.list_profiles(), 'profile')


def cmd_create_device(client, args):
    print(client.create_device(args.id, _options(args)).to_string())


def cmd_create_profile(client, args):
    print(client.create_profile(args.id, _options(args)).to_string())


def cmd_delete_device(client, args):
    client.delete_device(args.id)
    print(f"Deleted device {args.id}")


def cmd_delete_profile(client, args):
    client.delete_profile(args.id)
    print(f"Deleted profile {args.id}")


def cmd_find_device(client, args):
    print(client.find_device(args.id).to_string())


def cmd_find_profile(client, args):
    print(client.find_profile(args.id).to_string())


def cmd_profile_set_filename(client, args):
    profile = client.find_profile(args.id)
    profile.set_filename(args.filename)
    print(profile.to_string())


def cmd_profile_set_qualifier(client, args):
    profile = client.find_profile(args.id)
    profile.set_qualifier(args.qualifier)
    print(profile.to_string())


def cmd_profile_install(client, args):
    client.find_profile(args.id).install_system_wide()
    print(f"Installed profile {args.id} system-wide")


def cmd_version(client, args):
    print(client.daemon_version() or 'unknown')


def cmd_monitor(client, args, stop: threading.Event | None = None):
    if stop is None:
        stop = threading.Event()

    def _print_event(event):
        path = getattr(event, 'object_path', None)
        print(event.name if path is None else f"{event.name} {path}", flush=True)

    client.subscribe(_print_event)
    try:
        stop.wait()
    finally:
        client.unsubscribe(_print_event)


def _add_id(parser, with_options=False):
    parser.add_argument('id', help='object id')
    if with_options:
        parser.add_argument('--temp', action='store_true',
                            help='only keep the object for this session')
        parser.add_argument('--disk', action='store_true',
                            help='persist the object across daemon restarts')


def build_parser() -> ArgumentParser:
    parser = ArgumentParser(prog='pycolord', description='Access the colord daemon',
                            formatter_class=RawDescriptionHelpFormatter)
    parser.add_argument('-v', '--version', action='version',
                        version=f"pycolord {__version__}")
    parser.add_argument('-d', '--debug', action='append_const', const=True,
                        help='increase logging verbosity')
    parser.add_argument('-C', '--colorlog', action='store_true',
                        help='use colored log output')
    parser.add_argument('--session', action='store_true',
                        help='talk to a daemon on the session bus')
    parser.add_argument('--config', metavar='FILE', help='configuration file')

    sub = parser.add_subparsers(dest='command', metavar='COMMAND')

    sub.add_parser('get-devices', help='list all devices') \
            .set_defaults(func=cmd_get_devices)

    cmd = sub.add_parser('get-devices-by-kind', help='list devices of one kind')
    cmd.add_argument('kind', choices=[k.value for k in DeviceKind])
    cmd.set_defaults(func=cmd_get_devices_by_kind)

    sub.add_parser('get-profiles', help='list all profiles') \
            .set_defaults(func=cmd_get_profiles)

    for name, func, help_text, with_options in (
            ('create-device', cmd_create_device, 'create a device', True),
            ('create-profile', cmd_create_profile, 'create a profile', True),
            ('delete-device', cmd_delete_device, 'delete a device', False),
            ('delete-profile', cmd_delete_profile, 'delete a profile', False),
            ('find-device', cmd_find_device, 'show a device by id', False),
            ('find-profile', cmd_find_profile, 'show a profile by id', False),
            ('profile-install', cmd_profile_install,
             'install a profile system-wide', False)):
        cmd = sub.add_parser(name, help=help_text)
        _add_id(cmd, with_options)
        cmd.set_defaults(func=func)

    cmd = sub.add_parser('profile-set-filename', help='set the ICC file of a profile')
    _add_id(cmd)
    cmd.add_argument('filename')
    cmd.set_defaults(func=cmd_profile_set_filename)

    cmd = sub.add_parser('profile-set-qualifier', help='set the qualifier of a profile')
    _add_id(cmd)
    cmd.add_argument('qualifier')
    cmd.set_defaults(func=cmd_profile_set_qualifier)

    sub.add_parser('version', help='show the daemon version') \
            .set_defaults(func=cmd_version)
    sub.add_parser('monitor', help='print daemon signals until interrupted') \
            .set_defaults(func=cmd_monitor)

    return parser


def _setup_logging(args):
    Log.enable_color(args.colorlog)

    level = logging.WARNING
    if args.debug is not None:
        level = LOG_TRACE if len(args.debug) > 1 else logging.DEBUG
    logging.getLogger().setLevel(level)


def main(args: list[str] | None = None, transport_factory=None) -> int:
    """
    Console entry point.

    :return: Exit code
    """
    parser = build_parser()
    autocomplete(parser)
    parsed = parser.parse_args(args)

    if getattr(parsed, 'func', None) is None:
        parser.print_help()
        return 0

    _setup_logging(parsed)

    try:
        config = ClientConfig.load(parsed.config)
        if parsed.session:
            config = config.replace(bus='session')

        with get_client(config, transport_factory) as client:
            client.connect()
            parsed.func(client, parsed)

    except KeyboardInterrupt:
        print()
        return 130
    except ColordError as err:
        print(f"pycolord: {err}", file=sys.stderr)
        return 1

    return 0


if __name__ == '__main__':
    sys.exit(main())
