#
# Copyright (C) 2026 pycolord Developers — LGPL-3.0-or-later
#
"""
Reply decoding helpers.

Each remote method has a fixed reply signature. Replies are checked
against it once, at the boundary, before any field is extracted.
"""
import re

from typing import NamedTuple

from dbus_fast import Variant

from pycolord.errors import DecodeError


class Reply(NamedTuple):
    """
    Body of a method return, with the signature it was sent with
    """
    signature: str
    body: list


OBJECT_PATH_RE = re.compile(r'^/$|^(/[A-Za-z0-9_]+)+$')


def is_object_path(value) -> bool:
    """
    True if value is a syntactically valid D-Bus object path
    """
    return isinstance(value, str) and OBJECT_PATH_RE.match(value) is not None


def unwrap_variants(obj):
    """
    Recursively unwrap dbus_fast Variants.
    """
    if isinstance(obj, Variant):
        return unwrap_variants(obj.value)
    if isinstance(obj, dict):
        return {k: unwrap_variants(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple)):
        return type(obj)(unwrap_variants(item) for item in obj)
    return obj


def decode_reply(operation: str, reply: Reply, signature: str) -> list:
    """
    Check that a reply has exactly the expected signature.

    :param operation: Remote method name, for error messages
    :param reply: The reply to check
    :param signature: Expected D-Bus signature of the reply body

    :return: The reply body
    """
    if not isinstance(reply, Reply):
        raise DecodeError(operation, f"not a method reply: {reply!r}")

    if reply.signature != signature:
        raise DecodeError(operation, "expected signature '%s', got '%s'"
                          % (signature, reply.signature))

    body = list(reply.body)
    if len(body) != len(_split_signature(signature)):
        raise DecodeError(operation, "expected %d values, got %d"
                          % (len(_split_signature(signature)), len(body)))
    return body


def expect_empty(operation: str, reply: Reply):
    decode_reply(operation, reply, '')


def expect_object_path(operation: str, reply: Reply) -> str:
    """
    Extract the single object path from a '(o)' reply.
    """
    path, = decode_reply(operation, reply, 'o')
    if not is_object_path(path):
        raise DecodeError(operation, f"invalid object path {path!r}")
    return path


def expect_object_path_array(operation: str, reply: Reply) -> list:
    """
    Extract the list of object paths from an '(ao)' reply, in order.
    """
    paths, = decode_reply(operation, reply, 'ao')
    if not isinstance(paths, (list, tuple)):
        raise DecodeError(operation, f"expected an array, got {paths!r}")
    for path in paths:
        if not is_object_path(path):
            raise DecodeError(operation, f"invalid object path {path!r}")
    return list(paths)


def _split_signature(signature: str) -> list:
    """
    Split a signature into its complete single types.
    """
    types = []
    idx = 0
    while idx < len(signature):
        end = _single_type_end(signature, idx)
        types.append(signature[idx:end])
        idx = end
    return types


def _single_type_end(signature: str, idx: int) -> int:
    char = signature[idx]
    if char == 'a':
        return _single_type_end(signature, idx + 1)
    if char in '({':
        close = ')' if char == '(' else '}'
        idx += 1
        while signature[idx] != close:
            idx = _single_type_end(signature, idx)
        return idx + 1
    return idx + 1
