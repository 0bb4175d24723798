"""Encoding of the SSH request payloads used by sessions."""

from __future__ import annotations

import struct
from typing import Iterable

_LENGTH = struct.Struct(">I")
_MAX_UINT32 = 0xFFFFFFFF


class WireError(ValueError):
    """Raised when a payload does not hold the expected message."""


def _pack_string(value: str) -> bytes:
    data = value.encode("utf-8", "surrogateescape")
    return _LENGTH.pack(len(data)) + data


def _unpack_strings(payload: bytes, type_name: str, field_names: Iterable[str]) -> list[str]:
    values = []
    offset = 0
    for name in field_names:
        error = WireError(f"ssh: unmarshal error for field {name} of type {type_name}")
        if len(payload) - offset < _LENGTH.size:
            raise error
        (length,) = _LENGTH.unpack_from(payload, offset)
        offset += _LENGTH.size
        if len(payload) - offset < length:
            raise error
        values.append(payload[offset : offset + length].decode("utf-8", "surrogateescape"))
        offset += length
    if offset != len(payload):
        raise WireError("ssh: parse error in message type 0")
    return values


def pack_env_request(name: str, value: str) -> bytes:
    """Payload of an "env" request setting name to value."""
    return _pack_string(name) + _pack_string(value)


def unpack_env_request(payload: bytes) -> tuple[str, str]:
    """Return the (name, value) pair of an "env" request payload."""
    name, value = _unpack_strings(payload, "envRequest", ("Name", "Value"))
    return name, value


def pack_exec_request(command: str) -> bytes:
    """Payload of an "exec" request running command."""
    return _pack_string(command)


def unpack_exec_request(payload: bytes) -> str:
    """Return the command of an "exec" request payload."""
    (command,) = _unpack_strings(payload, "execRequest", ("Command",))
    return command


def pack_exit_status(status: int) -> bytes:
    """Payload of an "exit-status" request."""
    if not 0 <= status <= _MAX_UINT32:
        raise WireError(f"exit status out of range: {status}")
    return _LENGTH.pack(status)