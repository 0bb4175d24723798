"""Helpers for the Git pkt-line format."""

from __future__ import annotations

import re
from typing import BinaryIO, Iterator

MAX_PKT_SIZE = 0xFFFF
PKT_DELIM = b"0001"

_READ_SIZE = 0x10000
_HEX_PREFIX = re.compile(rb"[+-]?[0-9a-fA-F]+")
_BRANCH_REMOVAL = re.compile(rb"\A[a-f0-9]{4}[a-f0-9]{40} 0{40} ")


class PacketLineError(ValueError):
    """Raised when the input is not a well-formed sequence of packets."""


def _split(data: bytearray, at_eof: bool) -> int | None:
    """Return the length of the next packet in data, or None if more is needed."""
    if len(data) < 4:
        if at_eof and data:
            raise PacketLineError(f"pktLineSplitter: incomplete length prefix on {bytes(data)!r}")
        return None

    prefix = bytes(data[:4])
    if not _HEX_PREFIX.fullmatch(prefix):
        raise PacketLineError(f"pktLineSplitter: decode length: invalid syntax {prefix!r}")
    length = int(prefix, 16)

    if length < 0:
        raise PacketLineError(f"pktLineSplitter: invalid length: {length}")
    if length < 4:
        # Magic empty packets 0000, 0001, 0002 and 0003.
        return 4
    if len(data) < length:
        if at_eof:
            raise PacketLineError(
                f"pktLineSplitter: less than {length} bytes in input {bytes(data)!r}"
            )
        return None
    return length


def scan_packets(stream: BinaryIO) -> Iterator[bytes]:
    """Yield each packet read from a binary stream.

    Raises PacketLineError after the last complete packet if the input is malformed.
    """
    buffer = bytearray()
    at_eof = False
    while True:
        length = _split(buffer, at_eof)
        if length is not None:
            packet = bytes(buffer[:length])
            del buffer[:length]
            yield packet
            continue
        if at_eof:
            return
        chunk = stream.read(_READ_SIZE)
        if chunk:
            buffer.extend(chunk)
        else:
            at_eof = True


def is_ref_removal(pkt: bytes) -> bool:
    """Whether the packet removes a reference."""
    return _BRANCH_REMOVAL.match(pkt) is not None


def is_flush(pkt: bytes) -> bool:
    """Whether the packet is the flush packet '0000'."""
    return pkt == b"0000"


def is_done(pkt: bytes) -> bool:
    """Whether the packet is the 'done' packet."""
    return pkt == pkt_done()


def pkt_done() -> bytes:
    """The bytes of a 'done' packet."""
    return b"0009done\n"