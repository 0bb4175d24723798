import io

import pytest

from gitshell.pktline import (
    PacketLineError,
    is_done,
    is_flush,
    is_ref_removal,
    pkt_done,
    scan_packets,
)

LARGEST_STRING = b"z" * (0xFFFF - 4)
LARGEST_PACKET = b"ffff" + LARGEST_STRING


class _TrickleStream:
    def __init__(self, data):
        self._data = data

    def read(self, _size):
        chunk, self._data = self._data[:1], self._data[1:]
        return chunk


def _collect(stream):
    out = []
    error = None
    try:
        for packet in scan_packets(stream):
            out.append(packet)
    except PacketLineError as exc:
        error = exc
    return out, error


@pytest.mark.parametrize(
    "data, expected, fail",
    [
        (
            b"0010hello world!000000010010hello world!",
            [b"0010hello world!", b"0000", b"0001", b"0010hello world!"],
            False,
        ),
        (
            b"0010hello world!0000" + LARGEST_PACKET + b"0000",
            [b"0010hello world!", b"0000", LARGEST_PACKET, b"0000"],
            False,
        ),
        (
            b"0010hello world!00000010010hello world!",
            [b"0010hello world!", b"0000", b"0010010hello wor"],
            True,
        ),
        (b"0010hello world!000", [b"0010hello world!"], True),
        (b"0010hello world!0005", [b"0010hello world!"], True),
    ],
    ids=["happy path", "large input", "missing byte middle", "unfinished prefix", "short read"],
)
def test_scanner(data, expected, fail):
    out, error = _collect(io.BytesIO(data))
    assert out == expected
    assert (error is not None) == fail


def test_scanner_with_one_byte_reads():
    data = b"0010hello world!000000010010hello world!"
    out, error = _collect(_TrickleStream(data))
    assert error is None
    assert out == [b"0010hello world!", b"0000", b"0001", b"0010hello world!"]


def test_scanner_empty_input():
    assert _collect(io.BytesIO(b"")) == ([], None)


def test_scanner_rejects_non_hex_prefix():
    with pytest.raises(PacketLineError):
        list(scan_packets(io.BytesIO(b"zzzzabc")))


@pytest.mark.parametrize(
    "pkt, removal",
    [
        (b"003f7217a7c7e582c46cec22a130adf4b9d7d950fba0 7d1665144a3a975c05f1f43902ddaf084e784dbe refs/heads/debug", False),
        (b"003f0000000000000000000000000000000000000000 7d1665144a3a975c05f1f43902ddaf084e784dbe refs/heads/debug", False),
        (b"003f7217a7c7e582c46cec22a130adf4b9d7d950fba0 0000000000000000000000000000000000000000 refs/heads/debug", True),
    ],
)
def test_is_ref_removal(pkt, removal):
    assert is_ref_removal(pkt) is removal


@pytest.mark.parametrize(
    "pkt, flush",
    [(b"0008abcd", False), (b"invalid packet", False), (b"0000", True)],
)
def test_is_flush(pkt, flush):
    assert is_flush(pkt) is flush


@pytest.mark.parametrize(
    "pkt, done",
    [(b"0008abcd", False), (b"invalid packet", False), (b"0009done\n", True), (b"0001", False)],
)
def test_is_done(pkt, done):
    assert is_done(pkt) is done


def test_pkt_done():
    assert pkt_done() == b"0009done\n"