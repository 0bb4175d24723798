import pytest

from gitshell.sshwire import (
    WireError,
    pack_env_request,
    pack_exec_request,
    pack_exit_status,
    unpack_env_request,
    unpack_exec_request,
)


def test_exit_status_zero_bytes():
    assert pack_exit_status(0) == b"\x00\x00\x00\x00"


def test_env_request_bytes():
    assert pack_env_request("GIT_PROTOCOL", "2") == b"\x00\x00\x00\x0cGIT_PROTOCOL\x00\x00\x00\x012"


@pytest.mark.parametrize(
    "name,value",
    [("GIT_PROTOCOL", "2"), ("", ""), ("LANG", "héllo wörld"), ("A", "x" * 1000)],
)
def test_env_round_trip(name, value):
    assert unpack_env_request(pack_env_request(name, value)) == (name, value)


@pytest.mark.parametrize("command", ["discover", "", "git-upload-pack 'group/repo.git'", "ünïcode"])
def test_exec_round_trip(command):
    assert unpack_exec_request(pack_exec_request(command)) == command


def test_exec_payload_length_prefix_matches_body():
    payload = pack_exec_request("discover")
    assert int.from_bytes(payload[:4], "big") == len(payload) - 4
    assert payload[4:] == b"discover"


def test_invalid_env_payload():
    with pytest.raises(WireError) as info:
        unpack_env_request(b"invalid")
    assert str(info.value) == "ssh: unmarshal error for field Name of type envRequest"


def test_invalid_exec_payload():
    with pytest.raises(WireError) as info:
        unpack_exec_request(b"invalid")
    assert str(info.value) == "ssh: unmarshal error for field Command of type execRequest"


def test_truncated_env_value():
    payload = pack_env_request("GIT_PROTOCOL", "2")[:-1]
    with pytest.raises(WireError) as info:
        unpack_env_request(payload)
    assert str(info.value) == "ssh: unmarshal error for field Value of type envRequest"


def test_trailing_data_rejected():
    with pytest.raises(WireError):
        unpack_exec_request(pack_exec_request("discover") + b"x")


def test_env_payload_is_not_an_exec_payload():
    with pytest.raises(WireError):
        unpack_exec_request(pack_env_request("GIT_PROTOCOL", "2"))


@pytest.mark.parametrize("status", [0, 1, 128, 0xFFFFFFFF])
def test_exit_status_is_big_endian_uint32(status):
    payload = pack_exit_status(status)
    assert len(payload) == 4
    assert int.from_bytes(payload, "big") == status


@pytest.mark.parametrize("status", [-1, 0x100000000])
def test_exit_status_out_of_range(status):
    with pytest.raises(WireError):
        pack_exit_status(status)