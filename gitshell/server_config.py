"""Authentication rules and algorithm choices of the SSH daemon."""

from __future__ import annotations

import base64
import logging
from dataclasses import dataclass, field
from typing import Callable, Optional, Sequence

from gitshell.gssapi import GssapiServer

_logger = logging.getLogger("gitshell")

KEY_ALGO_DSA = "ssh-dss"
SERVER_VERSION = "SSH-2.0-GitLab-SSHD"

SUPPORTED_MACS = (
    "hmac-sha2-256-etm@example.com",
    "hmac-sha2-512-etm@example.com",
    "hmac-sha2-256",
    "hmac-sha2-512",
    "hmac-sha1",
)

SUPPORTED_KEY_EXCHANGES = (
    "curve25519-sha256",
    "curve25519-sha256@example.com",
    "ecdh-sha2-nistp256",
    "ecdh-sha2-nistp384",
    "ecdh-sha2-nistp521",
    "diffie-hellman-group14-sha256",
    "diffie-hellman-group14-sha1",
)


def select_macs(custom: Sequence[str] | None) -> tuple[str, ...]:
    """The configured MACs, or the supported set when none are configured."""
    return tuple(custom) if custom else SUPPORTED_MACS


def select_key_exchanges(custom: Sequence[str] | None) -> tuple[str, ...]:
    """The configured key exchanges, or the supported set when none are configured."""
    return tuple(custom) if custom else SUPPORTED_KEY_EXCHANGES


def select_ciphers(custom: Sequence[str] | None) -> tuple[str, ...] | None:
    """The configured ciphers, or None to leave the transport's defaults."""
    return tuple(custom) if custom else None


def select_public_key_algorithms(custom: Sequence[str] | None) -> tuple[str, ...] | None:
    """The configured public key algorithms, or None to leave the transport's defaults."""
    return tuple(custom) if custom else None


@dataclass(frozen=True)
class AlgorithmSettings:
    """Algorithms offered by the server; None means the transport's defaults."""

    macs: tuple[str, ...]
    key_exchanges: tuple[str, ...]
    ciphers: Optional[tuple[str, ...]] = None
    public_key_algorithms: Optional[tuple[str, ...]] = None
    server_version: str = SERVER_VERSION


@dataclass
class ServerConfig:
    """Who may log in and which algorithms are offered.

    ``key_lookup`` is given a public key blob in unpadded base64 and returns
    the id of the matching key, raising when the key is not known.
    """

    user: str = ""
    key_lookup: Optional[Callable[[str], int]] = None
    macs: Sequence[str] = ()
    kex_algorithms: Sequence[str] = ()
    ciphers: Sequence[str] = ()
    public_key_algorithms: Sequence[str] = ()
    gssapi_enabled: bool = False
    gssapi_service_principal_name: str = ""
    gssapi_server: Optional[GssapiServer] = field(init=False, default=None)

    def __post_init__(self) -> None:
        if self.gssapi_enabled:
            self.gssapi_server = GssapiServer(
                service_principal_name=self.gssapi_service_principal_name
            )

    def handle_user_key(self, user: str, key_type: str, key_blob: bytes) -> dict[str, str]:
        """Authenticate a public key; return the extensions recorded for the session."""
        if user != self.user:
            raise PermissionError("unknown user")
        if key_type == KEY_ALGO_DSA:
            raise PermissionError("DSA is prohibited")
        if self.key_lookup is None:
            raise RuntimeError("no authorized keys lookup configured")

        encoded = base64.b64encode(key_blob).decode("ascii").rstrip("=")
        key_id = self.key_lookup(encoded)
        return {"key-id": str(int(key_id))}

    def allow_gssapi_login(self, user: str, src_name: str) -> dict[str, str]:
        """Allow a Kerberos login; return the extensions recorded for the session."""
        if user != self.user:
            raise PermissionError("unknown user")
        return {"krb5principal": src_name}

    def algorithms(self) -> AlgorithmSettings:
        """The algorithms to offer to clients."""
        return AlgorithmSettings(
            macs=select_macs(self.macs),
            key_exchanges=select_key_exchanges(self.kex_algorithms),
            ciphers=select_ciphers(self.ciphers),
            public_key_algorithms=select_public_key_algorithms(self.public_key_algorithms),
        )