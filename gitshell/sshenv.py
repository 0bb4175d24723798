"""SSH-related environment of a shell invocation."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Mapping

GIT_PROTOCOL_ENV = "GIT_PROTOCOL"
SSH_CONNECTION_ENV = "SSH_CONNECTION"
SSH_ORIGINAL_COMMAND_ENV = "SSH_ORIGINAL_COMMAND"


@dataclass
class Env:
    """What the SSH layer tells the shell about the connection."""

    git_protocol_version: str = ""
    is_ssh_connection: bool = False
    original_command: str = ""
    remote_addr: str = ""
    namespace_path: str = ""


def new_from_env(environ: Mapping[str, str] | None = None) -> Env:
    """Build an Env from environment variables (os.environ by default)."""
    if environ is None:
        environ = os.environ
    return Env(
        git_protocol_version=environ.get(GIT_PROTOCOL_ENV, ""),
        is_ssh_connection=bool(environ.get(SSH_CONNECTION_ENV, "")),
        original_command=environ.get(SSH_ORIGINAL_COMMAND_ENV, ""),
        remote_addr=remote_addr_from_env(environ),
    )


def remote_addr_from_env(environ: Mapping[str, str] | None = None) -> str:
    """Return the client address from SSH_CONNECTION, or an empty string."""
    if environ is None:
        environ = os.environ
    fields = environ.get(SSH_CONNECTION_ENV, "").split()
    return fields[0] if fields else ""