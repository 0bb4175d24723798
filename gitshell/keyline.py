"""Lines for an authorized_keys file that route logins through the shell."""

from __future__ import annotations

import posixpath
import re
from dataclasses import dataclass

PUBLIC_KEY_PREFIX = "key"
PRINCIPAL_PREFIX = "username"
SSH_OPTIONS = "no-port-forwarding,no-X11-forwarding,no-agent-forwarding,no-pty"

BIN_DIR = "bin"
SHELL_EXECUTABLE = "gitlab-shell"

_KEY_ID = re.compile(r"[a-z0-9-]+")


class KeyLineError(ValueError):
    """Raised when a key line would be malformed."""


@dataclass(frozen=True)
class KeyLine:
    """One authorized_keys entry: an identifier and the key or principal it maps to."""

    id: str
    value: str
    prefix: str
    root_dir: str

    def render(self) -> str:
        """Return the line as it is written to authorized_keys."""
        executable = posixpath.normpath(posixpath.join(self.root_dir, BIN_DIR, SHELL_EXECUTABLE))
        command = f"{executable} {self.prefix}-{self.id}"
        return f'command="{command}",{SSH_OPTIONS} {self.value}'

    def __str__(self) -> str:
        return self.render()


def _new_key_line(key_id: str, value: str, prefix: str, root_dir: str) -> KeyLine:
    if not _KEY_ID.fullmatch(key_id):
        raise KeyLineError(f"invalid key_id: {key_id}")
    if "\n" in value:
        raise KeyLineError(f"invalid value: {value}")
    return KeyLine(id=key_id, value=value, prefix=prefix, root_dir=root_dir)


def new_public_key_line(key_id: str, public_key: str, root_dir: str) -> KeyLine:
    """Build a key line for a public key."""
    return _new_key_line(key_id, public_key, PUBLIC_KEY_PREFIX, root_dir)


def new_principal_key_line(key_id: str, principal: str, root_dir: str) -> KeyLine:
    """Build a key line for a certificate principal."""
    return _new_key_line(key_id, principal, PRINCIPAL_PREFIX, root_dir)