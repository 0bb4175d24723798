"""GSSAPI authentication server for builds without Kerberos support."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

UNSUPPORTED_MESSAGE = "gssapi is unsupported"

_log = logging.getLogger(__name__)


class GssapiUnsupportedError(RuntimeError):
    """Raised by every GSSAPI operation when Kerberos support is not available."""

    def __init__(self, operation: str = "") -> None:
        super().__init__(UNSUPPORTED_MESSAGE)
        self.operation = operation


def _check_bytes(value: object, name: str) -> bytes:
    if not isinstance(value, (bytes, bytearray, memoryview)):
        raise TypeError(f"{name} must be bytes, not {type(value).__name__}")
    return bytes(value)


@dataclass
class GssapiServer:
    """Accepts GSSAPI security contexts for the configured service principal."""

    service_principal_name: str = ""
    last_error: GssapiUnsupportedError | None = field(
        default=None, init=False, repr=False, compare=False
    )

    def _unsupported(self, operation: str, size: int = 0) -> GssapiUnsupportedError:
        _log.debug(
            "gssapi: %s refused for principal %r (%d bytes)",
            operation,
            self.service_principal_name,
            size,
        )
        self.last_error = GssapiUnsupportedError(operation)
        return self.last_error

    def accept_sec_context(self, token: bytes) -> tuple[bytes, str, bool]:
        """Return the output token, the source name and whether more rounds are needed."""
        data = _check_bytes(token, "token")
        raise self._unsupported("accept_sec_context", len(data))

    def verify_mic(self, mic_field: bytes, mic_token: bytes) -> None:
        """Check a message integrity code against the established context."""
        field_bytes = _check_bytes(mic_field, "mic_field")
        mic = _check_bytes(mic_token, "mic_token")
        raise self._unsupported("verify_mic", len(field_bytes) + len(mic))

    def delete_sec_context(self) -> None:
        """Drop the established security context."""
        error = self._unsupported("delete_sec_context")
        raise error