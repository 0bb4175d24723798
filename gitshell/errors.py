"""Error types shared by the shell and the SSH daemon."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Any


class StatusCode(enum.IntEnum):
    """Status codes carried by errors coming back from the git server."""

    OK = 0
    CANCELED = 1
    UNKNOWN = 2
    INVALID_ARGUMENT = 3
    DEADLINE_EXCEEDED = 4
    NOT_FOUND = 5
    ALREADY_EXISTS = 6
    PERMISSION_DENIED = 7
    RESOURCE_EXHAUSTED = 8
    FAILED_PRECONDITION = 9
    ABORTED = 10
    OUT_OF_RANGE = 11
    UNIMPLEMENTED = 12
    INTERNAL = 13
    UNAVAILABLE = 14
    DATA_LOSS = 15
    UNAUTHENTICATED = 16

    @property
    def label(self) -> str:
        """The camel-case name used in error messages."""
        return _LABELS[self]


_LABELS = {
    StatusCode.OK: "OK",
    StatusCode.CANCELED: "Canceled",
    StatusCode.UNKNOWN: "Unknown",
    StatusCode.INVALID_ARGUMENT: "InvalidArgument",
    StatusCode.DEADLINE_EXCEEDED: "DeadlineExceeded",
    StatusCode.NOT_FOUND: "NotFound",
    StatusCode.ALREADY_EXISTS: "AlreadyExists",
    StatusCode.PERMISSION_DENIED: "PermissionDenied",
    StatusCode.RESOURCE_EXHAUSTED: "ResourceExhausted",
    StatusCode.FAILED_PRECONDITION: "FailedPrecondition",
    StatusCode.ABORTED: "Aborted",
    StatusCode.OUT_OF_RANGE: "OutOfRange",
    StatusCode.UNIMPLEMENTED: "Unimplemented",
    StatusCode.INTERNAL: "Internal",
    StatusCode.UNAVAILABLE: "Unavailable",
    StatusCode.DATA_LOSS: "DataLoss",
    StatusCode.UNAUTHENTICATED: "Unauthenticated",
}


@dataclass(frozen=True)
class LimitError:
    """Detail attached by the git server when it is at its request limit."""

    error_message: str
    retry_after: float = 0.0


class GitalyStatusError(Exception):
    """An error with a status code, as returned by the git server."""

    def __init__(self, code: StatusCode, message: str, details: tuple[Any, ...] = ()) -> None:
        super().__init__(code, message)
        self.code = StatusCode(code)
        self.message = message
        self.details = tuple(details)

    def __str__(self) -> str:
        return f"rpc error: code = {self.code.label} desc = {self.message}"

    def __repr__(self) -> str:
        return f"GitalyStatusError({self.code!r}, {self.message!r}, {self.details!r})"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, GitalyStatusError):
            return NotImplemented
        return (self.code, self.message, self.details) == (other.code, other.message, other.details)

    def __hash__(self) -> int:
        return hash((self.code, self.message))

    @staticmethod
    def code_of(err: BaseException | None) -> StatusCode:
        """Return the status code of an error: OK for none, UNKNOWN for foreign errors."""
        if err is None:
            return StatusCode.OK
        if isinstance(err, GitalyStatusError):
            return err.code
        return StatusCode.UNKNOWN


class ApiError(Exception):
    """An error reported by the GitLab internal API."""

    def __init__(self, msg: str) -> None:
        super().__init__(msg)
        self.msg = msg

    def __str__(self) -> str:
        return self.msg

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ApiError):
            return NotImplemented
        return self.msg == other.msg

    def __hash__(self) -> int:
        return hash(self.msg)


class DisallowedCommandError(Exception):
    """Raised when the requested command is not allowed."""

    def __init__(self, message: str = "Disallowed command") -> None:
        super().__init__(message)
        self.message = message

    def __str__(self) -> str:
        return self.message