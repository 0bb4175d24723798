"""Running commands against the git server with the metadata it expects."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Callable, MutableMapping

from gitshell.errors import GitalyStatusError, LimitError, StatusCode
from gitshell.sshenv import Env

_logger = logging.getLogger("gitshell")

FEATURE_PREFIX = "gitaly-feature-"

LOAD_MESSAGE = "GitLab is currently unable to handle this request due to load."
UNAVAILABLE_MESSAGE = (
    "The git server, Gitaly, is not available at this time. Please contact your administrator."
)

Metadata = dict[str, list[str]]
Handler = Callable[[Metadata, Any], int]


@dataclass
class GitalyEndpoint:
    """Where the git server is and how to talk to it."""

    address: str = ""
    token: str = ""
    features: dict[str, str] = field(default_factory=dict)


@dataclass
class AccessResponse:
    """The parts of an access check result needed to run a git command."""

    key_id: int = 0
    key_type: str = ""
    user_id: str = ""
    username: str = ""
    gitaly: GitalyEndpoint = field(default_factory=GitalyEndpoint)


@dataclass
class Repository:
    """A repository as addressed on the git server."""

    storage_name: str = ""
    relative_path: str = ""
    git_object_directory: str = ""
    git_alternate_object_directories: list[str] = field(default_factory=list)
    gl_repository: str = ""
    gl_project_path: str = ""


@dataclass(frozen=True)
class _Channel:
    """A lazily established connection to one git server."""

    service_name: str
    address: str
    token: str


def process_gitaly_error(err: BaseException) -> GitalyStatusError:
    """Turn an unavailable-server error into a message fit for the end user."""
    if isinstance(err, GitalyStatusError) and any(
        isinstance(detail, LimitError) for detail in err.details
    ):
        return GitalyStatusError(StatusCode.UNAVAILABLE, LOAD_MESSAGE)
    return GitalyStatusError(StatusCode.UNAVAILABLE, UNAVAILABLE_MESSAGE)


def feature_metadata(features: dict[str, str]) -> Metadata:
    """Outgoing metadata holding only the git server feature flags."""
    metadata: Metadata = {}
    for key, value in features.items():
        if key.startswith(FEATURE_PREFIX):
            metadata.setdefault(key.lower(), []).append(value)
    return metadata


@dataclass
class GitalyCommand:
    """A git command to run on the git server on behalf of an authenticated user.

    Connections are kept in ``connections`` for reuse; commands sharing the
    mapping share connections to the same server.
    """

    service_name: str
    response: AccessResponse
    connections: MutableMapping[tuple[str, str, str], Any] = field(default_factory=dict)

    def _connection(self) -> Any:
        endpoint = self.response.gitaly
        if not endpoint.address:
            raise ValueError("no gitaly_address given")
        key = (self.service_name, endpoint.address, endpoint.token)
        conn = self.connections.get(key)
        if conn is None:
            conn = _Channel(*key)
            self.connections[key] = conn
        return conn

    def run(self, handler: Handler) -> int:
        """Call handler with the outgoing metadata and a connection; return its exit status.

        Errors from the handler are raised again, with unavailable-server
        errors replaced by a message for the end user.
        """
        try:
            conn = self._connection()
        except ValueError as err:
            _logger.error(
                "Failed to get connection to execute Git command",
                extra={"fields": {"error": f"RunGitalyCommand: {err}"}},
            )
            raise

        metadata = feature_metadata(self.response.gitaly.features)
        try:
            return handler(metadata, conn)
        except Exception as err:
            _logger.error(
                "Failed to execute Git command", extra={"fields": {"error": str(err)}}
            )
            if GitalyStatusError.code_of(err) == StatusCode.UNAVAILABLE:
                raise process_gitaly_error(err) from err
            raise

    def prepare_metadata(self, repository: Repository, env: Env) -> Metadata:
        """Log the execution and return metadata identifying the client."""
        self.log_execution(repository, env)
        return {
            "key_id": [str(self.response.key_id)],
            "key_type": [self.response.key_type],
            "user_id": [self.response.user_id],
            "username": [self.response.username],
            "remote_ip": [env.remote_addr],
        }

    def log_execution(self, repository: Repository, env: Env) -> None:
        """Log which git command is run, for whom and on what."""
        fields = {
            "command": self.service_name,
            "gl_project_path": repository.gl_project_path,
            "gl_repository": repository.gl_repository,
            "user_id": self.response.user_id,
            "username": self.response.username,
            "git_protocol": env.git_protocol_version,
            "remote_ip": env.remote_addr,
            "gl_key_type": self.response.key_type,
            "gl_key_id": self.response.key_id,
        }
        _logger.info("executing git command", extra={"fields": fields})