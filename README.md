# gitshell

This package holds building blocks for serving Git over SSH in front of a Git
storage service. Its only runtime dependency is the standard library.

## Installation

```
pip install .
```

To run the test suite:

```
pip install ".[test]"
pytest
```

## Modules

- `gitshell.pktline` reads Git pkt-line streams.
  - `scan_packets(stream)` yields each packet from a binary stream as bytes. It
    raises `PacketLineError` after the last complete packet when the input is
    truncated or has an invalid length prefix.
  - `is_flush`, `is_done` and `is_ref_removal` classify packets.
  - `pkt_done()` returns the `done` packet.
- `gitshell.sshenv` turns the environment of an SSH login into an `Env`.
  - `new_from_env(environ)` reads `GIT_PROTOCOL`, `SSH_CONNECTION` and
    `SSH_ORIGINAL_COMMAND`.
  - `remote_addr_from_env(environ)` returns the client address taken from
    `SSH_CONNECTION`.
  - Both functions read `os.environ` when no mapping is given.
- `gitshell.keyline` builds lines for `authorized_keys` files.
  - `new_public_key_line(key_id, public_key, root_dir)` and
    `new_principal_key_line(key_id, principal, root_dir)` return a `KeyLine`.
  - `KeyLine.render()` returns the finished line. Each line runs
    `<root_dir>/bin/gitlab-shell` with forwarding and the PTY disabled.
  - An identifier that is not made of lower-case letters, digits and dashes, or
    a value that contains a newline, raises `KeyLineError`.
- `gitshell.logger` sets up the `gitshell` logger from a `LogSettings` holding
  the log file, the format (`json`, `text` or `color`) and the level.
  - `configure(settings)` requires a log file. When the file cannot be used it
    reports the problem to syslog and falls back to the null device.
  - `configure_standalone(settings)` treats an empty log file as stderr and
    falls back to stdout.
  - Structured fields are passed as `extra={"fields": {...}}`.
- `gitshell.errors` defines the shared error types: `StatusCode`,
  `GitalyStatusError` (with optional details such as `LimitError`), `ApiError`
  and `DisallowedCommandError`.
- `gitshell.gitaly` runs git commands with `GitalyCommand`, built from a
  service name and an `AccessResponse` that carries a `GitalyEndpoint`.
  - `GitalyCommand.run(handler)` calls `handler(metadata, connection)`. The
    metadata contains only the `gitaly-feature-*` flags. `run` returns the
    handler's exit status.
  - When the handler raises an unavailable-server error, `run` raises the
    result of `process_gitaly_error` in its place: a load message if a
    `LimitError` is attached, otherwise a generic unavailability message.
  - `prepare_metadata(repository, env)` logs the execution and returns
    metadata that identifies the client.
  - `feature_metadata(features)` filters the feature flags.
- `gitshell.sshwire` encodes and decodes SSH request payloads:
  - `pack_env_request` and `unpack_env_request`
  - `pack_exec_request` and `unpack_exec_request`
  - `pack_exit_status`

  Malformed payloads raise `WireError`.
- `gitshell.server_config` provides `ServerConfig`, which holds the login rules
  and the algorithm choices.
  - `handle_user_key(user, key_type, key_blob)` rejects unknown users and DSA
    keys. It then asks `key_lookup` for the key id and returns
    `{"key-id": ...}`.
  - `allow_gssapi_login(user, src_name)` returns `{"krb5principal": ...}`.
  - `algorithms()` returns an `AlgorithmSettings`. Configured algorithms are
    used where set; otherwise MACs and key exchanges default to the supported
    sets, and ciphers and public key algorithms are left as `None`.
  - `select_macs`, `select_key_exchanges`, `select_ciphers` and
    `select_public_key_algorithms` apply these rules on their own.
- `gitshell.gssapi` provides `GssapiServer`. Every one of its operations raises
  `GssapiUnsupportedError`, because Kerberos support is not available.

## What it does not do

- It contains no SSH server. Nothing listens on a socket, performs the SSH
  handshake, accepts channels, limits concurrent sessions or sends keep-alives.
- It does not dispatch `env`, `exec` or `shell` requests to commands.
  `gitshell.sshwire` only encodes and decodes their payloads.
- It has no readiness or liveness endpoints and no PROXY protocol handling.
- It collects no metrics.
- `GitalyCommand` opens no network connection. The connection it passes to the
  handler is a record of the service name, address and token. This record is
  reused across commands that share the same `connections` mapping.
- Kerberos (GSSAPI) authentication always fails.
- The package provides no command-line programs.

## Example

```python
import io
from gitshell.pktline import scan_packets, is_flush

for packet in scan_packets(io.BytesIO(b"0010hello world!0000")):
    print(packet, is_flush(packet))
```

```python
from gitshell.keyline import new_public_key_line

line = new_public_key_line("1", "ssh-ed25519 placeholder", "/srv/shell")
print(line.render())
```