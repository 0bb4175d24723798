"""Building blocks for serving Git over SSH: pkt-lines, key lines, logging, auth rules."""

__version__ = "0.1.0"
__all__ = [
    "errors",
    "gitaly",
    "gssapi",
    "keyline",
    "logger",
    "pktline",
    "server_config",
    "sshenv",
    "sshwire",
]