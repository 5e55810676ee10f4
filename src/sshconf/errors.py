"""Error types raised by sshconf operations."""


class SshconfError(Exception):
    """Base class for host collection errors."""


class DuplicateError(SshconfError):
    """A host with the requested name already exists."""


class NotFoundError(SshconfError):
    """The requested host does not exist."""


class DecodeError(SshconfError):
    """Import data is not valid JSON."""


class ShapeError(SshconfError):
    """Import data decoded, but is not a list of host records."""


class InvalidHostError(SshconfError):
    """A host name or option would not survive a write and re-read."""
