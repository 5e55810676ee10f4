"""Storage module for config file persistence."""

from sshconf.store.base import HostStore
from sshconf.store.file import FileHostStore

__all__ = ["FileHostStore", "HostStore"]
