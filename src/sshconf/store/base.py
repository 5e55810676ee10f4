"""HostStore protocol for config file persistence."""

from pathlib import Path
from typing import Protocol


class HostStore(Protocol):
    """Protocol for reading and writing the backing config text."""

    path: Path

    def exists(self) -> bool:
        """Check if the backing file exists."""
        ...

    def read(self) -> str:
        """Return the file contents, or an empty string if absent."""
        ...

    def write(self, text: str) -> None:
        """Replace the whole file with text."""
        ...

    def backup(self) -> Path:
        """Copy the file to a timestamped sibling. Returns the copy's path."""
        ...
