"""Filesystem implementation of HostStore."""

import logging
import os
import shutil
import tempfile
import time
from pathlib import Path

logger = logging.getLogger(__name__)

DIR_MODE = 0o700
FILE_MODE = 0o600


class FileHostStore:
    """Config file store with whole-file atomic rewrites."""

    def __init__(self, path: Path):
        self.path = Path(path).expanduser()

    def exists(self) -> bool:
        return self.path.exists()

    def read(self) -> str:
        if not self.path.exists():
            logger.debug(f"Config file {self.path} not found, treating as empty")
            return ""
        return self.path.read_text(encoding="utf-8", errors="surrogateescape")

    def write(self, text: str) -> None:
        """Write text via a temporary sibling file and rename it into place."""
        self._ensure_dir()

        fd, temp_path = tempfile.mkstemp(
            dir=self.path.parent,
            prefix=f".{self.path.name}.tmp.",
            text=True,
        )
        try:
            with os.fdopen(fd, "w", encoding="utf-8", errors="surrogateescape") as f:
                f.write(text)
            os.chmod(temp_path, FILE_MODE)
            os.replace(temp_path, self.path)
        except Exception:
            if os.path.exists(temp_path):
                os.unlink(temp_path)
            raise

        logger.debug(f"Wrote {len(text)} bytes to {self.path}")

    def backup(self) -> Path:
        if not self.path.exists():
            raise FileNotFoundError(f"Config file not found: {self.path}")

        backup_path = self.path.with_name(f"{self.path.name}.backup.{int(time.time() * 1000)}")
        shutil.copy2(self.path, backup_path)
        logger.info(f"Backed up {self.path} to {backup_path}")
        return backup_path

    def _ensure_dir(self) -> None:
        parent = self.path.parent
        if not parent.exists():
            parent.mkdir(mode=DIR_MODE, parents=True)
            logger.debug(f"Created {parent}")
