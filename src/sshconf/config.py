"""Configuration models for sshconf."""

from pathlib import Path

import yaml
from pydantic import BaseModel, field_validator

DEFAULT_SETTINGS_PATH = Path("~/.config/sshconf/config.yaml")


class SshconfConfig(BaseModel):
    """User settings for the sshconf command line."""

    ssh_config_path: str = "~/.ssh/config"
    ssh_command: str = "ssh"
    connect_timeout: int = 5
    default_port: str = "22"

    @field_validator("connect_timeout")
    @classmethod
    def validate_timeout(cls, v: int) -> int:
        if v <= 0:
            raise ValueError("connect_timeout must be positive")
        return v

    def config_file(self) -> Path:
        """Expanded path of the SSH config file to edit."""
        return Path(self.ssh_config_path).expanduser()


def load_config(path: Path) -> SshconfConfig:
    """Load settings from a YAML file."""
    with open(path) as f:
        data = yaml.safe_load(f)
    return SshconfConfig(**(data or {}))


def resolve_config(path: Path | None = None) -> SshconfConfig:
    """Load settings from path, else the default location, else defaults."""
    if path is not None:
        return load_config(path)

    default_path = DEFAULT_SETTINGS_PATH.expanduser()
    if default_path.exists():
        return load_config(default_path)
    return SshconfConfig()
