"""Connectivity check using the system ssh client."""

import logging
import subprocess
from dataclasses import dataclass

from sshconf.types import HostRecord

logger = logging.getLogger(__name__)


@dataclass
class ConnectResult:
    """Outcome of a connection attempt."""

    success: bool
    address: str
    stderr: str = ""


def host_address(host: HostRecord, default_port: str = "22") -> str:
    """Return `<HostName or name>:<Port>` for display."""
    return f"{host.get('HostName', host.name)}:{host.get('Port', default_port)}"


def check_connection(
    host: HostRecord,
    ssh_command: str = "ssh",
    timeout: int = 5,
    default_port: str = "22",
) -> ConnectResult:
    """Try a non-interactive login to the host alias and exit immediately."""
    address = host_address(host, default_port)
    command = [
        ssh_command,
        "-o", f"ConnectTimeout={timeout}",
        "-o", "BatchMode=yes",
        host.name,
        "exit",
    ]
    logger.debug(f"Running: {' '.join(command)}")

    try:
        result = subprocess.run(
            command,
            stdin=subprocess.DEVNULL,
            capture_output=True,
            text=True,
            timeout=timeout + 5,
        )
    except FileNotFoundError:
        return ConnectResult(success=False, address=address, stderr=f"{ssh_command}: command not found")
    except subprocess.TimeoutExpired:
        return ConnectResult(success=False, address=address, stderr="Connection timed out")

    return ConnectResult(
        success=result.returncode == 0,
        address=address,
        stderr=result.stderr.strip(),
    )
