"""Serialization of host records to config text and export dialects."""

import json

import yaml
from pydantic import TypeAdapter, ValidationError

from sshconf.errors import DecodeError, DuplicateError, ShapeError
from sshconf.types import ExportFormat, HostRecord

INDENT = "    "

_records = TypeAdapter(list[HostRecord])


def stringify(hosts: list[HostRecord]) -> str:
    """Render records as OpenSSH config text.

    Each block is followed by an empty line, so output for a non-empty
    collection ends in a single newline.
    """
    lines: list[str] = []
    for host in hosts:
        lines.append(f"Host {host.name}")
        for key, value in host.options.items():
            lines.append(f"{INDENT}{key} {value}")
        lines.append("")
    return "\n".join(lines)


def to_structured(hosts: list[HostRecord]) -> str:
    """Lossless JSON dump, readable by load_structured."""
    return json.dumps([host.model_dump() for host in hosts], indent=2)


def to_simplified(hosts: list[HostRecord]) -> str:
    """YAML mapping of host name to options. Export only."""
    if not hosts:
        return ""
    data = {host.name: dict(host.options) for host in hosts}
    return yaml.safe_dump(data, sort_keys=False, default_flow_style=False, allow_unicode=True)


def export_config(hosts: list[HostRecord], fmt: ExportFormat | str = ExportFormat.NATIVE) -> str:
    """Render hosts in the requested dialect."""
    fmt = ExportFormat(fmt)
    if fmt == ExportFormat.STRUCTURED:
        return to_structured(hosts)
    if fmt == ExportFormat.SIMPLIFIED:
        return to_simplified(hosts)
    return stringify(hosts)


def load_structured(text: str | bytes) -> list[HostRecord]:
    """Decode a structured dump back into host records.

    Raises:
        DecodeError: text is not valid UTF-8 JSON
        ShapeError: decoded value is not a list of host objects
        DuplicateError: two entries share a name
    """
    if isinstance(text, bytes):
        try:
            text = text.decode("utf-8")
        except UnicodeDecodeError as e:
            raise DecodeError(f"Invalid JSON: not UTF-8 encoded ({e.reason})") from e

    try:
        data = json.loads(text)
    except (json.JSONDecodeError, TypeError) as e:
        raise DecodeError(f"Invalid JSON: {e}") from e

    if not isinstance(data, list):
        raise ShapeError(f"Expected array of hosts, got {type(data).__name__}")

    for i, entry in enumerate(data):
        if not isinstance(entry, dict):
            raise ShapeError(f"Entry {i} is not an object")

    try:
        hosts = _records.validate_python(data)
    except ValidationError as e:
        raise ShapeError(f"Invalid host entry: {e.errors()[0]['msg']} at {_location(e)}") from e

    seen: set[str] = set()
    for host in hosts:
        if host.name in seen:
            raise DuplicateError(f"Host already exists: {host.name}")
        seen.add(host.name)

    return hosts


def _location(error: ValidationError) -> str:
    loc = error.errors()[0]["loc"]
    return ".".join(str(part) for part in loc) or "<root>"
