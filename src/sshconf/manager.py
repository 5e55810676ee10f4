"""Host operations over a persisted config file.

Every operation reloads the file, so nothing is cached between calls and
two sequential operations only see each other through the file itself.
Mutations either persist the full updated collection or raise before
writing anything.
"""

from collections.abc import Mapping

from sshconf.errors import DuplicateError, InvalidHostError, NotFoundError
from sshconf.parser import parse
from sshconf.serializer import export_config, load_structured, stringify
from sshconf.store.base import HostStore
from sshconf.types import ExportFormat, HostFields, HostRecord, normalize_name, normalize_option


def _coerce_fields(fields: HostFields | Mapping | None) -> HostFields:
    if fields is None:
        return HostFields()
    if isinstance(fields, HostFields):
        return fields
    return HostFields.model_validate(dict(fields))


def _checked_name(name: str) -> str:
    try:
        return normalize_name(name)
    except ValueError as e:
        raise InvalidHostError(str(e)) from e


def _checked_options(fields: HostFields | Mapping | None) -> dict[str, str]:
    try:
        options = _coerce_fields(fields).to_options()
        return dict(normalize_option(key, value) for key, value in options.items())
    except ValueError as e:
        raise InvalidHostError(str(e)) from e


def _find(hosts: list[HostRecord], name: str) -> int | None:
    for i, host in enumerate(hosts):
        if host.name == name:
            return i
    return None


class HostManager:
    """Add, edit, remove, copy, import and export hosts."""

    def __init__(self, store: HostStore):
        self.store = store

    def load(self) -> list[HostRecord]:
        return parse(self.store.read())

    def save(self, hosts: list[HostRecord]) -> None:
        self.store.write(stringify(hosts))

    def hosts(self) -> list[HostRecord]:
        """All records in file order."""
        return self.load()

    def list_hosts(self) -> list[str]:
        """Host names in file order."""
        return [host.name for host in self.load()]

    def get_host(self, name: str) -> HostRecord | None:
        """Look up a host by exact name. Returns None if absent."""
        hosts = self.load()
        index = _find(hosts, name)
        return hosts[index] if index is not None else None

    def add_host(self, name: str, fields: HostFields | Mapping | None = None) -> HostRecord:
        """Append a new host built from the recognized fields."""
        name = _checked_name(name)
        options = _checked_options(fields)
        hosts = self.load()
        if _find(hosts, name) is not None:
            raise DuplicateError(f"Host already exists: {name}")

        host = HostRecord(name=name, options=options)
        hosts.append(host)
        self.save(hosts)
        return host

    def edit_host(self, name: str, fields: HostFields | Mapping | None = None) -> HostRecord:
        """Overwrite only the supplied fields of an existing host."""
        options = _checked_options(fields)
        hosts = self.load()
        index = _find(hosts, name)
        if index is None:
            raise NotFoundError(f"Host not found: {name}")

        host = hosts[index]
        host.options.update(options)
        self.save(hosts)
        return host

    def remove_host(self, name: str) -> None:
        hosts = self.load()
        index = _find(hosts, name)
        if index is None:
            raise NotFoundError(f"Host not found: {name}")

        del hosts[index]
        self.save(hosts)

    def copy_host(self, source: str, target: str) -> HostRecord:
        """Duplicate a host's options under a new name."""
        hosts = self.load()
        index = _find(hosts, source)
        if index is None:
            raise NotFoundError(f"Host not found: {source}")
        target = _checked_name(target)
        if _find(hosts, target) is not None:
            raise DuplicateError(f"Host already exists: {target}")

        host = hosts[index].model_copy(update={"name": target}, deep=True)
        hosts.append(host)
        self.save(hosts)
        return host

    def export_config(self, fmt: ExportFormat | str = ExportFormat.NATIVE) -> str:
        return export_config(self.load(), fmt)

    def import_config(self, text: str | bytes) -> int:
        """Replace the whole config with a structured dump. Returns host count."""
        hosts = load_structured(text)
        self.save(hosts)
        return len(hosts)
