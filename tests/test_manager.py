"""Tests for HostManager operations."""

import json

import pytest

from sshconf.errors import (
    DecodeError,
    DuplicateError,
    InvalidHostError,
    NotFoundError,
    ShapeError,
    SshconfError,
)
from sshconf.manager import HostManager
from sshconf.store.file import FileHostStore
from sshconf.types import HostFields

THREE_HOSTS = """Host alpha
    HostName 10.0.0.1

Host beta
    HostName 10.0.0.2

Host gamma
    HostName 10.0.0.3
"""

FULL_HOST = """Host prod
    HostName prod.example.com
    User deploy
    Port 22
    IdentityFile ~/.ssh/prod
"""


@pytest.fixture
def config_path(tmp_path):
    return tmp_path / ".ssh" / "config"


@pytest.fixture
def manager(config_path):
    return HostManager(FileHostStore(config_path))


def write(path, text):
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(text)


class TestRead:
    def test_missing_file_is_empty(self, manager, config_path):
        assert manager.list_hosts() == []
        assert manager.get_host("anything") is None
        assert not config_path.exists()

    def test_list_hosts_in_order(self, manager, config_path):
        write(config_path, THREE_HOSTS)
        assert manager.list_hosts() == ["alpha", "beta", "gamma"]

    def test_get_host(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        host = manager.get_host("beta")

        assert host is not None
        assert host.options == {"HostName": "10.0.0.2"}

    def test_get_host_is_case_sensitive(self, manager, config_path):
        write(config_path, THREE_HOSTS)
        assert manager.get_host("Beta") is None

    def test_reads_are_not_cached(self, manager, config_path):
        write(config_path, THREE_HOSTS)
        assert len(manager.list_hosts()) == 3

        write(config_path, "Host only\n")
        assert manager.list_hosts() == ["only"]


class TestAddHost:
    def test_add_creates_file(self, manager, config_path):
        host = manager.add_host("prod", {"host": "example.com", "user": "deploy", "port": 2222})

        assert host.options == {"HostName": "example.com", "User": "deploy", "Port": "2222"}
        assert config_path.read_text() == (
            "Host prod\n    HostName example.com\n    User deploy\n    Port 2222\n"
        )

    def test_add_only_supplied_fields(self, manager):
        host = manager.add_host("minimal", HostFields(user="me"))
        assert host.options == {"User": "me"}

    def test_add_without_fields(self, manager, config_path):
        manager.add_host("bare")
        assert config_path.read_text() == "Host bare\n"

    def test_add_field_order_is_fixed(self, manager):
        host = manager.add_host(
            "ordered", {"identity": "~/.ssh/key", "port": "22", "user": "u", "host": "h"}
        )
        assert list(host.options) == ["HostName", "User", "Port", "IdentityFile"]

    def test_add_ignores_unknown_fields(self, manager):
        host = manager.add_host("x", {"host": "h", "ForwardAgent": "yes", "color": "blue"})
        assert host.options == {"HostName": "h"}

    def test_add_accepts_option_spellings(self, manager):
        host = manager.add_host("x", {"HostName": "h", "User": "u", "IdentityFile": "k"})
        assert host.options == {"HostName": "h", "User": "u", "IdentityFile": "k"}

    def test_add_appends(self, manager, config_path):
        write(config_path, THREE_HOSTS)
        manager.add_host("delta")
        assert manager.list_hosts() == ["alpha", "beta", "gamma", "delta"]

    def test_add_duplicate_fails_and_leaves_file(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(DuplicateError, match="Host already exists: beta"):
            manager.add_host("beta", {"host": "other"})

        assert config_path.read_text() == THREE_HOSTS


class TestEditHost:
    def test_partial_update(self, manager, config_path):
        write(config_path, FULL_HOST)

        host = manager.edit_host("prod", {"port": "3333"})

        assert list(host.options.items()) == [
            ("HostName", "prod.example.com"),
            ("User", "deploy"),
            ("Port", "3333"),
            ("IdentityFile", "~/.ssh/prod"),
        ]
        assert config_path.read_text() == FULL_HOST.replace("Port 22", "Port 3333")

    def test_edit_adds_missing_field_at_end(self, manager, config_path):
        write(config_path, "Host a\n    HostName h\n    ForwardAgent yes\n")

        host = manager.edit_host("a", {"user": "root"})

        assert list(host.options) == ["HostName", "ForwardAgent", "User"]

    def test_edit_keeps_unrelated_options(self, manager, config_path):
        write(config_path, "Host a\n    ProxyJump bastion\n    User old\n")

        manager.edit_host("a", {"user": "new"})

        assert manager.get_host("a").options == {"ProxyJump": "bastion", "User": "new"}

    def test_edit_missing(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(NotFoundError, match="Host not found: delta"):
            manager.edit_host("delta", {"user": "x"})

        assert config_path.read_text() == THREE_HOSTS

    def test_edit_leaves_other_hosts(self, manager, config_path):
        write(config_path, THREE_HOSTS)
        manager.edit_host("beta", {"port": 2200})

        assert manager.get_host("alpha").options == {"HostName": "10.0.0.1"}
        assert manager.get_host("beta").options == {"HostName": "10.0.0.2", "Port": "2200"}


class TestRemoveHost:
    def test_remove_middle_preserves_order(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        manager.remove_host("beta")

        assert manager.list_hosts() == ["alpha", "gamma"]
        assert config_path.read_text() == (
            "Host alpha\n    HostName 10.0.0.1\n\nHost gamma\n    HostName 10.0.0.3\n"
        )

    def test_remove_last_host(self, manager, config_path):
        write(config_path, "Host solo\n")
        manager.remove_host("solo")
        assert config_path.read_text() == ""

    def test_remove_missing(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(NotFoundError):
            manager.remove_host("delta")

        assert config_path.read_text() == THREE_HOSTS


class TestCopyHost:
    def test_copy(self, manager, config_path):
        write(config_path, FULL_HOST)

        host = manager.copy_host("prod", "staging")

        assert host.name == "staging"
        assert manager.list_hosts() == ["prod", "staging"]
        assert manager.get_host("staging").options == manager.get_host("prod").options

    def test_copy_isolation(self, manager, config_path):
        write(config_path, FULL_HOST)
        manager.copy_host("prod", "staging")

        manager.edit_host("staging", {"host": "staging.example.com", "port": 2222})

        prod = manager.get_host("prod")
        assert prod.options["HostName"] == "prod.example.com"
        assert prod.options["Port"] == "22"

    def test_returned_copy_does_not_share_options(self, manager, config_path):
        write(config_path, FULL_HOST)
        copied = manager.copy_host("prod", "staging")

        copied.options["User"] = "changed"

        assert manager.get_host("prod").options["User"] == "deploy"
        assert manager.get_host("staging").options["User"] == "deploy"

    def test_copy_missing_source(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(NotFoundError, match="Host not found: nope"):
            manager.copy_host("nope", "delta")

        assert config_path.read_text() == THREE_HOSTS

    def test_copy_onto_existing(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(DuplicateError, match="Host already exists: gamma"):
            manager.copy_host("alpha", "gamma")

        assert config_path.read_text() == THREE_HOSTS
        assert manager.list_hosts().count("gamma") == 1


class TestImportExport:
    def test_export_native(self, manager, config_path):
        write(config_path, THREE_HOSTS)
        assert manager.export_config() == THREE_HOSTS

    def test_export_import_round_trip(self, manager, config_path, tmp_path):
        write(config_path, FULL_HOST + "\n" + THREE_HOSTS)
        dump = manager.export_config("structured")

        other = HostManager(FileHostStore(tmp_path / "other" / "config"))
        count = other.import_config(dump)

        assert count == 4
        assert other.export_config() == manager.export_config()

    def test_import_replaces(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        manager.import_config(json.dumps([{"name": "new", "options": {"User": "x"}}]))

        assert manager.list_hosts() == ["new"]
        assert config_path.read_text() == "Host new\n    User x\n"

    def test_import_not_json_leaves_file(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(DecodeError):
            manager.import_config("not json")

        assert config_path.read_text() == THREE_HOSTS

    def test_import_wrong_shape(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(ShapeError):
            manager.import_config('{"a":1}')

        assert config_path.read_text() == THREE_HOSTS

    def test_import_without_existing_file(self, manager, config_path):
        assert manager.import_config("[]") == 0
        assert config_path.read_text() == ""


class TestHostValidation:
    def test_name_is_stripped(self, manager, config_path):
        host = manager.add_host("  web  ")

        assert host.name == "web"
        assert config_path.read_text() == "Host web\n"

    def test_padded_name_is_a_duplicate(self, manager, config_path):
        manager.add_host("x")

        with pytest.raises(DuplicateError, match="Host already exists: x"):
            manager.add_host(" x")

        assert manager.list_hosts() == ["x"]
        assert config_path.read_text() == "Host x\n"

    def test_copy_to_padded_existing_name(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(DuplicateError):
            manager.copy_host("alpha", "gamma ")

        assert config_path.read_text() == THREE_HOSTS

    @pytest.mark.parametrize("name", ["", "   ", "a\nb", "a\rb"])
    def test_invalid_name(self, manager, config_path, name):
        with pytest.raises(InvalidHostError) as exc_info:
            manager.add_host(name)

        assert isinstance(exc_info.value, SshconfError)
        assert not config_path.exists()

    def test_copy_to_invalid_name(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(InvalidHostError):
            manager.copy_host("alpha", "")

        assert config_path.read_text() == THREE_HOSTS

    def test_value_with_newline_rejected(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(InvalidHostError):
            manager.add_host("a", {"host": "h\nHost evil"})

        assert config_path.read_text() == THREE_HOSTS
        assert manager.get_host("evil") is None

    def test_edit_value_with_newline_rejected(self, manager, config_path):
        write(config_path, FULL_HOST)

        with pytest.raises(InvalidHostError):
            manager.edit_host("prod", {"user": "root\r\nHost evil"})

        assert config_path.read_text() == FULL_HOST

    def test_blank_field_counts_as_missing(self, manager, config_path):
        write(config_path, FULL_HOST)

        manager.edit_host("prod", {"user": "   "})

        assert config_path.read_text() == FULL_HOST

    def test_values_are_stripped(self, manager):
        host = manager.add_host("a", {"user": "  me  "})
        assert host.options == {"User": "me"}

    def test_import_cannot_inject_hosts(self, manager, config_path):
        write(config_path, THREE_HOSTS)

        with pytest.raises(ShapeError):
            manager.import_config('[{"name": "a", "options": {"Host": "b", "User": ""}}]')

        assert config_path.read_text() == THREE_HOSTS


class TestNonUtf8File:
    CONTENT = b"# caf\xe9\nHost a\n    User r\xe9my\n"

    def test_read(self, manager, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_bytes(self.CONTENT)

        assert manager.list_hosts() == ["a"]

    def test_bytes_survive_rewrite(self, manager, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_bytes(self.CONTENT)

        manager.add_host("b")
        manager.copy_host("a", "c")

        assert config_path.read_bytes() == (
            b"Host a\n    User r\xe9my\n\nHost b\n\nHost c\n    User r\xe9my\n"
        )

    def test_edit_other_field(self, manager, config_path):
        config_path.parent.mkdir(parents=True)
        config_path.write_bytes(self.CONTENT)

        manager.edit_host("a", {"port": 22})

        assert config_path.read_bytes() == b"Host a\n    User r\xe9my\n    Port 22\n"
