"""sshconf CLI."""

import logging
from contextlib import contextmanager
from pathlib import Path

import typer
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from sshconf.config import SshconfConfig, resolve_config
from sshconf.connect import check_connection
from sshconf.errors import SshconfError
from sshconf.manager import HostManager
from sshconf.store.file import FileHostStore
from sshconf.types import ExportFormat, HostFields, HostRecord

app = typer.Typer(help="sshconf - SSH config manager", no_args_is_help=True)
console = Console()
err_console = Console(stderr=True)

logger = logging.getLogger(__name__)

SHOW_FIELDS = ["HostName", "User", "Port", "IdentityFile"]


def setup_logging(verbose: bool = False):
    """Configure logging with rich handler."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, rich_tracebacks=True)],
    )
    logging.getLogger("sshconf").setLevel(level)


def fail(message: str):
    console.print(f"[red]Error:[/red] {escape(message)}")
    raise typer.Exit(1)


@contextmanager
def handle_errors():
    """Turn sshconf and filesystem errors into an exit code of 1."""
    try:
        yield
    except SshconfError as e:
        fail(str(e))
    except OSError as e:
        logger.debug("I/O failure", exc_info=True)
        console.print(f"[red]I/O error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


def shown(value: str) -> str:
    """Escape config text for rich, replacing bytes that were not UTF-8."""
    return escape(value.encode("utf-8", "surrogateescape").decode("utf-8", "replace"))


def get_config(ctx: typer.Context) -> SshconfConfig:
    return ctx.obj


def get_manager(ctx: typer.Context) -> HostManager:
    return HostManager(FileHostStore(get_config(ctx).config_file()))


@app.callback()
def main(
    ctx: typer.Context,
    file: Path | None = typer.Option(
        None, "--file", "-f", envvar="SSHCONF_FILE", help="SSH config file to edit"
    ),
    settings: Path | None = typer.Option(None, "--settings", help="sshconf settings YAML"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose logging"),
):
    """Manage hosts in an OpenSSH client config file."""
    setup_logging(verbose)

    try:
        config = resolve_config(settings)
    except (OSError, yaml.YAMLError, ValidationError) as e:
        fail(f"Could not load settings: {e}")

    if file is not None:
        config.ssh_config_path = str(file)
    logger.debug(f"Using SSH config {config.config_file()}")
    ctx.obj = config


def print_table(hosts: list[HostRecord], default_port: str):
    table = Table(box=None, header_style="dim")
    table.add_column("HOST", style="cyan")
    table.add_column("HOSTNAME")
    table.add_column("USER")
    table.add_column("PORT")

    for host in hosts:
        table.add_row(
            shown(host.name),
            shown(host.get("HostName", "-")),
            shown(host.get("User", "-")),
            shown(host.get("Port", default_port)),
        )
    console.print(table)


@app.command("list")
def list_hosts(ctx: typer.Context):
    """List all hosts."""
    with handle_errors():
        hosts = get_manager(ctx).hosts()

    if not hosts:
        console.print("[dim]No hosts configured[/dim]")
        return
    print_table(hosts, get_config(ctx).default_port)


@app.command("ls", hidden=True)
def ls(ctx: typer.Context):
    """List all hosts."""
    list_hosts(ctx)


@app.command()
def add(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Host alias"),
    host: str | None = typer.Option(None, "--host", "-h", help="Hostname or IP"),
    user: str | None = typer.Option(None, "--user", "-u", help="SSH username"),
    port: int | None = typer.Option(None, "--port", "-p", help="SSH port"),
    identity: str | None = typer.Option(None, "--identity", "-i", help="Identity file path"),
):
    """Add a new host."""
    fields = HostFields(host=host, user=user, port=port, identity=identity)
    with handle_errors():
        record = get_manager(ctx).add_host(name, fields)
    console.print(f"[green]✓ Added host '{shown(record.name)}'[/green]")


@app.command()
def show(ctx: typer.Context, name: str = typer.Argument(..., help="Host alias")):
    """Show a host's config."""
    with handle_errors():
        host = get_manager(ctx).get_host(name)
    if host is None:
        fail(f"Host not found: {name}")

    console.print(f"Host: [cyan]{shown(host.name)}[/cyan]")
    console.print("[dim]──────────────[/dim]")
    for key in SHOW_FIELDS:
        if key in host.options:
            console.print(f"{key + ':':<14}{shown(host.options[key])}")
    for key, value in host.options.items():
        if key not in SHOW_FIELDS:
            console.print(f"[dim]{shown(key + ':'):<14}{shown(value)}[/dim]")


@app.command()
def edit(
    ctx: typer.Context,
    name: str = typer.Argument(..., help="Host alias"),
    host: str | None = typer.Option(None, "--host", "-h", help="Hostname or IP"),
    user: str | None = typer.Option(None, "--user", "-u", help="SSH username"),
    port: int | None = typer.Option(None, "--port", "-p", help="SSH port"),
    identity: str | None = typer.Option(None, "--identity", "-i", help="Identity file path"),
):
    """Edit a host's config."""
    fields = HostFields(host=host, user=user, port=port, identity=identity)
    with handle_errors():
        get_manager(ctx).edit_host(name, fields)
    console.print(f"[green]✓ Updated host '{escape(name)}'[/green]")


@app.command()
def remove(ctx: typer.Context, name: str = typer.Argument(..., help="Host alias")):
    """Remove a host."""
    with handle_errors():
        get_manager(ctx).remove_host(name)
    console.print(f"[green]✓ Removed host '{escape(name)}'[/green]")


@app.command("rm", hidden=True)
def rm(ctx: typer.Context, name: str = typer.Argument(..., help="Host alias")):
    """Remove a host."""
    remove(ctx, name)


@app.command()
def copy(
    ctx: typer.Context,
    source: str = typer.Argument(..., help="Existing host alias"),
    target: str = typer.Argument(..., help="New host alias"),
):
    """Copy a host entry under a new name."""
    with handle_errors():
        record = get_manager(ctx).copy_host(source, target)
    console.print(f"[green]✓ Copied '{escape(source)}' to '{shown(record.name)}'[/green]")


@app.command()
def test(ctx: typer.Context, name: str = typer.Argument(..., help="Host alias")):
    """Test the SSH connection to a host."""
    config = get_config(ctx)
    with handle_errors():
        host = get_manager(ctx).get_host(name)
    if host is None:
        fail(f"Host not found: {name}")

    console.print(f"Testing connection to [cyan]{escape(name)}[/cyan]...")
    result = check_connection(
        host,
        ssh_command=config.ssh_command,
        timeout=config.connect_timeout,
        default_port=config.default_port,
    )
    if not result.success:
        logger.debug(f"ssh stderr: {result.stderr}")
        console.print("[red]✗ Connection failed[/red]")
        raise typer.Exit(1)
    console.print(f"[green]✓ Connection successful ({escape(result.address)})[/green]")


@app.command()
def export(
    ctx: typer.Context,
    as_json: bool = typer.Option(False, "--json", help="Structured JSON dump"),
    as_yaml: bool = typer.Option(False, "--yaml", help="Simplified YAML mapping"),
):
    """Export the config."""
    if as_json and as_yaml:
        fail("Choose only one of --json and --yaml")

    fmt = ExportFormat.NATIVE
    if as_json:
        fmt = ExportFormat.STRUCTURED
    elif as_yaml:
        fmt = ExportFormat.SIMPLIFIED

    with handle_errors():
        output = get_manager(ctx).export_config(fmt)
    # Bytes that were not UTF-8 in the source file are written back unchanged
    typer.echo(output.encode("utf-8", "surrogateescape"), nl=not output.endswith("\n"))


@app.command("import")
def import_hosts(ctx: typer.Context, file: Path = typer.Argument(..., help="JSON dump to import")):
    """Replace the config with hosts from a JSON dump."""
    if not file.exists():
        fail(f"File not found: {file}")

    with handle_errors():
        count = get_manager(ctx).import_config(file.read_bytes())
    console.print(f"[green]✓ Imported {count} hosts[/green]")


@app.command()
def backup(ctx: typer.Context):
    """Back up the config file."""
    store = FileHostStore(get_config(ctx).config_file())
    if not store.exists():
        fail(f"Config file not found: {store.path}")

    with handle_errors():
        path = store.backup()
    console.print(f"[green]✓ Backup created: {escape(str(path))}[/green]")


@app.command("help")
def show_help(ctx: typer.Context):
    """Show this message."""
    typer.echo(ctx.parent.get_help())


if __name__ == "__main__":
    app()
