"""Command line interface for Labelspace projects."""

from __future__ import annotations

import asyncio
import copy
import difflib
import json
import uuid
from pathlib import Path
from typing import Any, Coroutine, TypeVar

import click
import yaml
from pydantic import ValidationError
from rich.console import Console
from rich.syntax import Syntax
from rich.table import Table

from labelspace.config import ConfigError, ConfigManager, LabelspaceConfig, resolve_with_precedence
from labelspace.constants import PROJECT_FILE_EXTENSION
from labelspace.errors import LabelspaceError, ProjectFileError
from labelspace.log_config import configure_logging
from labelspace.models import Connection, Project, SecurityToken, Tag
from labelspace.providers import StorageProviderFactory
from labelspace.security import SecurityTokenStore
from labelspace.services import ProjectService, remove_project_tag, rename_project_tag

console = Console()

T = TypeVar("T")


def _handle_cli_error(
    message: str,
    *,
    code: str,
    json_output: bool,
    original: Exception | None = None,
) -> None:
    """Emit a standardized error and terminate the command.

    Args:
        message: Human-readable error message.
        code: Machine-readable error identifier.
        json_output: Indicates whether JSON mode is active.
        original: Original exception for chaining when not using JSON.

    Raises:
        SystemExit: When emitting JSON output to terminate the command.
        click.ClickException: For non-JSON flows to surface the error.
    """
    if json_output:
        console.print_json(data={"error": {"code": code, "message": message}})
        raise SystemExit(1)

    raise click.ClickException(message) from original


def _run(coro: Coroutine[Any, Any, T]) -> T:
    return asyncio.run(coro)


def _config(ctx: click.Context) -> LabelspaceConfig:
    return ctx.obj["config"]


def _token_store(ctx: click.Context) -> SecurityTokenStore:
    return SecurityTokenStore(_config(ctx).security_tokens)


def _report(ctx: click.Context, message: str) -> None:
    """Print a status message unless quiet output is configured."""
    if not _config(ctx).cli.quiet_default:
        console.print(message)


def _read_project_file(path: Path) -> Project:
    """Parse a project file as written by ``ProjectService.save``.

    Raises:
        ProjectFileError: If the file cannot be read or is not a valid project.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
        return Project.model_validate(data)
    except (OSError, json.JSONDecodeError, ValidationError) as exc:
        raise ProjectFileError(f"Unable to read project file {path}: {exc}") from exc


def _open_project(ctx: click.Context, path: Path) -> tuple[Project, SecurityToken]:
    """Read and decrypt the project at ``path`` with its configured token."""
    stored = _read_project_file(path)
    token = _token_store(ctx).get(stored.security_token)
    project = _run(ProjectService().load(stored, token))
    return project, token


async def _existing_projects(project: Project) -> list[Project]:
    storage = StorageProviderFactory.create_from_connection(project.target_connection)
    projects = []
    for name in await storage.list_files(PROJECT_FILE_EXTENSION):
        try:
            projects.append(Project.model_validate_json(await storage.read_text(name)))
        except ValidationError:
            continue
    return projects


def _local_connection(provider_type: str, folder: str, name: str) -> Connection:
    return Connection(
        id=uuid.uuid4().hex,
        name=name,
        provider_type=provider_type,
        provider_options={"folderPath": str(Path(folder).expanduser().resolve())},
    )


def _project_table(project: Project) -> Table:
    table = Table(title=f"Project {project.name}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("id", project.id or "-")
    table.add_row("security token", project.security_token)
    table.add_row(
        "source",
        f"{project.source_connection.provider_type} {project.source_connection.provider_options}",
    )
    table.add_row(
        "target",
        f"{project.target_connection.provider_type} {project.target_connection.provider_options}",
    )
    export = project.export_format
    table.add_row("export", export.provider_type if export else "-")
    table.add_row("tags", ", ".join(tag.name for tag in project.tags) or "-")
    table.add_row("assets", str(len(project.assets)))
    return table


def _assign_nested(target: dict[str, Any], path: list[str], value: Any) -> None:
    """Assign ``value`` at the nested location described by ``path``.

    Raises:
        ConfigError: If a non-mapping value is encountered along the path.
    """
    node = target
    for segment in path[:-1]:
        existing = node.setdefault(segment, {})
        if not isinstance(existing, dict):
            raise ConfigError(
                f"Cannot assign into '{segment}' because it is not a mapping in the config file."
            )
        node = existing
    node[path[-1]] = value


@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(package_name="labelspace")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Labelspace manages labeling projects, their encrypted connections, and tags."""
    try:
        config = ConfigManager().load()
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc
    configure_logging(config.logging)
    ctx.ensure_object(dict)
    ctx.obj["config"] = config


@cli.group()
def token() -> None:
    """Manage security tokens used to encrypt project connections."""


@token.command("create")
@click.argument("name")
@click.pass_context
def token_create(ctx: click.Context, name: str) -> None:
    """Generate a new security token called NAME and store it in the config."""
    manager = ConfigManager()
    try:
        manager.add_security_token(_token_store(ctx).create(name))
    except (ConfigError, ValueError) as exc:
        raise click.ClickException(str(exc)) from exc
    console.print(f"[green]Created security token {name}.[/green]")


@token.command("list")
@click.pass_context
def token_list(ctx: click.Context) -> None:
    """List configured security token names."""
    tokens = _token_store(ctx).tokens()
    if not tokens:
        console.print("[yellow]No security tokens configured.[/yellow]")
        return
    for entry in tokens:
        console.print(entry.name)


@cli.group()
def project() -> None:
    """Create, inspect, and delete projects."""


@project.command("create")
@click.argument("name")
@click.option("--source", required=True, type=click.Path(file_okay=False), help="Asset folder.")
@click.option("--target", required=True, type=click.Path(file_okay=False), help="Project folder.")
@click.option("--token", "token_name", required=True, help="Security token protecting the project.")
@click.option("--tag", "tags", multiple=True, help="Tag to add; repeat for several tags.")
@click.option("--json", "json_output", is_flag=True, help="Emit the saved project as JSON.")
@click.pass_context
def project_create(
    ctx: click.Context,
    name: str,
    source: str,
    target: str,
    token_name: str,
    tags: tuple[str, ...],
    json_output: bool,
) -> None:
    """Create project NAME storing its file and asset metadata in TARGET."""
    json_enabled = json_output or _config(ctx).cli.json_default
    provider_type = _config(ctx).storage.default_provider
    try:
        security_token = _token_store(ctx).get(token_name)
        new_project = Project(
            id=uuid.uuid4().hex,
            name=name,
            security_token=security_token.name,
            source_connection=_local_connection(provider_type, source, f"{name} source"),
            target_connection=_local_connection(provider_type, target, f"{name} target"),
            tags=[Tag(name=tag) for tag in dict.fromkeys(tags)],
        )
        service = ProjectService()
        duplicate = service.is_duplicate(new_project, _run(_existing_projects(new_project)))
        if not duplicate:
            saved = _run(service.save(new_project, security_token))
    except LabelspaceError as exc:
        _handle_cli_error(str(exc), code="project_error", json_output=json_enabled, original=exc)
        return

    if duplicate:
        _handle_cli_error(
            f"A project named {name!r} already exists in {target}.",
            code="duplicate_project",
            json_output=json_enabled,
        )
        return

    if json_enabled:
        console.print_json(data=saved.to_wire())
    else:
        _report(ctx, f"[green]Created project {name}.[/green]")


@project.command("show")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("--json", "json_output", is_flag=True, help="Emit the decrypted project as JSON.")
@click.pass_context
def project_show(ctx: click.Context, path: Path, json_output: bool) -> None:
    """Decrypt and display the project stored at PATH."""
    json_enabled = json_output or _config(ctx).cli.json_default
    try:
        loaded, _ = _open_project(ctx, path)
    except LabelspaceError as exc:
        _handle_cli_error(str(exc), code="project_error", json_output=json_enabled, original=exc)
        return

    if json_enabled:
        console.print_json(data=loaded.to_wire())
    else:
        console.print(_project_table(loaded))


@project.command("delete")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.confirmation_option(prompt="Delete the project file and all asset metadata?")
@click.pass_context
def project_delete(ctx: click.Context, path: Path) -> None:
    """Delete the project stored at PATH along with its asset metadata."""
    try:
        loaded, _ = _open_project(ctx, path)
        _run(ProjectService().delete(loaded))
    except LabelspaceError as exc:
        _handle_cli_error(str(exc), code="project_error", json_output=False, original=exc)
        return
    _report(ctx, f"[green]Deleted project {loaded.name} ({len(loaded.assets)} assets).[/green]")


@cli.group()
def tag() -> None:
    """Rename or delete tags across every asset of a project."""


@tag.command("rename")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("old")
@click.argument("new")
@click.pass_context
def tag_rename(ctx: click.Context, path: Path, old: str, new: str) -> None:
    """Rename tag OLD to NEW in the project stored at PATH."""
    try:
        loaded, security_token = _open_project(ctx, path)
        service = ProjectService()
        updated = _run(service.update_tag(loaded, old, new))
        _run(service.save(rename_project_tag(loaded, old, new), security_token))
    except LabelspaceError as exc:
        _handle_cli_error(str(exc), code="tag_error", json_output=False, original=exc)
        return
    _report(ctx, f"[green]Renamed {old!r} to {new!r} in {len(updated)} assets.[/green]")


@tag.command("delete")
@click.argument("path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.argument("name")
@click.pass_context
def tag_delete(ctx: click.Context, path: Path, name: str) -> None:
    """Delete tag NAME from the project stored at PATH."""
    try:
        loaded, security_token = _open_project(ctx, path)
        service = ProjectService()
        updated = _run(service.delete_tag(loaded, name))
        _run(service.save(remove_project_tag(loaded, name), security_token))
    except LabelspaceError as exc:
        _handle_cli_error(str(exc), code="tag_error", json_output=False, original=exc)
        return
    _report(ctx, f"[green]Deleted {name!r} from {len(updated)} assets.[/green]")


@cli.group()
def config() -> None:
    """Manage Labelspace configuration files and overrides."""


@config.command("view")
@click.option("--no-env", is_flag=True, help="Ignore environment overrides when displaying output.")
def config_view(no_env: bool) -> None:
    """Display the effective configuration with security token keys hidden."""
    manager = ConfigManager()
    try:
        manager.ensure_exists()
        effective = manager.load(include_env=not no_env)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    data = effective.model_dump(mode="python")
    data["security_tokens"] = [
        {"name": entry["name"], "key": "********"} for entry in data["security_tokens"]
    ]
    console.print(Syntax(yaml.safe_dump(data, sort_keys=False), "yaml", word_wrap=True))


@config.command("set")
@click.argument("key")
@click.option("--value", required=True, help="Value to assign to KEY.")
def config_set(key: str, value: str) -> None:
    """Persist a configuration value expressed as a dotted KEY."""
    manager = ConfigManager()
    manager.ensure_exists()

    before = manager.read_text().splitlines()
    segments = [segment.strip() for segment in key.split(".") if segment.strip()]
    if not segments:
        raise click.ClickException("KEY must specify a dotted path such as 'logging.level'.")

    try:
        parsed_value = yaml.safe_load(value)
    except yaml.YAMLError as exc:
        raise click.ClickException(f"Unable to parse value: {exc}") from exc

    try:
        original = manager.load_file_overrides()
        file_data = copy.deepcopy(original)
        _assign_nested(file_data, segments, parsed_value)
        resolve_with_precedence(defaults=LabelspaceConfig(), file_overrides=file_data)
    except ConfigError as exc:
        raise click.ClickException(str(exc)) from exc

    if file_data == original:
        console.print("[yellow]No changes applied; value already up to date.[/yellow]")
        return

    manager.save(file_data)
    diff = list(
        difflib.unified_diff(
            before,
            manager.read_text().splitlines(),
            fromfile="config.yaml (before)",
            tofile="config.yaml (after)",
            lineterm="",
        )
    )
    console.print(Syntax("\n".join(diff), "diff", word_wrap=False))
    console.print(f"[green]Updated {'.'.join(segments)}.[/green]")


def main() -> None:
    """Invoke the Click CLI as the console script entry point."""
    cli()


if __name__ == "__main__":
    main()
