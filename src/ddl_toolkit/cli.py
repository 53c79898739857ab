"""Command line interface for DDL Toolkit."""

import logging
import sys
from json import JSONDecodeError, dumps, loads
from pathlib import Path
from sys import stdout
from typing import Literal

from cyclopts import App
from rich.console import Console
from rich.logging import RichHandler
from rich.progress import Progress, SpinnerColumn, TextColumn
from rich.table import Table

from ddl_toolkit.config import (
    ConfigError,
    DataSourceConfig,
    load_config,
    merge_config,
    resolve_platform_name,
)
from ddl_toolkit.errors import DdlToolkitError
from ddl_toolkit.model import Database, database_from_dict, database_to_dict
from ddl_toolkit.platform import ExecutionReport, Platform, PlatformRegistry, default_registry
from ddl_toolkit.platform.base import open_connection

app = App(help="DDL Toolkit CLI tool")

console = Console()
err_console = Console(stderr=True)

REGISTRY = default_registry()


def print_error(message: str) -> None:
    """Print error message to stderr."""
    err_console.print(f"[bold red]Error:[/] {message}")


def print_success(message: str) -> None:
    """Print success message to stderr."""
    err_console.print(f"[bold green]✓[/] {message}")


def print_info(message: str) -> None:
    """Print info message to stderr."""
    err_console.print(f"[bold blue]i[/] {message}")


def setup_logging(*, verbose: bool = False) -> None:
    """Route library logging through rich on stderr."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def load_model(model_location: Path) -> Database:
    """Load a JSON model file."""
    if not model_location.exists():
        msg = f"Model file does not exist: {model_location}"
        raise ConfigError(msg)
    try:
        return database_from_dict(loads(model_location.read_text(encoding="utf-8")))
    except (JSONDecodeError, KeyError, TypeError, ValueError) as e:
        msg = f"Invalid model file {model_location}: {e}"
        raise ConfigError(msg) from e


def resolve_datasource(
    url: str | None,
    config_location: Path | None,
    platform: str | None,
) -> DataSourceConfig:
    """Combine the configuration file with the command line values."""
    config = load_config(config_location) if config_location else DataSourceConfig()
    config = merge_config(config, url=url, platform=platform)
    if not config.get("url"):
        msg = "A database URL is required, either as argument or in the configuration"
        raise ConfigError(msg)
    return config


def create_platform(name: str, registry: PlatformRegistry = REGISTRY) -> Platform:
    """Create a platform by name."""
    return registry.create(name)


def platform_rows(registry: PlatformRegistry = REGISTRY) -> list[tuple[str, ...]]:
    """Summarise the capabilities of every registered platform."""
    rows: list[tuple[str, ...]] = []
    for name in registry.names():
        info = registry.create(name).info
        rows.append(
            (
                name,
                info.name,
                str(info.max_identifier_length or "-"),
                "embedded" if info.foreign_keys_embedded else "external",
                "yes" if info.auto_commit_ddl else "no",
                "yes" if info.supports_alter_column else "rebuild",
            ),
        )
    return rows


def report_execution(report: ExecutionReport) -> None:
    """Print the outcome of executing a script."""
    for warning in report.warnings:
        print_info(f"Warning: {warning}")
    for failure in report.failures:
        print_error(f"Statement {failure.index} failed: {failure.message}")
        err_console.print(failure.statement, markup=False, highlight=False)
    if report.succeeded:
        print_success(f"Executed {report.executed} statements")
    else:
        print_error(
            f"Executed {report.executed} statements, {len(report.failures)} failed",
        )
        sys.exit(1)


@app.command
def platforms() -> None:
    """List the supported database platforms."""
    table = Table(title="Platforms")
    table.add_column("Name", style="bold cyan")
    table.add_column("Dialect")
    table.add_column("Max identifier")
    table.add_column("Foreign keys")
    table.add_column("Auto-commit DDL")
    table.add_column("Alter column")
    for row in platform_rows():
        table.add_row(*row)
    console.print(table)


@app.command
def sql(
    model: Path,
    platform: str,
    *,
    drop_first: bool = False,
    drop: bool = False,
    verbose: bool = False,
) -> None:
    """Generate the DDL of a JSON model for a platform."""
    setup_logging(verbose=verbose)
    try:
        database = load_model(model)
        target = create_platform(platform)
        if drop:
            script = target.get_drop_tables_sql(database)
        else:
            script = target.get_create_tables_sql(database, drop_first=drop_first)
    except DdlToolkitError as e:
        print_error(str(e))
        sys.exit(1)

    stdout.write(script.text)
    for warning in script.warnings:
        print_info(f"Warning: {warning}")
    print_success(f"Generated {len(script)} statements for {target.info.name}")


@app.command
def dump(
    url: str | None = None,
    *,
    config: Path | None = None,
    platform: str | None = None,
    schema: str | None = None,
    fmt: Literal["json", "sql"] = "json",
    target: str | None = None,
    verbose: bool = False,
) -> None:
    """Read the schema of a live database as a model or as DDL."""
    setup_logging(verbose=verbose)
    try:
        datasource = merge_config(resolve_datasource(url, config, platform), schema=schema)
        source = create_platform(resolve_platform_name(datasource))
        print_info(f"Source: {datasource['url']} ({source.info.name})")
        handle = open_connection(
            datasource.get("driver"),
            datasource["url"],
            datasource.get("username"),
            datasource.get("password"),
        )
        try:
            with Progress(
                SpinnerColumn(),
                TextColumn("[progress.description]{task.description}"),
                console=err_console,
            ) as progress:
                progress.add_task("Reading schema...", total=None)
                database = source.read_model_from_database(
                    handle.connection,
                    catalog=datasource.get("catalog"),
                    schema=datasource.get("schema"),
                    table_types=datasource.get("table_types"),
                )
        finally:
            handle.close()
        if fmt == "json":
            stdout.write(dumps(database_to_dict(database), indent=2))
        else:
            output = create_platform(target) if target else source
            stdout.write(output.get_create_tables_sql(database).text)
    except DdlToolkitError as e:
        print_error(str(e))
        sys.exit(1)

    print_success(f"Read {len(database.tables)} tables")


@app.command
def create(
    model: Path,
    url: str | None = None,
    *,
    config: Path | None = None,
    platform: str | None = None,
    drop_first: bool = False,
    continue_on_error: bool = False,
    dry_run: bool = False,
    verbose: bool = False,
) -> None:
    """Create the tables of a JSON model in a live database."""
    setup_logging(verbose=verbose)
    try:
        database = load_model(model)
        datasource = resolve_datasource(url, config, platform)
        target = create_platform(resolve_platform_name(datasource))
        if dry_run:
            stdout.write(target.get_create_tables_sql(database, drop_first=drop_first).text)
            return
        handle = open_connection(
            datasource.get("driver"),
            datasource["url"],
            datasource.get("username"),
            datasource.get("password"),
        )
        try:
            report = target.create_tables(
                handle.connection,
                database,
                drop_first=drop_first,
                continue_on_error=continue_on_error,
            )
        finally:
            handle.close()
    except DdlToolkitError as e:
        print_error(str(e))
        sys.exit(1)

    report_execution(report)


@app.command
def alter(
    model: Path,
    url: str | None = None,
    *,
    config: Path | None = None,
    platform: str | None = None,
    continue_on_error: bool = False,
    dry_run: bool = False,
    verbose: bool = False,
) -> None:
    """Alter a live database to match a JSON model."""
    setup_logging(verbose=verbose)
    try:
        desired = load_model(model)
        datasource = resolve_datasource(url, config, platform)
        target = create_platform(resolve_platform_name(datasource))
        handle = open_connection(
            datasource.get("driver"),
            datasource["url"],
            datasource.get("username"),
            datasource.get("password"),
        )
        try:
            if dry_run:
                current = target.read_model_from_database(
                    handle.connection,
                    desired.name,
                    catalog=datasource.get("catalog"),
                    schema=datasource.get("schema"),
                    table_types=datasource.get("table_types"),
                )
                stdout.write(target.get_alter_tables_sql(current, desired).text)
                return
            report = target.alter_tables(
                handle.connection,
                desired,
                continue_on_error=continue_on_error,
                catalog=datasource.get("catalog"),
                schema=datasource.get("schema"),
                table_types=datasource.get("table_types"),
            )
        finally:
            handle.close()
    except DdlToolkitError as e:
        print_error(str(e))
        sys.exit(1)

    report_execution(report)


def main() -> None:
    """Entry point for the CLI."""
    app()


if __name__ == "__main__":
    main()
