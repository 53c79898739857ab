"""Tests for the command line helpers and commands."""

from json import dumps
from pathlib import Path

import pytest
from sqlalchemy import create_engine, inspect

from ddl_toolkit.cli import (
    create,
    load_model,
    platform_rows,
    report_execution,
    resolve_datasource,
    sql,
)
from ddl_toolkit.config import ConfigError
from ddl_toolkit.model import Column, Database, Table, TypeCode, database_to_dict
from ddl_toolkit.platform import ExecutionReport, StatementFailure


@pytest.fixture(name="model_path")
def create_model_path(tmp_path: Path) -> Path:
    """Create a JSON model file with one table."""
    database = Database(
        "people",
        [
            Table(
                "person",
                [
                    Column("id", TypeCode.INTEGER, required=True, primary_key=True),
                    Column("name", TypeCode.VARCHAR, size=64),
                ],
            ),
        ],
    )
    path = tmp_path / "people.json"
    path.write_text(dumps(database_to_dict(database)), encoding="utf-8")
    return path


def test_load_model(model_path: Path) -> None:
    """Test a JSON model file is loaded."""
    database = load_model(model_path)

    assert database.name == "people"
    assert [table.name for table in database.tables] == ["person"]


def test_load_model_errors(tmp_path: Path) -> None:
    """Test missing and malformed model files are configuration errors."""
    with pytest.raises(ConfigError, match="does not exist"):
        load_model(tmp_path / "missing.json")

    broken = tmp_path / "broken.json"
    broken.write_text("{not json", encoding="utf-8")
    with pytest.raises(ConfigError, match="Invalid model file"):
        load_model(broken)


def test_resolve_datasource(tmp_path: Path) -> None:
    """Test command line values override the configuration file."""
    config_path = tmp_path / "ddl.toml"
    config_path.write_text(
        '[datasource]\nurl = "sqlite:///a.db"\nplatform = "sqlite"\n',
        encoding="utf-8",
    )

    assert resolve_datasource(None, config_path, None)["url"] == "sqlite:///a.db"
    assert resolve_datasource("sqlite:///b.db", config_path, None)["url"] == "sqlite:///b.db"
    with pytest.raises(ConfigError, match="A database URL is required"):
        resolve_datasource(None, None, "sqlite")


def test_platform_rows() -> None:
    """Test the platform summary lists every dialect's capabilities."""
    rows = {row[0]: row for row in platform_rows()}

    assert rows["sqlite"] == ("sqlite", "SQLite", "-", "embedded", "yes", "rebuild")
    assert rows["oracle"][2] == "30"
    assert rows["firebird"][4] == "no"


def test_report_execution_exits_on_failures() -> None:
    """Test a report with failures ends the command with an error status."""
    report = ExecutionReport(
        executed=1,
        failures=[StatementFailure(1, "DROP TABLE missing", RuntimeError("no such table"))],
    )

    with pytest.raises(SystemExit) as info:
        report_execution(report)

    assert info.value.code == 1


def test_sql_rejects_unknown_platforms(model_path: Path) -> None:
    """Test the sql command fails for an unknown platform."""
    with pytest.raises(SystemExit) as info:
        sql(model_path, "nope")

    assert info.value.code == 1


def test_create_builds_the_tables(model_path: Path, tmp_path: Path) -> None:
    """Test the create command creates the model's tables in a SQLite file."""
    url = f"sqlite:///{tmp_path / 'people.db'}"

    create(model_path, url)

    engine = create_engine(url)
    try:
        assert inspect(engine).get_table_names() == ["person"]
    finally:
        engine.dispose()
