"""Tests for executing generated statements."""

import sqlite3
from collections.abc import Iterator

import pytest
from sqlalchemy import Connection, create_engine
from sqlalchemy.exc import InvalidRequestError, OperationalError

from ddl_toolkit.errors import ExecutionFailure
from ddl_toolkit.model import Column, Database, Table, TypeCode
from ddl_toolkit.platform.execution import execute_statements, is_commit
from ddl_toolkit.platforms import SqlitePlatform


@pytest.fixture(name="connection")
def create_connection() -> Iterator[Connection]:
    """Create a connection to an in-memory database."""
    engine = create_engine("sqlite://")
    with engine.connect() as connection:
        yield connection
    engine.dispose()


@pytest.mark.parametrize(
    ("statement", "expected"),
    [("COMMIT", True), ("  commit\n", True), ("COMMIT;", True), ("COMMIT WORK", False)],
)
def test_is_commit(statement: str, expected: bool) -> None:  # noqa: FBT001
    """Test bare COMMIT statements are recognised."""
    assert is_commit(statement) is expected


def test_statements_run_in_order(connection: Connection) -> None:
    """Test every statement runs and COMMIT only commits."""
    report = execute_statements(
        connection,
        ["CREATE TABLE t (a INTEGER)", "INSERT INTO t VALUES (1)", "COMMIT"],
    )

    assert report.succeeded
    assert report.executed == 3
    assert connection.exec_driver_sql("SELECT a FROM t").scalar() == 1


def test_failure_stops_the_batch(connection: Connection) -> None:
    """Test the first failing statement raises with its position."""
    statements = [
        "CREATE TABLE t (a INTEGER)",
        "CREATE TABLE t (a INTEGER)",
        "CREATE TABLE u (b INTEGER)",
    ]

    with pytest.raises(ExecutionFailure, match="already exists") as info:
        execute_statements(connection, statements)

    assert info.value.index == 1
    assert info.value.statement == "CREATE TABLE t (a INTEGER)"
    tables = connection.exec_driver_sql("SELECT name FROM sqlite_master").scalars().all()
    assert tables == ["t"]


def test_continue_on_error_collects_failures(connection: Connection) -> None:
    """Test failures are collected and the remaining statements still run."""
    report = execute_statements(
        connection,
        [
            "CREATE TABLE t (a INTEGER)",
            "CREATE TABLE t (a INTEGER)",
            "CREATE TABLE u (b INTEGER)",
        ],
        continue_on_error=True,
    )

    assert not report.succeeded
    assert report.executed == 2
    assert report.failed_indices == [1]
    assert "already exists" in report.failures[0].message


def test_script_warnings_reach_the_report(connection: Connection) -> None:
    """Test warnings from generating the script are part of the execution report."""
    table = Table(
        "entry",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True),
            Column("serial", TypeCode.INTEGER, auto_increment=True),
        ],
    )

    report = SqlitePlatform().create_tables(connection, Database("db", [table]))

    assert report.succeeded
    assert len(report.warnings) == 1
    assert "Auto-increment of entry.serial skipped" in report.warnings[0]


class BrokenConnection:
    """Connection whose statements and rollbacks both fail."""

    def __init__(self) -> None:
        """Initialize with no rollback attempts."""
        self.rollbacks = 0

    def exec_driver_sql(self, statement: str) -> None:
        """Reject every statement."""
        raise OperationalError(statement, None, sqlite3.OperationalError("disk I/O error"))

    def commit(self) -> None:
        """Commit nothing."""

    def rollback(self) -> None:
        """Fail to roll back."""
        self.rollbacks += 1
        msg = "connection was invalidated"
        raise InvalidRequestError(msg)


def test_failed_rollback_keeps_the_statement_failure() -> None:
    """Test a failing rollback neither hides the statement error nor stops collection."""
    connection = BrokenConnection()

    report = execute_statements(
        connection,  # type: ignore[arg-type]
        ["CREATE TABLE t (a INTEGER)", "CREATE TABLE u (b INTEGER)"],
        continue_on_error=True,
    )

    assert report.failed_indices == [0, 1]
    assert connection.rollbacks == 2
    assert report.failures[0].message == "disk I/O error"
    assert isinstance(report.failures[0].rollback_error, InvalidRequestError)


def test_failed_rollback_is_noted_on_the_raised_failure() -> None:
    """Test the statement error is raised with the rollback error attached."""
    with pytest.raises(ExecutionFailure, match="disk I/O error") as info:
        execute_statements(BrokenConnection(), ["DROP TABLE t"])  # type: ignore[arg-type]

    (note,) = info.value.__notes__
    assert note.startswith("Rollback also failed: connection was invalidated")
