"""Execution of generated statements on a caller-owned connection."""

from __future__ import annotations

from dataclasses import dataclass, field
from logging import getLogger
from typing import TYPE_CHECKING

from sqlalchemy.exc import DBAPIError, SQLAlchemyError

from ddl_toolkit.errors import ExecutionFailure
from ddl_toolkit.platform.builder import normalize_statement

if TYPE_CHECKING:
    from collections.abc import Iterable

    from sqlalchemy import Connection

logger = getLogger(__name__)


@dataclass
class StatementFailure:
    """A statement the backend rejected."""

    index: int
    statement: str
    cause: Exception
    rollback_error: Exception | None = None

    @property
    def message(self) -> str:
        """Return the backend's error message."""
        if isinstance(self.cause, DBAPIError) and self.cause.orig is not None:
            return str(self.cause.orig)
        return str(self.cause)


@dataclass
class ExecutionReport:
    """Outcome of running a batch of statements."""

    executed: int = 0
    failures: list[StatementFailure] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        """Whether every statement ran."""
        return not self.failures

    @property
    def failed_indices(self) -> list[int]:
        """Return the positions of the failed statements in the batch."""
        return [failure.index for failure in self.failures]


def is_commit(statement: str) -> bool:
    """Whether the statement is a bare COMMIT."""
    return normalize_statement(statement).rstrip(";").upper() == "COMMIT"


def execute_statements(
    connection: Connection,
    statements: Iterable[str],
    *,
    continue_on_error: bool = False,
) -> ExecutionReport:
    """Run statements one by one, committing after each.

    Args:
        connection: Caller-owned connection; it is neither retained nor closed
        statements: Statements without terminators
        continue_on_error: Collect failures and go on instead of stopping

    Returns:
        How many statements ran and which ones failed

    Raises:
        ExecutionFailure: A statement failed and ``continue_on_error`` is off

    """
    report = ExecutionReport()
    for index, statement in enumerate(statements):
        try:
            if not is_commit(statement):
                connection.exec_driver_sql(statement)
            connection.commit()
        except SQLAlchemyError as error:
            failure = StatementFailure(index, statement, error)
            try:
                connection.rollback()
            except SQLAlchemyError as rollback_error:
                logger.warning("Rollback after statement %d failed: %s", index, rollback_error)
                failure.rollback_error = rollback_error
            if not continue_on_error:
                execution_failure = ExecutionFailure(failure.message, index, statement)
                if failure.rollback_error is not None:
                    execution_failure.add_note(f"Rollback also failed: {failure.rollback_error}")
                raise execution_failure from error
            logger.warning("Statement %d failed: %s", index, failure.message)
            report.failures.append(failure)
        else:
            report.executed += 1
    logger.info(
        "Executed %d statements with %d failures",
        report.executed,
        len(report.failures),
    )
    return report
