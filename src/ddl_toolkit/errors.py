"""Error types raised by the toolkit."""

from __future__ import annotations

from collections.abc import Iterable


class DdlToolkitError(Exception):
    """Base class for every error the toolkit raises."""


class ModelInvariantViolation(DdlToolkitError):
    """A model failed validation; carries every violation that was found."""

    def __init__(self, violations: Iterable[str]) -> None:
        """Initialize with the list of violation messages."""
        self.violations = list(violations)
        count = len(self.violations)
        details = "\n".join(f"  - {violation}" for violation in self.violations)
        super().__init__(f"Model has {count} invariant violation(s):\n{details}")


class UnsupportedDialectFeature(DdlToolkitError):
    """A construct or operation cannot be expressed on the target dialect."""


class IntrospectionFailure(DdlToolkitError):
    """Reading the schema metadata of a live database failed."""


class ExecutionFailure(DdlToolkitError):
    """The database rejected a generated statement."""

    def __init__(self, message: str, index: int, statement: str) -> None:
        """Initialize with the failing statement and its position in the batch."""
        self.index = index
        self.statement = statement
        super().__init__(f"{message} (statement {index}: {statement})")


class ResourceFailure(DdlToolkitError):
    """Acquiring or releasing a database connection failed."""
