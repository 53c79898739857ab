"""Database model and structural validation."""

from __future__ import annotations

from collections import Counter
from copy import deepcopy
from dataclasses import dataclass, field

from ddl_toolkit.errors import ModelInvariantViolation
from ddl_toolkit.model.elements import ForeignKey, fold
from ddl_toolkit.model.table import Table
from ddl_toolkit.model.types import is_assignment_compatible


@dataclass
class Database:
    """A named collection of tables."""

    name: str
    tables: list[Table] = field(default_factory=list)

    def find_table(self, name: str, *, case_sensitive: bool = False) -> Table | None:
        """Return the table with the given name, if any."""
        key = fold(name, case_sensitive=case_sensitive)
        return next(
            (
                table
                for table in self.tables
                if fold(table.name, case_sensitive=case_sensitive) == key
            ),
            None,
        )

    def add_table(self, table: Table) -> None:
        """Append a table to the database."""
        self.tables.append(table)

    def remove_table(self, name: str, *, case_sensitive: bool = False) -> Table:
        """Remove and return the named table."""
        table = self.find_table(name, case_sensitive=case_sensitive)
        if table is None:
            msg = f"Unknown table: {name}"
            raise KeyError(msg)
        self.tables.remove(table)
        return table

    def copy(self) -> Database:
        """Return a deep copy of the database."""
        return deepcopy(self)

    def violations(self, *, case_sensitive: bool = False) -> list[str]:
        """Check every structural invariant and list the violations found."""
        problems: list[str] = []

        if not self.name:
            problems.append("Database has no name")

        table_names = Counter(
            fold(table.name, case_sensitive=case_sensitive)
            for table in self.tables
            if table.name
        )
        problems.extend(
            f"Table name '{name}' is used {count} times"
            for name, count in sorted(table_names.items())
            if count > 1
        )

        for position, table in enumerate(self.tables):
            if not table.name:
                problems.append(f"Table #{position} has no name")
                continue
            problems.extend(self._table_violations(table, case_sensitive=case_sensitive))

        return problems

    def _table_violations(self, table: Table, *, case_sensitive: bool) -> list[str]:
        """List the violations of a single table."""
        problems: list[str] = []
        where = f"Table '{table.name}'"

        if not table.columns:
            problems.append(f"{where} has no columns")

        column_names = Counter(
            fold(column.name, case_sensitive=case_sensitive)
            for column in table.columns
            if column.name
        )
        problems.extend(
            f"{where}: column name '{name}' is used {count} times"
            for name, count in sorted(column_names.items())
            if count > 1
        )

        for position, column in enumerate(table.columns):
            if not column.name:
                problems.append(f"{where}: column #{position} has no name")
                continue
            label = f"{where}, column '{column.name}'"
            if column.scale is not None and not column.type_code.is_scaled:
                problems.append(
                    f"{label}: scale is set but {column.type_code.name} takes no scale",
                )
            if column.size is not None and column.size < 0:
                problems.append(f"{label}: size must not be negative")
            if column.auto_increment and not column.type_code.is_numeric:
                problems.append(
                    f"{label}: auto-increment requires a numeric type, "
                    f"not {column.type_code.name}",
                )
            if column.primary_key and not column.required:
                problems.append(f"{label}: primary key columns must be required")

        for position, index in enumerate(table.indices):
            label = f"{where}, index '{index.name or f'#{position}'}'"
            if not index.columns:
                problems.append(f"{label} has no columns")
            problems.extend(
                f"{label}: unknown column '{index_column.name}'"
                for index_column in index.columns
                if table.find_column(index_column.name, case_sensitive=case_sensitive)
                is None
            )

        for position, foreign_key in enumerate(table.foreign_keys):
            label = f"{where}, foreign key '{foreign_key.name or f'#{position}'}'"
            problems.extend(
                self._foreign_key_violations(
                    table,
                    foreign_key,
                    label,
                    case_sensitive=case_sensitive,
                ),
            )

        return problems

    def _foreign_key_violations(
        self,
        table: Table,
        foreign_key: ForeignKey,
        label: str,
        *,
        case_sensitive: bool,
    ) -> list[str]:
        """List the violations of a foreign key once resolved against the database."""
        problems: list[str] = []

        if not foreign_key.references:
            problems.append(f"{label} has no references")

        foreign_table = self.find_table(
            foreign_key.foreign_table,
            case_sensitive=case_sensitive,
        )
        if foreign_table is None:
            problems.append(f"{label}: unknown foreign table '{foreign_key.foreign_table}'")

        for reference in foreign_key.references:
            local = table.find_column(
                reference.local_column,
                case_sensitive=case_sensitive,
            )
            if local is None:
                problems.append(f"{label}: unknown local column '{reference.local_column}'")
            if foreign_table is None:
                continue
            foreign = foreign_table.find_column(
                reference.foreign_column,
                case_sensitive=case_sensitive,
            )
            if foreign is None:
                problems.append(
                    f"{label}: unknown column '{reference.foreign_column}' "
                    f"in table '{foreign_table.name}'",
                )
            elif local is not None and not is_assignment_compatible(
                local.type_code,
                foreign.type_code,
            ):
                problems.append(
                    f"{label}: {local.name} ({local.type_code.name}) cannot hold "
                    f"values of {foreign_table.name}.{foreign.name} "
                    f"({foreign.type_code.name})",
                )

        return problems

    def validate(self, *, case_sensitive: bool = False) -> None:
        """Raise ModelInvariantViolation listing every violation, if there are any."""
        if problems := self.violations(case_sensitive=case_sensitive):
            raise ModelInvariantViolation(problems)
