"""Reconstruction of a schema model from database metadata."""

from __future__ import annotations

from contextlib import contextmanager
from logging import getLogger
from typing import TYPE_CHECKING, Any, ClassVar

from sqlalchemy.exc import SQLAlchemyError

from ddl_toolkit.errors import IntrospectionFailure
from ddl_toolkit.model.database import Database
from ddl_toolkit.model.elements import (
    CascadeAction,
    Column,
    ForeignKey,
    Index,
    IndexColumn,
    Reference,
)
from ddl_toolkit.model.table import Table
from ddl_toolkit.platform.metadata import (
    COLUMN_NO_NULLS,
    IMPORTED_KEY_CASCADE,
    IMPORTED_KEY_RESTRICT,
    IMPORTED_KEY_SET_DEFAULT,
    IMPORTED_KEY_SET_NULL,
)
from ddl_toolkit.platform.values import strip_literal

if TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

    from ddl_toolkit.platform.info import PlatformInfo
    from ddl_toolkit.platform.metadata import DatabaseMetaData, Row
    from ddl_toolkit.platform.type_map import TypeMap

logger = getLogger(__name__)

_ACTIONS = {
    IMPORTED_KEY_CASCADE: CascadeAction.CASCADE,
    IMPORTED_KEY_RESTRICT: CascadeAction.RESTRICT,
    IMPORTED_KEY_SET_NULL: CascadeAction.SET_NULL,
    IMPORTED_KEY_SET_DEFAULT: CascadeAction.SET_DEFAULT,
}

METADATA_ERRORS = (SQLAlchemyError, KeyError, ValueError)


def cascade_action(rule: Any) -> CascadeAction:
    """Map a JDBC rule code to a referential action."""
    if rule is None:
        return CascadeAction.NONE
    return _ACTIONS.get(int(rule), CascadeAction.NONE)


class ModelReader:
    """Builds a :class:`Database` from a :class:`DatabaseMetaData`.

    Dialects subclass the reader to set their default patterns and to recognise
    the indices the backend creates on its own.
    """

    default_catalog_pattern: ClassVar[str | None] = None
    default_schema_pattern: ClassVar[str | None] = None
    default_table_types: ClassVar[tuple[str, ...]] = ("TABLE",)

    def __init__(self, info: PlatformInfo, type_map: TypeMap) -> None:
        """Initialize the reader for a dialect."""
        self.info = info
        self.type_map = type_map
        self.warnings: list[str] = []

    def warn(self, message: str) -> None:
        """Record a warning about the read model."""
        logger.warning("%s", message)
        self.warnings.append(message)

    @contextmanager
    def introspecting(self, what: str) -> Iterator[None]:
        """Turn metadata errors into :class:`IntrospectionFailure` naming ``what``."""
        try:
            yield
        except IntrospectionFailure:
            raise
        except METADATA_ERRORS as error:
            msg = f"Failed to read {what}: {error}"
            raise IntrospectionFailure(msg) from error

    def read(
        self,
        metadata: DatabaseMetaData,
        name: str | None = None,
        catalog: str | None = None,
        schema: str | None = None,
        table_types: Sequence[str] | None = None,
    ) -> Database:
        """Read every table visible through the metadata into a model.

        Args:
            metadata: Source of the table descriptions
            name: Name of the resulting model, defaults to the dialect name
            catalog: Catalog filter, defaults to the dialect's pattern
            schema: Schema filter, defaults to the dialect's pattern
            table_types: Table types to read, defaults to plain tables

        Returns:
            The model; foreign keys to unknown tables are kept with a warning

        """
        catalog = catalog if catalog is not None else self.default_catalog_pattern
        schema = schema if schema is not None else self.default_schema_pattern
        table_types = table_types or self.default_table_types

        tables: list[Table] = []
        with self.introspecting("tables"), metadata.get_tables(
            catalog,
            schema,
            "%",
            table_types,
        ) as rows:
            table_rows = list(rows)
        for row in table_rows:
            table = self.read_table(metadata, row, catalog, schema)
            if table is not None:
                tables.append(table)

        database = Database(name or self.info.name, tables)
        self.resolve_foreign_keys(database)
        logger.info("Read %d tables from the database", len(tables))
        return database

    def read_table(
        self,
        metadata: DatabaseMetaData,
        row: Row,
        catalog: str | None,
        schema: str | None,
    ) -> Table | None:
        """Read one table with its columns, keys and indices."""
        table_name: str = row["TABLE_NAME"]
        if not table_name:
            return None
        table = Table(
            table_name,
            schema=row.get("TABLE_SCHEM"),
            catalog=row.get("TABLE_CAT"),
            description=row.get("REMARKS") or None,
        )
        where = f"table {table_name}"

        with self.introspecting(f"columns of {where}"), metadata.get_columns(
            catalog,
            schema,
            table_name,
        ) as rows:
            column_rows = sorted(rows, key=lambda column: column.get("ORDINAL_POSITION") or 0)
            table.columns = [self.read_column(column_row) for column_row in column_rows]

        with self.introspecting(f"primary key of {where}"), metadata.get_primary_keys(
            catalog,
            schema,
            table_name,
        ) as rows:
            primary_key = [
                key_row["COLUMN_NAME"]
                for key_row in sorted(rows, key=lambda key_row: key_row.get("KEY_SEQ") or 0)
            ]
        for name in primary_key:
            column = table.find_column(name, case_sensitive=True)
            if column is None:
                msg = f"Primary key of {where} names unknown column {name}"
                raise IntrospectionFailure(msg)
            column.primary_key = True
            column.required = True

        with self.introspecting(f"foreign keys of {where}"), metadata.get_imported_keys(
            catalog,
            schema,
            table_name,
        ) as rows:
            table.foreign_keys = self.read_foreign_keys(table, list(rows))

        with self.introspecting(f"indices of {where}"), metadata.get_index_info(
            catalog,
            schema,
            table_name,
        ) as rows:
            indices = self.read_indices(list(rows))

        table.indices = [index for index in indices if not self.is_internal_index(table, index)]
        return table

    def read_column(self, row: Row) -> Column:
        """Build a column from a ``get_columns`` row."""
        native = self.type_map.from_native(
            row["TYPE_NAME"] or "",
            row.get("DATA_TYPE"),
            row.get("COLUMN_SIZE"),
            row.get("DECIMAL_DIGITS"),
        )
        auto_increment = str(row.get("IS_AUTOINCREMENT") or "").upper() == "YES"
        column = Column(
            name=row["COLUMN_NAME"],
            type_code=native.type_code,
            size=native.size,
            scale=native.scale,
            required=row.get("NULLABLE") == COLUMN_NO_NULLS,
            auto_increment=auto_increment,
            description=row.get("REMARKS") or None,
        )
        if not auto_increment:
            column.default_value = self.normalize_default(row.get("COLUMN_DEF"), column)
        return column

    def normalize_default(self, raw: str | None, column: Column) -> str | None:  # noqa: ARG002
        """Reduce a reported default to the model's textual form."""
        return strip_literal(raw)

    def read_foreign_keys(self, table: Table, rows: list[Row]) -> list[ForeignKey]:
        """Group imported-key rows into foreign keys.

        Rows are grouped by the declared key name; unnamed keys are told apart
        by their key sequence restarting at one.
        """
        grouped: dict[str, ForeignKey] = {}
        sequences: dict[str, list[tuple[int, Reference]]] = {}
        current_key: str | None = None
        unnamed = 0
        for row in rows:
            name = row.get("FK_NAME")
            sequence = int(row.get("KEY_SEQ") or 1)
            if name:
                group = f"name:{name}"
            else:
                if current_key is None or not current_key.startswith("unnamed:") or sequence == 1:
                    unnamed += 1
                group = f"unnamed:{table.name}:{unnamed}"
            current_key = group
            if group not in grouped:
                grouped[group] = ForeignKey(
                    foreign_table=row["PKTABLE_NAME"],
                    name=name or None,
                    on_delete=cascade_action(row.get("DELETE_RULE")),
                    on_update=cascade_action(row.get("UPDATE_RULE")),
                )
                sequences[group] = []
            sequences[group].append(
                (sequence, Reference(row["FKCOLUMN_NAME"], row["PKCOLUMN_NAME"])),
            )
        for group, foreign_key in grouped.items():
            foreign_key.references = [
                reference for _, reference in sorted(sequences[group], key=lambda item: item[0])
            ]
        return list(grouped.values())

    def read_indices(self, rows: list[Row]) -> list[Index]:
        """Group index-info rows into indices, dropping statistics rows."""
        indices: dict[str, Index] = {}
        positions: dict[str, list[tuple[int, str]]] = {}
        for row in rows:
            name = row.get("INDEX_NAME")
            column_name = row.get("COLUMN_NAME")
            if not name or not column_name:
                continue
            if name not in indices:
                indices[name] = Index(name=name, unique=not row.get("NON_UNIQUE"))
                positions[name] = []
            positions[name].append((int(row.get("ORDINAL_POSITION") or 0), column_name))
        for name, index in indices.items():
            index.columns = [
                IndexColumn(column_name)
                for _, column_name in sorted(positions[name], key=lambda item: item[0])
            ]
        return list(indices.values())

    def is_internal_index(self, table: Table, index: Index) -> bool:
        """Whether the backend created the index for a primary or foreign key."""
        if self.is_internal_primary_key_index(table, index):
            logger.debug("Dropping internal primary key index %s", index.name)
            return True
        for foreign_key in table.foreign_keys:
            if self.is_internal_foreign_key_index(table, foreign_key, index):
                logger.debug("Dropping internal foreign key index %s", index.name)
                return True
        return False

    def is_internal_primary_key_index(self, table: Table, index: Index) -> bool:
        """Whether the index is the one backing the primary key."""
        primary_key = [column.name.upper() for column in table.primary_key_columns]
        return (
            index.unique
            and bool(primary_key)
            and [name.upper() for name in index.column_names] == primary_key
        )

    def is_internal_foreign_key_index(
        self,
        table: Table,  # noqa: ARG002
        foreign_key: ForeignKey,  # noqa: ARG002
        index: Index,  # noqa: ARG002
    ) -> bool:
        """Whether the index was created by the backend for a foreign key."""
        return False

    def resolve_foreign_keys(self, database: Database) -> None:
        """Point foreign keys at the read spelling of their tables, warning on dangling ones."""
        for table in database.tables:
            for foreign_key in table.foreign_keys:
                target = database.find_table(
                    foreign_key.foreign_table,
                    case_sensitive=self.info.case_sensitive,
                )
                if target is None:
                    self.warn(
                        f"Foreign key {foreign_key.name or foreign_key.local_columns} of "
                        f"table {table.name} references unknown table "
                        f"{foreign_key.foreign_table}",
                    )
                    continue
                foreign_key.foreign_table = target.name
