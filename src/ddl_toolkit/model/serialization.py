"""TypedDict schemas for exchanging models as plain data (e.g. JSON)."""

from __future__ import annotations

from typing import NotRequired, TypedDict

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
from ddl_toolkit.model.types import TypeCode


class ColumnSchema(TypedDict):
    """Schema for a column; keys follow the schema descriptor attributes."""

    name: str
    type: str
    size: NotRequired[int]
    scale: NotRequired[int]
    default: NotRequired[str]
    required: NotRequired[bool]
    primaryKey: NotRequired[bool]  # noqa: N815
    autoIncrement: NotRequired[bool]  # noqa: N815
    description: NotRequired[str]


class ReferenceSchema(TypedDict):
    """Local/foreign column pair of a foreign key."""

    local: str
    foreign: str


class ForeignKeySchema(TypedDict):
    """Schema for a foreign key."""

    foreignTable: str  # noqa: N815
    reference: list[ReferenceSchema]
    name: NotRequired[str]
    onDelete: NotRequired[str]  # noqa: N815
    onUpdate: NotRequired[str]  # noqa: N815


class IndexColumnSchema(TypedDict):
    """Schema for an indexed column."""

    name: str
    size: NotRequired[int]


class IndexSchema(TypedDict):
    """Schema for an index or unique constraint."""

    columns: list[IndexColumnSchema]
    name: NotRequired[str]
    unique: NotRequired[bool]


class TableSchema(TypedDict):
    """Schema for a table."""

    name: str
    columns: list[ColumnSchema]
    foreignKeys: NotRequired[list[ForeignKeySchema]]  # noqa: N815
    indices: NotRequired[list[IndexSchema]]
    schema: NotRequired[str]
    catalog: NotRequired[str]
    description: NotRequired[str]


class DatabaseSchema(TypedDict):
    """Root schema of a database model."""

    name: str
    tables: list[TableSchema]


def _column_to_dict(column: Column) -> ColumnSchema:
    data: ColumnSchema = {"name": column.name, "type": column.type_code.name}
    if column.size is not None:
        data["size"] = column.size
    if column.scale is not None:
        data["scale"] = column.scale
    if column.default_value is not None:
        data["default"] = column.default_value
    if column.required:
        data["required"] = True
    if column.primary_key:
        data["primaryKey"] = True
    if column.auto_increment:
        data["autoIncrement"] = True
    if column.description:
        data["description"] = column.description
    return data


def _foreign_key_to_dict(foreign_key: ForeignKey) -> ForeignKeySchema:
    data: ForeignKeySchema = {
        "foreignTable": foreign_key.foreign_table,
        "reference": [
            {"local": reference.local_column, "foreign": reference.foreign_column}
            for reference in foreign_key.references
        ],
    }
    if foreign_key.name:
        data["name"] = foreign_key.name
    if foreign_key.on_delete is not CascadeAction.NONE:
        data["onDelete"] = foreign_key.on_delete.value
    if foreign_key.on_update is not CascadeAction.NONE:
        data["onUpdate"] = foreign_key.on_update.value
    return data


def _index_to_dict(index: Index) -> IndexSchema:
    columns: list[IndexColumnSchema] = []
    for index_column in index.columns:
        column: IndexColumnSchema = {"name": index_column.name}
        if index_column.size is not None:
            column["size"] = index_column.size
        columns.append(column)
    data: IndexSchema = {"columns": columns}
    if index.name:
        data["name"] = index.name
    if index.unique:
        data["unique"] = True
    return data


def _table_to_dict(table: Table) -> TableSchema:
    data: TableSchema = {
        "name": table.name,
        "columns": [_column_to_dict(column) for column in table.columns],
    }
    if table.foreign_keys:
        data["foreignKeys"] = [_foreign_key_to_dict(fk) for fk in table.foreign_keys]
    if table.indices:
        data["indices"] = [_index_to_dict(index) for index in table.indices]
    if table.schema:
        data["schema"] = table.schema
    if table.catalog:
        data["catalog"] = table.catalog
    if table.description:
        data["description"] = table.description
    return data


def database_to_dict(database: Database) -> DatabaseSchema:
    """Convert a model to plain data."""
    return {
        "name": database.name,
        "tables": [_table_to_dict(table) for table in database.tables],
    }


def _column_from_dict(data: ColumnSchema) -> Column:
    return Column(
        name=data["name"],
        type_code=TypeCode.from_name(data["type"]),
        size=data.get("size"),
        scale=data.get("scale"),
        default_value=data.get("default"),
        required=data.get("required", False),
        primary_key=data.get("primaryKey", False),
        auto_increment=data.get("autoIncrement", False),
        description=data.get("description"),
    )


def _foreign_key_from_dict(data: ForeignKeySchema) -> ForeignKey:
    return ForeignKey(
        foreign_table=data["foreignTable"],
        references=[
            Reference(reference["local"], reference["foreign"])
            for reference in data["reference"]
        ],
        name=data.get("name"),
        on_delete=CascadeAction.from_sql(data.get("onDelete")),
        on_update=CascadeAction.from_sql(data.get("onUpdate")),
    )


def _index_from_dict(data: IndexSchema) -> Index:
    return Index(
        columns=[
            IndexColumn(column["name"], column.get("size")) for column in data["columns"]
        ],
        name=data.get("name"),
        unique=data.get("unique", False),
    )


def database_from_dict(data: DatabaseSchema) -> Database:
    """Build a model from plain data."""
    return Database(
        name=data["name"],
        tables=[
            Table(
                name=table["name"],
                columns=[_column_from_dict(column) for column in table["columns"]],
                foreign_keys=[
                    _foreign_key_from_dict(fk) for fk in table.get("foreignKeys", [])
                ],
                indices=[_index_from_dict(index) for index in table.get("indices", [])],
                schema=table.get("schema"),
                catalog=table.get("catalog"),
                description=table.get("description"),
            )
            for table in data["tables"]
        ],
    )
