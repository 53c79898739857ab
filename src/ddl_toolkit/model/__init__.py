"""Vendor-neutral schema model."""

from ddl_toolkit.model.database import Database
from ddl_toolkit.model.elements import (
    CascadeAction,
    Column,
    ForeignKey,
    Index,
    IndexColumn,
    Reference,
)
from ddl_toolkit.model.serialization import (
    DatabaseSchema,
    database_from_dict,
    database_to_dict,
)
from ddl_toolkit.model.table import Table
from ddl_toolkit.model.types import TypeCode, is_assignment_compatible

__all__ = [
    "CascadeAction",
    "Column",
    "Database",
    "DatabaseSchema",
    "ForeignKey",
    "Index",
    "IndexColumn",
    "Reference",
    "Table",
    "TypeCode",
    "database_from_dict",
    "database_to_dict",
    "is_assignment_compatible",
]
