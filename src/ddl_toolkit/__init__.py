"""Database schema toolkit: DDL generation, introspection and alteration."""

from ddl_toolkit.errors import (
    DdlToolkitError,
    ExecutionFailure,
    IntrospectionFailure,
    ModelInvariantViolation,
    ResourceFailure,
    UnsupportedDialectFeature,
)
from ddl_toolkit.model import (
    CascadeAction,
    Column,
    Database,
    ForeignKey,
    Index,
    IndexColumn,
    Reference,
    Table,
    TypeCode,
)
from ddl_toolkit.platform import (
    ExecutionReport,
    Platform,
    PlatformInfo,
    PlatformRegistry,
    SqlScript,
    default_registry,
    platform_name_for_url,
)

__all__ = [
    "CascadeAction",
    "Column",
    "Database",
    "DdlToolkitError",
    "ExecutionFailure",
    "ExecutionReport",
    "ForeignKey",
    "Index",
    "IndexColumn",
    "IntrospectionFailure",
    "ModelInvariantViolation",
    "Platform",
    "PlatformInfo",
    "PlatformRegistry",
    "Reference",
    "ResourceFailure",
    "SqlScript",
    "Table",
    "TypeCode",
    "UnsupportedDialectFeature",
    "default_registry",
    "platform_name_for_url",
]
