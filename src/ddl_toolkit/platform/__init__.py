"""Dialect-independent SQL generation, introspection and execution."""

from ddl_toolkit.platform.alter import ModelComparator
from ddl_toolkit.platform.base import Platform, creation_url, open_connection
from ddl_toolkit.platform.builder import SqlBuilder, SqlScript
from ddl_toolkit.platform.execution import ExecutionReport, StatementFailure
from ddl_toolkit.platform.info import CaseFold, PlatformInfo
from ddl_toolkit.platform.metadata import DatabaseMetaData, InspectorMetaData, ResultSet
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.registry import (
    PlatformRegistry,
    default_registry,
    platform_name_for_url,
)
from ddl_toolkit.platform.type_map import NativeType, TypeMap

__all__ = [
    "CaseFold",
    "DatabaseMetaData",
    "ExecutionReport",
    "InspectorMetaData",
    "ModelComparator",
    "ModelReader",
    "NativeType",
    "Platform",
    "PlatformInfo",
    "PlatformRegistry",
    "ResultSet",
    "SqlBuilder",
    "SqlScript",
    "StatementFailure",
    "TypeMap",
    "creation_url",
    "default_registry",
    "open_connection",
    "platform_name_for_url",
]
