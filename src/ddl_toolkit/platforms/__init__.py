"""Built-in dialects."""

from ddl_toolkit.platforms.axion import AxionPlatform
from ddl_toolkit.platforms.cloudscape import CloudscapePlatform
from ddl_toolkit.platforms.db2 import Db2Platform
from ddl_toolkit.platforms.derby import DerbyPlatform
from ddl_toolkit.platforms.firebird import FirebirdPlatform
from ddl_toolkit.platforms.hsqldb import HsqlDbPlatform
from ddl_toolkit.platforms.interbase import InterbasePlatform
from ddl_toolkit.platforms.maxdb import MaxDbPlatform
from ddl_toolkit.platforms.mssql import MsSqlPlatform
from ddl_toolkit.platforms.mysql import MySqlPlatform
from ddl_toolkit.platforms.oracle import OraclePlatform
from ddl_toolkit.platforms.postgresql import PostgreSqlPlatform
from ddl_toolkit.platforms.sapdb import SapDbPlatform
from ddl_toolkit.platforms.sqlite import SqlitePlatform
from ddl_toolkit.platforms.sybase import SybasePlatform

BUILTIN_PLATFORMS = {
    "axion": AxionPlatform,
    "cloudscape": CloudscapePlatform,
    "db2": Db2Platform,
    "derby": DerbyPlatform,
    "firebird": FirebirdPlatform,
    "hsqldb": HsqlDbPlatform,
    "interbase": InterbasePlatform,
    "maxdb": MaxDbPlatform,
    "mssql": MsSqlPlatform,
    "mysql": MySqlPlatform,
    "oracle": OraclePlatform,
    "postgresql": PostgreSqlPlatform,
    "sapdb": SapDbPlatform,
    "sqlite": SqlitePlatform,
    "sybase": SybasePlatform,
}

__all__ = [
    "BUILTIN_PLATFORMS",
    "AxionPlatform",
    "CloudscapePlatform",
    "Db2Platform",
    "DerbyPlatform",
    "FirebirdPlatform",
    "HsqlDbPlatform",
    "InterbasePlatform",
    "MaxDbPlatform",
    "MsSqlPlatform",
    "MySqlPlatform",
    "OraclePlatform",
    "PostgreSqlPlatform",
    "SapDbPlatform",
    "SqlitePlatform",
    "SybasePlatform",
]
