"""Lookup of platforms by name and detection from connection URLs."""

from __future__ import annotations

from logging import getLogger
from typing import TYPE_CHECKING, Any

from sqlalchemy.engine import make_url
from sqlalchemy.exc import ArgumentError

from ddl_toolkit.errors import UnsupportedDialectFeature

if TYPE_CHECKING:
    from collections.abc import Callable

    from ddl_toolkit.platform.base import Platform

logger = getLogger(__name__)

# JDBC subprotocols
JDBC_SUBPROTOCOLS: dict[str, str] = {
    "microsoft:sqlserver": "mssql",
    "jtds:sqlserver": "mssql",
    "jtds:sybase": "sybase",
    "sybase:tds": "sybase",
    "firebirdsql": "firebird",
    "postgresql": "postgresql",
    "sqlserver": "mssql",
    "interbase": "interbase",
    "cloudscape": "cloudscape",
    "axiondb": "axion",
    "hsqldb": "hsqldb",
    "oracle": "oracle",
    "sapdb": "sapdb",
    "sqlite": "sqlite",
    "derby": "derby",
    "mysql": "mysql",
    "db2j": "cloudscape",
    "db2": "db2",
}

# SQLAlchemy backend names
BACKENDS: dict[str, str] = {
    "firebird": "firebird",
    "ibm_db_sa": "db2",
    "db2": "db2",
    "mariadb": "mysql",
    "mssql": "mssql",
    "mysql": "mysql",
    "oracle": "oracle",
    "postgresql": "postgresql",
    "sqlite": "sqlite",
    "sybase": "sybase",
}


def platform_name_for_url(url: str) -> str | None:
    """Return the platform name matching a JDBC or SQLAlchemy URL, if any."""
    if url.lower().startswith("jdbc:"):
        subprotocol = url[len("jdbc:") :].lower()
        for prefix, name in JDBC_SUBPROTOCOLS.items():
            if subprotocol.startswith(f"{prefix}:"):
                return name
        return None
    try:
        backend = make_url(url).get_backend_name()
    except ArgumentError:
        logger.debug("Not a SQLAlchemy URL: %s", url)
        return None
    return BACKENDS.get(backend)


class PlatformRegistry:
    """Explicit mapping of lowercase platform names to platform factories."""

    def __init__(self) -> None:
        """Initialize an empty registry."""
        self._factories: dict[str, Callable[..., Platform]] = {}

    def register(self, name: str, factory: Callable[..., Platform]) -> None:
        """Register a factory (typically a :class:`Platform` subclass) under a name."""
        self._factories[name.lower()] = factory

    def create(self, name: str, **kwargs: Any) -> Platform:
        """Create the platform registered under a name.

        Raises:
            UnsupportedDialectFeature: No platform has that name

        """
        factory = self._factories.get(name.lower())
        if factory is None:
            msg = f"Unknown platform '{name}', expected one of: {', '.join(self.names())}"
            raise UnsupportedDialectFeature(msg)
        return factory(**kwargs)

    def names(self) -> list[str]:
        """Return the registered names in sorted order."""
        return sorted(self._factories)

    def __contains__(self, name: object) -> bool:
        """Whether a platform is registered under the name."""
        return isinstance(name, str) and name.lower() in self._factories


def default_registry() -> PlatformRegistry:
    """Build a registry holding every built-in platform."""
    from ddl_toolkit.platforms import BUILTIN_PLATFORMS

    registry = PlatformRegistry()
    for name, platform_class in BUILTIN_PLATFORMS.items():
        registry.register(name, platform_class)
    return registry
