"""Tests for looking up platforms by name and URL."""

import pytest

from ddl_toolkit.errors import UnsupportedDialectFeature
from ddl_toolkit.platform import PlatformRegistry, default_registry, platform_name_for_url
from ddl_toolkit.platforms import BUILTIN_PLATFORMS, DerbyPlatform, SqlitePlatform


@pytest.mark.parametrize(
    ("url", "expected"),
    [
        ("jdbc:derby:test;create=true", "derby"),
        ("jdbc:db2j:net://localhost/test", "cloudscape"),
        ("jdbc:db2://localhost:50000/test", "db2"),
        ("jdbc:microsoft:sqlserver://localhost:1433", "mssql"),
        ("jdbc:jtds:sybase://localhost/test", "sybase"),
        ("JDBC:HSQLDB:mem:test", "hsqldb"),
        ("jdbc:unknown:test", None),
        ("postgresql+psycopg://user@localhost/test", "postgresql"),
        ("mariadb://user@localhost/test", "mysql"),
        ("sqlite://", "sqlite"),
        ("duckdb:///test.db", None),
        ("not a url", None),
    ],
)
def test_platform_name_for_url(url: str, expected: str | None) -> None:
    """Test platforms are detected from JDBC subprotocols and SQLAlchemy backends."""
    assert platform_name_for_url(url) == expected


def test_default_registry_holds_every_builtin_platform() -> None:
    """Test the default registry creates each built-in dialect by name."""
    registry = default_registry()

    assert registry.names() == sorted(BUILTIN_PLATFORMS)
    assert isinstance(registry.create("Derby"), DerbyPlatform)
    assert "SQLITE" in registry
    assert 42 not in registry


def test_unknown_platform() -> None:
    """Test an unknown name is rejected with the known names."""
    registry = PlatformRegistry()
    registry.register("SQLite", SqlitePlatform)

    with pytest.raises(UnsupportedDialectFeature, match="expected one of: sqlite"):
        registry.create("nope")


def test_create_passes_arguments_to_the_factory() -> None:
    """Test keyword arguments reach the platform constructor."""
    registry = PlatformRegistry()
    registry.register("sqlite", SqlitePlatform)
    info = SqlitePlatform().info

    platform = registry.create("sqlite", info=info)

    assert platform.info is info
