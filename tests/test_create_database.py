"""Tests for creating new databases through a platform."""

import sqlite3
from pathlib import Path

import pytest

from ddl_toolkit.errors import ResourceFailure, UnsupportedDialectFeature
from ddl_toolkit.platform import Platform, creation_url
from ddl_toolkit.platforms import CloudscapePlatform, DerbyPlatform, SqlitePlatform


class FakeConnection:
    """Connection that records being closed, optionally failing to close."""

    def __init__(self, *, fail_on_close: bool = False) -> None:
        """Initialize an open connection."""
        self.closed = False
        self.fail_on_close = fail_on_close

    def close(self) -> None:
        """Close the connection."""
        if self.fail_on_close:
            msg = "disk full"
            raise OSError(msg)
        self.closed = True


class RecordingFactory:
    """Connection factory remembering the arguments of each call."""

    def __init__(self, connection: FakeConnection | None = None) -> None:
        """Initialize with the connection to hand out; None makes opening fail."""
        self.connection = connection
        self.calls: list[tuple[str | None, str, str | None, str | None]] = []

    def __call__(
        self,
        driver: str | None,
        url: str,
        username: str | None,
        password: str | None,
    ) -> FakeConnection:
        """Open a fake connection."""
        self.calls.append((driver, url, username, password))
        if self.connection is None:
            msg = "connection refused"
            raise OSError(msg)
        return self.connection


def test_creation_url() -> None:
    """Test the create flag and the parameters are appended to the URL."""
    assert creation_url("jdbc:derby:test") == "jdbc:derby:test;create=true"
    assert (
        creation_url("jdbc:derby:test", {"territory": "de_DE"})
        == "jdbc:derby:test;create=true;territory=de_DE"
    )
    assert creation_url("jdbc:derby:test", {"create": "false"}) == "jdbc:derby:test;create=false"
    assert creation_url("jdbc:derby:test", {"bootPassword": None}) == (
        "jdbc:derby:test;create=true;bootPassword="
    )


def test_derby_creates_by_connecting() -> None:
    """Test Derby connects once with the creation URL and closes the connection."""
    connection = FakeConnection()
    factory = RecordingFactory(connection)
    platform = DerbyPlatform(connection_factory=factory)

    platform.create_database(
        "org.apache.derby.jdbc.EmbeddedDriver",
        "jdbc:derby:test",
        "app",
        "secret",
        {"territory": "de_DE"},
    )

    assert factory.calls == [
        (
            "org.apache.derby.jdbc.EmbeddedDriver",
            "jdbc:derby:test;create=true;territory=de_DE",
            "app",
            "secret",
        ),
    ]
    assert connection.closed


@pytest.mark.parametrize(
    ("platform_class", "driver", "url"),
    [
        (DerbyPlatform, "EmbeddedDriver", "jdbc:derby:test"),
        (DerbyPlatform, None, "jdbc:derby:memory:test"),
        (CloudscapePlatform, "com.ibm.db2j.jdbc.DB2jDriver", "jdbc:db2j:test"),
        (CloudscapePlatform, None, "jdbc:cloudscape:test"),
    ],
)
def test_accepted_drivers(
    platform_class: type[CloudscapePlatform],
    driver: str | None,
    url: str,
) -> None:
    """Test drivers are matched by full or short class name, URLs by subprotocol."""
    factory = RecordingFactory(FakeConnection())

    platform_class(connection_factory=factory).create_database(driver, url)

    assert len(factory.calls) == 1


@pytest.mark.parametrize(
    ("driver", "url"),
    [("org.postgresql.Driver", "jdbc:derby:test"), (None, "jdbc:postgresql://host/db")],
)
def test_unsupported_driver(driver: str | None, url: str) -> None:
    """Test drivers that cannot create a database are rejected before connecting."""
    factory = RecordingFactory(FakeConnection())

    with pytest.raises(UnsupportedDialectFeature, match="Unable to create a Derby database"):
        DerbyPlatform(connection_factory=factory).create_database(driver, url)
    assert factory.calls == []


def test_failed_connection_is_a_resource_failure() -> None:
    """Test an error while connecting is reported with the URL."""
    platform = DerbyPlatform(connection_factory=RecordingFactory())

    with pytest.raises(ResourceFailure, match="Error while trying to create a database at"):
        platform.create_database(None, "jdbc:derby:test")


def test_failed_close_is_a_resource_failure() -> None:
    """Test an error while closing the connection is reported."""
    factory = RecordingFactory(FakeConnection(fail_on_close=True))
    platform = DerbyPlatform(connection_factory=factory)

    with pytest.raises(ResourceFailure, match="Error while closing the connection"):
        platform.create_database(None, "jdbc:derby:test")


def test_generic_platform_cannot_create_databases() -> None:
    """Test dialects without a creation idiom refuse."""
    with pytest.raises(UnsupportedDialectFeature, match="cannot be created"):
        Platform().create_database(None, "sqlite://")


def test_sqlite_creates_the_database_file(tmp_path: Path) -> None:
    """Test SQLite creates its database file on first connection."""
    path = tmp_path / "new.db"

    SqlitePlatform().create_database(None, f"sqlite:///{path}")

    assert path.exists()


def test_invalid_url_is_a_resource_failure() -> None:
    """Test a URL SQLAlchemy cannot parse is reported as a resource failure."""
    with pytest.raises(ResourceFailure, match="not a SQLAlchemy URL"):
        SqlitePlatform().create_database(None, "not a url")


def test_driver_errors_are_resource_failures() -> None:
    """Test a raw DB-API error from the driver does not escape unwrapped."""

    def failing_factory(
        driver: str | None,  # noqa: ARG001
        url: str,
        username: str | None,  # noqa: ARG001
        password: str | None,  # noqa: ARG001
    ) -> FakeConnection:
        msg = f"unable to open database file: {url}"
        raise sqlite3.OperationalError(msg)

    platform = DerbyPlatform(connection_factory=failing_factory)

    with pytest.raises(ResourceFailure) as caught:
        platform.create_database("org.apache.derby.jdbc.EmbeddedDriver", "jdbc:derby:test")
    assert isinstance(caught.value.__cause__, sqlite3.OperationalError)
