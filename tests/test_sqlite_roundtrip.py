"""Tests creating, reading back and altering schemas on a live SQLite database."""

from collections.abc import Iterator

import pytest
from sqlalchemy import Connection, create_engine

from ddl_toolkit.model import Column, Database, ForeignKey, Index, Reference, Table, TypeCode
from ddl_toolkit.platform import InspectorMetaData, ModelComparator
from ddl_toolkit.platform.metadata import IMPORTED_KEY_NO_ACTION
from ddl_toolkit.platforms import SqlitePlatform


@pytest.fixture(name="connection")
def create_connection() -> Iterator[Connection]:
    """Create a connection to an in-memory database."""
    engine = create_engine("sqlite://")
    with engine.connect() as connection:
        yield connection
    engine.dispose()


@pytest.fixture(name="contacts")
def create_contacts() -> Database:
    """Create a model of people and their addresses."""
    person = Table(
        "person",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True, auto_increment=True),
            Column("name", TypeCode.VARCHAR, size=64, required=True),
        ],
    )
    address = Table(
        "address",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True),
            Column("person_id", TypeCode.INTEGER),
            Column("street", TypeCode.VARCHAR, size=100, default_value="Main"),
        ],
        foreign_keys=[
            ForeignKey("person", [Reference("person_id", "id")], "fk_address_person"),
        ],
        indices=[Index.of("street", name="idx_address_street")],
    )
    return Database("contacts", [address, person])


def differences(platform: SqlitePlatform, current: Database, desired: Database) -> list[object]:
    """Return the changes still separating two models."""
    return list(ModelComparator(platform.info, platform.type_map).compare(current, desired))


def test_created_schema_reads_back_unchanged(
    connection: Connection,
    contacts: Database,
) -> None:
    """Test a created schema is read back as an equivalent model."""
    platform = SqlitePlatform()

    report = platform.create_tables(connection, contacts)
    read = platform.read_model_from_database(connection, "contacts")

    assert report.succeeded
    assert report.executed == 3
    assert sorted(table.name for table in read.tables) == ["address", "person"]
    person = read.find_table("person")
    assert person is not None
    assert person.columns[0].auto_increment
    address = read.find_table("address")
    assert address is not None
    assert [index.name for index in address.indices] == ["idx_address_street"]
    assert address.columns[2].default_value == "Main"
    assert differences(platform, read, contacts) == []


def test_alter_adds_a_column(connection: Connection, contacts: Database) -> None:
    """Test altering a live schema adds the missing column."""
    platform = SqlitePlatform()
    platform.create_tables(connection, contacts)
    desired = contacts.copy()
    person = desired.find_table("person")
    assert person is not None
    person.columns.append(Column("nickname", TypeCode.VARCHAR, size=20))

    report = platform.alter_tables(connection, desired)

    assert report.succeeded
    assert report.executed == 1
    read = platform.read_model_from_database(connection, "contacts")
    assert differences(platform, read, desired) == []


def test_rebuild_keeps_the_rows(connection: Connection, contacts: Database) -> None:
    """Test dropping a column through a table rebuild keeps the existing rows."""
    platform = SqlitePlatform()
    platform.create_tables(connection, contacts)
    connection.exec_driver_sql("INSERT INTO person (name) VALUES ('Ada')")
    connection.exec_driver_sql(
        "INSERT INTO address (id, person_id, street) VALUES (7, 1, 'Elm')",
    )
    connection.commit()
    desired = contacts.copy()
    address = desired.find_table("address")
    assert address is not None
    address.columns = address.columns[:2]
    address.indices = []

    report = platform.alter_tables(connection, desired)

    assert report.succeeded
    rows = connection.exec_driver_sql("SELECT id, person_id FROM address").all()
    assert [tuple(row) for row in rows] == [(7, 1)]
    read = platform.read_model_from_database(connection, "contacts")
    assert differences(platform, read, desired) == []


def test_drop_tables(connection: Connection, contacts: Database) -> None:
    """Test dropping removes every table of the model."""
    platform = SqlitePlatform()
    platform.create_tables(connection, contacts)

    report = platform.drop_tables(connection, contacts)

    assert report.succeeded
    assert platform.read_model_from_database(connection).tables == []


def test_inspector_metadata_rows(connection: Connection, contacts: Database) -> None:
    """Test the inspector adapter reports JDBC-labelled rows."""
    SqlitePlatform().create_tables(connection, contacts)
    metadata = InspectorMetaData(connection)

    with metadata.get_tables(None, None, "pers%", ["TABLE"]) as rows:
        names = [row["TABLE_NAME"] for row in rows]
    with metadata.get_imported_keys(None, None, "address") as rows:
        (key,) = list(rows)
    with metadata.get_type_info() as rows:
        type_names = {row["TYPE_NAME"] for row in rows}

    assert names == ["person"]
    assert (key["PKTABLE_NAME"], key["PKCOLUMN_NAME"], key["FKCOLUMN_NAME"]) == (
        "person",
        "id",
        "person_id",
    )
    assert key["DELETE_RULE"] == IMPORTED_KEY_NO_ACTION
    assert "INTEGER" in type_names
