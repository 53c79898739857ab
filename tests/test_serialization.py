"""Tests for exchanging models as plain data."""

import json

import pytest

from ddl_toolkit.model import (
    CascadeAction,
    Column,
    Database,
    DatabaseSchema,
    ForeignKey,
    Index,
    IndexColumn,
    Reference,
    Table,
    TypeCode,
    database_from_dict,
    database_to_dict,
)


@pytest.fixture(name="library_data")
def create_library_data() -> DatabaseSchema:
    """Create a model description as it would be read from JSON."""
    return {
        "name": "library",
        "tables": [
            {
                "name": "author",
                "columns": [
                    {
                        "name": "id",
                        "type": "INTEGER",
                        "required": True,
                        "primaryKey": True,
                        "autoIncrement": True,
                    },
                    {"name": "name", "type": "varchar", "size": 100, "required": True},
                ],
                "description": "Book authors",
            },
            {
                "name": "book",
                "columns": [
                    {"name": "id", "type": "INTEGER", "required": True, "primaryKey": True},
                    {"name": "author_id", "type": "INTEGER"},
                    {"name": "price", "type": "DECIMAL", "size": 8, "scale": 2, "default": "0"},
                    {"name": "title", "type": "VARCHAR", "size": 200},
                ],
                "foreignKeys": [
                    {
                        "foreignTable": "author",
                        "reference": [{"local": "author_id", "foreign": "id"}],
                        "name": "fk_book_author",
                        "onDelete": "setnull",
                    },
                ],
                "indices": [
                    {
                        "columns": [{"name": "title", "size": 20}],
                        "name": "idx_book_title",
                        "unique": True,
                    },
                ],
            },
        ],
    }


def test_database_from_dict(library_data: DatabaseSchema) -> None:
    """Test plain data becomes a model with every attribute set."""
    database = database_from_dict(library_data)

    author, book = database.tables
    assert database.name == "library"
    assert author.description == "Book authors"
    assert author.columns[0] == Column(
        "id",
        TypeCode.INTEGER,
        required=True,
        primary_key=True,
        auto_increment=True,
    )
    assert author.columns[1].type_code is TypeCode.VARCHAR
    assert book.columns[2].default_value == "0"
    assert book.columns[2].scale == 2
    assert book.foreign_keys == [
        ForeignKey(
            "author",
            [Reference("author_id", "id")],
            name="fk_book_author",
            on_delete=CascadeAction.SET_NULL,
        ),
    ]
    assert book.indices == [Index([IndexColumn("title", 20)], "idx_book_title", unique=True)]


def test_database_to_dict_omits_defaults() -> None:
    """Test unset attributes are left out of the plain data."""
    database = Database(
        "db",
        [Table("t", [Column("c", TypeCode.CHAR)], foreign_keys=[ForeignKey("t")])],
    )

    assert database_to_dict(database) == {
        "name": "db",
        "tables": [
            {
                "name": "t",
                "columns": [{"name": "c", "type": "CHAR"}],
                "foreignKeys": [{"foreignTable": "t", "reference": []}],
            },
        ],
    }


def test_json_round_trip(library_data: DatabaseSchema) -> None:
    """Test a model survives conversion to JSON and back."""
    database = database_from_dict(library_data)

    text = json.dumps(database_to_dict(database))

    assert database_from_dict(json.loads(text)) == database


def test_unknown_type_is_rejected(library_data: DatabaseSchema) -> None:
    """Test an unknown type name fails to load."""
    library_data["tables"][0]["columns"][0]["type"] = "SERIAL"

    with pytest.raises(ValueError, match="Unknown type: SERIAL"):
        database_from_dict(library_data)
