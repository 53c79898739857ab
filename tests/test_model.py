"""Tests for the schema model and its structural validation."""

import pytest

from ddl_toolkit.errors import ModelInvariantViolation
from ddl_toolkit.model import (
    CascadeAction,
    Column,
    Database,
    ForeignKey,
    Index,
    Reference,
    Table,
    TypeCode,
    is_assignment_compatible,
)


@pytest.fixture(name="shop")
def create_shop() -> Database:
    """Create a valid two-table model."""
    customer = Table(
        "Customer",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True, auto_increment=True),
            Column("name", TypeCode.VARCHAR, size=64, required=True),
        ],
    )
    purchase = Table(
        "purchase",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True),
            Column("customer_id", TypeCode.INTEGER, required=True),
            Column("total", TypeCode.DECIMAL, size=10, scale=2),
        ],
        foreign_keys=[
            ForeignKey(
                "customer",
                [Reference("customer_id", "id")],
                name="fk_purchase_customer",
                on_delete=CascadeAction.CASCADE,
            ),
        ],
        indices=[Index.of("customer_id", name="idx_purchase_customer")],
    )
    return Database("shop", [customer, purchase])


def test_valid_model_has_no_violations(shop: Database) -> None:
    """Test a consistent model passes validation."""
    assert shop.violations() == []
    shop.validate()


def test_lookups_ignore_case_by_default(shop: Database) -> None:
    """Test tables, columns, indices and foreign keys are found case-insensitively."""
    purchase = shop.find_table("PURCHASE")

    assert purchase is not None
    assert purchase.find_column("Customer_ID") is not None
    assert purchase.find_index("IDX_PURCHASE_CUSTOMER") is not None
    assert purchase.find_foreign_key("FK_Purchase_Customer") is not None
    assert shop.find_table("customer") is shop.tables[0]


def test_case_sensitive_lookup(shop: Database) -> None:
    """Test exact-name lookups only match the declared spelling."""
    assert shop.find_table("customer", case_sensitive=True) is None
    assert shop.find_table("Customer", case_sensitive=True) is not None


def test_derived_column_lists(shop: Database) -> None:
    """Test primary key, auto-increment and index partitions of a table."""
    customer, purchase = shop.tables
    purchase.indices.append(Index.unique_index("customer_id", "total"))

    assert [column.name for column in customer.primary_key_columns] == ["id"]
    assert [column.name for column in customer.auto_increment_columns] == ["id"]
    assert len(purchase.uniques) == 1
    assert [index.name for index in purchase.non_unique_indices] == ["idx_purchase_customer"]
    assert purchase.references_to("CUSTOMER") == purchase.foreign_keys


def test_self_reference() -> None:
    """Test a foreign key pointing back to its own table is recognised."""
    foreign_key = ForeignKey("node", [Reference("parent_id", "id")])
    node = Table(
        "Node",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True),
            Column("parent_id", TypeCode.INTEGER),
        ],
        foreign_keys=[foreign_key],
    )

    assert node.is_self_referencing(foreign_key)
    assert not node.is_self_referencing(foreign_key, case_sensitive=True)


def test_copy_is_deep(shop: Database) -> None:
    """Test changes to a copy leave the original untouched."""
    copy = shop.copy()
    copy.tables[0].columns[1].size = 128
    copy.tables[1].foreign_keys.clear()

    assert shop.tables[0].columns[1].size == 64
    assert len(shop.tables[1].foreign_keys) == 1


def test_add_and_remove_table(shop: Database) -> None:
    """Test tables can be added and removed by name."""
    shop.add_table(Table("note", [Column("text", TypeCode.LONGVARCHAR)]))
    removed = shop.remove_table("NOTE")

    assert removed.name == "note"
    assert [table.name for table in shop.tables] == ["Customer", "purchase"]
    with pytest.raises(KeyError):
        shop.remove_table("note")


def test_every_violation_is_reported() -> None:
    """Test validation collects all problems instead of stopping at the first."""
    broken = Database(
        "broken",
        [
            Table(
                "item",
                [
                    Column("id", TypeCode.INTEGER, primary_key=True),
                    Column("code", TypeCode.VARCHAR, size=10, scale=2, auto_increment=True),
                ],
                foreign_keys=[ForeignKey("missing", [Reference("id", "id")])],
                indices=[Index.of("nope", name="idx_nope")],
            ),
            Table("ITEM", [Column("id", TypeCode.INTEGER)]),
            Table("empty"),
        ],
    )

    with pytest.raises(ModelInvariantViolation) as exc_info:
        broken.validate()

    violations = exc_info.value.violations
    assert "Table name 'ITEM' is used 2 times" in violations
    assert "Table 'item', column 'id': primary key columns must be required" in violations
    assert "Table 'item', column 'code': scale is set but VARCHAR takes no scale" in violations
    assert (
        "Table 'item', column 'code': auto-increment requires a numeric type, not VARCHAR"
        in violations
    )
    assert "Table 'item', index 'idx_nope': unknown column 'nope'" in violations
    assert "Table 'item', foreign key '#0': unknown foreign table 'missing'" in violations
    assert "Table 'empty' has no columns" in violations
    assert f"{len(violations)} invariant violation(s)" in str(exc_info.value)


def test_incompatible_foreign_key_types() -> None:
    """Test a foreign key between a text and a numeric column is rejected."""
    database = Database(
        "db",
        [
            Table("parent", [Column("id", TypeCode.INTEGER, required=True, primary_key=True)]),
            Table(
                "child",
                [Column("parent_id", TypeCode.VARCHAR, size=10)],
                foreign_keys=[ForeignKey("parent", [Reference("parent_id", "id")])],
            ),
        ],
    )

    violations = database.violations()

    assert len(violations) == 1
    assert "cannot hold values of parent.id" in violations[0]


def test_assignment_compatibility() -> None:
    """Test booleans and numbers mix while other categories do not."""
    assert is_assignment_compatible(TypeCode.INTEGER, TypeCode.BIGINT)
    assert is_assignment_compatible(TypeCode.BIT, TypeCode.SMALLINT)
    assert is_assignment_compatible(TypeCode.CHAR, TypeCode.CLOB)
    assert not is_assignment_compatible(TypeCode.VARCHAR, TypeCode.INTEGER)
    assert not is_assignment_compatible(TypeCode.DATE, TypeCode.BLOB)


def test_type_code_parsing() -> None:
    """Test type names and JDBC codes map to type codes."""
    assert TypeCode.from_name(" varchar ") is TypeCode.VARCHAR
    assert TypeCode.from_code(2004) is TypeCode.BLOB
    assert TypeCode.from_code(-9) is None
    with pytest.raises(ValueError, match="Unknown type"):
        TypeCode.from_name("STRING")


def test_type_code_categories() -> None:
    """Test the category predicates of type codes."""
    assert TypeCode.DECIMAL.is_scaled
    assert not TypeCode.INTEGER.is_scaled
    assert TypeCode.CLOB.is_long
    assert TypeCode.CLOB.is_text
    assert TypeCode.TIMESTAMP.is_temporal
    assert TypeCode.BIT.category == "boolean"
    assert TypeCode.OTHER.category == "other"


@pytest.mark.parametrize(
    ("text", "expected"),
    [
        (None, CascadeAction.NONE),
        ("", CascadeAction.NONE),
        ("NO ACTION", CascadeAction.NONE),
        ("cascade", CascadeAction.CASCADE),
        ("SET NULL", CascadeAction.SET_NULL),
        ("setdefault", CascadeAction.SET_DEFAULT),
        ("Restrict", CascadeAction.RESTRICT),
    ],
)
def test_cascade_action_parsing(text: str | None, expected: CascadeAction) -> None:
    """Test referential actions parse from their SQL and model spellings."""
    assert CascadeAction.from_sql(text) is expected


def test_cascade_action_sql() -> None:
    """Test referential actions render as SQL."""
    assert CascadeAction.SET_NULL.sql == "SET NULL"
    assert CascadeAction.NONE.sql == "NO ACTION"
