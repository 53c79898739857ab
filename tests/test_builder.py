"""Tests for DDL generation with the generic dialect."""

import io

import pytest

from ddl_toolkit.errors import ModelInvariantViolation, UnsupportedDialectFeature
from ddl_toolkit.model import (
    CascadeAction,
    Column,
    Database,
    ForeignKey,
    Index,
    Reference,
    Table,
    TypeCode,
)
from ddl_toolkit.platform import Platform
from ddl_toolkit.platforms import BUILTIN_PLATFORMS


@pytest.fixture(name="contacts")
def create_contacts() -> Database:
    """Create a model whose first table references the second."""
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
            Column("person_id", TypeCode.INTEGER, required=True),
            Column("street", TypeCode.VARCHAR, size=100, default_value="Main"),
        ],
        foreign_keys=[
            ForeignKey("person", [Reference("person_id", "id")], name="fk_address_person"),
        ],
        indices=[Index.of("street", name="idx_address_street")],
    )
    return Database("contacts", [address, person])


@pytest.fixture(name="org_chart")
def create_org_chart() -> Database:
    """Create two tables referencing each other."""
    department = Table(
        "department",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True),
            Column("manager_id", TypeCode.INTEGER),
        ],
        foreign_keys=[
            ForeignKey(
                "employee",
                [Reference("manager_id", "id")],
                name="fk_department_manager",
            ),
        ],
    )
    employee = Table(
        "employee",
        [
            Column("id", TypeCode.INTEGER, required=True, primary_key=True),
            Column("department_id", TypeCode.INTEGER),
        ],
        foreign_keys=[
            ForeignKey(
                "department",
                [Reference("department_id", "id")],
                name="fk_employee_department",
            ),
        ],
    )
    return Database("org", [department, employee])


def test_create_tables_in_dependency_order(contacts: Database) -> None:
    """Test referenced tables come first and foreign keys follow all tables."""
    script = Platform().get_create_tables_sql(contacts)

    assert script.normalized() == [
        "CREATE TABLE person (id INTEGER GENERATED BY DEFAULT AS IDENTITY NOT NULL, "
        "name VARCHAR(64) NOT NULL, CONSTRAINT PK_person PRIMARY KEY (id))",
        "CREATE TABLE address (id INTEGER NOT NULL, person_id INTEGER NOT NULL, "
        "street VARCHAR(100) DEFAULT 'Main', CONSTRAINT PK_address PRIMARY KEY (id))",
        "CREATE INDEX idx_address_street ON address (street)",
        "ALTER TABLE address ADD CONSTRAINT fk_address_person "
        "FOREIGN KEY (person_id) REFERENCES person (id)",
    ]
    assert script.warnings == []


def test_embedded_foreign_keys(contacts: Database) -> None:
    """Test foreign keys to already created tables are written inline."""
    platform = Platform().with_options(foreign_keys_embedded=True)

    script = platform.get_create_tables_sql(contacts)

    assert script.normalized()[1] == (
        "CREATE TABLE address (id INTEGER NOT NULL, person_id INTEGER NOT NULL, "
        "street VARCHAR(100) DEFAULT 'Main', CONSTRAINT PK_address PRIMARY KEY (id), "
        "CONSTRAINT fk_address_person FOREIGN KEY (person_id) REFERENCES person (id))"
    )
    assert len(script) == 3


def test_cycle_is_broken_with_trailing_constraints(org_chart: Database) -> None:
    """Test mutually referencing tables get their foreign keys after both exist."""
    platform = Platform().with_options(foreign_keys_embedded=True)

    script = platform.get_create_tables_sql(org_chart)

    assert script.normalized() == [
        "CREATE TABLE department (id INTEGER NOT NULL, manager_id INTEGER, "
        "CONSTRAINT PK_department PRIMARY KEY (id))",
        "CREATE TABLE employee (id INTEGER NOT NULL, department_id INTEGER, "
        "CONSTRAINT PK_employee PRIMARY KEY (id))",
        "ALTER TABLE department ADD CONSTRAINT fk_department_manager "
        "FOREIGN KEY (manager_id) REFERENCES employee (id)",
        "ALTER TABLE employee ADD CONSTRAINT fk_employee_department "
        "FOREIGN KEY (department_id) REFERENCES department (id)",
    ]


def test_drop_tables_reverses_creation(contacts: Database) -> None:
    """Test foreign keys are dropped first and tables in reverse order."""
    script = Platform().get_drop_tables_sql(contacts)

    assert script.normalized() == [
        "ALTER TABLE address DROP CONSTRAINT fk_address_person",
        "DROP TABLE address",
        "DROP TABLE person",
    ]


def test_drop_first(contacts: Database) -> None:
    """Test the drop statements precede the create statements."""
    script = Platform().get_create_tables_sql(contacts, drop_first=True)

    assert script.statements[0].startswith("ALTER TABLE address DROP CONSTRAINT")
    assert script.statements[3].startswith("CREATE TABLE person")


def test_single_table_operations(contacts: Database) -> None:
    """Test creating and dropping one table of a model."""
    platform = Platform()
    address, person = contacts.tables

    created = platform.get_create_table_sql(address, contacts)
    dropped = platform.get_drop_table_sql(person, contacts)

    assert [statement.split(" (")[0] for statement in created.normalized()] == [
        "CREATE TABLE address",
        "CREATE INDEX idx_address_street ON address",
        "ALTER TABLE address ADD CONSTRAINT fk_address_person FOREIGN KEY",
    ]
    assert dropped.normalized() == [
        "ALTER TABLE address DROP CONSTRAINT fk_address_person",
        "DROP TABLE person",
    ]


def test_script_text_and_output(contacts: Database) -> None:
    """Test the script text carries comments and terminators and is mirrored."""
    output = io.StringIO()

    script = Platform().get_create_tables_sql(contacts, output=output)

    assert output.getvalue() == script.text == str(script)
    assert "-- person\n" in script.text
    assert "CREATE INDEX idx_address_street ON address (street);\n" in script.text


def test_comments_can_be_disabled(contacts: Database) -> None:
    """Test no comment lines are written when comments are off."""
    script = Platform().with_options(sql_comments_enabled=False).get_create_tables_sql(contacts)

    assert "--" not in script.text


def test_generated_constraint_names() -> None:
    """Test unnamed indices and foreign keys get derived names."""
    database = Database(
        "db",
        [
            Table("parent", [Column("id", TypeCode.INTEGER, required=True, primary_key=True)]),
            Table(
                "child",
                [Column("parent_id", TypeCode.INTEGER)],
                foreign_keys=[ForeignKey("parent", [Reference("parent_id", "id")])],
                indices=[Index.unique_index("parent_id")],
            ),
        ],
    )

    statements = Platform().get_create_tables_sql(database).normalized()

    assert "CREATE UNIQUE INDEX UQ_child_parent_id ON child (parent_id)" in statements
    assert (
        "ALTER TABLE child ADD CONSTRAINT FK_child_parent_id "
        "FOREIGN KEY (parent_id) REFERENCES parent (id)"
    ) in statements


def test_foreign_key_actions(contacts: Database) -> None:
    """Test supported referential actions are written."""
    contacts.tables[0].foreign_keys[0].on_delete = CascadeAction.CASCADE
    contacts.tables[0].foreign_keys[0].on_update = CascadeAction.RESTRICT

    statements = Platform().get_create_tables_sql(contacts).normalized()

    assert statements[-1].endswith("REFERENCES person (id) ON DELETE CASCADE ON UPDATE RESTRICT")


def test_unsupported_foreign_key_action_warns(contacts: Database) -> None:
    """Test an action the dialect lacks is skipped with a warning."""
    contacts.tables[0].foreign_keys[0].on_delete = CascadeAction.SET_DEFAULT
    platform = BUILTIN_PLATFORMS["mysql"]()

    script = platform.get_create_tables_sql(contacts)

    assert "SET DEFAULT" not in script.text
    assert script.warnings == [
        "ON DELETE SET DEFAULT of foreign key fk_address_person skipped: not supported by MySQL",
    ]
    with pytest.raises(UnsupportedDialectFeature, match="SET DEFAULT"):
        platform.with_options(strict=True).get_create_tables_sql(contacts)


def test_non_unique_index_unsupported(contacts: Database) -> None:
    """Test non-unique indices are skipped on dialects without them."""
    platform = Platform().with_options(supports_non_unique_indices=False)

    script = platform.get_create_tables_sql(contacts)

    assert not any("INDEX" in statement for statement in script)
    assert len(script.warnings) == 1
    assert "idx_address_street" in script.warnings[0]
    with pytest.raises(UnsupportedDialectFeature, match="idx_address_street"):
        platform.with_options(strict=True).get_create_tables_sql(contacts)


def test_invalid_model_is_rejected_before_emitting(contacts: Database) -> None:
    """Test validation errors stop generation with every violation listed."""
    contacts.tables[1].columns[0].required = False
    contacts.tables[0].foreign_keys[0].foreign_table = "people"

    with pytest.raises(ModelInvariantViolation) as exc_info:
        Platform().get_create_tables_sql(contacts)

    assert len(exc_info.value.violations) == 2


def test_identity_column_limit() -> None:
    """Test dialects allowing one identity column reject a second."""
    table = Table(
        "counter",
        [
            Column("a", TypeCode.INTEGER, required=True, primary_key=True, auto_increment=True),
            Column("b", TypeCode.INTEGER, auto_increment=True),
        ],
    )

    with pytest.raises(ModelInvariantViolation, match="allows 1"):
        BUILTIN_PLATFORMS["hsqldb"]().get_create_tables_sql(Database("db", [table]))


def test_invalid_default_is_rejected() -> None:
    """Test a default that is not a value of the column type fails."""
    table = Table("t", [Column("n", TypeCode.INTEGER, default_value="many")])

    with pytest.raises(ModelInvariantViolation, match=r"Invalid default value for t\.n"):
        Platform().get_create_tables_sql(Database("db", [table]))


def test_default_sizes() -> None:
    """Test columns without a size get the dialect's default size."""
    table = Table(
        "t",
        [
            Column("code", TypeCode.VARCHAR),
            Column("amount", TypeCode.DECIMAL, scale=2),
            Column("flag", TypeCode.BOOLEAN, default_value="yes"),
        ],
    )

    statements = Platform().get_create_tables_sql(Database("db", [table])).normalized()

    assert statements == [
        "CREATE TABLE t (code VARCHAR(254), amount DECIMAL(15,2), flag BOOLEAN DEFAULT TRUE)",
    ]


def test_long_type_defaults_skipped_where_unsupported() -> None:
    """Test defaults on large object columns are dropped with a warning."""
    table = Table("t", [Column("body", TypeCode.CLOB, default_value="none")])

    script = BUILTIN_PLATFORMS["mysql"]().get_create_tables_sql(Database("db", [table]))

    assert "DEFAULT" not in script.statements[0]
    assert "does not support defaults on CLOB columns" in script.warnings[0]


def test_long_identifiers_are_shortened() -> None:
    """Test names beyond the dialect limit are shortened with a warning."""
    name = "customer_relationship_history_entries"
    table = Table(name, [Column("id", TypeCode.INTEGER)])

    script = BUILTIN_PLATFORMS["oracle"]().get_create_tables_sql(Database("db", [table]))

    written = script.normalized()[0].split()[2]
    assert len(written) == 30
    assert written.startswith("customer_relationship")
    assert len(script.warnings) == 1


def test_generic_dialect_cannot_report_identity_values(contacts: Database) -> None:
    """Test the generic dialect has no way to read generated identity values."""
    with pytest.raises(UnsupportedDialectFeature, match="identity values"):
        Platform().select_last_identity_values(contacts.tables[1])


@pytest.mark.parametrize("name", sorted(BUILTIN_PLATFORMS))
def test_generation_is_deterministic(name: str, contacts: Database) -> None:
    """Test repeated generation yields identical scripts on every dialect."""
    platform = BUILTIN_PLATFORMS[name]()

    first = platform.get_create_tables_sql(contacts, drop_first=True)
    second = platform.get_create_tables_sql(contacts.copy(), drop_first=True)

    assert first.statements == second.statements
    assert first.text == second.text
    assert first.warnings == second.warnings
