"""Static description of what a SQL dialect supports."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from enum import StrEnum

from ddl_toolkit.model.elements import CascadeAction
from ddl_toolkit.model.types import TypeCode

# Reserved in SQL:2003 and by most vendors; dialects extend this set
SQL_RESERVED_WORDS = frozenset(
    {
        "ADD", "ALL", "ALTER", "AND", "ANY", "AS", "ASC", "BETWEEN", "BY",
        "CASE", "CAST", "CHECK", "COLUMN", "CONSTRAINT", "CREATE", "CROSS",
        "CURRENT", "CURRENT_DATE", "CURRENT_TIME", "CURRENT_TIMESTAMP",
        "CURRENT_USER", "DEFAULT", "DELETE", "DESC", "DISTINCT", "DROP",
        "ELSE", "END", "ESCAPE", "EXCEPT", "EXISTS", "FALSE", "FETCH", "FOR",
        "FOREIGN", "FROM", "FULL", "GRANT", "GROUP", "HAVING", "IN", "INDEX",
        "INNER", "INSERT", "INTERSECT", "INTO", "IS", "JOIN", "KEY", "LEFT",
        "LIKE", "NOT", "NULL", "ON", "OR", "ORDER", "OUTER", "PRIMARY",
        "REFERENCES", "RIGHT", "SELECT", "SET", "SOME", "TABLE", "THEN", "TO",
        "TRUE", "UNION", "UNIQUE", "UPDATE", "USER", "USING", "VALUES", "WHEN",
        "WHERE", "WITH",
    },
)  # fmt: skip

DEFAULT_SIZES: Mapping[TypeCode, int] = {
    TypeCode.CHAR: 1,
    TypeCode.VARCHAR: 254,
    TypeCode.BINARY: 1,
    TypeCode.VARBINARY: 254,
    TypeCode.DECIMAL: 15,
    TypeCode.NUMERIC: 15,
}

ALL_ACTIONS = frozenset(CascadeAction)


class CaseFold(StrEnum):
    """How a backend stores unquoted identifiers."""

    UPPER = "upper"
    LOWER = "lower"
    PRESERVE = "preserve"

    def apply(self, name: str) -> str:
        """Return the name as the backend would store it unquoted."""
        match self:
            case CaseFold.UPPER:
                return name.upper()
            case CaseFold.LOWER:
                return name.lower()
            case _:
                return name


@dataclass(frozen=True)
class PlatformInfo:
    """Capabilities and options of one dialect.

    Instances are immutable; derive variants with ``dataclasses.replace``.
    """

    name: str = "generic"

    # Identifiers
    max_identifier_length: int | None = None
    identifier_quote_char: str | None = '"'
    delimited_identifiers_supported: bool = True
    delimited_identifier_mode: bool = False
    identifier_case_fold: CaseFold = CaseFold.UPPER
    case_sensitive: bool = False
    supports_mixed_case_identifiers: bool = True
    reserved_words: frozenset[str] = SQL_RESERVED_WORDS

    # Constraint emission
    primary_key_embedded: bool = True
    foreign_keys_embedded: bool = False
    indices_embedded: bool = False
    foreign_key_forward_references: bool = False

    # Script framing
    comment_prefix: str = "--"
    comment_suffix: str = ""
    sql_comments_enabled: bool = True
    statement_terminator: str = ";"
    auto_commit_ddl: bool = True

    # Indices
    supports_non_unique_indices: bool = True

    # Alteration
    supports_alter_for_drop: bool = True
    supports_alter_column: bool = True
    supports_add_column_default: bool = True
    supports_alter_constraints: bool = True
    supports_rename_table: bool = True
    add_column_clause: str = "ADD COLUMN"
    drop_column_clause: str = "DROP COLUMN"

    # Columns and values
    null_as_default_allowed: bool = True
    explicit_null_required: bool = False
    default_values_for_long_types: bool = True
    boolean_literals: tuple[str, str] = ("TRUE", "FALSE")
    default_sizes: Mapping[TypeCode, int] = field(
        default_factory=lambda: dict(DEFAULT_SIZES),
    )

    # Identity
    last_identity_value_readable: bool = False
    max_identity_columns: int | None = None

    # Referential actions
    on_delete_actions: frozenset[CascadeAction] = ALL_ACTIONS
    on_update_actions: frozenset[CascadeAction] = ALL_ACTIONS

    strict: bool = False

    def default_size_for(self, type_code: TypeCode) -> int | None:
        """Return the size used when a column of this type has none."""
        return self.default_sizes.get(type_code)

    def is_reserved(self, name: str) -> bool:
        """Whether the name is a reserved word of the dialect."""
        return name.upper() in self.reserved_words

