"""Abstract SQL type codes shared by every dialect."""

from __future__ import annotations

from enum import IntEnum


class TypeCode(IntEnum):
    """Abstract SQL type, numbered like the JDBC ``java.sql.Types`` constants."""

    BIT = -7
    TINYINT = -6
    BIGINT = -5
    LONGVARBINARY = -4
    VARBINARY = -3
    BINARY = -2
    LONGVARCHAR = -1
    NULL = 0
    CHAR = 1
    NUMERIC = 2
    DECIMAL = 3
    INTEGER = 4
    SMALLINT = 5
    FLOAT = 6
    REAL = 7
    DOUBLE = 8
    VARCHAR = 12
    BOOLEAN = 16
    DATE = 91
    TIME = 92
    TIMESTAMP = 93
    OTHER = 1111
    BLOB = 2004
    CLOB = 2005

    @classmethod
    def from_name(cls, name: str) -> TypeCode:
        """Parse a type name such as ``varchar`` or ``VARCHAR``."""
        try:
            return cls[name.strip().upper()]
        except KeyError as err:
            msg = f"Unknown type: {name}"
            raise ValueError(msg) from err

    @classmethod
    def from_code(cls, code: int) -> TypeCode | None:
        """Return the type for a JDBC integer code, or None if it is not standard."""
        try:
            return cls(code)
        except ValueError:
            return None

    @property
    def is_numeric(self) -> bool:
        """Whether the type holds numbers."""
        return self in NUMERIC_TYPES

    @property
    def is_scaled(self) -> bool:
        """Whether the type accepts a scale."""
        return self in SCALED_TYPES

    @property
    def is_text(self) -> bool:
        """Whether the type holds character data."""
        return self in TEXT_TYPES

    @property
    def is_binary(self) -> bool:
        """Whether the type holds binary data."""
        return self in BINARY_TYPES

    @property
    def is_temporal(self) -> bool:
        """Whether the type holds dates or times."""
        return self in TEMPORAL_TYPES

    @property
    def is_boolean(self) -> bool:
        """Whether the type holds truth values."""
        return self in BOOLEAN_TYPES

    @property
    def is_long(self) -> bool:
        """Whether the type is a large object type."""
        return self in LONG_TYPES

    @property
    def category(self) -> str:
        """Return the assignment category of the type."""
        if self.is_boolean:
            return "boolean"
        if self.is_numeric:
            return "numeric"
        if self.is_text:
            return "text"
        if self.is_binary:
            return "binary"
        if self.is_temporal:
            return "temporal"
        return "other"


NUMERIC_TYPES = frozenset(
    {
        TypeCode.TINYINT,
        TypeCode.SMALLINT,
        TypeCode.INTEGER,
        TypeCode.BIGINT,
        TypeCode.REAL,
        TypeCode.FLOAT,
        TypeCode.DOUBLE,
        TypeCode.DECIMAL,
        TypeCode.NUMERIC,
    },
)
SCALED_TYPES = frozenset({TypeCode.DECIMAL, TypeCode.NUMERIC})
TEXT_TYPES = frozenset(
    {TypeCode.CHAR, TypeCode.VARCHAR, TypeCode.LONGVARCHAR, TypeCode.CLOB},
)
BINARY_TYPES = frozenset(
    {TypeCode.BINARY, TypeCode.VARBINARY, TypeCode.LONGVARBINARY, TypeCode.BLOB},
)
TEMPORAL_TYPES = frozenset({TypeCode.DATE, TypeCode.TIME, TypeCode.TIMESTAMP})
BOOLEAN_TYPES = frozenset({TypeCode.BIT, TypeCode.BOOLEAN})
LONG_TYPES = frozenset(
    {TypeCode.LONGVARCHAR, TypeCode.CLOB, TypeCode.LONGVARBINARY, TypeCode.BLOB},
)


def is_assignment_compatible(local: TypeCode, foreign: TypeCode) -> bool:
    """Check whether values of one type can be stored in a column of the other.

    Booleans and numbers are interchangeable because several dialects store
    booleans as small numbers.
    """
    if local == foreign:
        return True
    categories = {local.category, foreign.category}
    return len(categories) == 1 or categories == {"boolean", "numeric"}
