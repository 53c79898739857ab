"""Columns, keys and indices: the parts a table is built from."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum

from ddl_toolkit.model.types import TypeCode


def fold(name: str, *, case_sensitive: bool = False) -> str:
    """Return the key used to compare an identifier."""
    return name if case_sensitive else name.upper()


class CascadeAction(StrEnum):
    """Referential action of a foreign key."""

    NONE = "none"
    CASCADE = "cascade"
    SET_NULL = "setnull"
    SET_DEFAULT = "setdefault"
    RESTRICT = "restrict"

    @property
    def sql(self) -> str:
        """Return the SQL spelling of the action."""
        return {
            CascadeAction.NONE: "NO ACTION",
            CascadeAction.CASCADE: "CASCADE",
            CascadeAction.SET_NULL: "SET NULL",
            CascadeAction.SET_DEFAULT: "SET DEFAULT",
            CascadeAction.RESTRICT: "RESTRICT",
        }[self]

    @classmethod
    def from_sql(cls, text: str | None) -> CascadeAction:
        """Parse an action as written in SQL (``SET NULL``, ``cascade`` ...)."""
        if not text:
            return cls.NONE
        normalized = "".join(text.split()).lower()
        if normalized == "noaction":
            return cls.NONE
        return cls(normalized)


@dataclass
class Column:
    """A table column."""

    name: str
    type_code: TypeCode
    size: int | None = None
    scale: int | None = None
    default_value: str | None = None
    required: bool = False
    primary_key: bool = False
    auto_increment: bool = False
    description: str | None = None


@dataclass
class Reference:
    """A local column paired with the foreign column it points to."""

    local_column: str
    foreign_column: str


@dataclass
class ForeignKey:
    """A foreign key; the target table is referenced by name only."""

    foreign_table: str
    references: list[Reference] = field(default_factory=list)
    name: str | None = None
    on_delete: CascadeAction = CascadeAction.NONE
    on_update: CascadeAction = CascadeAction.NONE

    @property
    def local_columns(self) -> list[str]:
        """Return the local column names in reference order."""
        return [reference.local_column for reference in self.references]

    @property
    def foreign_columns(self) -> list[str]:
        """Return the foreign column names in reference order."""
        return [reference.foreign_column for reference in self.references]

    def points_to(self, table_name: str, *, case_sensitive: bool = False) -> bool:
        """Whether the key references the named table."""
        return fold(self.foreign_table, case_sensitive=case_sensitive) == fold(
            table_name,
            case_sensitive=case_sensitive,
        )


@dataclass
class IndexColumn:
    """A column of an index, with an optional prefix length."""

    name: str
    size: int | None = None


@dataclass
class Index:
    """An index over table columns. A unique index doubles as a unique constraint."""

    columns: list[IndexColumn] = field(default_factory=list)
    name: str | None = None
    unique: bool = False

    @classmethod
    def of(cls, *columns: str, name: str | None = None, unique: bool = False) -> Index:
        """Build an index from plain column names."""
        return cls([IndexColumn(column) for column in columns], name, unique)

    @classmethod
    def unique_index(cls, *columns: str, name: str | None = None) -> Index:
        """Build a unique index (the model's *Unique*)."""
        return cls.of(*columns, name=name, unique=True)

    @property
    def column_names(self) -> list[str]:
        """Return the indexed column names in order."""
        return [column.name for column in self.columns]
