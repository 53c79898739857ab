"""Table model."""

from __future__ import annotations

from dataclasses import dataclass, field

from ddl_toolkit.model.elements import Column, ForeignKey, Index, fold


@dataclass
class Table:
    """A table: ordered columns plus its foreign keys and indices."""

    name: str
    columns: list[Column] = field(default_factory=list)
    foreign_keys: list[ForeignKey] = field(default_factory=list)
    indices: list[Index] = field(default_factory=list)
    schema: str | None = None
    catalog: str | None = None
    description: str | None = None

    def find_column(self, name: str, *, case_sensitive: bool = False) -> Column | None:
        """Return the column with the given name, if any."""
        key = fold(name, case_sensitive=case_sensitive)
        return next(
            (
                column
                for column in self.columns
                if fold(column.name, case_sensitive=case_sensitive) == key
            ),
            None,
        )

    def find_index(self, name: str, *, case_sensitive: bool = False) -> Index | None:
        """Return the index with the given name, if any."""
        key = fold(name, case_sensitive=case_sensitive)
        return next(
            (
                index
                for index in self.indices
                if index.name and fold(index.name, case_sensitive=case_sensitive) == key
            ),
            None,
        )

    def find_foreign_key(
        self,
        name: str,
        *,
        case_sensitive: bool = False,
    ) -> ForeignKey | None:
        """Return the foreign key with the given name, if any."""
        key = fold(name, case_sensitive=case_sensitive)
        return next(
            (
                foreign_key
                for foreign_key in self.foreign_keys
                if foreign_key.name
                and fold(foreign_key.name, case_sensitive=case_sensitive) == key
            ),
            None,
        )

    @property
    def primary_key_columns(self) -> list[Column]:
        """Return the primary key columns in column order."""
        return [column for column in self.columns if column.primary_key]

    @property
    def auto_increment_columns(self) -> list[Column]:
        """Return the auto-increment columns in column order."""
        return [column for column in self.columns if column.auto_increment]

    @property
    def uniques(self) -> list[Index]:
        """Return the unique indices."""
        return [index for index in self.indices if index.unique]

    @property
    def non_unique_indices(self) -> list[Index]:
        """Return the non-unique indices."""
        return [index for index in self.indices if not index.unique]

    def references_to(
        self,
        table_name: str,
        *,
        case_sensitive: bool = False,
    ) -> list[ForeignKey]:
        """Return the foreign keys of this table that point to the named table."""
        return [
            foreign_key
            for foreign_key in self.foreign_keys
            if foreign_key.points_to(table_name, case_sensitive=case_sensitive)
        ]

    def is_self_referencing(
        self,
        foreign_key: ForeignKey,
        *,
        case_sensitive: bool = False,
    ) -> bool:
        """Whether the foreign key points back to this table."""
        return foreign_key.points_to(self.name, case_sensitive=case_sensitive)
