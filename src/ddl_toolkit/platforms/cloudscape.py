"""Cloudscape: the IBM predecessor of Derby, created through the connection URL."""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, ClassVar

from ddl_toolkit.errors import UnsupportedDialectFeature
from ddl_toolkit.platform.base import Platform, creation_url
from ddl_toolkit.platform.info import PlatformInfo
from ddl_toolkit.platform.reader import ModelReader
from ddl_toolkit.platform.type_map import TypeMap
from ddl_toolkit.platforms.db2 import Db2Builder, register_db2_types

if TYPE_CHECKING:
    from collections.abc import Mapping

    from ddl_toolkit.model.elements import ForeignKey, Index
    from ddl_toolkit.model.table import Table

# Backing indices of constraints are named SQL followed by a timestamp
GENERATED_INDEX_NAME = re.compile(r"^SQL\d{6,}")


def driver_matches(driver: str, known: str) -> bool:
    """Whether a driver name is the known class name or a dotted suffix of it."""
    return driver == known or known.endswith(f".{driver}")


class CloudscapeReader(ModelReader):
    """Reads metadata, skipping the SQL... indices backing constraints."""

    def is_internal_primary_key_index(self, table: Table, index: Index) -> bool:
        """Whether the index is a generated backing index of the primary key."""
        return super().is_internal_primary_key_index(table, index) and bool(
            GENERATED_INDEX_NAME.match(index.name or ""),
        )

    def is_internal_foreign_key_index(
        self,
        table: Table,  # noqa: ARG002
        foreign_key: ForeignKey,
        index: Index,
    ) -> bool:
        """Whether the index is a generated backing index of the foreign key."""
        return bool(GENERATED_INDEX_NAME.match(index.name or "")) and [
            name.upper() for name in index.column_names
        ] == [name.upper() for name in foreign_key.local_columns]


class CloudscapePlatform(Platform):
    """The Cloudscape platform."""

    name = "Cloudscape"
    builder_class = Db2Builder
    reader_class = CloudscapeReader
    drivers: ClassVar[tuple[str, ...]] = ("com.ibm.db2j.jdbc.DB2jDriver",)
    subprotocols: ClassVar[tuple[str, ...]] = ("jdbc:db2j:", "jdbc:cloudscape:")

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return the capabilities shared by Cloudscape and Derby."""
        return PlatformInfo(
            name=cls.name,
            max_identifier_length=128,
            supports_alter_for_drop=False,
            supports_alter_column=False,
            max_identity_columns=1,
            last_identity_value_readable=True,
        )

    @classmethod
    def default_type_map(cls) -> TypeMap:
        """Return the type spellings shared by Cloudscape and Derby."""
        return register_db2_types(TypeMap())

    def accepts_driver(self, driver: str | None, url: str) -> bool:
        """Whether the database can be created through this driver or URL."""
        if driver is None:
            return url.lower().startswith(self.subprotocols)
        return any(driver_matches(driver, known) for known in self.drivers)

    def create_database(
        self,
        driver: str | None,
        url: str,
        username: str | None = None,
        password: str | None = None,
        parameters: Mapping[str, str | None] | None = None,
    ) -> None:
        """Create the database by connecting with ``;create=true`` appended.

        A ``create`` entry in the parameters takes the place of the default flag;
        every other parameter is appended as ``;key=value``.

        Raises:
            UnsupportedDialectFeature: The driver cannot create databases
            ResourceFailure: Opening or closing the connection failed

        """
        if not self.accepts_driver(driver, url):
            msg = f"Unable to create a {self.info.name} database via the driver {driver}"
            raise UnsupportedDialectFeature(msg)
        self.open_and_close(driver, creation_url(url, parameters), username, password)
