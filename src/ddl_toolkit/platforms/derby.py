"""Apache Derby: Cloudscape's successor, with DROP COLUMN support."""

from __future__ import annotations

from dataclasses import replace
from typing import ClassVar

from ddl_toolkit.platform.info import PlatformInfo
from ddl_toolkit.platforms.cloudscape import CloudscapePlatform


class DerbyPlatform(CloudscapePlatform):
    """The Derby platform."""

    name = "Derby"
    drivers: ClassVar[tuple[str, ...]] = (
        "org.apache.derby.jdbc.ClientDriver",
        "org.apache.derby.jdbc.EmbeddedDriver",
    )
    subprotocols: ClassVar[tuple[str, ...]] = ("jdbc:derby:",)

    @classmethod
    def default_info(cls) -> PlatformInfo:
        """Return Derby's capabilities."""
        return replace(super().default_info(), supports_alter_for_drop=True)
