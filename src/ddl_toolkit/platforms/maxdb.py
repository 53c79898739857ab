"""MaxDB: SAP DB under its later name."""

from __future__ import annotations

from ddl_toolkit.platforms.sapdb import SapDbPlatform


class MaxDbPlatform(SapDbPlatform):
    """The MaxDB platform."""

    name = "MaxDB"
