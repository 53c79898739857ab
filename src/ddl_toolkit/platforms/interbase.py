"""InterBase: the Firebird dialect under its original name."""

from __future__ import annotations

from ddl_toolkit.platforms.firebird import FirebirdPlatform


class InterbasePlatform(FirebirdPlatform):
    """The InterBase platform."""

    name = "Interbase"
