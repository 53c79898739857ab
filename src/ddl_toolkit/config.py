"""Loading of data source settings from TOML files."""

from __future__ import annotations

from tomllib import TOMLDecodeError, load
from typing import TYPE_CHECKING, TypedDict

from ddl_toolkit.errors import DdlToolkitError
from ddl_toolkit.platform.registry import platform_name_for_url

if TYPE_CHECKING:
    from pathlib import Path

SECTION = "datasource"


class DataSourceConfig(TypedDict, total=False):
    """Connection and introspection settings of one database."""

    driver: str
    url: str
    username: str
    password: str
    parameters: dict[str, str]
    platform: str
    catalog: str
    schema: str
    table_types: list[str]


class ConfigError(DdlToolkitError):
    """A configuration file is missing, malformed or incomplete."""


def load_config(path: Path) -> DataSourceConfig:
    """Load the ``[datasource]`` table of a TOML file.

    A file without that table is read as the data source settings themselves.

    Raises:
        ConfigError: The file cannot be read or is not valid TOML

    """
    try:
        with path.open("rb") as f:
            data = load(f)
    except (OSError, TOMLDecodeError) as error:
        msg = f"Cannot read configuration {path}: {error}"
        raise ConfigError(msg) from error
    config: DataSourceConfig = data.get(SECTION, data)
    return config


def merge_config(config: DataSourceConfig, **overrides: object) -> DataSourceConfig:
    """Return the configuration with every override that is not None applied."""
    merged = dict(config)
    merged.update({key: value for key, value in overrides.items() if value is not None})
    return DataSourceConfig(**merged)  # type: ignore[typeddict-item]


def resolve_platform_name(config: DataSourceConfig) -> str:
    """Return the explicit platform name, or the one detected from the URL.

    Raises:
        ConfigError: Neither is available

    """
    if platform := config.get("platform"):
        return platform.lower()
    url = config.get("url")
    if url and (detected := platform_name_for_url(url)):
        return detected
    msg = f"Cannot determine the platform of {url or 'an unspecified URL'}; set 'platform'"
    raise ConfigError(msg)
