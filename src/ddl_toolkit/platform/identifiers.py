"""Safe emission of identifiers: quoting, validation and shortening."""

from __future__ import annotations

import hashlib
import re
from typing import TYPE_CHECKING

from ddl_toolkit.errors import UnsupportedDialectFeature

if TYPE_CHECKING:
    from collections.abc import Callable

    from ddl_toolkit.platform.info import PlatformInfo

BARE_IDENTIFIER = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")
HASH_LENGTH = 8

_CLOSING_QUOTES = {"[": "]"}


def shorten(name: str, max_length: int | None) -> str:
    """Shorten a name to ``max_length`` with a deterministic hash suffix.

    The result keeps as much of the original prefix as fits, followed by an
    underscore and the first characters of the name's SHA-1 digest, so distinct
    long names stay distinct and the same name always maps to the same result.
    """
    if max_length is None or len(name) <= max_length:
        return name
    digest = hashlib.sha1(name.encode(), usedforsecurity=False).hexdigest()
    if max_length <= HASH_LENGTH + 1:
        return digest[:max_length]
    keep = max_length - HASH_LENGTH - 1
    return f"{name[:keep]}_{digest[:HASH_LENGTH]}"


class IdentifierWriter:
    """Renders identifiers for one dialect."""

    def __init__(self, info: PlatformInfo, warn: Callable[[str], None]) -> None:
        """Initialize with the dialect description and a warning sink."""
        self._info = info
        self._warn = warn
        self._shortened: dict[str, str] = {}

    @property
    def can_quote(self) -> bool:
        """Whether the dialect can write delimited identifiers."""
        return (
            self._info.delimited_identifiers_supported
            and self._info.identifier_quote_char is not None
        )

    def shorten(self, name: str) -> str:
        """Return the name shortened to the dialect limit, warning once per name."""
        result = shorten(name, self._info.max_identifier_length)
        if result != name and name not in self._shortened:
            self._shortened[name] = result
            self._warn(
                f"Identifier '{name}' exceeds {self._info.max_identifier_length} "
                f"characters and was shortened to '{result}'",
            )
        return result

    def is_case_significant(self, name: str) -> bool:
        """Whether writing the name bare would change its case on the backend."""
        info = self._info
        if info.case_sensitive and info.identifier_case_fold.apply(name) != name:
            return True
        return not info.supports_mixed_case_identifiers and name not in (
            name.upper(),
            name.lower(),
        )

    def needs_quoting(self, name: str) -> bool:
        """Whether the name has to be delimited to survive as written."""
        return (
            self._info.delimited_identifier_mode
            or not BARE_IDENTIFIER.match(name)
            or self._info.is_reserved(name)
            or self.is_case_significant(name)
        )

    def quote(self, name: str) -> str:
        """Delimit a name, doubling embedded quote characters."""
        opening = self._info.identifier_quote_char or '"'
        closing = _CLOSING_QUOTES.get(opening, opening)
        return f"{opening}{name.replace(closing, closing * 2)}{closing}"

    def write(self, name: str) -> str:
        """Return the identifier as it must appear in emitted SQL.

        Raises:
            UnsupportedDialectFeature: The name cannot be written safely

        """
        if not name:
            msg = "Identifiers must not be empty"
            raise UnsupportedDialectFeature(msg)
        name = self.shorten(name)
        if not self.needs_quoting(name):
            return name
        if self.can_quote:
            return self.quote(name)
        if not BARE_IDENTIFIER.match(name) or self._info.is_reserved(name):
            msg = (
                f"Identifier '{name}' needs quoting but {self._info.name} "
                "does not support delimited identifiers"
            )
            raise UnsupportedDialectFeature(msg)
        message = f"Identifier '{name}' is case-sensitive but will be case-folded"
        if self._info.strict:
            raise UnsupportedDialectFeature(message)
        self._warn(message)
        return name

    def generated(self, prefix: str, table: str, *columns: str) -> str:
        """Build a derived object name such as ``FK_<table>_<columns>``."""
        return self.shorten("_".join((prefix, table, *columns)))
