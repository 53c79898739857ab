"""Bidirectional mapping between abstract type codes and native type spellings."""

from __future__ import annotations

import re
from typing import NamedTuple

from ddl_toolkit.model.types import TypeCode

_ARGUMENTS = re.compile(r"\(\{size\}(?:,\{scale\})?\)")
_NATIVE_ARGUMENTS = re.compile(r"^(.*?)\((\d+)(?:,(\d+))?\)(.*)$")

STANDARD_TEMPLATES: dict[TypeCode, str] = {
    TypeCode.BIT: "BIT",
    TypeCode.TINYINT: "TINYINT",
    TypeCode.SMALLINT: "SMALLINT",
    TypeCode.INTEGER: "INTEGER",
    TypeCode.BIGINT: "BIGINT",
    TypeCode.REAL: "REAL",
    TypeCode.FLOAT: "FLOAT",
    TypeCode.DOUBLE: "DOUBLE",
    TypeCode.DECIMAL: "DECIMAL({size},{scale})",
    TypeCode.NUMERIC: "NUMERIC({size},{scale})",
    TypeCode.CHAR: "CHAR({size})",
    TypeCode.VARCHAR: "VARCHAR({size})",
    TypeCode.LONGVARCHAR: "LONGVARCHAR",
    TypeCode.CLOB: "CLOB",
    TypeCode.BINARY: "BINARY({size})",
    TypeCode.VARBINARY: "VARBINARY({size})",
    TypeCode.LONGVARBINARY: "LONGVARBINARY",
    TypeCode.BLOB: "BLOB",
    TypeCode.DATE: "DATE",
    TypeCode.TIME: "TIME",
    TypeCode.TIMESTAMP: "TIMESTAMP",
    TypeCode.BOOLEAN: "BOOLEAN",
    TypeCode.NULL: "NULL",
    TypeCode.OTHER: "OTHER",
}


class NativeType(NamedTuple):
    """Result of mapping a native spelling back to the model."""

    type_code: TypeCode
    size: int | None = None
    scale: int | None = None


def normalize_spelling(native: str) -> str:
    """Return the lookup key of a native spelling (upper case, tight parentheses)."""
    collapsed = " ".join(native.upper().split())
    return re.sub(r"\s*([(),])\s*", r"\1", collapsed)


def _base_name(template: str) -> str:
    return " ".join(_ARGUMENTS.sub(" ", template).split())


class TypeMap:
    """Per-dialect type templates plus the reverse lookup used by readers."""

    def __init__(self) -> None:
        """Initialize with the standard spellings."""
        self._templates: dict[TypeCode, str] = dict(STANDARD_TEMPLATES)
        self._reverse: dict[str, TypeCode] = {}
        self._explicit: set[str] = set()
        self._frozen = False
        for type_code, template in STANDARD_TEMPLATES.items():
            self._add_reverse(template, type_code, explicit=False)

    def _check_writable(self) -> None:
        if self._frozen:
            msg = "Type map is frozen"
            raise RuntimeError(msg)

    def _add_reverse(self, template: str, type_code: TypeCode, *, explicit: bool) -> None:
        """Record the reverse spelling; the first explicit registration wins."""
        key = normalize_spelling(template)
        if _ARGUMENTS.search(template):
            key = normalize_spelling(_base_name(template))
        if key in self._explicit:
            return
        if explicit:
            self._explicit.add(key)
            self._reverse[key] = type_code
        else:
            self._reverse.setdefault(key, type_code)

    def register(self, type_code: TypeCode, native: str, *, reverse: bool = True) -> None:
        """Set the native template of a type code.

        Args:
            type_code: Abstract type to map
            native: Template such as ``VARCHAR({size})`` or ``DECIMAL(18,0)``
            reverse: Whether the spelling also reads back as this type code

        """
        self._check_writable()
        self._templates[type_code] = native
        if reverse:
            self._add_reverse(native, type_code, explicit=True)

    def register_native(self, native: str, type_code: TypeCode) -> None:
        """Add an extra native spelling that reads back as the type code."""
        self._check_writable()
        self._add_reverse(native, type_code, explicit=True)

    def freeze(self) -> TypeMap:
        """Make the map read-only and return it."""
        self._frozen = True
        return self

    @property
    def frozen(self) -> bool:
        """Whether further registrations are rejected."""
        return self._frozen

    def template(self, type_code: TypeCode) -> str:
        """Return the raw template of a type code."""
        return self._templates[type_code]

    def carries_size(self, type_code: TypeCode) -> bool:
        """Whether the native spelling of the type code takes a size."""
        return "{size}" in self._templates[type_code]

    def carries_scale(self, type_code: TypeCode) -> bool:
        """Whether the native spelling of the type code takes a scale."""
        return "{scale}" in self._templates[type_code]

    def to_native(
        self,
        type_code: TypeCode,
        size: int | None = None,
        scale: int | None = None,
        default_size: int | None = None,
    ) -> str:
        """Render the native spelling of a type code.

        A missing size falls back to the default size, a missing scale drops the
        scale argument and without any size the argument list is omitted.
        """
        template = self._templates[type_code]
        match = _ARGUMENTS.search(template)
        if match is None:
            return template
        effective_size = size if size is not None else default_size
        if effective_size is None:
            arguments = ""
        elif scale is not None and "{scale}" in match.group(0):
            arguments = f"({effective_size},{scale})"
        else:
            arguments = f"({effective_size})"
        return template[: match.start()] + arguments + template[match.end() :]

    def from_native(
        self,
        native_name: str,
        jdbc_code: int | None = None,
        size: int | None = None,
        scale: int | None = None,
    ) -> NativeType:
        """Map a native spelling (with optional driver-reported details) to the model.

        The exact spelling is tried first, then the spelling with the reported
        arguments, then the base name, then the JDBC code and finally OTHER.
        """
        key = normalize_spelling(native_name)
        type_code = self._reverse.get(key)

        base = key
        if parsed := _NATIVE_ARGUMENTS.match(key):
            base = " ".join(f"{parsed.group(1)} {parsed.group(4)}".split())
            if size is None:
                size = int(parsed.group(2))
            if scale is None and parsed.group(3) is not None:
                scale = int(parsed.group(3))

        if type_code is None and size is not None:
            with_arguments = f"{base}({size})" if scale is None else f"{base}({size},{scale})"
            type_code = self._reverse.get(with_arguments)
        if type_code is None:
            type_code = self._reverse.get(base)
        if type_code is None and jdbc_code is not None:
            type_code = TypeCode.from_code(jdbc_code)
        if type_code is None:
            type_code = TypeCode.OTHER

        return NativeType(
            type_code,
            size if self.carries_size(type_code) else None,
            scale if self.carries_scale(type_code) else None,
        )

    def canonical(
        self,
        type_code: TypeCode,
        size: int | None = None,
        scale: int | None = None,
        default_size: int | None = None,
    ) -> NativeType:
        """Return what a column of ``type_code`` reads back as once written.

        Fixed spellings make aliases depend on the arguments: on a dialect writing
        BIGINT as ``DECIMAL(18,0)``, a DECIMAL(18,0) column reads back as BIGINT.
        """
        return self.from_native(self.to_native(type_code, size, scale, default_size))
