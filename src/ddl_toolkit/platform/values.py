"""Typed parsing and rendering of column default values.

Defaults are stored in the model as text, the way a schema descriptor writes
them. They are parsed into Python values according to the column's type code and
then rendered as SQL literals of the target dialect.
"""

from __future__ import annotations

import re
from datetime import date, datetime, time
from decimal import Decimal, InvalidOperation
from typing import TYPE_CHECKING

from ddl_toolkit.model.types import TypeCode

if TYPE_CHECKING:
    from ddl_toolkit.platform.info import PlatformInfo

Value = str | int | Decimal | bool | date | time | datetime | None

SQL_KEYWORD_DEFAULTS = frozenset(
    {"CURRENT_DATE", "CURRENT_TIME", "CURRENT_TIMESTAMP", "CURRENT_USER"},
)

_CAST_SUFFIX = re.compile(r"::[A-Za-z_][\w ]*(\[\])?$")


def cast_boolean(raw_value: str) -> bool:
    """Cast text to boolean with database-friendly spellings."""
    lowered = raw_value.strip().lower()
    if lowered in ("1", "true", "yes", "y", "t"):
        return True
    if lowered in ("0", "false", "no", "n", "f"):
        return False
    msg = f"Cannot convert '{raw_value}' to boolean"
    raise ValueError(msg)


def cast_number(raw_value: str) -> int | Decimal:
    """Cast text to an integer, or to a decimal when it has a fraction or exponent."""
    text = raw_value.strip()
    try:
        return int(text)
    except ValueError:
        pass
    try:
        return Decimal(text)
    except InvalidOperation:
        msg = f"Cannot convert '{raw_value}' to a number"
        raise ValueError(msg) from None


def cast_date(raw_value: str) -> date:
    """Cast text to a date, accepting a timestamp and dropping its time part."""
    text = raw_value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        msg = f"Cannot convert '{raw_value}' to date"
        raise ValueError(msg) from None


def cast_time(raw_value: str) -> time:
    """Cast text to a time of day."""
    try:
        return time.fromisoformat(raw_value.strip())
    except ValueError:
        msg = f"Cannot convert '{raw_value}' to time"
        raise ValueError(msg) from None


def cast_datetime(raw_value: str) -> datetime:
    """Cast text to a timestamp; a bare date means midnight."""
    text = raw_value.strip()
    try:
        return datetime.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.combine(date.fromisoformat(text), time())
    except ValueError:
        msg = f"Cannot convert '{raw_value}' to datetime"
        raise ValueError(msg) from None


def is_null(raw_value: str) -> bool:
    """Whether the default text denotes SQL NULL."""
    return raw_value.strip().upper() == "NULL"


def is_keyword(raw_value: str) -> bool:
    """Whether the default is a SQL keyword such as CURRENT_TIMESTAMP."""
    return raw_value.strip().upper() in SQL_KEYWORD_DEFAULTS


def parse_default(raw_value: str | None, type_code: TypeCode) -> Value:
    """Parse a textual default into a typed value.

    Args:
        raw_value: Default as written in the model
        type_code: Type of the column

    Returns:
        The typed value, or None for a missing or NULL default

    Raises:
        ValueError: The text is not a valid value of the type

    """
    if raw_value is None or is_null(raw_value):
        return None
    if is_keyword(raw_value) and not type_code.is_text:
        return raw_value.strip().upper()
    if type_code.is_boolean:
        return cast_boolean(raw_value)
    if type_code.is_numeric:
        return cast_number(raw_value)
    match type_code:
        case TypeCode.DATE:
            return cast_date(raw_value)
        case TypeCode.TIME:
            return cast_time(raw_value)
        case TypeCode.TIMESTAMP:
            return cast_datetime(raw_value)
        case _:
            return raw_value


def quote_string(text: str) -> str:
    """Return a SQL string literal, doubling embedded single quotes."""
    return "'" + text.replace("'", "''") + "'"


def format_timestamp(value: datetime) -> str:
    """Format a timestamp with millisecond precision."""
    return value.strftime("%Y-%m-%d %H:%M:%S.") + f"{value.microsecond // 1000:03d}"


def render_default(raw_value: str, type_code: TypeCode, info: PlatformInfo) -> str:
    """Render a textual default as a SQL literal for the dialect."""
    value = parse_default(raw_value, type_code)
    if value is None:
        return "NULL"
    if is_keyword(raw_value) and not type_code.is_text:
        return raw_value.strip().upper()
    match value:
        case bool():
            true_literal, false_literal = info.boolean_literals
            return true_literal if value else false_literal
        case int() | Decimal():
            return str(value)
        case datetime():
            return quote_string(format_timestamp(value))
        case date():
            return quote_string(value.isoformat())
        case time():
            return quote_string(value.strftime("%H:%M:%S"))
        case _:
            return quote_string(str(value))


def defaults_equal(first: str | None, second: str | None, type_code: TypeCode) -> bool:
    """Whether two textual defaults denote the same value of the type."""
    try:
        return parse_default(first, type_code) == parse_default(second, type_code)
    except ValueError:
        return first == second


def _is_wrapped(text: str) -> bool:
    """Whether the opening parenthesis of ``text`` closes at its very end."""
    if not (text.startswith("(") and text.endswith(")")):
        return False
    depth = 0
    quoted = False
    for position, char in enumerate(text):
        if char == "'":
            quoted = not quoted
        elif quoted:
            continue
        elif char == "(":
            depth += 1
        elif char == ")":
            depth -= 1
            if depth == 0:
                return position == len(text) - 1
    return False


def strip_literal(raw_default: str | None) -> str | None:
    """Reduce a default reported by a database to the model's textual form.

    Removes wrapping parentheses, PostgreSQL style casts and string quotes, so
    ``('abc'::character varying)`` reads as ``abc``.
    """
    if raw_default is None:
        return None
    text = raw_default.strip()
    while _is_wrapped(text):
        text = text[1:-1].strip()
    text = _CAST_SUFFIX.sub("", text).strip()
    if len(text) >= 2 and text.startswith("'") and text.endswith("'"):  # noqa: PLR2004
        return text[1:-1].replace("''", "'")
    return text
