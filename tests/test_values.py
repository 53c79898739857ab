"""Tests for parsing and rendering column default values."""

from datetime import date, datetime, time
from decimal import Decimal

import pytest

from ddl_toolkit.model import TypeCode
from ddl_toolkit.platform import PlatformInfo
from ddl_toolkit.platform.values import (
    cast_boolean,
    defaults_equal,
    parse_default,
    render_default,
    strip_literal,
)


@pytest.mark.parametrize(
    ("raw", "type_code", "expected"),
    [
        ("42", TypeCode.INTEGER, 42),
        ("1.50", TypeCode.DECIMAL, Decimal("1.50")),
        ("1e3", TypeCode.DOUBLE, Decimal("1E+3")),
        ("yes", TypeCode.BOOLEAN, True),
        ("0", TypeCode.BIT, False),
        ("2024-01-02", TypeCode.DATE, date(2024, 1, 2)),
        ("2024-01-02T10:00:00", TypeCode.DATE, date(2024, 1, 2)),
        ("12:30", TypeCode.TIME, time(12, 30)),
        ("2024-01-02", TypeCode.TIMESTAMP, datetime(2024, 1, 2)),
        ("current_timestamp", TypeCode.TIMESTAMP, "CURRENT_TIMESTAMP"),
        ("CURRENT_DATE", TypeCode.VARCHAR, "CURRENT_DATE"),
        ("hello", TypeCode.VARCHAR, "hello"),
        ("NULL", TypeCode.INTEGER, None),
        (None, TypeCode.INTEGER, None),
    ],
)
def test_parse_default(raw: str | None, type_code: TypeCode, expected: object) -> None:
    """Test textual defaults parse into values of the column type."""
    assert parse_default(raw, type_code) == expected


@pytest.mark.parametrize(
    ("raw", "type_code"),
    [("abc", TypeCode.INTEGER), ("maybe", TypeCode.BOOLEAN), ("noon", TypeCode.TIME)],
)
def test_parse_default_rejects_invalid_text(raw: str, type_code: TypeCode) -> None:
    """Test text that is not a value of the type is rejected."""
    with pytest.raises(ValueError, match="Cannot convert"):
        parse_default(raw, type_code)


def test_render_default_literals() -> None:
    """Test defaults render as SQL literals."""
    info = PlatformInfo()

    assert render_default("7", TypeCode.INTEGER, info) == "7"
    assert render_default("it's", TypeCode.VARCHAR, info) == "'it''s'"
    assert render_default("2024-01-02", TypeCode.DATE, info) == "'2024-01-02'"
    assert render_default("08:15", TypeCode.TIME, info) == "'08:15:00'"
    assert (
        render_default("2024-01-02 03:04:05.123456", TypeCode.TIMESTAMP, info)
        == "'2024-01-02 03:04:05.123'"
    )
    assert render_default("current_timestamp", TypeCode.TIMESTAMP, info) == "CURRENT_TIMESTAMP"
    assert render_default("null", TypeCode.VARCHAR, info) == "NULL"


def test_render_boolean_uses_dialect_literals() -> None:
    """Test booleans render with the dialect's spelling."""
    assert render_default("true", TypeCode.BOOLEAN, PlatformInfo()) == "TRUE"
    assert render_default("f", TypeCode.BIT, PlatformInfo(boolean_literals=("1", "0"))) == "0"


def test_cast_boolean_message() -> None:
    """Test the error names the rejected text."""
    with pytest.raises(ValueError, match="Cannot convert 'maybe' to boolean"):
        cast_boolean("maybe")


def test_defaults_equal_compares_values() -> None:
    """Test defaults are equal when they denote the same value."""
    assert defaults_equal("1", "1.0", TypeCode.DECIMAL)
    assert defaults_equal("true", "1", TypeCode.BOOLEAN)
    assert defaults_equal(None, "NULL", TypeCode.VARCHAR)
    assert not defaults_equal("a", "b", TypeCode.VARCHAR)
    assert not defaults_equal("x", "y", TypeCode.INTEGER)


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        (None, None),
        ("0", "0"),
        ("(0)", "0"),
        ("'abc'", "abc"),
        ("('abc'::character varying)", "abc"),
        ("'it''s'", "it's"),
        ("CURRENT_TIMESTAMP", "CURRENT_TIMESTAMP"),
        ("(1)+(2)", "(1)+(2)"),
        ("((1)+(2))", "(1)+(2)"),
        ("'('", "("),
    ],
)
def test_strip_literal(raw: str | None, expected: str | None) -> None:
    """Test database-reported defaults reduce to their textual form."""
    assert strip_literal(raw) == expected
