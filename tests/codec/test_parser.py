# topmark:header:start
#
#   project      : Flatenv
#   file         : test_parser.py
#   file_relpath : tests/codec/test_parser.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""Tests for the line parser in `flatenv.parser`."""

from __future__ import annotations

import pytest

from flatenv.errors import EnvSyntaxError, EofError, ErrorKind
from flatenv.parser import Binding, iter_bindings, parse_pairs
from tests.conftest import parametrize

pytestmark: pytest.MarkDecorator = pytest.mark.codec


def test_basic_assignments_in_order() -> None:
    """Assignments come back in input order with duplicates kept."""
    text = "A=1\nB=two\nA=3\n"
    assert parse_pairs(text, environ={}) == [("A", "1"), ("B", "two"), ("A", "3")]


def test_comments_blank_lines_and_export() -> None:
    """Comments and blank lines are skipped; ``export`` is accepted."""
    text = "# header\n\n  \nexport A=1\n  B = 2  # trailing\n"
    assert parse_pairs(text, environ={}) == [("A", "1"), ("B", "2")]


@parametrize(
    "text, expected",
    [
        ("A='single # not a comment'", "single # not a comment"),
        ('A="double\\nline"', "double\\nline"),
        ('A="C:\\tmp"', "C:\\tmp"),
        ('A="C:\\"', "C:\\"),
        ('A="a\\\\b"', "a\\\\b"),
        ("A='no \\n escapes'", "no \\n escapes"),
        ("A=unquoted\\n", "unquoted\\n"),
        ('A="a","b"', "a,b"),
        ("A=a b", "a b"),
        ("A=", ""),
        ('A=""', ""),
        ("A=x#y", "x#y"),
    ],
)
def test_value_forms(text: str, expected: str) -> None:
    """Quoted, unquoted and concatenated value forms."""
    assert parse_pairs(text, environ={}) == [("A", expected)]


def test_quoted_value_spans_lines() -> None:
    """Quoted values may contain line breaks; line numbers keep counting."""
    text = 'A="first\nsecond"\nB=2'
    bindings: list[Binding] = list(iter_bindings(text))
    assert bindings == [Binding("A", "first\nsecond", 1), Binding("B", "2", 3)]


def test_crlf_line_endings() -> None:
    """Windows line endings are accepted."""
    assert parse_pairs("A=1\r\nB='2'\r\n", environ={}) == [("A", "1"), ("B", "2")]


def test_leading_bom_is_ignored() -> None:
    """A UTF-8 byte order mark before the first key is dropped."""
    assert parse_pairs("\ufeffA=1", environ={}) == [("A", "1")]


def test_unterminated_quote_raises_eof() -> None:
    """An open quote at the end of input is an unexpected end of input."""
    with pytest.raises(EofError) as excinfo:
        parse_pairs('A="never closed\nB=2', environ={})
    assert excinfo.value.kind is ErrorKind.EOF


@parametrize("text", ["JUSTAKEY", "=value", "A=1 'x'y' z", "A='x' trailing'"])
def test_malformed_lines_raise_syntax_error(text: str) -> None:
    """Lines without ``=``, without a key or with stray quotes are rejected."""
    with pytest.raises((EnvSyntaxError, EofError)):
        parse_pairs(text, environ={})


def test_syntax_error_reports_line_number() -> None:
    """The error message names the offending line."""
    with pytest.raises(EnvSyntaxError, match="line 3"):
        parse_pairs("A=1\n\nBROKEN\n", environ={})


def test_interpolation_from_earlier_assignment() -> None:
    """``${VAR}`` resolves against earlier keys of the same input first."""
    text = "HOST=localhost\nURL=http://${HOST}:${PORT:-80}/\n"
    pairs = parse_pairs(text, environ={"HOST": "ignored"})
    assert pairs[-1] == ("URL", "http://localhost:80/")


def test_interpolation_from_environment() -> None:
    """Unassigned references fall back to the given environment."""
    assert parse_pairs('A="${HOME}/x"', environ={"HOME": "/home/me"}) == [("A", "/home/me/x")]


def test_single_quotes_are_not_interpolated() -> None:
    """Single-quoted text stays literal."""
    assert parse_pairs("A='${HOME}'", environ={"HOME": "/home/me"}) == [("A", "${HOME}")]


def test_interpolation_can_be_disabled() -> None:
    """With ``interpolate=False`` references are kept verbatim."""
    text = "A=1\nB=${A}"
    assert parse_pairs(text, interpolate=False, environ={}) == [("A", "1"), ("B", "${A}")]


def test_missing_reference_expands_to_empty() -> None:
    """Unknown variables without default become the empty string."""
    assert parse_pairs("A=x${NOPE}y", environ={}) == [("A", "xy")]
