"""Test number and error display."""
import pytest

from arithmetic_evaluator.common.calculator import Calculator
from arithmetic_evaluator.common.errors import ErrorReport
from arithmetic_evaluator.common.formatting import format_error, format_number


def render_plain(report: ErrorReport, text: str) -> str:
    return format_error(report, text).plain


@pytest.mark.parametrize(
    "value,expected",
    [
        (14.0, "14"),
        (-3.0, "-3"),
        (0.5, "0.5"),
        (-0.0, "0"),
        (1e-07, "0.0000001"),
        (1e20, "100000000000000000000"),
        (2.5e-3, "0.0025"),
        (float("inf"), "inf"),
        (float("-inf"), "-inf"),
        (float("nan"), "nan"),
    ],
)
def test_format_number(value: float, expected: str) -> None:
    """Numbers are displayed in plain decimal notation."""
    assert format_number(value) == expected


def test_format_error_underlines_span() -> None:
    """The offending characters are underlined below the echoed input."""
    report = Calculator.run("2 & 3").error
    assert render_plain(report, "2 & 3").splitlines() == [
        "error: unexpected character '&'",
        "      2 & 3",
        "        ^",
    ]


def test_format_error_multi_character_span() -> None:
    """Every character of the span gets a caret."""
    report = Calculator.run("1 + 2..3").error
    assert render_plain(report, "1 + 2..3").splitlines()[-1] == "          ^^^^"


def test_format_error_at_end_of_input() -> None:
    """An end-of-input error gets one caret just past the input, ignoring the newline."""
    text = "2+\n"
    report = Calculator.run(text).error
    lines = render_plain(report, text).splitlines()
    assert lines[0] == "error: expected one of `-`, `(` or a number, found end of input"
    assert lines[1] == "      2+"
    assert lines[2] == "        ^"


def test_format_error_is_styled() -> None:
    """The rich rendering carries the same text plus styles."""
    report = Calculator.run("5/0").error
    rendered = format_error(report, "5/0")
    assert rendered.plain.startswith("error: division by zero")
    assert rendered.spans
