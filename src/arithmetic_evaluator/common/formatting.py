"""Display helpers for results and errors."""
from decimal import Decimal
import math
from typing import Tuple

from rich.style import Style
from rich.text import Text

from arithmetic_evaluator.common.errors import ErrorReport

# Indentation of the echoed input line below an error message
SOURCE_INDENT: str = " " * 6

STYLES = {
    "error": Style(color="red", bold=True),
    "message": Style(bold=True),
    "source": Style(color="white"),
    "underline": Style(color="red", bold=True),
}


def format_number(value: float) -> str:
    """
    Format a result in plain decimal notation.

    Integral values are shown without a fractional part and no exponent is ever used:
    ``14.0`` becomes ``14`` and ``1e-07`` becomes ``0.0000001``.

    :param float value: Value to display

    :return: Human readable number
    :rtype: str
    """
    if math.isnan(value):
        return "nan"
    if math.isinf(value):
        return "inf" if value > 0 else "-inf"
    if value == 0:
        # Also covers -0.0
        return "0"
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


def _error_lines(report: ErrorReport, text: str) -> Tuple[str, str, str]:
    """Return the message, the echoed source and the underline of an error."""
    # Tabs are replaced one-for-one so that offsets stay aligned with the carets
    source = text.rstrip("\r\n").replace("\t", " ")
    start = min(report.span.start, len(source))
    width = max(min(report.span.end, len(source)) - start, 1)
    return (
        report.message,
        f"{SOURCE_INDENT}{source}",
        f"{SOURCE_INDENT}{' ' * start}{'^' * width}",
    )


def format_error(report: ErrorReport, text: str) -> Text:
    """
    Render an error with the offending part of the input underlined.

    Example::

        error: unexpected character '&'
              2 & 3
                ^

    An error at the end of the input gets a single caret just past the last character.

    :param ErrorReport report: Error to display
    :param str text: Input the error refers to

    :return: Styled text for a rich console
    :rtype: Text
    """
    message, source, underline = _error_lines(report, text)
    rendered = Text()
    rendered.append("error", style=STYLES["error"])
    rendered.append(f": {message}\n", style=STYLES["message"])
    rendered.append(f"{source}\n", style=STYLES["source"])
    rendered.append(underline, style=STYLES["underline"])
    return rendered
