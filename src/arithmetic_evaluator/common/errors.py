"""Errors raised by the tokenizer, the parser and the runtime."""
from typing import Literal

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.spans import Span

Stage = Literal["lex", "parse", "runtime"]


class ErrorReport(BaseModel):
    """Structured description of a failed evaluation, ready to be displayed or serialized."""

    model_config = ConfigDict(frozen=True)

    stage: Stage = Field(..., description="Pipeline stage that failed")
    kind: str = Field(..., description="Name of the error, e.g. DivisionByZero")
    message: str = Field(..., description="Human readable explanation")
    span: Span = Field(..., description="Offending part of the input")


class CalculatorError(Exception):
    """
    Base class for every error the evaluation pipeline reports.

    Each error carries a human readable message and the span of the input it refers to.
    """

    stage: Stage

    def __init__(self, message: str, span: Span) -> None:
        super().__init__(message)
        self.message = message
        self.span = span

    @property
    def kind(self) -> str:
        return type(self).__name__

    def to_report(self) -> ErrorReport:
        """
        Convert the exception into a serializable report.

        :return: Report carrying stage, kind, message and span
        :rtype: ErrorReport
        """
        return ErrorReport(stage=self.stage, kind=self.kind, message=self.message, span=self.span)

    def __repr__(self) -> str:
        return f"{self.kind}({self.message!r}, span={self.span.start}..{self.span.end})"


class LexError(CalculatorError):
    """The input contains characters that do not form valid tokens."""

    stage = "lex"


class UnexpectedCharacter(LexError):
    def __init__(self, char: str, span: Span) -> None:
        super().__init__(f"unexpected character {char!r}", span)
        self.char = char


class MalformedNumber(LexError):
    def __init__(self, lexeme: str, span: Span) -> None:
        super().__init__(f"malformed number {lexeme!r}", span)
        self.lexeme = lexeme


class ParseError(CalculatorError):
    """The tokens do not form a valid expression."""

    stage = "parse"


class UnexpectedToken(ParseError):
    pass


class UnclosedParenthesis(ParseError):
    pass


class TrailingTokens(ParseError):
    pass


class NestingTooDeep(ParseError):
    pass


class UnrecognizedCommand(ParseError):
    """A ``?``-prefixed line that the interactive session does not know."""


class EmptyInput(ParseError):
    def __init__(self, span: Span) -> None:
        super().__init__("nothing to evaluate", span)


class CalcRuntimeError(CalculatorError):
    """A syntactically valid expression could not be evaluated."""

    stage = "runtime"


class DivisionByZero(CalcRuntimeError):
    def __init__(self, span: Span) -> None:
        super().__init__("division by zero", span)
