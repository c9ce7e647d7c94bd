"""Split an arithmetic expression into positioned tokens."""
import enum
from typing import Dict, List

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.errors import MalformedNumber, UnexpectedCharacter
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.spans import Span


class TokenType(enum.Enum):
    NUMBER = enum.auto()
    PLUS = enum.auto()
    MINUS = enum.auto()
    STAR = enum.auto()
    SLASH = enum.auto()
    LEFT_PAREN = enum.auto()
    RIGHT_PAREN = enum.auto()
    END_OF_INPUT = enum.auto()

    def __str__(self) -> str:
        return self.name


class Token(BaseModel):
    """A single lexical token and the span of input it was read from."""

    model_config = ConfigDict(frozen=True)

    type: TokenType = Field(..., description="Kind of token")
    lexeme: str = Field(..., description="Exact source text of the token")
    span: Span = Field(..., description="Position of the token in the input")

    @property
    def value(self) -> float:
        """Numeric value of a NUMBER token."""
        if self.type is not TokenType.NUMBER:
            raise TypeError(f"{self.type} token has no numeric value")
        return float(self.lexeme)

    def describe(self) -> str:
        """Short description used in error messages."""
        if self.type is TokenType.END_OF_INPUT:
            return "end of input"
        return f"`{self.lexeme}`"

    def __str__(self) -> str:
        return f"<{self.type}>{self.lexeme}"


# Mapping of operator and parenthesis symbols to their token type
SINGLE_CHAR_TOKENS: Dict[str, TokenType] = {
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.STAR,
    "/": TokenType.SLASH,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
}


def _is_valid_in_number(char: str) -> bool:
    # str.isdigit() accepts superscripts and other non-ASCII digits float() rejects
    return char in "0123456789."


def tokenize(text: str) -> List[Token]:
    """
    Convert an input line into tokens, terminated by a single END_OF_INPUT token.

    Whitespace (including a trailing newline) separates tokens and is otherwise ignored.

    :param str text: Raw input line

    :return: Tokens in source order
    :rtype: List[Token]
    :raises UnexpectedCharacter: If a character cannot start any token
    :raises MalformedNumber: If a number has more than one decimal point or no digit at all
    """
    tokens: List[Token] = []
    i = 0
    while i < len(text):
        char = text[i]
        if char.isspace():
            i += 1
        elif _is_valid_in_number(char):
            # Greedily take the whole run of digits and dots, then validate it
            end = i + 1
            while end < len(text) and _is_valid_in_number(text[end]):
                end += 1
            lexeme = text[i:end]
            span = Span(start=i, end=end)
            if lexeme.count(".") > 1 or lexeme == ".":
                raise MalformedNumber(lexeme, span)
            tokens.append(Token(type=TokenType.NUMBER, lexeme=lexeme, span=span))
            i = end
        elif char in SINGLE_CHAR_TOKENS:
            tokens.append(Token(type=SINGLE_CHAR_TOKENS[char], lexeme=char, span=Span(start=i, end=i + 1)))
            i += 1
        else:
            raise UnexpectedCharacter(char, Span(start=i, end=i + 1))

    tokens.append(Token(type=TokenType.END_OF_INPUT, lexeme="", span=Span(start=len(text), end=len(text))))
    logger.debug("Tokenized %r into %d tokens", text, len(tokens))
    return tokens
