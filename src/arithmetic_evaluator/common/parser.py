"""Build an expression tree from tokens using precedence climbing."""
import enum
from typing import Dict, List, Tuple, Union

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.errors import (
    EmptyInput,
    NestingTooDeep,
    TrailingTokens,
    UnclosedParenthesis,
    UnexpectedToken,
)
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.spans import Span
from arithmetic_evaluator.common.tokenizer import Token, TokenType


class BinaryOperator(enum.Enum):
    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"


class UnaryOperator(enum.Enum):
    NEGATE = "-"


class Literal(BaseModel):
    model_config = ConfigDict(frozen=True)

    value: float
    span: Span

    def __str__(self) -> str:
        return f"{self.value:g}"


class Unary(BaseModel):
    model_config = ConfigDict(frozen=True)

    operator: UnaryOperator
    operand: "Expression"
    span: Span

    def __str__(self) -> str:
        return f"({self.operator.value}{self.operand})"


class Binary(BaseModel):
    """A binary operation; ``span`` covers both operands, ``operator_span`` only the symbol."""

    model_config = ConfigDict(frozen=True)

    operator: BinaryOperator
    left: "Expression"
    right: "Expression"
    operator_span: Span = Field(..., description="Position of the operator symbol")
    span: Span

    def __str__(self) -> str:
        return f"({self.left} {self.operator.value} {self.right})"


class Grouping(BaseModel):
    """A parenthesized subexpression; ``span`` includes both parentheses."""

    model_config = ConfigDict(frozen=True)

    inner: "Expression"
    span: Span

    def __str__(self) -> str:
        return f"[{self.inner}]"


Expression = Union[Literal, Unary, Binary, Grouping]

for _node in (Unary, Binary, Grouping):
    _node.model_rebuild()


# Mapping of operator tokens to (binding power, operator); higher binds tighter.
# All binary operators are left-associative.
BINARY_OPERATORS: Dict[TokenType, Tuple[int, BinaryOperator]] = {
    TokenType.PLUS: (1, BinaryOperator.ADD),
    TokenType.MINUS: (1, BinaryOperator.SUBTRACT),
    TokenType.STAR: (2, BinaryOperator.MULTIPLY),
    TokenType.SLASH: (2, BinaryOperator.DIVIDE),
}

# Each open parenthesis costs two stack frames while parsing
MAX_NESTING_DEPTH: int = 200


class _Parser:
    """Cursor over the tokens of a single ``parse`` call."""

    def __init__(self, tokens: List[Token]) -> None:
        self.tokens = tokens
        self.position = 0
        # Number of parentheses currently open
        self.depth = 0

    def peek(self) -> Token:
        return self.tokens[self.position]

    def advance(self) -> Token:
        token = self.tokens[self.position]
        # Never move past END_OF_INPUT
        if token.type is not TokenType.END_OF_INPUT:
            self.position += 1
        return token

    def expression(self, min_binding_power: int) -> Expression:
        left = self.primary()

        while True:
            operator_token = self.peek()
            entry = BINARY_OPERATORS.get(operator_token.type)
            if entry is None:
                break
            binding_power, operator = entry
            if binding_power < min_binding_power:
                break
            self.advance()

            # binding_power + 1 makes an operator of equal power end the right operand
            right = self.expression(binding_power + 1)
            left = Binary(
                operator=operator,
                left=left,
                right=right,
                operator_span=operator_token.span,
                span=left.span.join(right.span),
            )

        return left

    def primary(self) -> Expression:
        token = self.advance()

        if token.type is TokenType.NUMBER:
            return Literal(value=token.value, span=token.span)

        if token.type is TokenType.MINUS:
            # Collect repeated signs first so that `---1` does not recurse once per sign
            signs = [token]
            while self.peek().type is TokenType.MINUS:
                signs.append(self.advance())
            operand = self.primary()
            for sign in reversed(signs):
                operand = Unary(operator=UnaryOperator.NEGATE, operand=operand, span=sign.span.join(operand.span))
            return operand

        if token.type is TokenType.LEFT_PAREN:
            if self.depth >= MAX_NESTING_DEPTH:
                raise NestingTooDeep(f"parentheses nested more than {MAX_NESTING_DEPTH} levels deep", token.span)
            self.depth += 1
            inner = self.expression(0)
            self.depth -= 1
            closing = self.peek()
            if closing.type is not TokenType.RIGHT_PAREN:
                raise UnclosedParenthesis(
                    f"expected `)` to close `(` at offset {token.span.start}, found {closing.describe()}",
                    closing.span,
                )
            self.advance()
            return Grouping(inner=inner, span=token.span.join(closing.span))

        raise UnexpectedToken(f"expected one of `-`, `(` or a number, found {token.describe()}", token.span)


def parse(tokens: List[Token]) -> Expression:
    """
    Parse a token sequence into a single expression tree.

    The first error aborts parsing; no partial tree is ever returned.

    :param List[Token] tokens: Output of ``tokenize``, terminated by END_OF_INPUT

    :return: Root of the expression tree
    :rtype: Expression
    :raises EmptyInput: If there is nothing but END_OF_INPUT
    :raises UnexpectedToken: If a number, `-` or `(` was expected
    :raises UnclosedParenthesis: If a `(` is not matched by a `)`
    :raises TrailingTokens: If tokens remain after a complete expression
    :raises NestingTooDeep: If parentheses are nested more than MAX_NESTING_DEPTH levels deep
    :raises ValueError: If the sequence is not terminated by END_OF_INPUT
    """
    if not tokens or tokens[-1].type is not TokenType.END_OF_INPUT:
        raise ValueError("Token sequence must end with an END_OF_INPUT token")

    if tokens[0].type is TokenType.END_OF_INPUT:
        raise EmptyInput(tokens[0].span)

    parser = _Parser(tokens)
    try:
        expression = parser.expression(0)
    except RecursionError:
        # Only reached when the caller itself runs close to the interpreter recursion limit
        raise NestingTooDeep("expression nested too deeply to parse", parser.peek().span) from None

    trailing = parser.peek()
    if trailing.type is not TokenType.END_OF_INPUT:
        raise TrailingTokens(f"expected end of input, found {trailing.describe()}", trailing.span)

    logger.debug(
        "Parsed %s spanning %d..%d", type(expression).__name__, expression.span.start, expression.span.end
    )
    return expression
