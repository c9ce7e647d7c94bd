"""Run arithmetic expressions through the tokenizer, the parser and the runtime."""
from typing import List

from arithmetic_evaluator.common.errors import CalculatorError
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.operations import EvaluationResult
from arithmetic_evaluator.common.parser import Expression, parse
from arithmetic_evaluator.common.runtime import evaluate
from arithmetic_evaluator.common.tokenizer import Token, tokenize


class Calculator:
    """
    Evaluate arithmetic expressions safely.

    Design constraints:
        - No eval(), no dynamic code execution
        - Stateless: evaluating the same text always gives the same outcome

    Algorithm:
        1. Tokenize the text into positioned tokens
        2. Build an expression tree with precedence climbing
        3. Evaluate the tree recursively

    A failing stage raises a ``CalculatorError`` and later stages never run.
    """

    @staticmethod
    def tokenize(text: str) -> List[Token]:
        """
        Split an arithmetic expression into tokens.

        :param str text: Arithmetic expression as a string

        :return: List of tokens ending with END_OF_INPUT
        :rtype: List[Token]
        """
        return tokenize(text)

    @staticmethod
    def parse(text: str) -> Expression:
        """
        Tokenize and parse an arithmetic expression.

        :param str text: Arithmetic expression as a string

        :return: Root of the expression tree
        :rtype: Expression
        """
        return parse(tokenize(text))

    @staticmethod
    def evaluate(text: str) -> float:
        """
        Evaluate an arithmetic expression.

        :param str text: Arithmetic expression as a string

        :return: Computed result as float
        :rtype: float
        :raises CalculatorError: If the expression cannot be tokenized, parsed or evaluated
        """
        return evaluate(parse(tokenize(text)))

    @staticmethod
    def run(text: str) -> EvaluationResult:
        """
        Evaluate an arithmetic expression and capture any pipeline error in the result.

        :param str text: Arithmetic expression as a string

        :return: The value, or the report of the stage that failed
        :rtype: EvaluationResult
        """
        try:
            value = Calculator.evaluate(text)
        except CalculatorError as exc:
            logger.debug("Evaluation of %r failed: %r", text, exc)
            return EvaluationResult(expression=text, error=exc.to_report())
        return EvaluationResult(expression=text, result=value)
