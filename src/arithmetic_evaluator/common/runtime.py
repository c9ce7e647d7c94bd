"""Evaluate expression trees."""
import operator
from typing import Callable, Dict, List, Tuple

from arithmetic_evaluator.common.errors import DivisionByZero
from arithmetic_evaluator.common.parser import (
    Binary,
    BinaryOperator,
    Expression,
    Grouping,
    Literal,
    Unary,
    UnaryOperator,
)

# Type alias for operator functions (taking two floats, returning a float)
OperatorFn = Callable[[float, float], float]

BINARY_IMPLS: Dict[BinaryOperator, OperatorFn] = {
    BinaryOperator.ADD: operator.add,
    BinaryOperator.SUBTRACT: operator.sub,
    BinaryOperator.MULTIPLY: operator.mul,
    BinaryOperator.DIVIDE: operator.truediv,
}


def evaluate(expression: Expression) -> float:
    """
    Compute the value of an expression tree in post-order.

    Operands are evaluated left before right. The walk uses an explicit stack,
    so the depth of the tree is not limited by the interpreter's recursion limit.

    :param Expression expression: Root of the tree to evaluate

    :return: Value of the expression
    :rtype: float
    :raises DivisionByZero: If a divisor evaluates to zero
    """
    values: List[float] = []
    # Each entry is (node, True once its operands have been evaluated)
    pending: List[Tuple[Expression, bool]] = [(expression, False)]

    while pending:
        node, operands_done = pending.pop()
        if isinstance(node, Literal):
            values.append(node.value)
        elif isinstance(node, Grouping):
            pending.append((node.inner, False))
        elif isinstance(node, Unary):
            if not operands_done:
                pending.append((node, True))
                pending.append((node.operand, False))
            elif node.operator is UnaryOperator.NEGATE:
                values.append(-values.pop())
            else:
                raise TypeError(f"Unexpected unary operator: {node.operator}")
        elif isinstance(node, Binary):
            if not operands_done:
                # Pushed last so that the left operand is evaluated first
                pending.append((node, True))
                pending.append((node.right, False))
                pending.append((node.left, False))
            else:
                right = values.pop()
                left = values.pop()
                if node.operator is BinaryOperator.DIVIDE and right == 0:
                    raise DivisionByZero(node.operator_span)
                values.append(BINARY_IMPLS[node.operator](left, right))
        else:
            raise TypeError(f"Unexpected expression type: {type(node).__name__}")

    return values.pop()
