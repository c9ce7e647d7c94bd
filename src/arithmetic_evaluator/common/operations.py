"""Pydantic model for evaluation results."""
from typing import Optional

from pydantic import BaseModel, Field, model_validator

from arithmetic_evaluator.common.errors import ErrorReport


class EvaluationResult(BaseModel):
    """Represents the outcome of evaluating one expression: a value or an error, never both."""

    expression: str = Field(..., description="Original arithmetic expression")
    result: Optional[float] = Field(default=None, description="Evaluated numeric result of the expression")
    error: Optional[ErrorReport] = Field(default=None, description="Why the expression could not be evaluated")

    @model_validator(mode="after")
    def exactly_one_outcome(self) -> "EvaluationResult":
        """Ensure that either a result or an error is set."""
        if (self.result is None) == (self.error is None):
            raise ValueError("Exactly one of result and error must be set")
        return self

    @property
    def ok(self) -> bool:
        return self.error is None
