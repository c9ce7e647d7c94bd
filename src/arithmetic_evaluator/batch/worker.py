"""Worker process evaluating a single arithmetic expression."""
from multiprocessing.connection import Connection

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.common.calculator import Calculator
from arithmetic_evaluator.common.logger import logger


class WorkerProcess(BaseModel):
    """
    Worker responsible for evaluating a single arithmetic expression.

    Lifecycle:
        - Spawned by the batch runner
        - Receives one expression only
        - Sends the computed result or error report through a Pipe
        - Terminates immediately after computation
    """

    # Make the Pydantic instance immutable (read-only) for safety
    # Allow arbitrary types like multiprocessing.Connection
    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    conn: Connection = Field(..., description="Connection object for sending results back to the runner")
    expression: str = Field(..., description="Single arithmetic expression to evaluate")
    line_number: int = Field(..., ge=1, description="Line number in the input file")

    def run(self) -> None:
        """
        Evaluate the arithmetic expression and send the result or error through the pipe.

        The payload always holds ``line`` and ``expression``, plus either ``result``
        (a float) or ``error`` (an ``ErrorReport`` dumped to a dict).

        :return: None
        """
        logger.info(f"👷🏁 Worker started on line {self.line_number}: {self.expression}")

        try:
            outcome = Calculator.run(self.expression)
            payload = {"line": self.line_number, "expression": self.expression}
            if outcome.ok:
                payload["result"] = outcome.result
                logger.info(f"👷✅ Worker finished on line {self.line_number}: {outcome.result}")
            else:
                payload["error"] = outcome.error.model_dump()
                logger.warning(
                    f"👷❌ Worker failed on line {self.line_number}: {outcome.error.kind}: {outcome.error.message}"
                )
            self.conn.send(payload)
        finally:
            # Always close the connection
            self.conn.close()
