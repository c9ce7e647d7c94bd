"""Evaluate a batch of arithmetic expressions using worker processes."""
from multiprocessing import Pipe, Process, cpu_count
from multiprocessing.connection import Connection, wait
from pathlib import Path
from typing import Dict, List, TextIO, Tuple

from pydantic import BaseModel, ConfigDict, Field

from arithmetic_evaluator.batch.sources import read_expressions
from arithmetic_evaluator.batch.worker import WorkerProcess
from arithmetic_evaluator.common.errors import ErrorReport
from arithmetic_evaluator.common.formatting import format_number
from arithmetic_evaluator.common.logger import logger
from arithmetic_evaluator.common.operations import EvaluationResult
from arithmetic_evaluator.common.spans import Span

ActiveWorker = Tuple[Process, Connection, int, str]


def format_result_line(result: EvaluationResult) -> str:
    """
    Format one line of the batch output file.

    :param EvaluationResult result: Outcome of one expression

    :return: ``<expr> = <value>`` or ``<expr> -> ERROR: <kind>: <message>``
    :rtype: str
    """
    if result.ok:
        return f"{result.expression} = {format_number(result.result)}"
    return f"{result.expression} -> ERROR: {result.error.kind}: {result.error.message}"


class BatchRunner(BaseModel):
    """
    Evaluates many independent expressions in parallel.

    Features:
        - Spawns one worker process per expression.
        - Writes results immediately to disk as soon as a worker finishes.
        - Ensures each worker is destroyed immediately after finishing.
        - Keeps at most ``max_workers`` workers alive at once.
    """

    model_config = ConfigDict(frozen=True)

    output_file: Path = Field(..., description="Path to write computation results")
    max_workers: int = Field(default_factory=cpu_count, ge=1, description="Maximum number of simultaneous workers")

    def _spawn_worker(self, expr: str, line_number: int) -> ActiveWorker:
        """
        Spawn a WorkerProcess for the given expression.

        :param str expr: Arithmetic expression
        :param int line_number: Line number of expression in input

        :return: Tuple of (Process, parent pipe, line number, expression)
        :rtype: ActiveWorker
        """
        parent_conn, child_conn = Pipe(duplex=False)
        worker = WorkerProcess(conn=child_conn, expression=expr, line_number=line_number)
        process = Process(target=worker.run)
        process.start()
        # The child owns its end of the pipe now
        child_conn.close()
        return process, parent_conn, line_number, expr

    @staticmethod
    def _payload_to_result(payload: dict) -> EvaluationResult:
        if "result" in payload:
            return EvaluationResult(expression=payload["expression"], result=payload["result"])
        return EvaluationResult(expression=payload["expression"], error=ErrorReport(**payload["error"]))

    def _collect_finished_workers(
        self, active_workers: List[ActiveWorker], f_out: TextIO, results: Dict[int, EvaluationResult]
    ) -> None:
        """
        Collect results from all workers that have reported and write them to the output file.

        Finished workers are removed from ``active_workers``.

        :param List[ActiveWorker] active_workers: Workers still being tracked
        :param TextIO f_out: Open file handle for writing results
        :param Dict[int, EvaluationResult] results: Collected results, keyed by line number
        """
        # Iterate in reverse to safely remove finished workers while iterating
        for i in reversed(range(len(active_workers))):
            proc, pipe_conn, line_number, expr = active_workers[i]
            if not pipe_conn.poll():
                continue

            try:
                result = self._payload_to_result(pipe_conn.recv())
            except EOFError:
                # The worker died before sending anything
                proc.join()
                logger.error(f"👷💥 Worker for line {line_number} exited with code {proc.exitcode}")
                report = ErrorReport(
                    stage="runtime",
                    kind="WorkerCrashed",
                    message=f"worker exited with code {proc.exitcode}",
                    span=Span(start=0, end=len(expr)),
                )
                result = EvaluationResult(expression=expr, error=report)
            finally:
                pipe_conn.close()
            proc.join()
            active_workers.pop(i)

            results[line_number] = result
            # Write output immediately
            f_out.write(format_result_line(result) + "\n")
            f_out.flush()

    def run(self, expressions: List[str]) -> List[EvaluationResult]:
        """
        Evaluate every expression, writing one output line per expression as soon as it is known.

        Lines of the output file appear in completion order; the returned list is in input order.

        :param List[str] expressions: Expressions to evaluate

        :return: One result per expression, in input order
        :rtype: List[EvaluationResult]
        """
        logger.info(f"🧮 Evaluating {len(expressions)} expressions with up to {self.max_workers} workers")
        results: Dict[int, EvaluationResult] = {}
        active_workers: List[ActiveWorker] = []

        with self.output_file.open("w", encoding="utf-8") as f_out:
            for line_number, expr in enumerate(expressions, start=1):
                # Wait until a worker slot is available
                while len(active_workers) >= self.max_workers:
                    wait([conn for _, conn, _, _ in active_workers])
                    self._collect_finished_workers(active_workers, f_out, results)

                active_workers.append(self._spawn_worker(expr, line_number))

            # Collect remaining active workers
            while active_workers:
                wait([conn for _, conn, _, _ in active_workers])
                self._collect_finished_workers(active_workers, f_out, results)

        failures = sum(1 for result in results.values() if not result.ok)
        logger.info(f"📝 Results written to {self.output_file} ({failures} failed)")
        return [results[line_number] for line_number in sorted(results)]

    def run_file(self, input_file: Path) -> List[EvaluationResult]:
        """
        Evaluate all expressions of a text file or archive.

        :param Path input_file: Path to the input file or archive

        :return: One result per non-blank line, in input order
        :rtype: List[EvaluationResult]
        """
        return self.run(read_expressions(input_file))
