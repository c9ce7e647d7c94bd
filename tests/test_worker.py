"""Unit tests for WorkerProcess using real Pipe connections."""
from multiprocessing import Pipe

from pydantic import ValidationError
import pytest

from arithmetic_evaluator.batch.worker import WorkerProcess


@pytest.mark.parametrize(
    "expr,expected",
    [
        ("2 + 3", 5.0),
        ("10 - 4", 6.0),
        ("3 * 4", 12.0),
        ("8 / 2", 4.0),
        ("(1 + 2) * -3", -9.0),
    ],
)
def test_worker_sends_result_for_valid_expression(expr: str, expected: float) -> None:
    """Worker sends computed result through the connection for valid expressions."""
    parent_conn, child_conn = Pipe()
    worker = WorkerProcess(conn=child_conn, expression=expr, line_number=1)
    worker.run()

    msg = parent_conn.recv()
    assert msg["line"] == 1
    assert msg["expression"] == expr
    assert msg["result"] == expected
    assert "error" not in msg


@pytest.mark.parametrize(
    "expr,kind",
    [
        ("2 +", "UnexpectedToken"),
        ("+ 3 4", "UnexpectedToken"),
        ("3 4 + 5", "TrailingTokens"),
        ("1 / 0", "DivisionByZero"),
        ("2 ^ 3", "UnexpectedCharacter"),
    ],
)
def test_worker_sends_error_for_invalid_expression(expr: str, kind: str) -> None:
    """Worker sends an error report for malformed arithmetic expressions."""
    parent_conn, child_conn = Pipe()
    worker = WorkerProcess(conn=child_conn, expression=expr, line_number=2)
    worker.run()

    msg = parent_conn.recv()
    assert msg["line"] == 2
    assert msg["expression"] == expr
    assert "result" not in msg
    assert msg["error"]["kind"] == kind
    assert isinstance(msg["error"]["message"], str)
    assert set(msg["error"]["span"]) == {"start", "end"}


def test_worker_closes_connection() -> None:
    """The worker's end of the pipe is closed after sending."""
    parent_conn, child_conn = Pipe()
    WorkerProcess(conn=child_conn, expression="1", line_number=1).run()

    parent_conn.recv()
    assert child_conn.closed
    with pytest.raises(EOFError):
        parent_conn.recv()


def test_worker_rejects_invalid_line_number() -> None:
    """Pydantic validation prevents creating WorkerProcess with a line number below 1."""
    _, child_conn = Pipe()
    with pytest.raises(ValidationError):
        WorkerProcess(conn=child_conn, expression="1", line_number=0)
