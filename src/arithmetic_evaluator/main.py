"""
Command line entry point.

This script either:
- starts an interactive session (no arguments)
- evaluates a single expression given with ``--expression``
- evaluates every line of a text file or archive given as argument
"""

import argparse
import logging
from pathlib import Path
import sys
from typing import List, Optional

from pydantic import BaseModel, Field, FilePath, ValidationError, field_validator, model_validator
from rich.console import Console

from arithmetic_evaluator.batch.runner import BatchRunner
from arithmetic_evaluator.common.calculator import Calculator
from arithmetic_evaluator.common.formatting import format_error, format_number
from arithmetic_evaluator.common.logger import logger, set_level
from arithmetic_evaluator.repl.session import ReplSession


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : Optional[FilePath]
        Path to the file containing arithmetic expressions, one per line.
    expression : Optional[str]
        Single expression to evaluate.
    output : Optional[Path]
        Where batch results are written.
    workers : Optional[int]
        Maximum number of simultaneous worker processes in batch mode.
    log_level : str
        Verbosity of the logger.
    """

    file_path: Optional[FilePath] = None
    expression: Optional[str] = None
    output: Optional[Path] = None
    workers: Optional[int] = Field(default=None, ge=1)
    log_level: str = "WARNING"

    @field_validator("log_level")
    def log_level_must_exist(cls, v: str) -> str:
        """Ensure the log level is one the logging module knows."""
        if not isinstance(logging.getLevelName(v.upper()), int):
            raise ValueError(f"Unknown log level: {v}")
        return v.upper()

    @model_validator(mode="after")
    def file_or_expression(self) -> "CliArgs":
        """Ensure at most one input source is given."""
        if self.file_path is not None and self.expression is not None:
            raise ValueError("Give either a file or --expression, not both")
        return self


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments without the program name, defaults to ``sys.argv[1:]``

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(
        prog="arithmetic-evaluator",
        description="Evaluate arithmetic expressions interactively or from a file",
    )
    parser.add_argument(
        "file_path",
        nargs="?",
        help="Text file (.txt) or archive (.zip, .tar.xz, .7z) with one expression per line",
    )
    parser.add_argument("-e", "--expression", help="Evaluate a single expression and exit")
    parser.add_argument("-o", "--output", help="Where to write batch results")
    parser.add_argument("-w", "--workers", type=int, help="Maximum number of worker processes")
    parser.add_argument("--log-level", default="WARNING", help="Logging level (DEBUG, INFO, WARNING, ...)")

    args = parser.parse_args(argv)

    try:
        return CliArgs(
            file_path=args.file_path,
            expression=args.expression,
            output=args.output,
            workers=args.workers,
            log_level=args.log_level,
        )
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct the output file path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/operations_short.7z
    output: resources/operations_short_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    # Path.stem only strips the last suffix, so strip them all before rebuilding
    base_name = input_path.name[: len(input_path.name) - len("".join(input_path.suffixes))]
    suffix_safe = "".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{base_name}{suffix_safe}_results.txt")


def evaluate_once(expression: str, console: Console, error_console: Console) -> int:
    """
    Evaluate one expression and print its value or error.

    :return: Process exit code, 0 on success and 1 on error
    """
    outcome = Calculator.run(expression)
    if outcome.ok:
        console.print(format_number(outcome.result), highlight=False)
        return 0
    error_console.print(format_error(outcome.error, expression))
    return 1


def run_batch(cli_args: CliArgs, console: Console) -> int:
    """
    Evaluate every expression of the input file.

    :return: Process exit code, 0 when every expression succeeded and 1 otherwise
    """
    input_path = Path(cli_args.file_path)
    output_path = cli_args.output or build_output_path(input_path)
    runner_options = {"output_file": output_path}
    if cli_args.workers is not None:
        runner_options["max_workers"] = cli_args.workers

    try:
        results = BatchRunner(**runner_options).run_file(input_path)
    except (ValueError, OSError) as exc:
        logger.error(f"❌ Could not read {input_path}: {exc}")
        return 2

    failures = sum(1 for result in results if not result.ok)
    console.print(
        f"{len(results)} expressions evaluated, {failures} failed, results in {output_path}",
        highlight=False,
        markup=False,
        soft_wrap=True,
    )
    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function executed by the ``arithmetic-evaluator`` command.

    :return: Process exit code
    """
    cli_args = parse_args(argv)
    set_level(cli_args.log_level)

    console = Console()
    if cli_args.expression is not None:
        return evaluate_once(cli_args.expression, console, Console(stderr=True))
    if cli_args.file_path is not None:
        return run_batch(cli_args, console)

    ReplSession(console=console).run()
    return 0


if __name__ == "__main__":
    sys.exit(main())
