"""Test the command line entry point."""
from pathlib import Path

import pytest

from arithmetic_evaluator import main as cli
from arithmetic_evaluator.repl.session import ReplSession


@pytest.mark.parametrize(
    "input_name,output_name",
    [
        ("operations_short.7z", "operations_short_7z_results.txt"),
        ("ops.tar.xz", "ops_tar_xz_results.txt"),
        ("ops.txt", "ops_txt_results.txt"),
        ("ops", "ops_results.txt"),
    ],
)
def test_build_output_path(input_name: str, output_name: str) -> None:
    """The output file lives beside the input, named after it."""
    assert cli.build_output_path(Path("resources") / input_name) == Path("resources") / output_name


def test_parse_args_defaults() -> None:
    """No arguments means an interactive session."""
    args = cli.parse_args([])
    assert args.file_path is None
    assert args.expression is None
    assert args.log_level == "WARNING"


def test_parse_args_normalizes_log_level() -> None:
    """Log levels are case-insensitive."""
    assert cli.parse_args(["-e", "1", "--log-level", "debug"]).log_level == "DEBUG"


@pytest.mark.parametrize(
    "argv",
    [
        ["missing_file.txt"],
        ["-e", "1", "--log-level", "chatty"],
        ["-e", "1", "--workers", "0"],
    ],
)
def test_parse_args_invalid(argv, tmp_path: Path, monkeypatch) -> None:
    """Invalid arguments exit through argparse."""
    monkeypatch.chdir(tmp_path)
    with pytest.raises(SystemExit):
        cli.parse_args(argv)


def test_parse_args_file_and_expression_exclusive(tmp_path: Path) -> None:
    """A file and an expression cannot be combined."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1\n")
    with pytest.raises(SystemExit):
        cli.parse_args([str(input_file), "-e", "1"])


def test_main_expression(capsys) -> None:
    """A single valid expression prints its value and exits with 0."""
    assert cli.main(["-e", "(2+3)*4"]) == 0
    assert capsys.readouterr().out.strip() == "20"


def test_main_expression_error(capsys) -> None:
    """A single invalid expression prints the error and exits with 1."""
    assert cli.main(["-e", "2 & 3"]) == 1
    err = capsys.readouterr().err
    assert "unexpected character '&'" in err
    assert "^" in err


def test_main_batch(tmp_path: Path, capsys) -> None:
    """Batch mode writes results next to the input and reports failures in the exit code."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1 + 1\n2 * 3\n")
    assert cli.main([str(input_file), "--workers", "2"]) == 0

    output_file = tmp_path / "ops_txt_results.txt"
    assert sorted(output_file.read_text().splitlines()) == ["1 + 1 = 2", "2 * 3 = 6"]
    assert "2 expressions evaluated, 0 failed" in capsys.readouterr().out


def test_main_batch_with_failures(tmp_path: Path) -> None:
    """Any failed expression makes batch mode exit with 1."""
    input_file = tmp_path / "ops.txt"
    input_file.write_text("1 / 0\n")
    output_file = tmp_path / "out.txt"
    assert cli.main([str(input_file), "-o", str(output_file), "-w", "1"]) == 1
    assert output_file.read_text() == "1 / 0 -> ERROR: DivisionByZero: division by zero\n"


def test_main_batch_unsupported_file(tmp_path: Path) -> None:
    """An unreadable input file exits with 2."""
    input_file = tmp_path / "ops.rar"
    input_file.write_text("1 + 1\n")
    assert cli.main([str(input_file)]) == 2


@pytest.mark.parametrize("name", ["ops.zip", "ops.7z", "ops.tar.xz"])
def test_main_batch_corrupt_archive(tmp_path: Path, name: str) -> None:
    """A corrupt archive exits with 2 instead of a traceback."""
    input_file = tmp_path / name
    input_file.write_bytes(b"not an archive")
    assert cli.main([str(input_file)]) == 2
    assert not (tmp_path / cli.build_output_path(input_file).name).exists()


def test_main_interactive(monkeypatch) -> None:
    """Without arguments an interactive session is started."""
    started = []
    monkeypatch.setattr(ReplSession, "run", lambda self: started.append(self))
    assert cli.main([]) == 0
    assert len(started) == 1
