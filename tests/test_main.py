"""Test the command-line entry point."""
from decimal import Decimal
from pathlib import Path

import pytest

from formula_calculator import main as cli


@pytest.fixture(autouse=True)
def no_log_handlers(monkeypatch) -> None:
    """Keep the CLI from attaching handlers to the package logger during tests."""
    monkeypatch.setattr(cli, "configure_logging", lambda level: None)


def test_single_formula_prints_result(capsys) -> None:
    """A formula argument is evaluated and printed."""
    assert cli.main(["3+4*2"]) == 0
    assert capsys.readouterr().out.strip() == "11"


def test_single_formula_with_variables(capsys) -> None:
    """--var binds variables used by the formula."""
    assert cli.main(["a*b", "--var", "a=1.5", "--var", "b=4"]) == 0
    assert Decimal(capsys.readouterr().out.strip()) == Decimal(6)


def test_single_formula_error_exit_status(capsys) -> None:
    """A failing formula prints the error and exits with status 1."""
    assert cli.main(["1/3"]) == 1
    assert "error:" in capsys.readouterr().err


@pytest.mark.parametrize("argv", [[], ["1", "--file", "missing.txt"], ["1", "--var", "novalue"]])
def test_invalid_arguments_exit(argv) -> None:
    """Invalid argument combinations exit through argparse."""
    with pytest.raises(SystemExit):
        cli.main(argv)


def test_parse_variable() -> None:
    """NAME=VALUE splits into a name and a decimal."""
    assert cli.parse_variable(" rate = 0.5 ") == ("rate", Decimal("0.5"))


@pytest.mark.parametrize("input_name,output_name", [
    ("formulas.txt", "formulas_txt_results.txt"),
    ("formulas", "formulas_results.txt"),
])
def test_build_output_path(tmp_path: Path, input_name: str, output_name: str) -> None:
    """Results are written next to the input file."""
    assert cli.build_output_path(tmp_path / input_name) == tmp_path / output_name


def test_evaluate_file(tmp_path: Path) -> None:
    """Each non-blank line gets a result or an error line."""
    input_file = tmp_path / "formulas.txt"
    output_file = tmp_path / "out.txt"
    input_file.write_text("1 + 1\n\n1 / 3\nx * 2\n", encoding="utf-8")

    failures = cli.evaluate_file(input_file, output_file, {"x": Decimal("2.5")})

    lines = output_file.read_text(encoding="utf-8").splitlines()
    assert failures == 1
    assert lines[0] == "1 + 1 = 2"
    assert lines[1].startswith("1 / 3 -> ERROR: ")
    assert lines[2] == "x * 2 = 5.0"


def test_main_file_mode(tmp_path: Path) -> None:
    """--file writes the results file beside the input."""
    input_file = tmp_path / "batch.txt"
    input_file.write_text("s(9)\n", encoding="utf-8")

    assert cli.main(["--file", str(input_file)]) == 0
    assert (tmp_path / "batch_txt_results.txt").read_text(encoding="utf-8") == "s(9) = 3\n"
