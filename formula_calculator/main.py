"""
Command-line entry point.

This script either:
- Evaluates a single formula given as argument and prints the result
- Evaluates every line of a formula file and writes the results next to it

Variables are bound with repeated ``--var NAME=VALUE`` options.
"""

import argparse
from decimal import Decimal, InvalidOperation
import logging
from pathlib import Path
import sys
from typing import Dict, List, Optional

from pydantic import BaseModel, FilePath, ValidationError, model_validator

from formula_calculator.common.logger import configure_logging, logger
from formula_calculator.common.models import FormulaRequest, FormulaResult
from formula_calculator.runner import FormulaRunner


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    formula : str, optional
        Formula to evaluate.
    file_path : FilePath, optional
        Path to a file containing one formula per line.
    variables : dict[str, Decimal]
        Variable bindings shared by every formula.
    verbose : bool
        Enable debug logging.
    """

    formula: Optional[str] = None
    file_path: Optional[FilePath] = None
    variables: Dict[str, Decimal] = {}
    verbose: bool = False

    @model_validator(mode="after")
    def exactly_one_source(self) -> "CliArgs":
        """Ensure that either a formula or a file is given, not both."""
        if (self.formula is None) == (self.file_path is None):
            raise ValueError("Give either a formula or --file, not both")
        return self


def parse_variable(binding: str) -> tuple[str, Decimal]:
    """
    Split a ``NAME=VALUE`` binding.

    :param str binding: Binding as given on the command line

    :return: Name and decimal value
    :rtype: tuple[str, Decimal]
    :raises argparse.ArgumentTypeError: If the binding is malformed
    """
    name, sep, value = binding.partition("=")
    if not sep or not name.strip():
        raise argparse.ArgumentTypeError(f"Expected NAME=VALUE, got {binding!r}")
    try:
        return name.strip(), Decimal(value.strip())
    except InvalidOperation as exc:
        raise argparse.ArgumentTypeError(f"Not a decimal value: {value!r}") from exc


def parse_args(argv: Optional[List[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments, defaults to ``sys.argv[1:]``
    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Evaluate arithmetic formulas with exact decimals")

    parser.add_argument("formula", nargs="?", help="Formula to evaluate")
    parser.add_argument("--file", dest="file_path", help="Path to a file with one formula per line")
    parser.add_argument(
        "--var",
        dest="variables",
        action="append",
        default=[],
        type=parse_variable,
        metavar="NAME=VALUE",
        help="Bind a variable (repeatable)",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging")

    args = parser.parse_args(argv)

    try:
        return CliArgs(
            formula=args.formula,
            file_path=args.file_path,
            variables=dict(args.variables),
            verbose=args.verbose,
        )
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results path for a formula file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: resources/formulas.txt
    output: resources/formulas_txt_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffix_safe = "_".join(input_path.suffixes).replace(".", "_")
    return input_path.with_name(f"{input_path.stem}{suffix_safe}_results.txt")


def evaluate_file(input_path: Path, output_path: Path, variables: Dict[str, Decimal]) -> int:
    """
    Evaluate every non-blank line of a formula file.

    Each line produces ``<formula> = <result>`` or ``<formula> -> ERROR: <message>``.

    :param Path input_path: File with one formula per line
    :param Path output_path: File the results are written to
    :param dict variables: Variable bindings shared by every formula

    :return: Number of formulas that failed
    :rtype: int
    """
    lines = [line.strip() for line in input_path.read_text(encoding="utf-8").splitlines()]
    failures = 0
    with output_path.open("w", encoding="utf-8") as f_out:
        for line_number, formula in enumerate(lines, start=1):
            if not formula:
                continue
            payload = FormulaRunner(formula=formula, line_number=line_number, variables=variables).run()
            if "result" in payload:
                f_out.write(f"{payload['formula']} = {payload['result']}\n")
            else:
                failures += 1
                f_out.write(f"{payload['formula']} -> ERROR: {payload['error']}\n")
            f_out.flush()
    logger.info(f"📄✅ Results written to {output_path} ({failures} failed)")
    return failures


def evaluate_formula(request: FormulaRequest) -> FormulaResult:
    """
    Evaluate one formula request.

    :param FormulaRequest request: Formula and bindings

    :return: Evaluated result
    :rtype: FormulaResult
    :raises ValueError: If the formula could not be evaluated
    """
    payload = FormulaRunner(formula=request.formula, variables=request.variables).run()
    if "error" in payload:
        raise ValueError(payload["error"])
    return FormulaResult(formula=request.formula, result=payload["result"])


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main function of the command-line tool.

    :return: Process exit status
    :rtype: int
    """
    cli_args = parse_args(argv)
    configure_logging(logging.DEBUG if cli_args.verbose else logging.WARNING)

    if cli_args.file_path is not None:
        input_path = Path(cli_args.file_path)
        evaluate_file(input_path, build_output_path(input_path), cli_args.variables)
        return 0

    try:
        request = FormulaRequest(formula=cli_args.formula, variables=cli_args.variables)
        result = evaluate_formula(request)
    except (ValueError, ValidationError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        return 1
    print(result.result)
    return 0


if __name__ == "__main__":
    sys.exit(main())
