"""Test classes FormulaRequest and FormulaResult."""
from decimal import Decimal

from pydantic import ValidationError
import pytest

from formula_calculator.common.models import FormulaRequest, FormulaResult


def test_formula_request_valid() -> None:
    """Test that a valid FormulaRequest can be created."""
    req = FormulaRequest(formula="2 + x", variables={"x": "1.5"})
    assert req.formula == "2 + x"
    assert req.variables == {"x": Decimal("1.5")}


def test_formula_request_defaults_to_no_variables() -> None:
    """Variables are optional."""
    assert FormulaRequest(formula="1").variables == {}


def test_formula_request_invalid_type() -> None:
    """Test that non-string formulas raise a validation error."""
    with pytest.raises(ValidationError):
        FormulaRequest(formula=123)


def test_formula_request_invalid_variable() -> None:
    """Variable values must be numeric."""
    with pytest.raises(ValidationError):
        FormulaRequest(formula="x", variables={"x": "abc"})


def test_formula_result_valid() -> None:
    """Test that a valid FormulaResult can be created."""
    res = FormulaResult(formula="1 / 4", result=Decimal("0.25"))
    assert res.result == Decimal("0.25")
    assert isinstance(res.result, Decimal)


def test_formula_result_invalid_result_type() -> None:
    """Test that invalid result type raises a validation error."""
    with pytest.raises(ValidationError):
        FormulaResult(formula="2 + 2", result="not a number")
