"""Test class Context."""
from decimal import Decimal

import pytest

from formula_calculator.common.errors import InvalidArgumentError
from formula_calculator.core.context import Context


def test_put_var_returns_stored_value():
    """put_var returns the value it stored."""
    context = Context()
    value = Decimal("1.5")
    assert context.put_var("x", value) is value
    assert context.get_var("x") == value


def test_put_var_replaces_previous_value():
    """Keys are unique; rebinding replaces the value."""
    context = Context()
    context.put_var("x", Decimal(1))
    context.put_var("x", Decimal(2))
    assert context.get_var("x") == Decimal(2)
    assert len(context.variables) == 1


def test_get_var_unbound_is_zero():
    """Unbound names resolve to zero."""
    assert Context().get_var("missing") == Decimal(0)


@pytest.mark.parametrize("value,expected", [(3, Decimal(3)), ("2.75", Decimal("2.75"))])
def test_put_var_converts_numbers(value, expected):
    """Integers and numeric strings are stored as decimals."""
    context = Context()
    assert context.put_var("x", value) == expected
    assert isinstance(context.get_var("x"), Decimal)


@pytest.mark.parametrize("name,value", [
    (None, Decimal(1)),
    ("x", None),
    ("x", "not a number"),
    ("x", Decimal("NaN")),
    ("x", Decimal("-Infinity")),
    ("x", "Infinity"),
    ("x", 1.1),
])
def test_put_var_invalid_arguments(name, value):
    """Missing names and missing, non-numeric, non-finite or float values are rejected."""
    with pytest.raises(InvalidArgumentError):
        Context().put_var(name, value)


def test_context_from_mapping():
    """A context can be built directly from a mapping."""
    context = Context(variables={"rate": "0.05"})
    assert context.get_var("rate") == Decimal("0.05")


def test_rejected_value_is_not_stored():
    """A failed binding leaves the context unchanged."""
    context = Context()
    with pytest.raises(InvalidArgumentError):
        context.put_var("x", Decimal("NaN"))
    assert context.variables == {}
    assert context.get_var("x") == Decimal(0)
