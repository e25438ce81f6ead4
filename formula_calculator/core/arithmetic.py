"""
Exact decimal arithmetic used by formula nodes.

Addition, subtraction, multiplication and integer powers never round.
Division is exact or fails, and only the square root is computed at a fixed precision.
"""
import decimal
from decimal import Decimal
from fractions import Fraction

from formula_calculator.common.errors import FormulaArithmeticError

# Significant digits of a square root, as for IEEE 754 decimal128
SQRT_PRECISION: int = 34

# Wide enough that no exact operation is ever rounded; Inexact is trapped to be sure
EXACT_CONTEXT = decimal.Context(
    prec=decimal.MAX_PREC,
    Emax=decimal.MAX_EMAX,
    Emin=decimal.MIN_EMIN,
    traps=[decimal.InvalidOperation, decimal.DivisionByZero, decimal.Overflow, decimal.Inexact],
)

SQRT_CONTEXT = decimal.Context(prec=SQRT_PRECISION, rounding=decimal.ROUND_HALF_EVEN)

ZERO = Decimal(0)
ONE = Decimal(1)


def add(left: Decimal, right: Decimal) -> Decimal:
    return EXACT_CONTEXT.add(left, right)


def subtract(left: Decimal, right: Decimal) -> Decimal:
    return EXACT_CONTEXT.subtract(left, right)


def multiply(left: Decimal, right: Decimal) -> Decimal:
    return EXACT_CONTEXT.multiply(left, right)


def _scaled(coefficient: int, exponent: int) -> Decimal:
    """Build ``coefficient * 10**exponent`` exactly, without an int-to-str conversion."""
    return Decimal(coefficient).scaleb(exponent, EXACT_CONTEXT)


def divide(left: Decimal, right: Decimal) -> Decimal:
    """
    Divide exactly.

    A quotient terminates in base ten only when its reduced denominator has no prime
    factors other than 2 and 5.

    :param Decimal left: Dividend
    :param Decimal right: Divisor

    :return: Exact quotient
    :rtype: Decimal
    :raises FormulaArithmeticError: On division by zero or a non-terminating quotient
    """
    if right == ZERO:
        raise FormulaArithmeticError("Division by zero")

    quotient = Fraction(left) / Fraction(right)
    denominator = quotient.denominator
    twos = fives = 0
    while denominator % 2 == 0:
        denominator //= 2
        twos += 1
    while denominator % 5 == 0:
        denominator //= 5
        fives += 1
    if denominator != 1:
        raise FormulaArithmeticError(
            f"Non-terminating decimal expansion dividing {left} by {right}"
        )

    scale = max(twos, fives)
    return _scaled(quotient.numerator * 10**scale // quotient.denominator, -scale)


def power(base: Decimal, exponent: Decimal) -> Decimal:
    """
    Raise ``base`` to the integer part of ``exponent``.

    The exponent is truncated toward zero. Negative exponents give the exact reciprocal.

    :param Decimal base: Base
    :param Decimal exponent: Exponent, truncated to an integer

    :return: Exact power
    :rtype: Decimal
    :raises FormulaArithmeticError: If zero is raised to a negative power or the reciprocal
        does not terminate
    """
    n = int(exponent)
    if n < 0:
        if base == ZERO:
            raise FormulaArithmeticError("Zero cannot be raised to a negative power")
        return divide(ONE, power(base, Decimal(-n)))

    # Square-and-multiply keeps every step an exact multiplication
    result = ONE
    factor = base
    while n:
        if n & 1:
            result = multiply(result, factor)
        n >>= 1
        if n:
            factor = multiply(factor, factor)
    return result


def _to_integral(value: Decimal, rounding: str) -> Decimal:
    result = value.to_integral_value(rounding=rounding)
    # No negative zero: -0.4 rounds to 0
    return result.copy_abs() if result.is_zero() else result


def round_half_up(value: Decimal) -> Decimal:
    return _to_integral(value, decimal.ROUND_HALF_UP)


def ceiling(value: Decimal) -> Decimal:
    return _to_integral(value, decimal.ROUND_CEILING)


def floor(value: Decimal) -> Decimal:
    return _to_integral(value, decimal.ROUND_FLOOR)


def square_root(value: Decimal) -> Decimal:
    """
    Square root rounded to ``SQRT_PRECISION`` significant digits.

    :raises FormulaArithmeticError: If the value is negative
    """
    if value < ZERO:
        raise FormulaArithmeticError(f"Square root of negative value {value}")
    return SQRT_CONTEXT.sqrt(value)
