"""Abstract syntax tree of a parsed formula."""
from decimal import Decimal, DecimalException
from enum import Enum
from typing import Dict, Protocol

from pydantic import BaseModel, ConfigDict, Field

from formula_calculator.common.errors import FormulaArithmeticError, InvalidArgumentError
from formula_calculator.core import arithmetic
from formula_calculator.core.context import Context


class Associativity(Enum):
    """Grouping of repeated operators with the same precedence."""

    NONE = "none"
    LEFT = "left"
    RIGHT = "right"


class Operation(Protocol):
    """Anything the shunting-yard conversion can order by precedence."""

    @property
    def precedence(self) -> int: ...

    @property
    def associativity(self) -> Associativity: ...


# Unary functions bind tighter than every binary operator
UNARY_PRECEDENCE: int = 3


class UnaryFunction(Enum):
    """Functions of one argument, keyed by their formula letter."""

    ROUND = "n"
    CEILING = "c"
    FLOOR = "f"
    SQRT = "s"

    @classmethod
    def from_symbol(cls, symbol: str) -> "UnaryFunction":
        """Look up a function by its letter, in either case."""
        return cls(symbol.lower())

    @property
    def precedence(self) -> int:
        return UNARY_PRECEDENCE

    @property
    def associativity(self) -> Associativity:
        return Associativity.RIGHT

    def apply(self, value: Decimal) -> Decimal:
        match self:
            case UnaryFunction.ROUND:
                return arithmetic.round_half_up(value)
            case UnaryFunction.CEILING:
                return arithmetic.ceiling(value)
            case UnaryFunction.FLOOR:
                return arithmetic.floor(value)
            case UnaryFunction.SQRT:
                return arithmetic.square_root(value)


# (precedence, associativity) of each binary operator
BINARY_RULES: Dict[str, tuple[int, Associativity]] = {
    "-": (0, Associativity.LEFT),
    "+": (0, Associativity.LEFT),
    "*": (1, Associativity.LEFT),
    "/": (1, Associativity.LEFT),
    "^": (2, Associativity.LEFT),
}


class BinaryFunction(Enum):
    """Functions of two arguments, keyed by their operator symbol."""

    SUBTRACT = "-"
    ADD = "+"
    MULTIPLY = "*"
    DIVIDE = "/"
    POWER = "^"

    @property
    def precedence(self) -> int:
        return BINARY_RULES[self.value][0]

    @property
    def associativity(self) -> Associativity:
        return BINARY_RULES[self.value][1]

    def apply(self, left: Decimal, right: Decimal) -> Decimal:
        match self:
            case BinaryFunction.SUBTRACT:
                return arithmetic.subtract(left, right)
            case BinaryFunction.ADD:
                return arithmetic.add(left, right)
            case BinaryFunction.MULTIPLY:
                return arithmetic.multiply(left, right)
            case BinaryFunction.DIVIDE:
                return arithmetic.divide(left, right)
            case BinaryFunction.POWER:
                return arithmetic.power(left, right)


class Node(BaseModel):
    """
    Base class of all tree nodes.

    Nodes are immutable once built, so one parsed tree can be evaluated any number of
    times against different contexts.
    """

    model_config = ConfigDict(frozen=True)

    def execute(self, context: Context) -> Decimal:
        """
        Evaluate this node against a variable context.

        :param Context context: Variable bindings

        :return: Value of the expression rooted at this node
        :rtype: Decimal
        :raises InvalidArgumentError: If no context is given
        :raises FormulaArithmeticError: If a numeric operation is undefined
        """
        if context is None:
            raise InvalidArgumentError("context must be a Context")
        try:
            return self._evaluate(context)
        except FormulaArithmeticError:
            raise
        except DecimalException as exc:
            raise FormulaArithmeticError(str(exc) or type(exc).__name__) from exc

    def _evaluate(self, context: Context) -> Decimal:
        raise NotImplementedError


class Literal(Node):
    """A numeric constant."""

    value: Decimal = Field(..., description="Literal value")

    def _evaluate(self, context: Context) -> Decimal:
        return self.value


class Identifier(Node):
    """A variable reference, resolved against the context."""

    name: str = Field(..., description="Variable name")

    def _evaluate(self, context: Context) -> Decimal:
        return context.get_var(self.name)


class Unary(Node):
    """A unary function applied to one operand."""

    function: UnaryFunction
    operand: Node

    @property
    def precedence(self) -> int:
        return self.function.precedence

    @property
    def associativity(self) -> Associativity:
        return self.function.associativity

    def _evaluate(self, context: Context) -> Decimal:
        return self.function.apply(self.operand._evaluate(context))


class Binary(Node):
    """A binary operator applied to a left and a right operand."""

    function: BinaryFunction
    left: Node
    right: Node

    @property
    def precedence(self) -> int:
        return self.function.precedence

    @property
    def associativity(self) -> Associativity:
        return self.function.associativity

    def _evaluate(self, context: Context) -> Decimal:
        # Right operand first
        right = self.right._evaluate(context)
        left = self.left._evaluate(context)
        return self.function.apply(left, right)
