"""Variable bindings a formula is evaluated against."""
from decimal import Decimal, InvalidOperation
from typing import Any

from pydantic import BaseModel, Field

from formula_calculator.common.errors import InvalidArgumentError


class Context(BaseModel):
    """
    Map of variable names to decimal values.

    Looking up a name that was never bound yields zero, so formulas may refer to
    optional variables.
    """

    variables: dict[str, Decimal] = Field(default_factory=dict, description="Bound variables")

    def put_var(self, name: str, value: Any) -> Decimal:
        """
        Bind a variable, replacing any previous value.

        :param str name: Variable name
        :param Decimal value: Value to bind; ints and numeric strings are converted

        :return: The stored value
        :rtype: Decimal
        :raises InvalidArgumentError: If name or value is missing, or value is a float,
            not numeric or not finite
        """
        if name is None:
            raise InvalidArgumentError("name must be a string")
        if value is None:
            raise InvalidArgumentError(f"value for {name!r} must be a decimal")
        if isinstance(value, float):
            raise InvalidArgumentError(f"value for {name!r} must be a decimal, not a float: {value!r}")
        if not isinstance(value, Decimal):
            try:
                value = Decimal(value)
            except (InvalidOperation, TypeError, ValueError) as exc:
                raise InvalidArgumentError(f"value for {name!r} is not a number: {value!r}") from exc
        if not value.is_finite():
            raise InvalidArgumentError(f"value for {name!r} must be finite: {value!r}")
        self.variables[name] = value
        return value

    def get_var(self, name: str) -> Decimal:
        """
        Resolve a variable.

        :param str name: Variable name

        :return: Bound value, or zero if the name is unbound
        :rtype: Decimal
        """
        value = self.variables.get(name)
        return Decimal(0) if value is None else value
