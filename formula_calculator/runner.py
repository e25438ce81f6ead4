"""Evaluate a single formula and report its result or error."""
from decimal import Decimal
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from formula_calculator.common.errors import FormulaError
from formula_calculator.common.logger import logger
from formula_calculator.core.context import Context
from formula_calculator.core.parser import FormulaParser


class FormulaRunner(BaseModel):
    """
    Job evaluating one formula against a set of variable bindings.

    Lifecycle:
        - Built with one formula and the bindings to evaluate it against
        - Parses and evaluates the formula when run
        - Returns the result or the error as a payload dict
    """

    # Make the Pydantic instance immutable (read-only) so a job cannot change while it runs
    model_config = ConfigDict(frozen=True)

    formula: str = Field(..., description="Single formula to evaluate")
    line_number: int = Field(default=1, ge=1, description="Line number in the input file")
    variables: dict[str, Decimal] = Field(default_factory=dict, description="Variable bindings")

    @field_validator("formula")
    def formula_must_not_be_empty(cls, v: str) -> str:
        """Ensure that the formula is not empty."""
        if not v.strip():
            raise ValueError("Formula cannot be empty")
        return v

    def build_context(self) -> Context:
        """
        Create a fresh context holding this job's variable bindings.

        :return: Populated context
        :rtype: Context
        """
        context = Context()
        for name, value in self.variables.items():
            context.put_var(name, value)
        return context

    def run(self) -> Dict[str, Any]:
        """
        Parse and evaluate the formula.

        :return: Payload with ``line`` and ``formula``, plus ``result`` or ``error``
        :rtype: Dict[str, Any]
        """
        logger.info(f"🧮🏁 Evaluating line {self.line_number}: {self.formula}")

        result: Optional[Decimal] = None
        try:
            tree = FormulaParser.parse(self.formula)
            result = tree.execute(self.build_context())
        except FormulaError as exc:
            logger.error(
                f"🧮❌ Evaluation failed on line {self.line_number}: {exc}\n"
                f"Invalid formula, could not evaluate: {self.formula!r}"
            )
            return {
                "line": self.line_number,
                "formula": self.formula,
                "error": str(exc),
            }

        logger.info(f"🧮✅ Line {self.line_number} evaluated to {result}")
        return {
            "line": self.line_number,
            "formula": self.formula,
            "result": result,
        }
