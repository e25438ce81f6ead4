"""Pydantic models describing a formula evaluation job and its outcome."""
from decimal import Decimal

from pydantic import BaseModel, Field


class FormulaRequest(BaseModel):
    """A formula together with the variable bindings it is evaluated against."""

    formula: str = Field(..., description="Formula text")
    variables: dict[str, Decimal] = Field(default_factory=dict, description="Variable bindings")


class FormulaResult(BaseModel):
    """The value a formula evaluated to."""

    formula: str = Field(..., description="Original formula text")
    result: Decimal = Field(..., description="Exact decimal result of the formula")
