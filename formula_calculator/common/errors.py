"""Error types raised while scanning, parsing and evaluating formulas."""
from typing import Optional


class FormulaError(Exception):
    """
    Base class for all formula errors.

    :ivar position: Offset in the formula where the error was detected, if known
    """

    def __init__(self, message: str, position: Optional[int] = None) -> None:
        self.position = position
        if position is not None:
            message = f"{message} (at position {position})"
        super().__init__(message)


class InvalidArgumentError(FormulaError, ValueError):
    """A required argument of a public call is missing."""


class LexicalError(FormulaError):
    """The formula contains a character no token can start with."""

    def __init__(self, character: str, position: int, message: Optional[str] = None) -> None:
        self.character = character
        super().__init__(message or f"Unexpected character {character!r}", position)


class ParseError(FormulaError):
    """The token sequence does not form a valid expression."""


class FormulaArithmeticError(FormulaError, ArithmeticError):
    """Evaluation failed because of a numeric domain violation."""
