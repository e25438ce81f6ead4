"""Split formula text into tokens."""
from enum import Enum
import re
from typing import Iterator, List, Optional, Pattern, Tuple

from pydantic import BaseModel, ConfigDict, Field

from formula_calculator.common.errors import LexicalError


class TokenKind(Enum):
    """Kinds of token the scanner recognizes."""

    COMMENT = "comment"
    NUMBER = "number"
    UNARY_OPERATOR = "unary_operator"
    IDENTIFIER = "identifier"
    BINARY_OPERATOR = "binary_operator"
    OPEN_PAREN = "open_paren"
    CLOSE_PAREN = "close_paren"
    WHITESPACE = "whitespace"


class Token(BaseModel):
    """A piece of formula text tagged with its kind."""

    model_config = ConfigDict(frozen=True)

    kind: TokenKind = Field(..., description="Kind of token")
    text: str = Field(..., description="Matched formula text")
    position: int = Field(..., ge=0, description="Offset of the token in the formula")


# Kinds that never reach the parser
SKIPPED_KINDS = frozenset({TokenKind.COMMENT, TokenKind.WHITESPACE})

# Kinds after which a "+" or "-" is a binary operator rather than the sign of a number
OPERAND_KINDS = frozenset({TokenKind.NUMBER, TokenKind.IDENTIFIER, TokenKind.CLOSE_PAREN})

COMMENT: Pattern[str] = re.compile(r"/\*.*?\*/", re.DOTALL)
SIGNED_NUMBER: Pattern[str] = re.compile(r"[+-]?[0-9]+(?:\.[0-9]+)?")
NUMBER: Pattern[str] = re.compile(r"[0-9]+(?:\.[0-9]+)?")
# A function letter only counts when a non-letter follows it, so "sum" stays an identifier
UNARY: Pattern[str] = re.compile(r"[nNcCfFsS](?=[^A-Za-z])")
IDENTIFIER: Pattern[str] = re.compile(r"[_A-Za-z][_A-Za-z0-9]*")
OPERATOR: Pattern[str] = re.compile(r"[-+*/^=]")
WHITESPACE: Pattern[str] = re.compile(r"\s+")

# Scan order: the first pattern matching at the current offset wins
PATTERNS: List[Tuple[TokenKind, Pattern[str]]] = [
    (TokenKind.COMMENT, COMMENT),
    (TokenKind.NUMBER, NUMBER),
    (TokenKind.UNARY_OPERATOR, UNARY),
    (TokenKind.IDENTIFIER, IDENTIFIER),
    (TokenKind.BINARY_OPERATOR, OPERATOR),
]


def _match_at(formula: str, position: int, expect_operand: bool) -> Optional[Token]:
    """
    Match the next token starting at ``position``.

    :param str formula: Complete formula text
    :param int position: Offset to scan from
    :param bool expect_operand: Whether a sign may start a numeric literal here

    :return: The matched token, or None if nothing matches
    :rtype: Optional[Token]
    """
    char = formula[position]
    if char == "(":
        return Token(kind=TokenKind.OPEN_PAREN, text=char, position=position)
    if char == ")":
        return Token(kind=TokenKind.CLOSE_PAREN, text=char, position=position)

    for kind, pattern in PATTERNS:
        if kind is TokenKind.NUMBER and expect_operand:
            pattern = SIGNED_NUMBER
        match = pattern.match(formula, position)
        if match:
            return Token(kind=kind, text=match.group(), position=position)

    match = WHITESPACE.match(formula, position)
    if match:
        return Token(kind=TokenKind.WHITESPACE, text=match.group(), position=position)
    return None


def scan(formula: str, keep_skipped: bool = False) -> Iterator[Token]:
    """
    Yield the tokens of a formula from left to right.

    Comments and whitespace are consumed but only yielded when ``keep_skipped`` is set.

    :param str formula: Formula text
    :param bool keep_skipped: Also yield comment and whitespace tokens

    :return: Iterator over tokens
    :rtype: Iterator[Token]
    :raises LexicalError: If a character cannot start any token
    """
    position = 0
    expect_operand = True
    while position < len(formula):
        if formula.startswith("/*", position) and not COMMENT.match(formula, position):
            raise LexicalError("/*", position, "Unterminated comment")
        token = _match_at(formula, position, expect_operand)
        if token is None:
            raise LexicalError(formula[position], position)

        # Consume exactly the matched prefix
        position += len(token.text)
        if token.kind in SKIPPED_KINDS:
            if keep_skipped:
                yield token
            continue
        expect_operand = token.kind not in OPERAND_KINDS
        yield token


def tokenize(formula: str) -> List[Token]:
    """
    Return the significant tokens of a formula.

    :param str formula: Formula text

    :return: Tokens without comments and whitespace
    :rtype: List[Token]
    :raises LexicalError: If a character cannot start any token
    """
    return list(scan(formula))
