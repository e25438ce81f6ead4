"""Parse formulas into evaluable syntax trees."""
from decimal import Decimal
from typing import List, Optional, Union

from pydantic import BaseModel, ConfigDict

from formula_calculator.common.errors import InvalidArgumentError, ParseError
from formula_calculator.common.logger import logger
from formula_calculator.core.nodes import (
    Associativity,
    Binary,
    BinaryFunction,
    Identifier,
    Literal,
    Node,
    Operation,
    Unary,
    UnaryFunction,
)
from formula_calculator.core.scanner import Token, TokenKind, tokenize


class PendingOperation(BaseModel):
    """An operator waiting on the operator stack or in the output queue."""

    model_config = ConfigDict(frozen=True)

    function: Union[UnaryFunction, BinaryFunction]
    position: int

    @property
    def precedence(self) -> int:
        return self.function.precedence

    @property
    def associativity(self) -> Associativity:
        return self.function.associativity

    @property
    def arity(self) -> int:
        return 1 if isinstance(self.function, UnaryFunction) else 2


class ParenOpen(BaseModel):
    """Scope boundary pushed on the operator stack for an opening parenthesis."""

    model_config = ConfigDict(frozen=True)

    position: int


StackEntry = Union[PendingOperation, ParenOpen]
QueueEntry = Union[Node, PendingOperation]


class FormulaParser:
    """
    Parse formulas into syntax trees.

    Algorithm:
        1. Scan the formula into tokens
        2. Reorder tokens into postfix order using Shunting-yard
        3. Reduce the postfix queue into a single tree with a stack

    Precedence, lowest to highest: ``+ -``, ``* /``, ``^``, then the unary functions
    ``n`` (round), ``c`` (ceiling), ``f`` (floor) and ``s`` (square root).
    Binary operators are left-associative, unary functions right-associative.

    Examples:
        - Formula: 3 + 4 * 2
        - Postfix queue: 3 4 2 * +
    """

    @staticmethod
    def tokenize(formula: str) -> List[Token]:
        """
        Split a formula into significant tokens.

        :param str formula: Formula text

        :return: List of tokens
        :rtype: List[Token]
        :raises LexicalError: If the formula contains an unrecognized character
        """
        return tokenize(formula)

    @staticmethod
    def _binary_function(token: Token) -> BinaryFunction:
        try:
            return BinaryFunction(token.text)
        except ValueError as exc:
            raise ParseError(f"Operator {token.text!r} has no function", token.position) from exc

    @staticmethod
    def _drain_for(operation: Operation, stack: List[StackEntry], output: List[QueueEntry]) -> None:
        """
        Move pending operators that must apply before ``operation`` to the output queue.

        A pending operator moves when it binds tighter, or equally tight and left-associative.
        Draining stops at the innermost open parenthesis.
        """
        while stack and isinstance(stack[-1], PendingOperation):
            prior = stack[-1]
            if prior.precedence > operation.precedence or (
                prior.precedence == operation.precedence and prior.associativity is Associativity.LEFT
            ):
                output.append(stack.pop())
            else:
                break

    @staticmethod
    def _drain_scope(stack: List[StackEntry], output: List[QueueEntry]) -> None:
        """Move every pending operator up to the innermost open parenthesis to the output queue."""
        while stack and isinstance(stack[-1], PendingOperation):
            output.append(stack.pop())

    @staticmethod
    def to_rpn(tokens: List[Token]) -> List[QueueEntry]:
        """
        Convert tokens into postfix order using the Shunting-yard algorithm.

        Operands become leaf nodes; operators stay pending until the tree is built.

        :param List[Token] tokens: Tokens in formula order

        :return: Leaf nodes and pending operators in postfix order
        :rtype: List[QueueEntry]
        :raises ParseError: On unbalanced parentheses or an unbound operator
        """
        output: List[QueueEntry] = []
        stack: List[StackEntry] = []

        for token in tokens:
            if token.kind is TokenKind.NUMBER:
                output.append(Literal(value=Decimal(token.text)))
            elif token.kind is TokenKind.IDENTIFIER:
                output.append(Identifier(name=token.text))
            elif token.kind in (TokenKind.UNARY_OPERATOR, TokenKind.BINARY_OPERATOR):
                if token.kind is TokenKind.UNARY_OPERATOR:
                    function = UnaryFunction.from_symbol(token.text)
                else:
                    function = FormulaParser._binary_function(token)
                operation = PendingOperation(function=function, position=token.position)
                FormulaParser._drain_for(operation, stack, output)
                stack.append(operation)
            elif token.kind is TokenKind.OPEN_PAREN:
                stack.append(ParenOpen(position=token.position))
            elif token.kind is TokenKind.CLOSE_PAREN:
                FormulaParser._drain_scope(stack, output)
                if not stack:
                    raise ParseError("Unmatched ')'", token.position)
                stack.pop()
            else:
                raise ParseError(f"Unexpected token {token.text!r}", token.position)

        FormulaParser._drain_scope(stack, output)
        if stack:
            raise ParseError("Unclosed '('", stack[-1].position)
        return output

    @staticmethod
    def build_tree(queue: List[QueueEntry]) -> Node:
        """
        Reduce a postfix queue into a single tree.

        :param List[QueueEntry] queue: Output of ``to_rpn``

        :return: Root node
        :rtype: Node
        :raises ParseError: If an operator lacks operands or operands are left over
        """
        nodes: List[Node] = []
        for entry in queue:
            if not isinstance(entry, PendingOperation):
                nodes.append(entry)
                continue

            if len(nodes) < entry.arity:
                raise ParseError(
                    f"Operator {entry.function.value!r} is missing an operand", entry.position
                )
            if isinstance(entry.function, UnaryFunction):
                nodes.append(Unary(function=entry.function, operand=nodes.pop()))
            else:
                # Right operand was pushed last
                right = nodes.pop()
                left = nodes.pop()
                nodes.append(Binary(function=entry.function, left=left, right=right))

        if not nodes:
            raise ParseError("Formula has no operands")
        if len(nodes) > 1:
            raise ParseError(f"Missing operator between {len(nodes)} operands")
        return nodes[0]

    @staticmethod
    def parse(formula: Optional[str]) -> Node:
        """
        Parse a formula into a syntax tree.

        :param str formula: Formula text

        :return: Root node of the formula
        :rtype: Node
        :raises InvalidArgumentError: If formula is None
        :raises LexicalError: If the formula contains an unrecognized character
        :raises ParseError: If the formula is empty or malformed
        """
        if formula is None:
            raise InvalidArgumentError("formula must be a string")

        tokens = FormulaParser.tokenize(formula)
        if not tokens:
            raise ParseError("Empty formula")
        logger.debug("Tokens of %r: %s", formula, [token.text for token in tokens])

        queue = FormulaParser.to_rpn(tokens)
        logger.debug(
            "Postfix queue of %r: %s",
            formula,
            [entry.function.value if isinstance(entry, PendingOperation) else entry for entry in queue],
        )
        tree = FormulaParser.build_tree(queue)
        logger.debug("Tree of %r: %r", formula, tree)
        return tree


def parse(formula: str) -> Node:
    """Parse a formula into a syntax tree; see ``FormulaParser.parse``."""
    return FormulaParser.parse(formula)
