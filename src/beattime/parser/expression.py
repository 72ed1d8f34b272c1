"""Precedence-climbing parser for time expressions.

Grammar::

    expr(p)  := p < 0 ? unary : expr(p-1) ( binary[tier p] expr(p-1) )*
    unary    := unary_op unary | primary
    primary  := value | "(" expr(MAX) ")"

Tier 0 holds ``* / @`` and binds tighter than tier 1 (``+ -``). Operators
within a tier associate left to right.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Union

from beattime.errors import TimeSyntaxError
from beattime.model.units import MAX_PRECEDENCE, Operator, Unit
from beattime.parser.tokenizer import Token, TokenGroup, TokenStream, literal_value, tokenize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Leaf:
    """A literal: a unit tag and its magnitude."""

    unit: Unit
    magnitude: int | float | tuple[float, float, float]


@dataclass(frozen=True)
class OperatorNode:
    """An operator applied to one (unary) or two (binary) children."""

    operator: Operator
    args: tuple[Node, ...]

    def __post_init__(self) -> None:
        if len(self.args) != self.operator.arity:
            raise ValueError(
                f"Operator {self.operator.name} takes {self.operator.arity} "
                f"argument(s), got {len(self.args)}"
            )


Node = Union[Leaf, OperatorNode]


def parse(tokens: TokenStream | list[Token]) -> Node:
    """Parse a token sequence into an expression tree.

    Raises
    ------
    TimeSyntaxError
        On premature end of input, a missing ``)``, a token in a position
        where it is not allowed, or tokens left over after the expression.
    """
    lexer = tokens if isinstance(tokens, TokenStream) else TokenStream(tokens)
    tree = _parse_expression(lexer, MAX_PRECEDENCE)
    leftover = lexer.peek()
    if leftover is not None:
        raise TimeSyntaxError(f"Unexpected token {leftover.text} after expression")
    return tree


def parse_expression(expr: str) -> Node:
    """Tokenize and parse *expr*."""
    tree = parse(tokenize(expr))
    logger.debug("parsed %r -> %r", expr, tree)
    return tree


def _parse_expression(lexer: TokenStream, precedence: int) -> Node:
    if precedence < 0:
        return _parse_unary(lexer)

    expr = _parse_expression(lexer, precedence - 1)
    token = lexer.peek()
    while (
        token is not None
        and token.group is TokenGroup.BINARY
        and token.precedence == precedence
    ):
        lexer.next()
        right = _parse_expression(lexer, precedence - 1)
        expr = OperatorNode(operator=token.name, args=(expr, right))
        token = lexer.peek()
    return expr


def _parse_unary(lexer: TokenStream) -> Node:
    token = lexer.peek()
    if token is not None and token.group is TokenGroup.UNARY:
        lexer.next()
        return OperatorNode(operator=token.name, args=(_parse_unary(lexer),))
    return _parse_primary(lexer)


def _parse_primary(lexer: TokenStream) -> Node:
    token = lexer.peek()
    if token is None:
        raise TimeSyntaxError("Unexpected termination of expression")

    if token.group is TokenGroup.VALUE:
        lexer.next()
        return Leaf(unit=token.name, magnitude=literal_value(token))

    if token.is_glue("("):
        lexer.next()
        expr = _parse_expression(lexer, MAX_PRECEDENCE)
        closing = lexer.next()
        if closing is None or not closing.is_glue(")"):
            raise TimeSyntaxError("Expected )")
        return expr

    raise TimeSyntaxError(f"Parse error, cannot process token {token.text}")


def format_tree(node: Node) -> str:
    """Render *node* as a fully parenthesised expression.

    >>> format_tree(parse_expression("1m+2n*3n"))
    '(1m + (2n * 3n))'
    """
    if isinstance(node, Leaf):
        return format_literal(node.unit, node.magnitude)
    if node.operator is Operator.NEGATE:
        return f"-{format_tree(node.args[0])}"
    if node.operator is Operator.NOW:
        return f"+{format_tree(node.args[0])}"
    left, right = node.args
    return f"({format_tree(left)} {node.operator.value} {format_tree(right)})"


def format_literal(unit: Unit, magnitude: int | float | tuple[float, float, float]) -> str:
    """Render a literal back into grammar text (``4n``, ``1:2:0``, ``0.5s``)."""
    if unit is Unit.TRANSPORT_TIME:
        return ":".join(f"{part:g}" for part in magnitude)
    return f"{magnitude:g}{unit.value}"
