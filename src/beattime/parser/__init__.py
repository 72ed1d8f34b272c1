"""Parser package — tokenize and parse time expressions into trees."""

from beattime.parser.expression import (
    Leaf,
    Node,
    OperatorNode,
    format_tree,
    parse,
    parse_expression,
)
from beattime.parser.tokenizer import Token, TokenGroup, TokenStream, tokenize

__all__ = [
    "format_tree",
    "parse",
    "parse_expression",
    "tokenize",
    "Leaf",
    "Node",
    "OperatorNode",
    "Token",
    "TokenGroup",
    "TokenStream",
]
