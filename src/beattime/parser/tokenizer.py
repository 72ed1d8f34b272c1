"""Regex tokenizer for time expressions.

Splits an expression such as ``"4n + 1m @ 8n"`` into typed tokens. Token
patterns are tried in a fixed priority order (values, glue, binary
operators, unary operators) and the first one matching a prefix of the
remaining text wins.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from enum import Enum

from beattime.errors import TimeSyntaxError
from beattime.model.units import Operator, Unit


class TokenGroup(Enum):
    VALUE = "value"
    GLUE = "glue"
    BINARY = "binary"
    UNARY = "unary"


@dataclass(frozen=True)
class Token:
    """One lexical token.

    ``name`` is a :class:`Unit` for values, an :class:`Operator` for
    operators and None for glue. ``text`` is the matched source text.
    """

    group: TokenGroup
    name: Unit | Operator | None
    text: str
    precedence: int | None = None

    def is_glue(self, text: str) -> bool:
        return self.group is TokenGroup.GLUE and self.text == text


# (group, name, pattern) in match priority order.
_PATTERNS: list[tuple[TokenGroup, Unit | Operator | None, re.Pattern[str]]] = [
    # values
    (TokenGroup.VALUE, Unit.DUPLET, re.compile(r"\d+n", re.I)),
    (TokenGroup.VALUE, Unit.TRIPLET, re.compile(r"\d+t", re.I)),
    (TokenGroup.VALUE, Unit.MEASURE, re.compile(r"\d+m", re.I)),
    (TokenGroup.VALUE, Unit.TICK, re.compile(r"\d+i", re.I)),
    (TokenGroup.VALUE, Unit.HERTZ, re.compile(r"\d+hz", re.I)),
    (
        TokenGroup.VALUE,
        Unit.TRANSPORT_TIME,
        re.compile(r"(\d+(\.\d+)?:){1,2}(\d+(\.\d+)?)?"),
    ),
    (
        TokenGroup.VALUE,
        Unit.SECONDS,
        re.compile(r"\d+(\.\d+)?(s(?![a-z0-9.])|(?![a-z0-9.]))", re.I),
    ),
    # syntactic glue
    (TokenGroup.GLUE, None, re.compile(r"\(")),
    (TokenGroup.GLUE, None, re.compile(r"\)")),
    (TokenGroup.GLUE, None, re.compile(r",")),
    # binary operators
    (TokenGroup.BINARY, Operator.ADD, re.compile(r"\+")),
    (TokenGroup.BINARY, Operator.SUBTRACT, re.compile(r"-")),
    (TokenGroup.BINARY, Operator.MULTIPLY, re.compile(r"\*")),
    (TokenGroup.BINARY, Operator.DIVIDE, re.compile(r"/")),
    (TokenGroup.BINARY, Operator.QUANTIZE, re.compile(r"@")),
    # unary operators
    (TokenGroup.UNARY, Operator.NEGATE, re.compile(r"-")),
    (TokenGroup.UNARY, Operator.NOW, re.compile(r"\+")),
]


def _ends_operand(token: Token | None) -> bool:
    """True if *token* completes an operand, so a binary operator may follow."""
    if token is None:
        return False
    return token.group is TokenGroup.VALUE or token.is_glue(")")


def _next_token(remainder: str, previous: Token | None) -> Token:
    binary_allowed = _ends_operand(previous)
    for group, name, pattern in _PATTERNS:
        if group is TokenGroup.BINARY and not binary_allowed:
            continue
        m = pattern.match(remainder)
        if m:
            precedence = name.precedence if group is TokenGroup.BINARY else None
            return Token(group=group, name=name, text=m.group(0), precedence=precedence)
    raise TimeSyntaxError(f"Unexpected token {remainder}")


def tokenize(expr: str) -> list[Token]:
    """Split *expr* into a list of :class:`Token`.

    Whitespace between tokens is discarded.

    Raises
    ------
    TimeSyntaxError
        If the expression is empty or a position matches no token pattern.

    Examples
    --------
    >>> [t.text for t in tokenize("4n + 1m@8n")]
    ['4n', '+', '1m', '@', '8n']
    """
    remainder = expr.strip()
    if not remainder:
        raise TimeSyntaxError("Empty time expression")

    tokens: list[Token] = []
    while remainder:
        token = _next_token(remainder, tokens[-1] if tokens else None)
        tokens.append(token)
        remainder = remainder[len(token.text):].lstrip()
    return tokens


def literal_value(token: Token) -> int | float | tuple[float, float, float]:
    """Return the numeric magnitude carried by a value token.

    Note counts, ticks, measures and hertz are integers. Seconds are
    integers when integral. Transport positions split on ``:`` into a
    ``(bars, beats, sixteenths)`` triple of floats, padded with zeros.
    """
    text = token.text
    if token.name is Unit.TRANSPORT_TIME:
        parts = [float(p) if p else 0.0 for p in text.split(":")]
        parts += [0.0] * (3 - len(parts))
        return (parts[0], parts[1], parts[2])
    if token.name is Unit.SECONDS:
        number = text.rstrip("sS")
        return float(number) if "." in number else int(number)
    if token.name is Unit.HERTZ:
        return int(text[:-2])
    return int(text[:-1])


class TokenStream:
    """Cursor over a token list with one token of look-ahead."""

    def __init__(self, tokens: list[Token]) -> None:
        self._tokens = tokens
        self._position = -1

    def peek(self) -> Token | None:
        """Return the next token without consuming it, or None at the end."""
        index = self._position + 1
        return self._tokens[index] if index < len(self._tokens) else None

    def next(self) -> Token | None:
        """Consume and return the next token, or None at the end."""
        token = self.peek()
        if token is not None:
            self._position += 1
        return token

    def at_end(self) -> bool:
        return self.peek() is None
