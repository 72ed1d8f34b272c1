"""FastMCP tool registrations for beattime."""

from __future__ import annotations

import logging

from fastmcp import FastMCP

from beattime.errors import BeattimeError
from beattime.model.evaluate import evaluate
from beattime.model.tempo import DEFAULT_BPM, DEFAULT_PPQ, DEFAULT_TIME_SIGNATURE, Transport
from beattime.model.time_value import materialize
from beattime.parser.expression import format_tree, parse_expression
from beattime.server.formatter import format_chain, format_result, format_seconds

logger = logging.getLogger(__name__)

REFERENCE_CARD = """\
# Time Expressions

## Literals
  4n, 8n, 16n        Note values (4n = quarter note = 1 beat)
  4t, 8t             Triplet note values (2/3 of the note)
  1m, 2m             Measures (time-signature beats each)
  96i                Ticks (beat / PPQ)
  440hz              Period of a frequency
  1:2:0              Transport position bars:beats:sixteenths
  0.5, 2s            Seconds

## Operators
  * / @              Multiply, divide, quantize (bind first)
  + -                Add, subtract
  ( ... )            Grouping
  -X                 Negate
  +X                 Relative to now

## Examples
  4n+1m@8n           quarter note plus one measure expressed in eighths
  (1m+2n)*3          grouped before multiplying
  +1m                one measure from now"""


def time_eval_impl(
    expr: str,
    bpm: float = DEFAULT_BPM,
    time_sig: int = DEFAULT_TIME_SIGNATURE,
    ppq: int = DEFAULT_PPQ,
    now: float | None = None,
) -> str:
    """Evaluate *expr* at the given tempo and format the outcome."""
    try:
        transport = Transport(bpm=bpm, time_signature=time_sig, ppq=ppq)
        seconds = evaluate(materialize(parse_expression(expr)), transport, now)
    except BeattimeError as exc:
        logger.debug("time_eval failed for %r: %s", expr, exc)
        return format_result(False, str(exc), "time_help")
    return format_result(True, format_seconds(seconds))


def time_tree_impl(expr: str) -> str:
    """Show how *expr* parses and the operation chain it materializes to."""
    try:
        tree = parse_expression(expr)
        value = materialize(tree)
    except BeattimeError as exc:
        return format_result(False, str(exc), "time_help")
    return f"{format_tree(tree)}\n{format_chain(value)}"


def register_tools(mcp: FastMCP) -> None:
    """Register the beattime tools on the given MCP server."""

    @mcp.tool
    def time_eval(
        expr: str,
        bpm: float = DEFAULT_BPM,
        time_sig: int = DEFAULT_TIME_SIGNATURE,
        ppq: int = DEFAULT_PPQ,
        now: float | None = None,
    ) -> str:
        """Evaluate a time expression ('4n+1m@8n', '1:2:0', '2t*3')
        to seconds at the given tempo."""
        return time_eval_impl(expr, bpm, time_sig, ppq, now)

    @mcp.tool
    def time_tree(expr: str) -> str:
        """Show the parse tree and chained operations of a time expression."""
        return time_tree_impl(expr)

    @mcp.tool
    def time_help() -> str:
        """Returns the time expression reference card."""
        return REFERENCE_CARD
