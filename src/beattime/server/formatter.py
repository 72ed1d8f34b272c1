"""Compact response formatting for the time tools."""

from __future__ import annotations

from beattime.model.time_value import TimeValue
from beattime.model.units import Operator


def format_result(
    success: bool,
    message: str,
    suggestion: str | None = None,
) -> str:
    """Format a result line.

    Success: ``= message``
    Error:   ``! message`` with optional ``  try: suggestion``
    """
    if success:
        return f"= {message}"
    line = f"! {message}"
    if suggestion:
        line += f"\n  try: {suggestion}"
    return line


def format_seconds(seconds: float) -> str:
    """Seconds with up to 6 decimals, trailing zeros dropped."""
    text = f"{seconds:.6f}".rstrip("0").rstrip(".")
    if text in ("-0", ""):
        text = "0"
    return f"{text}s"


def format_chain(value: TimeValue) -> str:
    """List the base literal and each chained operation on its own line."""
    lines = [f"base: {value.magnitude!r} {value.unit.name.lower()}"]
    for idx, op in enumerate(value.operations, 1):
        if op.operator is Operator.NOW:
            lines.append(f"  {idx}. now")
        else:
            lines.append(f"  {idx}. {op.operator.name.lower()} {op.operand}")
    return "\n".join(lines)
