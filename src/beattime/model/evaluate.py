"""Evaluate a :class:`TimeValue` to seconds against a tempo context."""

from __future__ import annotations

import logging
import math
import time

from beattime.errors import TimeArithmeticError
from beattime.model.tempo import TempoContext
from beattime.model.time_value import TimeValue
from beattime.model.units import Operator, Unit

logger = logging.getLogger(__name__)


def evaluate(
    value: TimeValue,
    context: TempoContext | None = None,
    now: float | None = None,
) -> float:
    """Return *value* in seconds.

    Parameters
    ----------
    value : TimeValue
        The value to evaluate. It is not modified.
    context : TempoContext | None
        Tempo source. With no context every tempo-relative unit is 0.
    now : float | None
        Reference time added by "now" operations. Falls back to
        ``context.now()`` when the context has one, then to a monotonic
        clock. Not passed on to chained operands.

    Raises
    ------
    TimeArithmeticError
        On division or quantization by zero, zero hertz, a zero note count,
        a literal too large for a float, or any other non-finite result.
    """
    result = _base_seconds(value, context)
    for op in value.operations:
        if op.operator is Operator.NOW:
            result += _reference_now(context, now)
            continue

        operand = evaluate(op.operand, context)
        if op.operator is Operator.ADD:
            result += operand
        elif op.operator is Operator.SUBTRACT:
            result -= operand
        elif op.operator is Operator.MULTIPLY:
            result *= operand
        elif op.operator in (Operator.DIVIDE, Operator.QUANTIZE):
            if operand == 0:
                raise TimeArithmeticError(
                    f"Cannot {op.operator.name.lower()} {value} by a zero duration"
                )
            result /= operand
        else:
            raise TimeArithmeticError(f"Unsupported chained operator {op.operator.name}")

    if not math.isfinite(result):
        raise TimeArithmeticError(f"{value} evaluates to a non-finite time ({result})")
    return float(result)


def _base_seconds(value: TimeValue, context: TempoContext | None) -> float:
    """Seconds of the value's own literal, ignoring chained operations."""
    unit = value.unit
    magnitude = _as_float(value)

    if unit is Unit.SECONDS:
        return magnitude
    if unit is Unit.HERTZ:
        if magnitude == 0:
            raise TimeArithmeticError("Cannot convert 0hz to a period")
        return 1 / magnitude

    if context is None:
        logger.warning(
            "No tempo context attached; %s evaluates to 0 seconds",
            value.unit.name.lower(),
        )
        beat = tick = numerator = 0.0
    else:
        beat = context.beat_duration()
        tick = context.tick_duration()
        numerator = context.time_signature_numerator()

    if unit is Unit.MEASURE:
        return numerator * beat * magnitude
    if unit in (Unit.DUPLET, Unit.TRIPLET):
        if magnitude == 0:
            raise TimeArithmeticError(f"Note count must be non-zero, got 0{unit.value}")
        # 1n is a whole note (4 beats), 4n a quarter note (1 beat)
        seconds = beat * 4 / magnitude
        return seconds * 2 / 3 if unit is Unit.TRIPLET else seconds
    if unit is Unit.TICK:
        return magnitude * tick
    if unit is Unit.TRANSPORT_TIME:
        bars, beats, sixteenths = magnitude
        return numerator * beat * bars + beat * beats + beat * sixteenths / 4

    raise TimeArithmeticError(f"Unsupported unit {unit.name}")


def _as_float(value: TimeValue) -> float | tuple[float, float, float]:
    try:
        if value.unit is Unit.TRANSPORT_TIME:
            bars, beats, sixteenths = value.magnitude
            return (float(bars), float(beats), float(sixteenths))
        return float(value.magnitude)
    except OverflowError as exc:
        raise TimeArithmeticError(
            f"{value.unit.name.lower()} magnitude is too large to evaluate"
        ) from exc


def _reference_now(context: TempoContext | None, now: float | None) -> float:
    """Explicit *now*, else the context clock if it has one, else monotonic time."""
    if now is not None:
        return now
    clock = getattr(context, "now", None)
    if clock is not None:
        return clock()
    return time.monotonic()
