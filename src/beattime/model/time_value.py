"""Time values with chained operations, and the fluent ``Time`` builder.

A :class:`TimeValue` is a unit-tagged magnitude plus an ordered tuple of
deferred operations (add, subtract, multiply, divide, quantize, now). It is
immutable: attaching an operation returns a new value, so a subtree
materialized once can never be modified through another reference.

:class:`Time` is the mutable builder used for fluent construction::

    Time("4n").add(1, "m").quantize("8n").build()
"""

from __future__ import annotations

import numbers
import re
from dataclasses import dataclass, replace

from beattime.errors import ValidationError
from beattime.model.units import Operator, Unit, resolve_unit
from beattime.parser.expression import Leaf, Node, OperatorNode, format_literal, parse_expression

Magnitude = int | float | tuple[float, float, float]


@dataclass(frozen=True)
class ChainedOperation:
    """One deferred step. ``operand`` is None only for :attr:`Operator.NOW`."""

    operator: Operator
    operand: TimeValue | None = None


@dataclass(frozen=True)
class TimeValue:
    unit: Unit
    magnitude: Magnitude
    operations: tuple[ChainedOperation, ...] = ()

    def __post_init__(self) -> None:
        if self.unit is Unit.TRANSPORT_TIME:
            if not (isinstance(self.magnitude, tuple) and len(self.magnitude) == 3):
                raise ValidationError(
                    f"Transport time needs a (bars, beats, sixteenths) triple, "
                    f"got {self.magnitude!r}"
                )
        elif isinstance(self.magnitude, bool) or not isinstance(self.magnitude, numbers.Real):
            raise ValidationError(
                f"{self.unit.name.lower()} magnitude must be a number, got {self.magnitude!r}"
            )

    def with_operation(self, operator: Operator, operand: TimeValue | None = None) -> TimeValue:
        """Return a copy with one more chained operation at the end."""
        op = ChainedOperation(operator=operator, operand=operand)
        return replace(self, operations=self.operations + (op,))

    def eval(self, context=None, now: float | None = None) -> float:
        """Shortcut for :func:`beattime.model.evaluate.evaluate`."""
        from beattime.model.evaluate import evaluate

        return evaluate(self, context, now)

    def __str__(self) -> str:
        text = format_literal(self.unit, self.magnitude)
        for op in self.operations:
            if op.operator is Operator.NOW:
                text = f"({text} + now)"
            else:
                text = f"({text} {op.operator.value} {op.operand})"
        return text


_BARE_NUMBER = re.compile(r"^\d+(\.\d+)?$")

# Negation is a chained multiply by this constant.
_MINUS_ONE = TimeValue(unit=Unit.SECONDS, magnitude=-1)


def materialize(node: Node) -> TimeValue:
    """Turn an expression tree into a :class:`TimeValue`.

    Binary nodes attach their right child as a chained operation on their
    left child, leaves first, so the chain order reproduces the tree's
    evaluation order.
    """
    if isinstance(node, Leaf):
        return TimeValue(unit=node.unit, magnitude=node.magnitude)

    assert isinstance(node, OperatorNode)
    if node.operator is Operator.NEGATE:
        return materialize(node.args[0]).with_operation(Operator.MULTIPLY, _MINUS_ONE)
    if node.operator is Operator.NOW:
        return materialize(node.args[0]).with_operation(Operator.NOW)

    left, right = node.args
    return materialize(left).with_operation(node.operator, materialize(right))


def parse_time(expr: str) -> TimeValue:
    """Parse *expr* straight into a :class:`TimeValue`."""
    return materialize(parse_expression(expr))


def to_time_value(value: object = None, units: Unit | str | None = None) -> TimeValue:
    """Coerce *value* into a :class:`TimeValue`.

    - a TimeValue is returned as-is
    - a :class:`Time` builder is snapshotted
    - a string is parsed as an expression; with ``units`` it must be a bare
      number (``"4", "n"``) or a single literal already in that unit
    - a number (or a triple for transport time) is tagged with ``units``,
      seconds by default
    - None means "now"
    """
    if isinstance(value, TimeValue):
        return value
    if isinstance(value, Time):
        return value.build()
    if value is None:
        return TimeValue(unit=Unit.SECONDS, magnitude=0).with_operation(Operator.NOW)
    if isinstance(value, str):
        if units is None:
            return parse_time(value)
        text = value.strip()
        if not _BARE_NUMBER.match(text):
            parsed = parse_time(text)
            if parsed.operations or parsed.unit is not resolve_unit(units):
                raise ValidationError(
                    f"Cannot apply units '{units}' to time expression '{value}'"
                )
            return parsed
        value = float(text) if "." in text else int(text)

    unit = Unit.SECONDS if units is None else resolve_unit(units)
    if isinstance(value, (list, tuple)):
        parts = [float(p) for p in value] + [0.0] * (3 - len(value))
        if len(parts) != 3:
            raise ValidationError(f"Transport time has at most 3 parts, got {value!r}")
        value = (parts[0], parts[1], parts[2])
    return TimeValue(unit=unit, magnitude=value)


class Time:
    """Fluent builder accumulating chained operations on a base value.

    Each operation method appends one step and returns the builder.
    :meth:`build` freezes the current state into a :class:`TimeValue`;
    building does not reset the builder.
    """

    def __init__(self, value: object = None, units: Unit | str | None = None) -> None:
        seed = to_time_value(value, units)
        self._base = TimeValue(unit=seed.unit, magnitude=seed.magnitude)
        self._operations: list[ChainedOperation] = list(seed.operations)

    def _push(self, operator: Operator, value: object, units: Unit | str | None) -> Time:
        operand = to_time_value(value, units)
        self._operations.append(ChainedOperation(operator=operator, operand=operand))
        return self

    def add(self, value: object, units: Unit | str | None = None) -> Time:
        return self._push(Operator.ADD, value, units)

    def sub(self, value: object, units: Unit | str | None = None) -> Time:
        return self._push(Operator.SUBTRACT, value, units)

    def mult(self, value: object, units: Unit | str | None = None) -> Time:
        return self._push(Operator.MULTIPLY, value, units)

    def div(self, value: object, units: Unit | str | None = None) -> Time:
        return self._push(Operator.DIVIDE, value, units)

    def quantize(self, value: object, units: Unit | str | None = None) -> Time:
        return self._push(Operator.QUANTIZE, value, units)

    def from_now(self) -> Time:
        """Make the value relative to the scheduler's current time."""
        self._operations.append(ChainedOperation(operator=Operator.NOW))
        return self

    def build(self) -> TimeValue:
        return replace(self._base, operations=tuple(self._operations))

    def eval(self, context=None, now: float | None = None) -> float:
        return self.build().eval(context, now)

    def __repr__(self) -> str:
        return f"Time({self.build()})"
