"""Units of musical time and the operators that combine them."""

from __future__ import annotations

import re
from enum import Enum

from beattime.errors import ValidationError


class Unit(Enum):
    """Unit tag of a time literal. Values are the literal suffixes."""

    SECONDS = "s"
    MEASURE = "m"
    DUPLET = "n"
    TRIPLET = "t"
    TICK = "i"
    HERTZ = "hz"
    TRANSPORT_TIME = "tr"

    @property
    def tempo_relative(self) -> bool:
        """True if converting this unit to seconds needs a tempo."""
        return self not in (Unit.SECONDS, Unit.HERTZ)


class Operator(Enum):
    """Operators of the time grammar and of chained operations."""

    ADD = "+"
    SUBTRACT = "-"
    MULTIPLY = "*"
    DIVIDE = "/"
    QUANTIZE = "@"
    NEGATE = "neg"
    NOW = "now"

    @property
    def arity(self) -> int:
        return 1 if self in (Operator.NEGATE, Operator.NOW) else 2

    @property
    def precedence(self) -> int | None:
        """Binding tier for binary operators; 0 binds tightest."""
        if self in (Operator.MULTIPLY, Operator.DIVIDE, Operator.QUANTIZE):
            return 0
        if self in (Operator.ADD, Operator.SUBTRACT):
            return 1
        return None


# Highest binary tier; the parser starts here.
MAX_PRECEDENCE = 1

# Aliases accepted by resolve_unit() in addition to the suffixes themselves.
_UNIT_ALIASES: dict[str, Unit] = {
    "seconds": Unit.SECONDS,
    "measure": Unit.MEASURE,
    "measures": Unit.MEASURE,
    "duplet": Unit.DUPLET,
    "note": Unit.DUPLET,
    "triplet": Unit.TRIPLET,
    "tick": Unit.TICK,
    "ticks": Unit.TICK,
    "hertz": Unit.HERTZ,
    "transport": Unit.TRANSPORT_TIME,
}

# Whole-string literal patterns used by parse_units().
_LITERAL_UNITS: list[tuple[re.Pattern[str], Unit]] = [
    (re.compile(r"^\d+n$", re.I), Unit.DUPLET),
    (re.compile(r"^\d+t$", re.I), Unit.TRIPLET),
    (re.compile(r"^\d+m$", re.I), Unit.MEASURE),
    (re.compile(r"^\d+i$", re.I), Unit.TICK),
    (re.compile(r"^\d+hz$", re.I), Unit.HERTZ),
    (re.compile(r"^(\d+(\.\d+)?:){1,2}(\d+(\.\d+)?)?$"), Unit.TRANSPORT_TIME),
    (re.compile(r"^\d+(\.\d+)?s?$", re.I), Unit.SECONDS),
]


def resolve_unit(units: Unit | str) -> Unit:
    """Return the :class:`Unit` for *units* (a Unit, suffix, or name).

    Raises
    ------
    ValidationError
        If *units* is not a known unit.
    """
    if isinstance(units, Unit):
        return units
    key = units.strip().lower()
    try:
        return Unit(key)
    except ValueError:
        pass
    unit = _UNIT_ALIASES.get(key)
    if unit is None:
        raise ValidationError(f"Unknown time unit: '{units}'")
    return unit


def parse_units(text: str) -> Unit | None:
    """Classify a single time literal, or return None.

    >>> parse_units("4n")
    <Unit.DUPLET: 'n'>
    >>> parse_units("1:2:0")
    <Unit.TRANSPORT_TIME: 'tr'>
    >>> parse_units("4n+1m") is None
    True
    """
    text = text.strip()
    for pattern, unit in _LITERAL_UNITS:
        if pattern.match(text):
            return unit
    return None
