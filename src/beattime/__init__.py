"""beattime — parse and evaluate musical time expressions.

>>> from beattime import Time, Transport
>>> Time("1:2:0").eval(Transport(bpm=120))
3.0
"""

from beattime.errors import (
    BeattimeError,
    TimeArithmeticError,
    TimeSyntaxError,
    ValidationError,
)
from beattime.model.evaluate import evaluate
from beattime.model.tempo import TempoContext, Transport
from beattime.model.time_value import ChainedOperation, Time, TimeValue, materialize, parse_time
from beattime.model.units import Operator, Unit, parse_units

__version__ = "0.1.0"

__all__ = [
    "evaluate",
    "materialize",
    "parse_time",
    "parse_units",
    "BeattimeError",
    "ChainedOperation",
    "Operator",
    "TempoContext",
    "Time",
    "TimeArithmeticError",
    "TimeSyntaxError",
    "TimeValue",
    "Transport",
    "Unit",
    "ValidationError",
]
