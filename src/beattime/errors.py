"""Custom exception hierarchy for beattime."""

from __future__ import annotations


class BeattimeError(Exception):
    """Base exception for all beattime errors."""


class TimeSyntaxError(BeattimeError, SyntaxError):
    """A time expression could not be tokenized or parsed.

    Subclasses SyntaxError so callers can catch parse failures without
    importing beattime's exception types.
    """


class TimeArithmeticError(BeattimeError, ArithmeticError):
    """Evaluation would produce a non-finite number of seconds."""


class ValidationError(BeattimeError, ValueError):
    """Invalid programmatic input (unknown unit, bad tempo, etc.)."""


class SerializationError(BeattimeError):
    """Error while reading tempo information from a MIDI file."""
