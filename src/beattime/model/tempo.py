"""Tempo contexts: where beat, tick and bar lengths come from.

The evaluator only needs the :class:`TempoContext` protocol. :class:`Transport`
is the stock implementation, built directly or from the conductor
information of a MIDI file.
"""

from __future__ import annotations

import os
import time
from dataclasses import dataclass, field
from typing import Callable, Protocol, runtime_checkable

import mido

from beattime.errors import SerializationError, ValidationError

DEFAULT_BPM = 120.0
DEFAULT_TIME_SIGNATURE = 4
DEFAULT_PPQ = 192


@runtime_checkable
class TempoContext(Protocol):
    """Read-only tempo information supplied by a transport or clock.

    A context may also offer ``now() -> float``, the scheduler's current
    time in seconds. It is optional: without it "now" operations read a
    monotonic clock.
    """

    def beat_duration(self) -> float:
        """Seconds per beat (60 / BPM)."""

    def tick_duration(self) -> float:
        """Seconds per tick (beat duration / PPQ)."""

    def time_signature_numerator(self) -> float:
        """Beats per measure."""


@dataclass
class Transport:
    """Mutable tempo state implementing :class:`TempoContext`.

    Changing ``bpm`` or ``time_signature`` affects every later evaluation;
    nothing is cached.
    """

    bpm: float = DEFAULT_BPM
    time_signature: int = DEFAULT_TIME_SIGNATURE
    ppq: int = DEFAULT_PPQ
    clock: Callable[[], float] = field(default=time.monotonic, repr=False)

    def __post_init__(self) -> None:
        if self.bpm <= 0:
            raise ValidationError(f"BPM must be > 0, got {self.bpm}")
        if self.time_signature <= 0:
            raise ValidationError(
                f"Time signature numerator must be > 0, got {self.time_signature}"
            )
        if self.ppq <= 0:
            raise ValidationError(f"PPQ must be > 0, got {self.ppq}")

    # -- TempoContext -------------------------------------------------------

    def beat_duration(self) -> float:
        return 60.0 / self.bpm

    def tick_duration(self) -> float:
        return self.beat_duration() / self.ppq

    def time_signature_numerator(self) -> float:
        return self.time_signature

    def now(self) -> float:
        return self.clock()

    # -- Construction -------------------------------------------------------

    @classmethod
    def from_midi(
        cls,
        source: str | os.PathLike | mido.MidiFile,
        clock: Callable[[], float] = time.monotonic,
    ) -> Transport:
        """Build a transport from the first tempo and time signature of a MIDI file.

        Parameters
        ----------
        source : str | PathLike | mido.MidiFile
            Path to a ``.mid`` file, or an already loaded file.
        clock : callable
            Clock returning the scheduler's current time in seconds.

        Returns
        -------
        Transport
            ``bpm`` from the earliest ``set_tempo`` (120 if none),
            ``time_signature`` from the earliest ``time_signature``
            numerator (4 if none), ``ppq`` from ``ticks_per_beat``.

        Raises
        ------
        SerializationError
            If the file cannot be read as MIDI.
        """
        if isinstance(source, mido.MidiFile):
            midi = source
        else:
            try:
                midi = mido.MidiFile(source)
            except (OSError, EOFError, ValueError) as exc:
                raise SerializationError(f"Cannot read MIDI file '{source}': {exc}") from exc

        bpm: float | None = None
        numerator: int | None = None
        for _, msg in _meta_messages(midi):
            if msg.type == "set_tempo" and bpm is None:
                bpm = mido.tempo2bpm(msg.tempo)
            elif msg.type == "time_signature" and numerator is None:
                numerator = msg.numerator
            if bpm is not None and numerator is not None:
                break

        return cls(
            bpm=bpm if bpm is not None else DEFAULT_BPM,
            time_signature=numerator if numerator is not None else DEFAULT_TIME_SIGNATURE,
            ppq=midi.ticks_per_beat,
            clock=clock,
        )


def _meta_messages(midi: mido.MidiFile) -> list[tuple[int, mido.MetaMessage]]:
    """All meta messages of *midi* as ``(absolute_tick, msg)``, earliest first."""
    result: list[tuple[int, mido.MetaMessage]] = []
    for track in midi.tracks:
        abs_tick = 0
        for msg in track:
            abs_tick += msg.time
            if msg.is_meta:
                result.append((abs_tick, msg))
    result.sort(key=lambda pair: pair[0])
    return result
