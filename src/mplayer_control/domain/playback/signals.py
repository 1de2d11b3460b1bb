"""Typed signals derived from the player's output.

A signal is transient: it is produced by the output classifier, applied to
the state machine and handed to a pending query, then dropped.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum


class OutputStream(StrEnum):
    """Which of the player's output pipes a line came from."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass(frozen=True)
class Signal:
    """Base class for all signals."""


@dataclass(frozen=True)
class Ready(Signal):
    pass


@dataclass(frozen=True)
class PlaybackStarted(Signal):
    pass


@dataclass(frozen=True)
class PausedChanged(Signal):
    paused: bool


@dataclass(frozen=True)
class PropertyError(Signal):
    name: str


@dataclass(frozen=True)
class PlaybackError(Signal):
    """The player could not open or find a file it was asked to load."""

    detail: str


@dataclass(frozen=True)
class SpawnError(Signal):
    """The player process could not be started at all."""

    detail: str


@dataclass(frozen=True)
class RawLine(Signal):
    """Any output line kept verbatim, for query answer scraping."""

    text: str
    stream: OutputStream = OutputStream.STDOUT
