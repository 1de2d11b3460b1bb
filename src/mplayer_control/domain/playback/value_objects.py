"""Immutable value objects for the playback bounded context."""

from __future__ import annotations

import math
from enum import Enum

from pydantic import BaseModel, ConfigDict


class PlayerState(Enum):
    """Player state with enforced transitions.

    State transitions:
    - UNINITIALIZED -> READY (banner seen)
    - READY -> PLAYING (playback started)
    - READY -> STOPPED (stop on an idle player)
    - PLAYING <-> PAUSED (pause / resume)
    - PLAYING, PAUSED -> STOPPED (stop command)
    - STOPPED -> PLAYING (new file loaded)
    - Any -> EXITED (process gone)
    """

    UNINITIALIZED = "uninitialized"
    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    STOPPED = "stopped"
    EXITED = "exited"

    def can_transition_to(self, target: PlayerState) -> bool:
        """Check if transition to target state is valid."""
        if target == PlayerState.EXITED:
            return self != PlayerState.EXITED
        valid_transitions = {
            PlayerState.UNINITIALIZED: {PlayerState.READY},
            PlayerState.READY: {PlayerState.PLAYING, PlayerState.STOPPED},
            PlayerState.PLAYING: {PlayerState.PAUSED, PlayerState.STOPPED},
            PlayerState.PAUSED: {PlayerState.PLAYING, PlayerState.STOPPED},
            PlayerState.STOPPED: {PlayerState.PLAYING},
        }
        return target in valid_transitions.get(self, set())

    @property
    def is_active(self) -> bool:
        """True while a file is loaded (playing or paused)."""
        return self in {PlayerState.PLAYING, PlayerState.PAUSED}

    @property
    def is_idle(self) -> bool:
        """True when the player is running but has nothing loaded."""
        return self in {PlayerState.READY, PlayerState.STOPPED}

    @property
    def is_running(self) -> bool:
        return self not in {PlayerState.UNINITIALIZED, PlayerState.EXITED}


class TrackInfo(BaseModel):
    """Metadata tags of the loaded file. Missing tags stay ``None``."""

    model_config = ConfigDict(frozen=True)

    artist: str | None = None
    album: str | None = None
    title: str | None = None

    @property
    def is_empty(self) -> bool:
        return self.artist is None and self.album is None and self.title is None


class Progress(BaseModel):
    """Playback position of the loaded file.

    Values the player did not report are NaN; treat them as unknown.
    """

    model_config = ConfigDict(frozen=True)

    percent: float = math.nan
    time: float = math.nan
    total: float = math.nan

    @property
    def is_complete(self) -> bool:
        return not any(math.isnan(v) for v in (self.percent, self.time, self.total))
