"""Player state machine.

The only place where the player's state changes. Transitions are driven by
signals classified from the player's output, in the order they arrived;
``stop()`` is the single exception because the player never acknowledges it.
"""

from __future__ import annotations

import logging

from mplayer_control.domain.playback.signals import (
    PausedChanged,
    PlaybackStarted,
    Ready,
    Signal,
    SpawnError,
)
from mplayer_control.domain.playback.value_objects import PlayerState
from mplayer_control.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)


class StateMachine:
    """Tracks the player's state from observed output.

    ``apply`` and friends return the new state when a transition happened and
    ``None`` when the signal left the state untouched (re-entering the current
    state, or a signal that is meaningless in it).
    """

    def __init__(self) -> None:
        self._state = PlayerState.UNINITIALIZED
        self._ready_seen = False

    @property
    def state(self) -> PlayerState:
        return self._state

    @property
    def ready(self) -> bool:
        """True once the banner was seen and until the process exits."""
        return self._ready_seen and self._state != PlayerState.EXITED

    def apply(self, signal: Signal) -> PlayerState | None:
        """Apply one classified signal."""
        match signal:
            case Ready():
                if self._ready_seen or self._state != PlayerState.UNINITIALIZED:
                    return None
                self._ready_seen = True
                logger.debug(LogTemplates.STATE_READY)
                return self._transition(PlayerState.READY)
            case PlaybackStarted():
                return self._transition(PlayerState.PLAYING)
            case PausedChanged(paused=True):
                if not self._state.is_active:
                    logger.debug(LogTemplates.STATE_SIGNAL_IGNORED, signal, self._state.value)
                    return None
                return self._transition(PlayerState.PAUSED)
            case PausedChanged(paused=False):
                # A resume answer can still arrive after a stop was issued.
                if not self._state.is_active:
                    logger.debug(LogTemplates.STATE_SIGNAL_IGNORED, signal, self._state.value)
                    return None
                return self._transition(PlayerState.PLAYING)
            case SpawnError():
                return self.mark_exited()
            case _:
                return None

    def mark_stopped(self) -> PlayerState | None:
        """Apply ``stop`` synchronously on command issue."""
        return self._transition(PlayerState.STOPPED)

    def mark_exited(self) -> PlayerState | None:
        """Enter the terminal state, overriding any other."""
        return self._transition(PlayerState.EXITED)

    def _transition(self, target: PlayerState) -> PlayerState | None:
        if target == self._state:
            return None
        if not self._state.can_transition_to(target):
            logger.debug(LogTemplates.STATE_SIGNAL_IGNORED, target.value, self._state.value)
            return None
        logger.debug(LogTemplates.STATE_CHANGED, self._state.value, target.value)
        self._state = target
        return target
