"""
mplayer-control

Asynchronous control of an MPlayer process running in slave mode: typed
playback state inferred from the player's output, and serialized ad hoc
queries over its unframed text protocol.
"""

from mplayer_control.application.services.player_service import MPlayer
from mplayer_control.config.settings import PlayerSettings, QuerySettings, Settings, get_settings
from mplayer_control.domain.playback.value_objects import PlayerState, Progress, TrackInfo
from mplayer_control.domain.shared.events import (
    EventBus,
    PlayerErrorRaised,
    PlayerExited,
    PlayerPlaying,
    PlayerReady,
    PlayerStatusChanged,
)
from mplayer_control.domain.shared.exceptions import (
    CommandTimeoutError,
    DomainError,
    InvalidOperationError,
    PlaybackFailedError,
    PlayerError,
    PlayerExitedError,
    PropertyUnknownError,
    QueryTimeoutError,
    SpawnFailureError,
)

__all__ = [
    "MPlayer",
    "PlayerSettings",
    "QuerySettings",
    "Settings",
    "get_settings",
    "PlayerState",
    "Progress",
    "TrackInfo",
    "EventBus",
    "PlayerReady",
    "PlayerPlaying",
    "PlayerStatusChanged",
    "PlayerErrorRaised",
    "PlayerExited",
    "DomainError",
    "PlayerError",
    "InvalidOperationError",
    "SpawnFailureError",
    "PropertyUnknownError",
    "QueryTimeoutError",
    "PlaybackFailedError",
    "CommandTimeoutError",
    "PlayerExitedError",
]
