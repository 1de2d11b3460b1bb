"""
Shared Domain Kernel

Contains exceptions, events and message templates shared across the package.
"""

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
    "DomainError",
    "InvalidOperationError",
    "PlayerError",
    "SpawnFailureError",
    "PropertyUnknownError",
    "QueryTimeoutError",
    "PlaybackFailedError",
    "CommandTimeoutError",
    "PlayerExitedError",
]
