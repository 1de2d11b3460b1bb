# ruff: noqa: N999
"""
Domain Layer

Contains the player's pure logic organized by bounded contexts:
- shared/: Cross-cutting exceptions, events, messages and types
- playback/: Signals, player state machine and query result records
"""

from mplayer_control.domain.shared.exceptions import DomainError

__all__ = [
    "DomainError",
]
