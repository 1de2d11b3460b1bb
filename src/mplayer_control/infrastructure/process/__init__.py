"""Player process supervision."""

from mplayer_control.infrastructure.process.supervisor import (
    ProcessSupervisor,
    SupervisorCallbacks,
)

__all__ = [
    "ProcessSupervisor",
    "SupervisorCallbacks",
]
