"""Base exception classes for domain-level errors."""

from __future__ import annotations

from mplayer_control.domain.shared.messages import ErrorMessages


class DomainError(Exception):
    """Base exception for all domain-level errors."""

    def __init__(self, message: str, code: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.code = code or self.__class__.__name__


class InvalidOperationError(DomainError):
    """Raised when an operation is invalid in the current state."""

    def __init__(self, operation: str, current_state: str, message: str | None = None) -> None:
        msg = message or f"Cannot perform '{operation}' in state '{current_state}'"
        super().__init__(msg, code="INVALID_OPERATION")
        self.operation = operation
        self.current_state = current_state


class PlayerError(DomainError):
    """Base exception for failures reported by, or about, the player process."""


class SpawnFailureError(PlayerError):
    """Raised when the player executable could not be started."""

    def __init__(self, detail: str) -> None:
        super().__init__(ErrorMessages.SPAWN_FAILED.format(detail=detail), code="SPAWN_FAILURE")
        self.detail = detail


class PropertyUnknownError(PlayerError):
    """Raised when the player does not know a queried property."""

    def __init__(self, name: str = "unknown") -> None:
        super().__init__(ErrorMessages.PROPERTY_UNKNOWN.format(name=name), code="PROPERTY_UNKNOWN")
        self.name = name


class QueryTimeoutError(PlayerError):
    """Raised when a query got no complete answer before its deadline."""

    def __init__(self, timeout: float) -> None:
        super().__init__(ErrorMessages.QUERY_TIMEOUT.format(timeout=timeout), code="QUERY_TIMEOUT")
        self.timeout = timeout


class PlaybackFailedError(PlayerError):
    """Raised when the player reports that a file could not be played."""

    def __init__(self, detail: str) -> None:
        super().__init__(
            ErrorMessages.PLAYBACK_FAILED.format(detail=detail), code="PLAYBACK_FAILED"
        )
        self.detail = detail


class CommandTimeoutError(PlayerError):
    """Raised when the player never confirmed a play/pause/resume command."""

    def __init__(self, operation: str, timeout: float) -> None:
        super().__init__(
            ErrorMessages.COMMAND_TIMEOUT.format(operation=operation, timeout=timeout),
            code="COMMAND_TIMEOUT",
        )
        self.operation = operation
        self.timeout = timeout


class PlayerExitedError(PlayerError):
    """Raised for operations still outstanding when the player process exits."""

    def __init__(self, returncode: int | None = None) -> None:
        super().__init__(
            ErrorMessages.PLAYER_EXITED.format(returncode=returncode), code="PLAYER_EXITED"
        )
        self.returncode = returncode
