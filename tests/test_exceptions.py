"""
Unit Tests for Domain Exceptions

Tests the error taxonomy callers catch: messages, codes and attributes.
"""

import pytest

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


class TestDomainError:
    """Tests for the base exceptions."""

    def test_domain_error_with_message(self):
        """Should create DomainError with message."""
        error = DomainError("Something went wrong")

        assert str(error) == "Something went wrong"
        assert error.message == "Something went wrong"
        assert error.code == "DomainError"

    def test_domain_error_with_custom_code(self):
        """Should use custom error code when provided."""
        assert DomainError("Custom error", code="CUSTOM_CODE").code == "CUSTOM_CODE"

    def test_invalid_operation_default_message(self):
        """Should describe the operation and state."""
        error = InvalidOperationError("pause", "ready")

        assert error.message == "Cannot perform 'pause' in state 'ready'"
        assert error.operation == "pause"
        assert error.current_state == "ready"
        assert error.code == "INVALID_OPERATION"

    def test_invalid_operation_custom_message(self):
        """Should prefer an explicit message."""
        assert InvalidOperationError("start", "ready", "Already").message == "Already"


class TestPlayerErrors:
    """Tests for the player error taxonomy."""

    @pytest.mark.parametrize(
        "error,code",
        [
            (SpawnFailureError("spawn mplayer ENOENT"), "SPAWN_FAILURE"),
            (PropertyUnknownError("volume"), "PROPERTY_UNKNOWN"),
            (QueryTimeoutError(5.0), "QUERY_TIMEOUT"),
            (PlaybackFailedError("Failed to open x"), "PLAYBACK_FAILED"),
            (CommandTimeoutError("play", 10.0), "COMMAND_TIMEOUT"),
            (PlayerExitedError(-2), "PLAYER_EXITED"),
        ],
    )
    def test_codes_and_hierarchy(self, error: PlayerError, code: str):
        """Should be catchable as PlayerError and carry a stable code."""
        assert isinstance(error, PlayerError)
        assert isinstance(error, DomainError)
        assert error.code == code

    def test_spawn_failure_message(self):
        """Should include the spawn detail."""
        error = SpawnFailureError("spawn /bin/nope No such file or directory")

        assert "spawn /bin/nope No such file or directory" in str(error)
        assert error.detail == "spawn /bin/nope No such file or directory"

    def test_property_unknown_name(self):
        """Should name the property, defaulting to unknown."""
        assert PropertyUnknownError("volume").name == "volume"
        assert PropertyUnknownError().name == "unknown"
        assert "volume" in PropertyUnknownError("volume").message

    def test_command_timeout_attributes(self):
        """Should name the operation and its timeout."""
        error = CommandTimeoutError("resume", 0.5)

        assert error.operation == "resume"
        assert error.timeout == 0.5
        assert "resume" in error.message

    def test_player_exited_returncode(self):
        """Should carry the exit code, when known."""
        assert PlayerExitedError(3).returncode == 3
        assert PlayerExitedError().returncode is None
