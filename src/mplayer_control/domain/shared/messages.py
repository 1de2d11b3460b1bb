"""Centralized message constants for error messages and log output."""

from __future__ import annotations


class ErrorMessages:
    """Error messages for exceptions and validation failures."""

    # Process Errors
    SPAWN_FAILED = "Failed to start player: {detail}"
    PLAYER_EXITED = "Player process exited (returncode={returncode})"
    PLAYER_NOT_STARTED = "Player not started. Call start() first."
    PLAYER_ALREADY_STARTED = "Player already started"

    # Playback/Query Errors
    PROPERTY_UNKNOWN = "Failed to get property '{name}'"
    QUERY_TIMEOUT = "Query got no complete answer within {timeout}s"
    PLAYBACK_FAILED = "Playback failed: {detail}"
    COMMAND_TIMEOUT = "'{operation}' was not confirmed within {timeout}s"

    # Settings Validation Errors
    INVALID_LOG_LEVEL = "Invalid log level: {level}. Must be one of {valid_levels}"
    EMPTY_EXECUTABLE = "Player executable cannot be empty"


class LogTemplates:
    """Log message templates for structured logging.

    Use these with logger.info(), logger.error(), etc. and pass values as parameters
    for proper log formatting and structured logging support.
    """

    # Process Lifecycle
    PROCESS_SPAWNING = "Spawning player: %s %s"
    PROCESS_SPAWNED = "Player started (pid=%s)"
    PROCESS_SPAWN_FAILED = "Failed to spawn %s: %s"
    PROCESS_INTERRUPTING = "Sending interrupt to player (pid=%s)"
    PROCESS_KILL_AFTER_TIMEOUT = "Player ignored interrupt for %ss, killing (pid=%s)"
    PROCESS_EXITED = "Player exited (returncode=%s)"
    PROCESS_EXITED_UNEXPECTEDLY = "Player exited unexpectedly (returncode=%s)"
    PROCESS_STREAM_READ_ERROR = "Error reading player %s: %r"

    # Protocol
    COMMAND_SENT = "-> %s"
    OUTPUT_LINE = "<- [%s] %s"
    COMMAND_WRITE_FAILED = "Failed to write command %r: %r"

    # State Machine
    STATE_CHANGED = "Player state %s -> %s"
    STATE_READY = "Player ready"
    STATE_SIGNAL_IGNORED = "Ignoring %s in state %s"

    # Playback Operations
    PLAYBACK_LOADING = "Loading %s (append=%s)"
    PLAYBACK_STARTED = "Playback started"
    PLAYBACK_FAILED = "Playback failed: %s"
    PLAYBACK_PAUSED = "Playback paused"
    PLAYBACK_RESUMED = "Playback resumed"
    PLAYBACK_STOPPED = "Playback stopped"
    PLAYBACK_ALREADY = "'%s' is a no-op in state %s"
    VOLUME_SET = "Volume set to %s"

    # Queries
    QUERY_WAITING = "Waiting for pending query to finish"
    QUERY_ISSUED = "Query issued: %s"
    QUERY_RESOLVED = "Query resolved in %.3fs"
    QUERY_PROPERTY_UNKNOWN = "Query failed, unknown property %s"
    QUERY_TIMED_OUT = "Query timed out after %ss: %r"
    QUERY_ABORTED = "Pending query aborted: %s"

    # Events
    EVENT_HANDLER_FAILED = "Error in handler for %s: %s"

    # Application Lifecycle
    APP_STARTING = "Starting mplayer-control in {environment} mode"
    APP_INTERRUPTED = "Received keyboard interrupt, shutting down..."
    APP_FATAL_ERROR = "Fatal error: %s"
    LOGGING_CONFIG_FALLBACK = "Could not load %s, falling back to basic config"
