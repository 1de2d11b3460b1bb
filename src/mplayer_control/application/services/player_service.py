"""
MPlayer Control Service

The public, asynchronous control surface over one MPlayer slave-mode process.
Composes the process supervisor, output classifiers, state machine, command
channel and query coordinator into the operations callers use.
"""

from __future__ import annotations

import asyncio
import logging
import os
from enum import Enum
from types import TracebackType
from typing import Self

from mplayer_control.application.queries.progress import extract_progress
from mplayer_control.application.queries.property_value import property_extractor
from mplayer_control.application.queries.track_info import extract_track_info
from mplayer_control.application.services.query_coordinator import QueryCoordinator
from mplayer_control.config.settings import PlayerSettings, QuerySettings
from mplayer_control.domain.playback.signals import (
    OutputStream,
    PausedChanged,
    PlaybackError,
    PlaybackStarted,
    PropertyError,
    RawLine,
    Ready,
    Signal,
    SpawnError,
)
from mplayer_control.domain.playback.state_machine import StateMachine
from mplayer_control.domain.playback.value_objects import PlayerState, Progress, TrackInfo
from mplayer_control.domain.shared.events import (
    DomainEvent,
    EventBus,
    PlayerErrorRaised,
    PlayerExited,
    PlayerPlaying,
    PlayerReady,
    PlayerStatusChanged,
)
from mplayer_control.domain.shared.exceptions import (
    CommandTimeoutError,
    InvalidOperationError,
    PlaybackFailedError,
    PlayerError,
    PlayerExitedError,
    PropertyUnknownError,
    SpawnFailureError,
)
from mplayer_control.domain.shared.messages import ErrorMessages, LogTemplates
from mplayer_control.infrastructure.process.supervisor import (
    ProcessSupervisor,
    SupervisorCallbacks,
)
from mplayer_control.infrastructure.protocol import commands
from mplayer_control.infrastructure.protocol.classifier import OutputClassifier

logger = logging.getLogger(__name__)


class _Wait(Enum):
    """What a completion handle is waiting for."""

    READY = "ready"
    PLAYING = "playing"
    PAUSED = "paused"
    RESUMED = "resumed"


class MPlayer:
    """Asynchronous controller for an MPlayer process in slave mode.

    The player's state is only ever changed by what the player prints, with
    the exception of ``stop()`` which the player never acknowledges. Each
    waiting operation gets its own completion handle; every outstanding
    handle is rejected when the process exits.

    Example::

        async with MPlayer() as player:
            await player.play("/music/song.flac")
            print(await player.get_track_infos())
    """

    def __init__(
        self,
        settings: PlayerSettings | None = None,
        query_settings: QuerySettings | None = None,
        event_bus: EventBus | None = None,
    ) -> None:
        """Initialize the controller. The process is spawned by ``start()``.

        Args:
            settings: Executable, arguments and timeouts.
            query_settings: Query poll interval and timeout.
            event_bus: Bus to publish player events on; a private one by default.
        """
        self._settings = settings or PlayerSettings()
        self._events = event_bus or EventBus()
        self._state = StateMachine()
        self._classifiers = {
            OutputStream.STDOUT: OutputClassifier(OutputStream.STDOUT),
            OutputStream.STDERR: OutputClassifier(OutputStream.STDERR),
        }
        self._supervisor = ProcessSupervisor(
            SupervisorCallbacks(
                on_output=self._on_output,
                on_eof=self._on_eof,
                on_spawn_error=self._on_spawn_error,
                on_exit=self._on_exit,
            )
        )
        self._queries = QueryCoordinator(lambda: self._supervisor.channel, query_settings)
        self._waiters: dict[_Wait, list[asyncio.Future[None]]] = {kind: [] for kind in _Wait}
        self._startup_error: PlayerError | None = None
        self._start_called = False
        self._load_error_reported = False

    # === Properties ===

    @property
    def events(self) -> EventBus:
        return self._events

    @property
    def ready(self) -> bool:
        return self._state.ready

    @property
    def pid(self) -> int | None:
        return self._supervisor.pid

    @property
    def returncode(self) -> int | None:
        return self._supervisor.returncode

    @property
    def terminated_by_interrupt(self) -> bool:
        return self._supervisor.terminated_by_interrupt

    def get_status(self) -> PlayerState:
        """Current state, read synchronously."""
        return self._state.state

    # === Lifecycle ===

    async def start(self) -> None:
        """Spawn the player process.

        Never raises for a missing or unexecutable player: that failure is
        reported by ``await_ready()`` and a ``PlayerErrorRaised`` event.
        """
        if self._start_called:
            raise InvalidOperationError(
                "start", self._state.state.value, ErrorMessages.PLAYER_ALREADY_STARTED
            )
        self._start_called = True
        await self._supervisor.start(self._settings.executable, self._settings.args)

    async def await_ready(self) -> None:
        """Wait until the player printed its banner.

        Raises:
            SpawnFailureError: The player could not be started.
            PropertyUnknownError: The player reported a property error first.
            PlayerExitedError: The player exited before becoming ready.
        """
        if self._state.ready:
            return
        if self._startup_error is not None:
            raise self._startup_error
        if self._state.state == PlayerState.EXITED:
            raise PlayerExitedError(self._supervisor.returncode)
        if not self._start_called:
            raise InvalidOperationError(
                "await_ready", self._state.state.value, ErrorMessages.PLAYER_NOT_STARTED
            )
        await self._new_waiter(_Wait.READY)

    async def exit(self) -> int | None:
        """Interrupt the player and wait for it to exit.

        Returns:
            The process return code.

        Raises:
            SpawnFailureError: The player was never started successfully.
        """
        if self._supervisor.started and not self._supervisor.running:
            return self._supervisor.returncode
        await self.await_ready()
        return await self._supervisor.terminate(self._settings.exit_timeout)

    async def __aenter__(self) -> Self:
        await self.start()
        await self.await_ready()
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        if self._supervisor.running:
            await self._supervisor.terminate(self._settings.exit_timeout)

    # === Playback ===

    async def play(self, path: str | os.PathLike[str], append: bool = False) -> None:
        """Load a file, replacing the current one or appending it to the playlist.

        Resolves once playback started. Appending while a file is loaded only
        enqueues it, and resolves once the command was written.

        Raises:
            PlaybackFailedError: The player could not open the file.
            CommandTimeoutError: Playback did not start within the command timeout.
        """
        self._ensure_running("play")
        path_str = os.fspath(path)
        logger.info(LogTemplates.PLAYBACK_LOADING, path_str, append)

        command = commands.load_file(path_str, append=append)
        self._load_error_reported = False
        if append and self._state.state.is_active:
            self._send(command)
            await self._supervisor.channel.drain()
            return

        waiter = self._new_waiter(_Wait.PLAYING)
        self._send(command)
        await self._wait(waiter, "play")

    async def pause(self) -> None:
        """Pause playback. Succeeds immediately when already paused.

        Raises:
            InvalidOperationError: Nothing is loaded (READY or STOPPED). Unlike
                the other no-op cases this raises, and no command is sent: an
                idle player never prints the pause marker to wait for.
        """
        self._ensure_running("pause")
        state = self._state.state
        if state == PlayerState.PAUSED:
            logger.debug(LogTemplates.PLAYBACK_ALREADY, "pause", state.value)
            return
        if state.is_idle:
            raise InvalidOperationError("pause", state.value)

        waiter = self._new_waiter(_Wait.PAUSED)
        self._send(commands.FORCE_PAUSE)
        await self._wait(waiter, "pause")
        logger.info(LogTemplates.PLAYBACK_PAUSED)

    async def resume(self) -> None:
        """Resume playback. Succeeds immediately unless paused."""
        self._ensure_running("resume")
        state = self._state.state
        if state != PlayerState.PAUSED:
            logger.debug(LogTemplates.PLAYBACK_ALREADY, "resume", state.value)
            return

        waiter = self._new_waiter(_Wait.RESUMED)
        self._send(commands.TOGGLE_PAUSE)
        # Unpausing prints nothing; asking for the pause property makes the
        # player print the resume marker.
        self._send(commands.QUERY_PAUSE)
        await self._wait(waiter, "resume")
        logger.info(LogTemplates.PLAYBACK_RESUMED)

    async def stop(self) -> None:
        """Stop playback. The player gives no confirmation, so this is immediate.

        Before the player is ready this first waits for readiness.
        """
        self._ensure_running("stop")
        await self.await_ready()
        state = self._state.state
        if state == PlayerState.STOPPED:
            logger.debug(LogTemplates.PLAYBACK_ALREADY, "stop", state.value)
            return

        self._send(commands.STOP)
        new_state = self._state.mark_stopped()
        if new_state is not None:
            self._publish(PlayerStatusChanged(status=new_state))
        logger.info(LogTemplates.PLAYBACK_STOPPED)

    async def set_volume(self, level: int) -> None:
        """Set the absolute volume (0-100). Not acknowledged by the player."""
        if not 0 <= level <= 100:
            raise ValueError(f"Volume must be between 0 and 100, got {level}")
        self._ensure_running("set_volume")
        self._send(commands.set_volume(level))
        logger.debug(LogTemplates.VOLUME_SET, level)

    # === Queries ===

    async def get_track_infos(self) -> TrackInfo:
        """Artist, album and title tags of the loaded file."""
        self._ensure_running("get_track_infos")
        return await self._queries.query(
            commands.TRACK_INFO_COMMANDS, extract_track_info, subject="meta"
        )

    async def get_progress(self) -> Progress:
        """Percent position, time position and length of the loaded file."""
        self._ensure_running("get_progress")
        return await self._queries.query(
            commands.PROGRESS_COMMANDS, extract_progress, subject="progress"
        )

    async def get_property(self, name: str) -> str | None:
        """Raw value of any player property.

        Raises:
            PropertyUnknownError: The player does not know (or cannot read) ``name``.
        """
        self._ensure_running("get_property")
        return await self._queries.query(
            [commands.get_property(name)], property_extractor(name), subject=name
        )

    # === Output handling ===

    def _on_output(self, stream: OutputStream, chunk: bytes) -> None:
        for signal in self._classifiers[stream].feed(chunk):
            self._dispatch(signal)

    def _on_eof(self, stream: OutputStream) -> None:
        for signal in self._classifiers[stream].flush():
            self._dispatch(signal)

    def _dispatch(self, signal: Signal) -> None:
        if isinstance(signal, RawLine):
            logger.debug(LogTemplates.OUTPUT_LINE, signal.stream.value, signal.text)
        taken = self._queries.offer(signal)
        new_state = self._state.apply(signal)

        match signal:
            case Ready():
                if new_state == PlayerState.READY:
                    self._resolve(_Wait.READY)
                    self._publish(PlayerReady())
                    self._apply_initial_volume()
            case PlaybackStarted():
                self._load_error_reported = False
                logger.info(LogTemplates.PLAYBACK_STARTED)
                self._resolve(_Wait.PLAYING)
                self._publish(PlayerPlaying())
            case PausedChanged(paused=True):
                self._resolve(_Wait.PAUSED)
            case PausedChanged(paused=False):
                self._resolve(_Wait.RESUMED)
            case PlaybackError(detail=detail) if self._load_error_reported:
                # One failed load prints several error lines.
                logger.debug(LogTemplates.PLAYBACK_FAILED, detail)
            case PlaybackError(detail=detail):
                self._load_error_reported = True
                logger.warning(LogTemplates.PLAYBACK_FAILED, detail)
                error = PlaybackFailedError(detail)
                self._reject(_Wait.PLAYING, error)
                self._publish(PlayerPlaying(error=error, detail=detail))
                self._publish(PlayerErrorRaised(error=error))
            case PropertyError(name=name) if not taken:
                error = PropertyUnknownError(name)
                if not self._state.ready:
                    self._startup_error = error
                    self._reject(_Wait.READY, error)
                    self._publish(PlayerReady(error=error))
                self._publish(PlayerErrorRaised(error=error))
            case _:
                pass

        if new_state is not None:
            self._publish(PlayerStatusChanged(status=new_state))

    def _on_spawn_error(self, detail: str) -> None:
        error = SpawnFailureError(detail)
        self._startup_error = error
        new_state = self._state.apply(SpawnError(detail))
        self._reject_all(error)
        self._publish(PlayerReady(error=error))
        self._publish(PlayerErrorRaised(error=error))
        if new_state is not None:
            self._publish(PlayerStatusChanged(status=new_state))

    def _on_exit(self, returncode: int | None) -> None:
        requested = self._supervisor.interrupt_sent
        error = PlayerExitedError(returncode)
        if self._startup_error is None and not self._state.ready:
            self._startup_error = error
        new_state = self._state.mark_exited()
        self._reject_all(error)
        self._queries.fail_pending(error)
        self._publish(PlayerExited(returncode=returncode, requested=requested))
        if not requested:
            self._publish(PlayerErrorRaised(error=error))
        if new_state is not None:
            self._publish(PlayerStatusChanged(status=new_state))

    # === Completion handles ===

    def _new_waiter(self, kind: _Wait) -> asyncio.Future[None]:
        waiter: asyncio.Future[None] = asyncio.get_running_loop().create_future()
        self._waiters[kind].append(waiter)
        return waiter

    def _resolve(self, kind: _Wait) -> None:
        waiters, self._waiters[kind] = self._waiters[kind], []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    def _reject(self, kind: _Wait, error: BaseException) -> None:
        waiters, self._waiters[kind] = self._waiters[kind], []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_exception(error)

    def _reject_all(self, error: BaseException) -> None:
        for kind in _Wait:
            self._reject(kind, error)

    async def _wait(self, waiter: asyncio.Future[None], operation: str) -> None:
        timeout = self._settings.command_timeout
        try:
            await asyncio.wait_for(waiter, timeout=timeout)
        except TimeoutError:
            raise CommandTimeoutError(operation, timeout or 0.0) from None
        finally:
            for waiters in self._waiters.values():
                if waiter in waiters:
                    waiters.remove(waiter)

    # === Helpers ===

    def _ensure_running(self, operation: str) -> None:
        state = self._state.state
        if not self._supervisor.started:
            if isinstance(self._startup_error, SpawnFailureError):
                raise self._startup_error
            raise InvalidOperationError(operation, state.value, ErrorMessages.PLAYER_NOT_STARTED)
        if state == PlayerState.EXITED or not self._supervisor.running:
            raise PlayerExitedError(self._supervisor.returncode)

    def _send(self, command: str) -> None:
        self._supervisor.channel.send(command)

    def _publish(self, event: DomainEvent) -> None:
        self._events.publish_nowait(event)

    def _apply_initial_volume(self) -> None:
        if self._settings.volume is None:
            return
        try:
            self._send(commands.set_volume(self._settings.volume))
        except PlayerExitedError:
            return
        logger.debug(LogTemplates.VOLUME_SET, self._settings.volume)
