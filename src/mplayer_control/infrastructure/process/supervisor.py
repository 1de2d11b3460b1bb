"""
Player Process Supervisor

Infrastructure component owning the player process: spawning it, pumping its
output pipes, observing its exit and interrupting it.
"""

from __future__ import annotations

import asyncio
import logging
import signal
from collections.abc import Callable, Sequence
from dataclasses import dataclass
from typing import Final

from mplayer_control.domain.playback.signals import OutputStream
from mplayer_control.domain.shared.messages import ErrorMessages, LogTemplates
from mplayer_control.infrastructure.protocol.commands import CommandChannel

logger = logging.getLogger(__name__)

DEFAULT_READ_SIZE: Final[int] = 4096


@dataclass
class SupervisorCallbacks:
    """Where the supervisor reports what it observes.

    All callbacks run on the event loop, in the order things were observed.
    """

    on_output: Callable[[OutputStream, bytes], None]
    on_eof: Callable[[OutputStream], None]
    on_spawn_error: Callable[[str], None]
    on_exit: Callable[[int | None], None]


class ProcessSupervisor:
    """Lifecycle of one player process.

    Spawn failures are reported through ``on_spawn_error`` instead of being
    raised, so callers observe them the same way as any later failure.
    """

    def __init__(self, callbacks: SupervisorCallbacks, read_size: int = DEFAULT_READ_SIZE) -> None:
        self._callbacks = callbacks
        self._read_size = read_size
        self._process: asyncio.subprocess.Process | None = None
        self._channel: CommandChannel | None = None
        self._watcher: asyncio.Task[None] | None = None
        self._exited = asyncio.Event()
        self._interrupted = False
        self._killed = False

    @property
    def pid(self) -> int | None:
        return self._process.pid if self._process else None

    @property
    def returncode(self) -> int | None:
        return self._process.returncode if self._process else None

    @property
    def started(self) -> bool:
        return self._process is not None

    @property
    def running(self) -> bool:
        return self._process is not None and not self._exited.is_set()

    @property
    def interrupt_sent(self) -> bool:
        return self._interrupted

    @property
    def killed(self) -> bool:
        """True when the process had to be killed after ignoring the interrupt."""
        return self._killed

    @property
    def terminated_by_interrupt(self) -> bool:
        """True when the process died from the interrupt it was sent."""
        return self._exited.is_set() and self.returncode == -signal.SIGINT

    @property
    def channel(self) -> CommandChannel:
        if self._channel is None:
            raise RuntimeError(ErrorMessages.PLAYER_NOT_STARTED)
        return self._channel

    async def start(self, executable: str, args: Sequence[str]) -> bool:
        """Spawn the player with piped stdio.

        Returns:
            True if the process was started; False if spawning failed (the
            failure has been reported through ``on_spawn_error``).
        """
        if self._process is not None:
            raise RuntimeError(ErrorMessages.PLAYER_ALREADY_STARTED)

        logger.info(LogTemplates.PROCESS_SPAWNING, executable, " ".join(args))
        try:
            process = await asyncio.create_subprocess_exec(
                executable,
                *args,
                stdin=asyncio.subprocess.PIPE,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            detail = f"spawn {executable} {e.strerror or e}"
            logger.error(LogTemplates.PROCESS_SPAWN_FAILED, executable, e)
            self._exited.set()
            self._callbacks.on_spawn_error(detail)
            return False

        assert process.stdin is not None
        assert process.stdout is not None
        assert process.stderr is not None

        self._process = process
        self._channel = CommandChannel(process.stdin)
        logger.info(LogTemplates.PROCESS_SPAWNED, process.pid)

        readers = [
            asyncio.create_task(self._pump(process.stdout, OutputStream.STDOUT)),
            asyncio.create_task(self._pump(process.stderr, OutputStream.STDERR)),
        ]
        self._watcher = asyncio.create_task(self._watch(process, readers))
        return True

    async def wait(self) -> int | None:
        """Wait until the process exit has been observed."""
        await self._exited.wait()
        return self.returncode

    async def terminate(self, timeout: float | None = None) -> int | None:
        """Interrupt the player and wait for it to exit.

        SIGINT lets the player shut down cleanly. If ``timeout`` is given and
        the player is still alive after it, the process is killed.

        Returns:
            The process return code (``-SIGINT`` when the interrupt killed it).
        """
        if self._process is None or self._exited.is_set():
            return self.returncode

        logger.info(LogTemplates.PROCESS_INTERRUPTING, self._process.pid)
        self._interrupted = True
        try:
            self._process.send_signal(signal.SIGINT)
        except ProcessLookupError:
            pass

        try:
            await asyncio.wait_for(self._exited.wait(), timeout=timeout)
        except TimeoutError:
            logger.warning(LogTemplates.PROCESS_KILL_AFTER_TIMEOUT, timeout, self._process.pid)
            self._killed = True
            try:
                self._process.kill()
            except ProcessLookupError:
                pass
            await self._exited.wait()
        return self.returncode

    async def _pump(self, reader: asyncio.StreamReader, stream: OutputStream) -> None:
        try:
            while True:
                chunk = await reader.read(self._read_size)
                if not chunk:
                    break
                self._callbacks.on_output(stream, chunk)
        except (ConnectionResetError, BrokenPipeError) as e:
            logger.debug(LogTemplates.PROCESS_STREAM_READ_ERROR, stream.value, e)
        finally:
            self._callbacks.on_eof(stream)

    async def _watch(
        self, process: asyncio.subprocess.Process, readers: list[asyncio.Task[None]]
    ) -> None:
        # Everything the player printed is delivered before its exit.
        await asyncio.gather(*readers, return_exceptions=True)
        returncode = await process.wait()
        if self._channel is not None:
            self._channel.close()
        if self._interrupted:
            logger.info(LogTemplates.PROCESS_EXITED, returncode)
        else:
            logger.warning(LogTemplates.PROCESS_EXITED_UNEXPECTEDLY, returncode)
        self._exited.set()
        self._callbacks.on_exit(returncode)
