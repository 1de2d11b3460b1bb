"""
Integration Tests for the Process Supervisor

Runs the slave-mode emulator as a real child process.
"""

import asyncio
import signal
import sys
from pathlib import Path

from mplayer_control.domain.playback.signals import OutputStream
from mplayer_control.infrastructure.process.supervisor import (
    ProcessSupervisor,
    SupervisorCallbacks,
)

FAKE_MPLAYER = Path(__file__).parent / "fake_mplayer.py"


class Recorder:
    """Collects everything the supervisor reports."""

    def __init__(self) -> None:
        self.output: dict[OutputStream, bytearray] = {
            OutputStream.STDOUT: bytearray(),
            OutputStream.STDERR: bytearray(),
        }
        self.eof: list[OutputStream] = []
        self.spawn_errors: list[str] = []
        self.exits: list[int | None] = []

    def callbacks(self) -> SupervisorCallbacks:
        return SupervisorCallbacks(
            on_output=lambda stream, chunk: self.output[stream].extend(chunk),
            on_eof=self.eof.append,
            on_spawn_error=self.spawn_errors.append,
            on_exit=self.exits.append,
        )

    def text(self, stream: OutputStream = OutputStream.STDOUT) -> str:
        return self.output[stream].decode()


async def _wait_for_text(recorder: Recorder, needle: str, timeout: float = 5.0) -> None:
    async def poll() -> None:
        while needle not in recorder.text():
            await asyncio.sleep(0.01)

    await asyncio.wait_for(poll(), timeout)


# =============================================================================
# Spawn Tests
# =============================================================================


class TestSpawn:
    """Tests for starting the process."""

    async def test_missing_executable_reported_not_raised(self):
        """Should report a spawn failure through the callback."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())

        started = await supervisor.start("/nonexistent/mplayer-binary", ["-slave"])

        assert started is False
        assert supervisor.started is False
        assert supervisor.running is False
        assert len(recorder.spawn_errors) == 1
        assert "/nonexistent/mplayer-binary" in recorder.spawn_errors[0]
        assert recorder.exits == []

    async def test_output_is_pumped(self):
        """Should deliver the player's stdout to the output callback."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())

        assert await supervisor.start(sys.executable, ["-u", str(FAKE_MPLAYER)])
        try:
            await _wait_for_text(recorder, "MPlayer")
            assert supervisor.pid is not None
            assert supervisor.running
        finally:
            await supervisor.terminate(5.0)

    async def test_stderr_is_pumped(self):
        """Should deliver stderr separately."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())
        await supervisor.start(
            sys.executable, ["-u", str(FAKE_MPLAYER), "--startup-property-error"]
        )
        try:
            await _wait_for_text(recorder, "MPlayer")
            assert "Failed to get value of property" in recorder.text(OutputStream.STDERR)
        finally:
            await supervisor.terminate(5.0)


# =============================================================================
# Exit Tests
# =============================================================================


class TestExit:
    """Tests for observing and forcing the process exit."""

    async def test_interrupt_exit(self):
        """Should terminate the player with SIGINT."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())
        await supervisor.start(sys.executable, ["-u", str(FAKE_MPLAYER)])
        await _wait_for_text(recorder, "MPlayer")

        returncode = await supervisor.terminate(5.0)

        assert returncode == -signal.SIGINT
        assert supervisor.interrupt_sent
        assert supervisor.terminated_by_interrupt
        assert not supervisor.killed
        assert recorder.exits == [-signal.SIGINT]
        assert sorted(recorder.eof) == sorted([OutputStream.STDOUT, OutputStream.STDERR])
        assert supervisor.channel.closed

    async def test_kill_after_timeout(self):
        """Should kill a player that ignores the interrupt."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())
        await supervisor.start(sys.executable, ["-u", str(FAKE_MPLAYER), "--ignore-sigint"])
        await _wait_for_text(recorder, "MPlayer")

        returncode = await supervisor.terminate(0.3)

        assert returncode == -signal.SIGKILL
        assert supervisor.killed
        assert not supervisor.terminated_by_interrupt

    async def test_unexpected_exit_observed(self):
        """Should report an exit nobody asked for."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())
        await supervisor.start(sys.executable, ["-u", str(FAKE_MPLAYER)])
        await _wait_for_text(recorder, "MPlayer")

        supervisor.channel.send("quit")
        returncode = await asyncio.wait_for(supervisor.wait(), 5.0)

        assert returncode == 0
        assert recorder.exits == [0]
        assert not supervisor.interrupt_sent
        assert not supervisor.running

    async def test_terminate_after_exit_is_noop(self):
        """Should just return the exit code when already exited."""
        recorder = Recorder()
        supervisor = ProcessSupervisor(recorder.callbacks())
        await supervisor.start(sys.executable, ["-u", str(FAKE_MPLAYER)])
        await _wait_for_text(recorder, "MPlayer")
        supervisor.channel.send("quit")
        await supervisor.wait()

        assert await supervisor.terminate(1.0) == 0
        assert not supervisor.interrupt_sent
