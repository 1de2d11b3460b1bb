"""
Slave-mode command vocabulary and the channel that writes it.

Commands are fire-and-forget text lines. Anything that only reads state is
prefixed with ``pausing_keep_force`` so that asking a paused player a question
does not unpause it.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Final

from mplayer_control.domain.shared.exceptions import PlayerExitedError
from mplayer_control.domain.shared.messages import LogTemplates

logger = logging.getLogger(__name__)

LINE_TERMINATOR: Final[str] = "\n"
KEEP_PAUSED: Final[str] = "pausing_keep_force"

FORCE_PAUSE: Final[str] = f"{KEEP_PAUSED} pause"
TOGGLE_PAUSE: Final[str] = "pause"
QUERY_PAUSE: Final[str] = f"{KEEP_PAUSED} get_property pause"
STOP: Final[str] = "stop"

GET_META_ARTIST: Final[str] = f"{KEEP_PAUSED} get_meta_artist"
GET_META_ALBUM: Final[str] = f"{KEEP_PAUSED} get_meta_album"
GET_META_TITLE: Final[str] = f"{KEEP_PAUSED} get_meta_title"
GET_PERCENT_POS: Final[str] = f"{KEEP_PAUSED} get_percent_pos"
GET_TIME_POS: Final[str] = f"{KEEP_PAUSED} get_time_pos"
GET_TIME_LENGTH: Final[str] = f"{KEEP_PAUSED} get_time_length"

TRACK_INFO_COMMANDS: Final[tuple[str, ...]] = (GET_META_ARTIST, GET_META_ALBUM, GET_META_TITLE)
PROGRESS_COMMANDS: Final[tuple[str, ...]] = (GET_PERCENT_POS, GET_TIME_POS, GET_TIME_LENGTH)


def quote_argument(value: str) -> str:
    """Quote a string argument for the slave-mode parser."""
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    return f'"{escaped}"'


def load_file(path: str, append: bool = False) -> str:
    """``loadfile``: replace the current file, or append it to the playlist."""
    command = f"loadfile {quote_argument(path)}"
    return f"{command} 1" if append else command


def get_property(name: str) -> str:
    return f"{KEEP_PAUSED} get_property {name}"


def set_volume(level: int) -> str:
    """Absolute volume (the trailing ``1`` selects absolute mode)."""
    return f"volume {level} 1"


class CommandChannel:
    """Writes commands to the player's input stream, in issue order."""

    def __init__(self, writer: asyncio.StreamWriter) -> None:
        self._writer = writer

    @property
    def closed(self) -> bool:
        return self._writer.is_closing()

    def send(self, command: str) -> None:
        """Write one command line.

        Raises:
            PlayerExitedError: If the input stream is already closed.
        """
        if self._writer.is_closing():
            raise PlayerExitedError()
        logger.debug(LogTemplates.COMMAND_SENT, command)
        try:
            self._writer.write(f"{command}{LINE_TERMINATOR}".encode())
        except (BrokenPipeError, ConnectionResetError) as e:
            logger.warning(LogTemplates.COMMAND_WRITE_FAILED, command, e)
            raise PlayerExitedError() from e

    def send_all(self, commands: list[str] | tuple[str, ...]) -> None:
        for command in commands:
            self.send(command)

    async def drain(self) -> None:
        """Wait until written commands were flushed to the pipe."""
        try:
            await self._writer.drain()
        except (BrokenPipeError, ConnectionResetError) as e:
            raise PlayerExitedError() from e

    def close(self) -> None:
        if not self._writer.is_closing():
            self._writer.close()
