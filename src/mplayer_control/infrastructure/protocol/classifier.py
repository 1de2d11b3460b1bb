"""
Output Classifier

Turns the player's raw, unframed output into typed signals. Classification is
plain substring search: the slave-mode output has no grammar worth parsing,
only a handful of fixed markers mixed with free text.
"""

from __future__ import annotations

import codecs
import re
from typing import Final

from mplayer_control.domain.playback.signals import (
    OutputStream,
    PausedChanged,
    PlaybackError,
    PlaybackStarted,
    PropertyError,
    RawLine,
    Ready,
    Signal,
)

READY_MARKER: Final[str] = "MPlayer"
PLAYBACK_STARTED_MARKER: Final[str] = "Starting playback..."
PAUSE_MARKER: Final[str] = "=====  PAUSE  ====="
PAUSE_ANSWER: Final[str] = "ANS_pause=yes"
RESUME_ANSWER: Final[str] = "ANS_pause=no"
PROPERTY_ERROR_MARKER: Final[str] = "Failed to get value of property"
PLAYBACK_ERROR_MARKERS: Final[tuple[str, ...]] = ("File not found:", "Failed to open")
ANSWER_PREFIX: Final[str] = "ANS_"

_PROPERTY_ERROR_RE = re.compile(re.escape(PROPERTY_ERROR_MARKER) + r"\s*(.*)")
_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def property_name_from(text: str) -> str:
    """Extract the property name from a property-error line.

    The player prints ``Failed to get value of property 'volume'.``; quotes
    and the trailing period are dropped.
    """
    match = _PROPERTY_ERROR_RE.search(text)
    if not match:
        return "unknown"
    name = match.group(1).strip().rstrip(".").strip("'\"")
    return name or "unknown"


def classify_line(text: str, stream: OutputStream = OutputStream.STDOUT) -> list[Signal]:
    """Classify one complete output line.

    Answer lines are always kept as ``RawLine`` for the pending query. Their
    values are free text (a title may read ``Failed to open the door``), so
    the only marker looked for in them is the pause answer.
    """
    if stream == OutputStream.STDERR and PROPERTY_ERROR_MARKER in text:
        return [PropertyError(property_name_from(text))]

    if text.lstrip().startswith(ANSWER_PREFIX):
        return _classify_answer(text, stream)

    if any(marker in text for marker in PLAYBACK_ERROR_MARKERS):
        return [PlaybackError(text.strip())]

    signals: list[Signal] = []
    if stream == OutputStream.STDOUT:
        if READY_MARKER in text:
            signals.append(Ready())
        if PLAYBACK_STARTED_MARKER in text:
            signals.append(PlaybackStarted())
        if PAUSE_MARKER in text:
            signals.append(PausedChanged(paused=True))

    if not signals:
        signals.append(RawLine(text, stream))
    return signals


def _classify_answer(text: str, stream: OutputStream) -> list[Signal]:
    signals: list[Signal] = []
    answer = text.strip()
    if stream == OutputStream.STDOUT:
        if answer == PAUSE_ANSWER:
            signals.append(PausedChanged(paused=True))
        elif answer == RESUME_ANSWER:
            signals.append(PausedChanged(paused=False))
    signals.append(RawLine(text, stream))
    return signals


class OutputClassifier:
    """Incremental classifier for one output stream.

    Chunks are buffered until a line break completes a line, so markers split
    across reads are still recognized.
    """

    def __init__(self, stream: OutputStream = OutputStream.STDOUT) -> None:
        self._stream = stream
        self._partial = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    @property
    def stream(self) -> OutputStream:
        return self._stream

    def feed(self, chunk: bytes) -> list[Signal]:
        """Classify every line completed by ``chunk``."""
        text = self._partial + self._decoder.decode(chunk)
        *lines, self._partial = _LINE_BREAK_RE.split(text)
        return self._classify_all(lines)

    def flush(self) -> list[Signal]:
        """Classify any unterminated trailing text (call at end of stream)."""
        lines, self._partial = [self._partial + self._decoder.decode(b"", final=True)], ""
        return self._classify_all(lines)

    def _classify_all(self, lines: list[str]) -> list[Signal]:
        signals: list[Signal] = []
        for line in lines:
            if line.strip():
                signals.extend(classify_line(line, self._stream))
        return signals
