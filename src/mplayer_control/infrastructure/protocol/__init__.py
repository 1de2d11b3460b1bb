"""Slave-mode protocol - command channel and output classifier."""

from mplayer_control.infrastructure.protocol.classifier import OutputClassifier, classify_line
from mplayer_control.infrastructure.protocol.commands import CommandChannel

__all__ = [
    "CommandChannel",
    "OutputClassifier",
    "classify_line",
]
