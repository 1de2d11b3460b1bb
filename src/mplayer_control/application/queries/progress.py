"""Playback progress query: percent position, time position and length."""

from __future__ import annotations

import re
from typing import Final

from mplayer_control.application.queries.answers import (
    INCOMPLETE,
    Incomplete,
    count_answers,
    parse_float,
    search_group,
)
from mplayer_control.domain.playback.value_objects import Progress
from mplayer_control.infrastructure.protocol.commands import PROGRESS_COMMANDS

PERCENT_RE: Final = re.compile(r"ANS_PERCENT_POSITION=(.*)")
TIME_RE: Final = re.compile(r"ANS_TIME_POSITION=(.*)")
LENGTH_RE: Final = re.compile(r"ANS_LENGTH=(.*)")

_ANSWER_PREFIXES: Final = ("ANS_PERCENT_POSITION=", "ANS_TIME_POSITION=", "ANS_LENGTH=")


def extract_progress(text: str) -> Progress | Incomplete:
    if count_answers(text, _ANSWER_PREFIXES) < len(PROGRESS_COMMANDS):
        return INCOMPLETE
    return Progress(
        percent=parse_float(search_group(PERCENT_RE, text)),
        time=parse_float(search_group(TIME_RE, text)),
        total=parse_float(search_group(LENGTH_RE, text)),
    )
