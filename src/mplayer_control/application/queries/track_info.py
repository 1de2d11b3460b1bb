"""Track metadata query: artist, album and title tags."""

from __future__ import annotations

import re
from typing import Final

from mplayer_control.application.queries.answers import (
    INCOMPLETE,
    Incomplete,
    count_answers,
    search_group,
)
from mplayer_control.domain.playback.value_objects import TrackInfo
from mplayer_control.infrastructure.protocol.commands import TRACK_INFO_COMMANDS

ARTIST_RE: Final = re.compile(r"ANS_META_ARTIST='(.*)'")
ALBUM_RE: Final = re.compile(r"ANS_META_ALBUM='(.*)'")
TITLE_RE: Final = re.compile(r"ANS_META_TITLE='(.*)'")

_ANSWER_PREFIXES: Final = ("ANS_META_",)


def extract_track_info(text: str) -> TrackInfo | Incomplete:
    """Build a ``TrackInfo`` once every metadata command was answered.

    A tag the player did not report (or reported as an error) is ``None``.
    """
    if count_answers(text, _ANSWER_PREFIXES) < len(TRACK_INFO_COMMANDS):
        return INCOMPLETE
    return TrackInfo(
        artist=search_group(ARTIST_RE, text),
        album=search_group(ALBUM_RE, text),
        title=search_group(TITLE_RE, text),
    )
