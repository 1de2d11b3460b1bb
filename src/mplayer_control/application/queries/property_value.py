"""Single property query (``get_property <name>``)."""

from __future__ import annotations

import re
from collections.abc import Callable

from mplayer_control.application.queries.answers import (
    INCOMPLETE,
    Incomplete,
    count_answers,
    search_group,
)


def property_extractor(name: str) -> Callable[[str], str | None | Incomplete]:
    """Build the extraction for property ``name``.

    The extraction yields the raw answer value, or ``None`` when the player
    answered with an error other than an unknown property (for instance a
    property that is unavailable while nothing is loaded).
    """
    prefix = f"ANS_{name}="
    pattern = re.compile(re.escape(prefix) + r"(.*)")

    def extract(text: str) -> str | None | Incomplete:
        if count_answers(text, (prefix,)) < 1:
            return INCOMPLETE
        return search_group(pattern, text)

    return extract
