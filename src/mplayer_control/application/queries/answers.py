"""Helpers shared by the query answer extractions.

The player answers every query command with exactly one ``ANS_`` line:
``ANS_<NAME>=<value>`` on success or ``ANS_ERROR=<reason>`` on failure. An
extraction is complete once one answer per command has arrived.
"""

from __future__ import annotations

import math
import re
from enum import Enum
from typing import Final

ERROR_ANSWER: Final[str] = "ANS_ERROR="
PROPERTY_UNKNOWN_ANSWER: Final[str] = "ANS_ERROR=PROPERTY_UNKNOWN"


class _Incomplete(Enum):
    INCOMPLETE = "incomplete"


INCOMPLETE: Final = _Incomplete.INCOMPLETE
"""Returned by an extraction while the answer text is not complete yet."""

Incomplete = _Incomplete


def count_answers(text: str, prefixes: tuple[str, ...]) -> int:
    """Count answer lines starting with one of ``prefixes`` or an error answer."""
    accepted = (*prefixes, ERROR_ANSWER)
    return sum(1 for line in text.splitlines() if line.lstrip().startswith(accepted))


def is_property_unknown(text: str) -> bool:
    return PROPERTY_UNKNOWN_ANSWER in text


def search_group(pattern: re.Pattern[str], text: str) -> str | None:
    match = pattern.search(text)
    return match.group(1) if match else None


def parse_float(value: str | None) -> float:
    """Parse a numeric answer; missing or malformed text becomes NaN."""
    if value is None:
        return math.nan
    try:
        return float(value.strip())
    except ValueError:
        return math.nan
