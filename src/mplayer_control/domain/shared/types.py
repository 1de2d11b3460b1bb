"""Reusable Pydantic Annotated types for validation.

Every constrained type used by settings and result models is defined here
once, so models can simply annotate their fields::

    from mplayer_control.domain.shared.types import NonEmptyStr, PositiveSeconds

    class MySettings(BaseModel):
        executable: NonEmptyStr
        timeout: PositiveSeconds
"""

from __future__ import annotations

from typing import Annotated

from pydantic import Field

# ── Numeric constraints ─────────────────────────────────────────────

PositiveSeconds = Annotated[float, Field(gt=0.0, le=3600.0)]
"""Duration in seconds: (0 … 3600]."""

PollIntervalSeconds = Annotated[float, Field(gt=0.0, le=5.0)]
"""Query poll interval in seconds: (0 … 5]."""

VolumeLevel = Annotated[int, Field(ge=0, le=100)]
"""Absolute player volume: 0 … 100."""


# ── String constraints ──────────────────────────────────────────────

NonEmptyStr = Annotated[str, Field(min_length=1)]
"""String with at least one character."""
