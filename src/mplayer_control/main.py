#!/usr/bin/env python3
"""Console entry point: play files through a supervised MPlayer process."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import logging.config
import math
import sys
from collections.abc import Sequence
from pathlib import Path

from mplayer_control.domain.shared.messages import LogTemplates

_LOGGING_CONFIG_PATH = Path(__file__).resolve().parents[2] / "logging_config.json"

logger = logging.getLogger(__name__)


def setup_logging(log_level: str = "INFO") -> None:
    resolved_level = getattr(logging, log_level.upper(), logging.INFO)

    try:
        with open(_LOGGING_CONFIG_PATH) as f:
            config = json.load(f)
        logging.config.dictConfig(config)
    except (FileNotFoundError, json.JSONDecodeError, ValueError):
        logging.warning(LogTemplates.LOGGING_CONFIG_FALLBACK, _LOGGING_CONFIG_PATH)
        logging.basicConfig(
            level=resolved_level,
            format="%(asctime)s | %(levelname)-8s | %(name)s | %(message)s",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    logging.getLogger().setLevel(resolved_level)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="mplayer-control",
        description="Play files through MPlayer in slave mode and report progress.",
    )
    parser.add_argument("files", nargs="+", type=Path, help="Files to play, in order")
    parser.add_argument(
        "--interval",
        type=float,
        default=1.0,
        help="Seconds between progress reports (default: 1.0)",
    )
    parser.add_argument("--volume", type=int, default=None, help="Initial volume (0-100)")
    return parser


def _format_seconds(value: float) -> str:
    if math.isnan(value):
        return "--:--"
    minutes, seconds = divmod(int(value), 60)
    return f"{minutes:02d}:{seconds:02d}"


async def run(files: Sequence[Path], interval: float, volume: int | None = None) -> int:
    """Play ``files`` and print progress until playback ends or is interrupted."""
    from mplayer_control.application.services.player_service import MPlayer
    from mplayer_control.config.settings import get_settings
    from mplayer_control.domain.shared.exceptions import PropertyUnknownError

    settings = get_settings()
    player_settings = settings.player
    if volume is not None:
        player_settings = player_settings.model_copy(update={"volume": volume})

    async with MPlayer(player_settings, settings.query) as player:
        first, *rest = files
        await player.play(first.resolve())
        for path in rest:
            await player.play(path.resolve(), append=True)

        info = await player.get_track_infos()
        print(f"{info.artist or '?'} - {info.title or first.name} ({info.album or '?'})")

        while True:
            await asyncio.sleep(interval)
            try:
                progress = await player.get_progress()
            except PropertyUnknownError:
                break
            if math.isnan(progress.total):
                # Nothing is loaded anymore: the playlist ran out.
                break
            print(
                f"\r{_format_seconds(progress.time)} / {_format_seconds(progress.total)}"
                f" ({progress.percent:.0f}%) [{player.get_status().value}]",
                end="",
                flush=True,
            )
        print()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    from mplayer_control.config.settings import get_settings
    from mplayer_control.domain.shared.exceptions import PlayerError

    settings = get_settings()
    setup_logging(settings.log_level)
    args = build_parser().parse_args(argv)

    logger.info(LogTemplates.APP_STARTING.format(environment=settings.environment))

    try:
        return asyncio.run(run(args.files, args.interval, args.volume))
    except KeyboardInterrupt:
        logger.info(LogTemplates.APP_INTERRUPTED)
        return 0
    except PlayerError as e:
        logger.error(LogTemplates.APP_FATAL_ERROR, e.message)
        return 1


def cli() -> None:
    """Console script entry point (used by pyproject.toml [project.scripts])."""
    sys.exit(main())


if __name__ == "__main__":
    cli()  # pragma: no cover
