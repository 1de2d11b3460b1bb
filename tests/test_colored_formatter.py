"""Tests for ColoredFormatter."""

import logging
from io import StringIO
from unittest.mock import patch

import pytest

from mplayer_control.utils.logging import ColoredFormatter

RESET = "\033[0m"
DIM = "\033[2m"
LEVEL_COLORS = {
    logging.DEBUG: "\033[36m",
    logging.INFO: "\033[32m",
    logging.WARNING: "\033[33m",
    logging.ERROR: "\033[31m",
    logging.CRITICAL: "\033[1;31m",
}


def _make_record(level: int, message: str = "test", args: tuple = ()) -> logging.LogRecord:
    return logging.LogRecord(
        name="mplayer_control.test",
        level=level,
        pathname="test.py",
        lineno=1,
        msg=message,
        args=args,
        exc_info=None,
    )


def _tty() -> StringIO:
    stream = StringIO()
    stream.isatty = lambda: True  # type: ignore[method-assign]
    return stream


class TestColoredFormatter:
    """Tests for ANSI color formatting."""

    def _tty_formatter(self) -> ColoredFormatter:
        return ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())

    @pytest.mark.parametrize(
        "level",
        [logging.DEBUG, logging.INFO, logging.WARNING, logging.ERROR, logging.CRITICAL],
    )
    def test_color_applied_per_level(self, level: int):
        """Should apply the correct ANSI color code for each level."""
        fmt = self._tty_formatter()
        output = fmt.format(_make_record(level))

        assert LEVEL_COLORS[level] in output
        assert RESET in output

    def test_no_color_when_no_color_env_set(self):
        """Should not apply colors when NO_COLOR env var is set."""
        fmt = self._tty_formatter()

        with patch.dict("os.environ", {"NO_COLOR": "1"}):
            output = fmt.format(_make_record(logging.INFO))

        assert "\033[" not in output

    def test_no_color_when_stream_not_tty(self):
        """Should not apply colors when stream is not a TTY."""
        fmt = ColoredFormatter("%(levelname)s | %(message)s", stream=StringIO())

        output = fmt.format(_make_record(logging.ERROR))

        assert "\033[" not in output

    def test_format_output_matches_pattern(self):
        """Should produce output matching the configured format string."""
        fmt = self._tty_formatter()
        output = fmt.format(_make_record(logging.INFO, "hello world"))

        plain = output.replace(LEVEL_COLORS[logging.INFO], "").replace(RESET, "")
        assert plain == "INFO | hello world"

    def test_original_record_not_mutated(self):
        """Should not mutate the original LogRecord."""
        fmt = self._tty_formatter()
        record = _make_record(logging.WARNING)
        original_levelname = record.levelname

        fmt.format(record)

        assert record.levelname == original_levelname


class TestTrafficDimming:
    """Tests for dimming raw player traffic."""

    @pytest.mark.parametrize(
        "message,args",
        [
            ("-> %s", ("pausing_keep_force get_time_pos",)),
            ("<- [%s] %s", ("stdout", "ANS_LENGTH=1")),
        ],
    )
    def test_traffic_is_dimmed(self, message: str, args: tuple):
        """Should dim command and output lines logged at DEBUG."""
        fmt = self._formatter()

        output = fmt.format(_make_record(logging.DEBUG, message, args))

        assert output.startswith(DIM)
        assert output.endswith(RESET)

    def test_regular_debug_not_dimmed(self):
        """Should leave other DEBUG messages alone."""
        fmt = self._formatter()
        record = _make_record(logging.DEBUG, "Player state %s -> %s", ("ready", "playing"))

        output = fmt.format(record)

        assert not output.startswith(DIM)

    def test_traffic_prefix_at_info_not_dimmed(self):
        """Should only dim traffic at DEBUG."""
        fmt = self._formatter()

        output = fmt.format(_make_record(logging.INFO, "-> %s", ("stop",)))

        assert not output.startswith(DIM)

    def _formatter(self) -> ColoredFormatter:
        return ColoredFormatter("%(levelname)s | %(message)s", stream=_tty())
