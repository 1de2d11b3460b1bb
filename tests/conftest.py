import sys
from pathlib import Path

import pytest
import pytest_asyncio

from mplayer_control.config.settings import PlayerSettings, QuerySettings, clear_settings_cache

FAKE_MPLAYER = Path(__file__).parent / "fake_mplayer.py"

# ============================================================================
# Settings Fixtures
# ============================================================================


def fake_player_settings(*flags: str, **overrides) -> PlayerSettings:
    """Settings that run the slave-mode emulator with the current interpreter."""
    values = {
        "executable": sys.executable,
        "args": ("-u", str(FAKE_MPLAYER), *flags),
        "command_timeout": 5.0,
        "exit_timeout": 5.0,
    }
    values.update(overrides)
    return PlayerSettings(**values)


@pytest.fixture
def make_player_settings():
    """Factory for emulator settings with extra flags or overrides."""
    return fake_player_settings


@pytest.fixture
def player_settings() -> PlayerSettings:
    return fake_player_settings()


@pytest.fixture
def query_settings() -> QuerySettings:
    return QuerySettings(poll_interval=0.02, timeout=3.0)


@pytest.fixture(autouse=True)
def _fresh_settings_cache():
    """Settings are cached process-wide; start every test from a clean slate."""
    clear_settings_cache()
    yield
    clear_settings_cache()


# ============================================================================
# Media Fixtures
# ============================================================================


@pytest.fixture
def sample_track(tmp_path: Path) -> Path:
    """An (empty) audio file; the emulator only checks that it exists."""
    path = tmp_path / "Sample 1.flac"
    path.write_bytes(b"")
    return path


@pytest.fixture
def second_track(tmp_path: Path) -> Path:
    path = tmp_path / "Sample 2.flac"
    path.write_bytes(b"")
    return path


# ============================================================================
# Player Fixtures
# ============================================================================


@pytest_asyncio.fixture
async def player(player_settings, query_settings):
    """A started, ready player that is shut down after the test."""
    from mplayer_control.application.services.player_service import MPlayer

    mplayer = MPlayer(player_settings, query_settings)
    await mplayer.start()
    await mplayer.await_ready()
    yield mplayer
    await mplayer.exit()
    await mplayer.events.drain()
