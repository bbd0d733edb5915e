import contextlib
import io
import logging
import sys
from collections.abc import Generator, Sequence
from pathlib import Path
from typing import Any

import pytest

PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

import vce.__main__ as vce_main
from vce.runtime.resource_pool import ResourcePool
from vce.timeline.scene import Scene
from vce.timeline.symbols import ASTRONOMICON_FONT, MOON_PHASE_ICONS

ASSET_FILES: tuple[str, ...] = (
    ASTRONOMICON_FONT,
    *MOON_PHASE_ICONS.values(),
    "audio/voice.mp3",
    "audio/music.mp3",
)


def sample_record() -> dict[str, Any]:
    """Six-second portrait scene exercising every timeline element."""
    return {
        "fps": 30,
        "durationSeconds": 6,
        "seed": "saturn-aries",
        "segments": [
            {"text": "Saturn enters Aries this week", "startTime": 0.0, "endTime": 2.5},
            {"text": "Expect slow lasting change", "startTime": 2.5, "endTime": 4.0},
            {"text": "Follow for more", "startTime": 4.5, "endTime": 6.0},
        ],
        "zoomPoints": [
            {"startTime": 0.0, "endTime": 2.0, "scale": 1.25, "anchorX": 0.5, "anchorY": 0.4}
        ],
        "tapPoints": [{"time": 1.0, "x": 0.3, "y": 0.6}],
        "overlays": [
            {"text": "Big shift ahead", "startTime": 0.0, "endTime": 1.5, "style": "hook"},
            {"text": "NEW", "startTime": 2.0, "endTime": 3.0, "style": "stamp"},
        ],
        "voiceTrack": {"src": "audio/voice.mp3", "startOffset": 0.2},
        "musicTrack": {"src": "audio/music.mp3"},
    }


@pytest.fixture
def scene_record() -> dict[str, Any]:
    return sample_record()


@pytest.fixture
def sample_scene() -> Scene:
    return Scene.from_dict(sample_record())


@pytest.fixture(scope="session")
def asset_root(tmp_path_factory: pytest.TempPathFactory) -> Path:
    """Static asset folder holding every file the sample scene references."""
    root = tmp_path_factory.mktemp("public")
    for ref in ASSET_FILES:
        path = root / ref
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(b"")
    return root


@pytest.fixture(scope="session")
def asset_pool() -> Generator[ResourcePool, None, None]:
    """Session-wide asset pool, closed explicitly at teardown."""
    pool = ResourcePool()
    yield pool
    pool.close()


@pytest.fixture
def run_cli(monkeypatch: pytest.MonkeyPatch):
    """Run the VCE CLI with a custom argv list."""
    monkeypatch.setattr(vce_main, "load_dotenv", lambda: None)

    def _run_cli(args: Sequence[str]) -> tuple[int, str]:
        stdout = io.StringIO()
        with contextlib.redirect_stdout(stdout):
            try:
                vce_main.main(list(args))
            except SystemExit as exc:
                code = exc.code if isinstance(exc.code, int) else 1
                return code, stdout.getvalue()
        return 0, stdout.getvalue()

    return _run_cli


@pytest.fixture(autouse=True)
def _silence_halo(monkeypatch: pytest.MonkeyPatch) -> None:
    """Replace Halo spinners with a silent stand-in for tests."""

    class _DummyHalo:
        def __init__(self, *args, **kwargs):
            self.text = kwargs.get("text")

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc, tb):
            return False

        def start(self, *args, **kwargs):
            return self

        def succeed(self, *args, **kwargs):
            return self

        def fail(self, *args, **kwargs):
            return self

    monkeypatch.setattr("vce.utils.timeline_utils.Halo", _DummyHalo)
    monkeypatch.setattr("vce.runtime.batch.Halo", _DummyHalo)


@pytest.fixture
def caplog_info(caplog: pytest.LogCaptureFixture) -> pytest.LogCaptureFixture:
    caplog.set_level(logging.INFO)
    return caplog
