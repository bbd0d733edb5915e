"""Tests for engine constants and environment-backed settings."""

import dataclasses
from collections.abc import Generator
from pathlib import Path

import pytest

import vce.config as config


@pytest.fixture
def clean_env(monkeypatch: pytest.MonkeyPatch) -> Generator[pytest.MonkeyPatch, None, None]:
    for name in (
        "VCE_ASSET_ROOT",
        "VCE_OUTPUT_FOLDER",
        "VCE_WORKERS",
        "VCE_BRAND",
        "VCE_COMPOSITION",
    ):
        monkeypatch.delenv(name, raising=False)
    yield monkeypatch
    monkeypatch.undo()
    config.reload_settings()


def test_defaults(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setattr(config.os, "cpu_count", lambda: 3)

    settings = config.reload_settings()

    assert settings.asset_root == Path("public")
    assert settings.output_folder == Path("renders")
    assert settings.max_workers == 3
    assert settings.brand == "lunary"
    assert settings.default_composition == "short-form"
    assert config.get_settings() is settings


def test_environment_overrides(clean_env: pytest.MonkeyPatch, tmp_path: Path) -> None:
    clean_env.setenv("VCE_ASSET_ROOT", str(tmp_path))
    clean_env.setenv("VCE_WORKERS", "6")
    clean_env.setenv("VCE_BRAND", "  Stellar ")
    clean_env.setenv("VCE_COMPOSITION", "landscape")

    settings = config.reload_settings()

    assert settings.asset_root == tmp_path
    assert settings.max_workers == 6
    assert settings.brand == "stellar"
    assert settings.default_composition == "landscape"


@pytest.mark.parametrize("raw", ["abc", "0", "-2", " "])
def test_invalid_worker_count_falls_back_to_cpu_count(
    clean_env: pytest.MonkeyPatch, raw: str
) -> None:
    clean_env.setenv("VCE_WORKERS", raw)
    clean_env.setattr(config.os, "cpu_count", lambda: 5)

    assert config.reload_settings().max_workers == 5


def test_blank_brand_uses_default(clean_env: pytest.MonkeyPatch) -> None:
    clean_env.setenv("VCE_BRAND", "   ")

    assert config.reload_settings().brand == config.CONTEXT_CONFIG.default_brand


def test_engine_constants_are_frozen() -> None:
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.ZOOM_CONFIG.spring_in_seconds = 1.0  # type: ignore[misc]

    assert set(config.OVERLAY_STYLES) == {"hook", "cta", "stamp", "chapter"}
    assert config.OVERLAY_STYLES["stamp"].pops_in is True
