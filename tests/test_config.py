"""Tests for environment-driven settings."""

from __future__ import annotations

from pathlib import Path

import pytest

from poke_predict.config import PredictorSettings


def test_defaults_without_environment(monkeypatch) -> None:
    for name in ("FORMAT", "MONTH", "RATING", "STATS_DIR", "RULESET", "VALIDATION_BUDGET"):
        monkeypatch.delenv(f"POKE_PREDICT_{name}", raising=False)

    settings = PredictorSettings.from_env(load_files=False)

    assert settings.format_id == "gen9ou"
    assert settings.rating == 1695
    assert settings.ruleset is None
    assert settings.validation_budget == 0


def test_environment_overrides(monkeypatch) -> None:
    monkeypatch.setenv("POKE_PREDICT_FORMAT", "gen4ou")
    monkeypatch.setenv("POKE_PREDICT_MONTH", "2025-09")
    monkeypatch.setenv("POKE_PREDICT_RATING", "1500")
    monkeypatch.setenv("POKE_PREDICT_STATS_DIR", "/tmp/stats")
    monkeypatch.setenv("POKE_PREDICT_RULESET", "rules.json")
    monkeypatch.setenv("POKE_PREDICT_VALIDATION_BUDGET", "12")

    settings = PredictorSettings.from_env(load_files=False)

    assert settings.format_id == "gen4ou"
    assert settings.month == "2025-09"
    assert settings.rating == 1500
    assert settings.stats_dir == Path("/tmp/stats")
    assert settings.ruleset == Path("rules.json")
    assert settings.validation_budget == 12


def test_bad_integer_names_the_variable(monkeypatch) -> None:
    monkeypatch.setenv("POKE_PREDICT_RATING", "high")

    with pytest.raises(ValueError, match="POKE_PREDICT_RATING"):
        PredictorSettings.from_env(load_files=False)


def test_local_env_file_overrides_environment(monkeypatch, tmp_path) -> None:
    # Registered with monkeypatch so the value written by dotenv is undone afterwards.
    monkeypatch.setenv("POKE_PREDICT_FORMAT", "gen9ou")
    monkeypatch.chdir(tmp_path)
    (tmp_path / ".env.local").write_text("POKE_PREDICT_FORMAT=gen3ou\n", encoding="utf-8")

    settings = PredictorSettings.from_env()

    assert settings.format_id == "gen3ou"
