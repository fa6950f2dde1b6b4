"""Tests for roadmap.core.settings – environment configuration."""

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from roadmap.core.settings import DEFAULT_SUBMIT_DELAY_MS, Settings


class TestDefaults:
    def test_empty_environment(self):
        s = Settings.from_env({})
        assert s == Settings()
        assert s.project_name is None
        assert s.seed_path is None
        assert s.submit_delay_ms == DEFAULT_SUBMIT_DELAY_MS == 1500
        assert s.toast_ms == 3000
        assert s.log_level == "INFO"

    def test_reads_os_environ(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ROADMAP_PROJECT_NAME", "Orion")
        assert Settings.from_env().project_name == "Orion"


class TestOverrides:
    def test_all_values(self, tmp_path: Path):
        seed = tmp_path / "seed.yaml"
        s = Settings.from_env(
            {
                "ROADMAP_PROJECT_NAME": "  Orion ",
                "ROADMAP_SEED_FILE": str(seed),
                "ROADMAP_SUBMIT_DELAY_MS": "10",
                "ROADMAP_TOAST_MS": "500",
                "ROADMAP_LOG_LEVEL": "debug",
            }
        )
        assert s.project_name == "Orion"
        assert s.seed_path == seed
        assert s.submit_delay_ms == 10
        assert s.toast_ms == 500
        assert s.log_level == "DEBUG"

    def test_blank_values_ignored(self):
        s = Settings.from_env({"ROADMAP_PROJECT_NAME": "  ", "ROADMAP_SEED_FILE": "", "ROADMAP_TOAST_MS": " "})
        assert s == Settings()

    def test_zero_delay_allowed(self):
        assert Settings.from_env({"ROADMAP_SUBMIT_DELAY_MS": "0"}).submit_delay_ms == 0


class TestInvalidValues:
    @pytest.mark.parametrize("raw", ["soon", "1.5", "-10"])
    def test_bad_integer_falls_back(self, raw, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="roadmap.core.settings"):
            s = Settings.from_env({"ROADMAP_SUBMIT_DELAY_MS": raw})
        assert s.submit_delay_ms == DEFAULT_SUBMIT_DELAY_MS
        assert "ROADMAP_SUBMIT_DELAY_MS" in caplog.text

    def test_unknown_log_level(self, caplog: pytest.LogCaptureFixture):
        with caplog.at_level(logging.WARNING, logger="roadmap.core.settings"):
            s = Settings.from_env({"ROADMAP_LOG_LEVEL": "chatty"})
        assert s.log_level == "INFO"
        assert "ROADMAP_LOG_LEVEL" in caplog.text
