"""Tests for configuration loading and command line handling."""

from __future__ import annotations

import logging
from unittest.mock import MagicMock

import pytest

from enhancer_genie.config.app_config import AppConfig
from enhancer_genie.core.telemetry import is_profiling_enabled, log_duration
from enhancer_genie.main import build_config, main, parse_args


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch):
    for name in ("ENHANCER_GENIE_API_URL", "ENHANCER_GENIE_TIMEOUT", "ENHANCER_GENIE_CATALOG_FILE",
                 "ENHANCER_GENIE_STORAGE_PREFIX", "ENHANCER_GENIE_PORT", "ENHANCER_GENIE_PROFILE"):
        monkeypatch.delenv(name, raising=False)


class TestAppConfig:
    def test_defaults(self):
        config = AppConfig.from_env()
        assert config.api_base_url == "http://localhost:5000/api"
        assert config.storage_prefix == "enhancer_genie."
        assert config.history_key == "history"
        assert config.port == 8080

    def test_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENHANCER_GENIE_API_URL", "https://genie.example.org/api/")
        monkeypatch.setenv("ENHANCER_GENIE_TIMEOUT", "12.5")
        monkeypatch.setenv("ENHANCER_GENIE_PORT", "9000")

        config = AppConfig.from_env()

        assert config.api_base_url == "https://genie.example.org/api"
        assert config.request_timeout == 12.5
        assert config.port == 9000

    def test_invalid_values_are_ignored(self, monkeypatch: pytest.MonkeyPatch, caplog):
        monkeypatch.setenv("ENHANCER_GENIE_PORT", "eighty")
        with caplog.at_level(logging.WARNING):
            config = AppConfig.from_env()
        assert config.port == 8080
        assert "ENHANCER_GENIE_PORT" in caplog.text

    def test_overrides_win_over_environment(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setenv("ENHANCER_GENIE_PORT", "9000")
        assert AppConfig.from_env(port=7000).port == 7000
        assert AppConfig.from_env(port=None).port == 9000


class TestCommandLine:
    def test_flags(self):
        config = build_config(parse_args(["--port", "8123", "--no-browser", "--api-url", "http://x/api"]))
        assert config.port == 8123
        assert config.open_browser is False
        assert config.api_base_url == "http://x/api"

    def test_no_flags_keeps_defaults(self):
        config = build_config(parse_args([]))
        assert config.port == 8080
        assert config.open_browser is True


class TestTelemetry:
    def test_profiling_switch(self, monkeypatch: pytest.MonkeyPatch):
        assert not is_profiling_enabled()
        monkeypatch.setenv("ENHANCER_GENIE_PROFILE", "yes")
        assert is_profiling_enabled()

    def test_log_duration_emits_one_line(self, caplog):
        logger = logging.getLogger("enhancer_genie.test")
        with caplog.at_level(logging.INFO, logger="enhancer_genie.test"):
            with log_duration(logger, "Catalog fetch"):
                pass
        assert len(caplog.records) == 1
        assert "Catalog fetch completed in" in caplog.records[0].getMessage()

    def test_debug_timings_need_profiling(self, caplog):
        logger = logging.getLogger("enhancer_genie.test")
        with caplog.at_level(logging.DEBUG, logger="enhancer_genie.test"):
            with log_duration(logger, "quiet", level=logging.DEBUG):
                pass
        assert caplog.records == []


class TestSessionEntryPoint:
    def test_main_builds_the_gui_with_the_config(self, monkeypatch: pytest.MonkeyPatch):
        gui_class = MagicMock()
        monkeypatch.setattr("enhancer_genie.ui.main_gui.EnhancerGenieGUI", gui_class)
        page = MagicMock()
        config = AppConfig.from_env()

        main(page, config)

        gui_class.assert_called_once_with(page, config)
        page.add.assert_not_called()

    def test_startup_error_is_shown_on_the_page(self, monkeypatch: pytest.MonkeyPatch):
        monkeypatch.setattr("enhancer_genie.ui.main_gui.EnhancerGenieGUI",
                            MagicMock(side_effect=RuntimeError("boom")))
        page = MagicMock()

        main(page, AppConfig.from_env())

        page.add.assert_called_once()
        page.update.assert_called_once()
