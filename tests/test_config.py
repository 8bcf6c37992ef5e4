"""
Unit tests for configuration loading and logging setup.
"""

from __future__ import annotations

import logging
import tempfile

import pytest
import yaml

from proposal_desk.backend.core.utils.config import (
    API_URL_ENV,
    get_default_config,
    load_config,
    save_config,
)
from proposal_desk.backend.core.utils.logging_setup import level_from_name, setup_logging
from proposal_desk.backend.schemas import DeskConfigIn


def _write(config: dict) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config, f)
        return f.name


class TestLoadConfig:
    def test_load_valid_config(self) -> None:
        loaded = load_config(_write({"api": {"base_url": "https://api.test", "timeout": 5.0}}))

        assert loaded["api"]["base_url"] == "https://api.test"
        assert loaded["api"]["timeout"] == 5.0

    def test_missing_file_raises(self) -> None:
        with pytest.raises(FileNotFoundError):
            load_config("/nonexistent/path/config.yaml")

    def test_missing_sections_get_defaults(self) -> None:
        """Config with missing required sections should get empty dicts."""
        loaded = load_config(_write({"api": {"base_url": "https://api.test"}}))

        assert loaded["wizard"] == {}
        assert loaded["validation"] == {}
        assert loaded["logging"] == {}

    def test_empty_file_loads(self) -> None:
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write("")
        loaded = load_config(f.name)
        assert loaded["api"] == {}

    def test_numeric_strings_are_converted(self) -> None:
        """Quoted numbers like '0.25' should come back as numbers."""
        loaded = load_config(_write({"validation": {"debounce": "0.25"}, "wizard": {"search_limit": "20"}}))

        assert loaded["validation"]["debounce"] == pytest.approx(0.25)
        assert loaded["wizard"]["search_limit"] == 20
        assert isinstance(loaded["wizard"]["search_limit"], int)

    def test_env_overrides_base_url(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv(API_URL_ENV, "https://override.test")
        loaded = load_config(_write({"api": {"base_url": "https://api.test"}}))
        assert loaded["api"]["base_url"] == "https://override.test"

    def test_default_config_loads(self, config_path) -> None:
        """The shipped default_config.yaml should load without errors."""
        config = load_config(config_path)
        assert config["validation"]["debounce"] == pytest.approx(0.5)
        assert config["wizard"]["search_debounce"] == pytest.approx(0.3)
        assert config["wizard"]["search_limit"] == 50

    def test_default_file_matches_builtin_defaults(
        self, config_path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.delenv(API_URL_ENV, raising=False)
        assert load_config(config_path) == get_default_config()


class TestSaveConfig:
    def test_save_then_load(self, tmp_path) -> None:
        path = tmp_path / "nested" / "config.yaml"
        cfg = get_default_config()
        cfg["wizard"]["search_limit"] = 10

        save_config(cfg, path)

        assert load_config(path)["wizard"]["search_limit"] == 10


class TestDeskConfig:
    def test_from_config_uses_section_values(self) -> None:
        cfg = get_default_config()
        cfg["api"]["timeout"] = 12.5
        desk = DeskConfigIn.from_config(cfg)
        assert desk.api.timeout == 12.5
        assert desk.validation.debounce == 0.5

    def test_empty_sections_fall_back_to_defaults(self) -> None:
        desk = DeskConfigIn.from_config({"api": {}, "wizard": {}, "logging": {"level": "INFO"}})
        assert desk.api.base_url == "http://localhost:8000"
        assert desk.wizard.search_limit == 50


class TestLogging:
    def test_level_from_name(self) -> None:
        assert level_from_name("debug") == logging.DEBUG
        assert level_from_name("WARNING") == logging.WARNING
        assert level_from_name(None, logging.ERROR) == logging.ERROR
        assert level_from_name("nonsense", logging.INFO) == logging.INFO

    def test_setup_logging_writes_file(self, tmp_path) -> None:
        log_file = tmp_path / "logs" / "desk.log"
        setup_logging(logging.INFO, log_file)

        logging.getLogger("proposal_desk.test").info("hello file")
        for handler in logging.getLogger().handlers:
            handler.flush()

        assert "hello file" in log_file.read_text()
        assert logging.getLogger("httpx").level == logging.WARNING
