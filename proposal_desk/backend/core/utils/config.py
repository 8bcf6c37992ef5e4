"""
Configuration Loading Utilities.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any

import yaml

# Environment variable that overrides ``api.base_url``
API_URL_ENV = "PROPOSAL_DESK_API_URL"

REQUIRED_SECTIONS = ("api", "wizard", "validation", "logging")


def _convert_numeric_strings(obj: Any) -> Any:
    """
    Recursively convert numeric strings to floats/ints.

    Handles values like '0.5' or '1e-3' that end up quoted in
    hand-edited YAML files.
    """
    if isinstance(obj, dict):
        return {k: _convert_numeric_strings(v) for k, v in obj.items()}
    elif isinstance(obj, list):
        return [_convert_numeric_strings(item) for item in obj]
    elif isinstance(obj, str):
        # Try to convert to number if it looks numeric
        try:
            if "." in obj or "e" in obj.lower():
                return float(obj)
            return int(obj)
        except ValueError:
            return obj
    return obj


def _apply_env_overrides(config: dict[str, Any]) -> dict[str, Any]:
    base_url = os.getenv(API_URL_ENV)
    if base_url:
        config.setdefault("api", {})["base_url"] = base_url
    return config


def load_config(config_path: str | Path) -> dict[str, Any]:
    """
    Load configuration from YAML file.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary

    Raises:
        FileNotFoundError: If config file doesn't exist
        yaml.YAMLError: If config file is invalid
    """
    config_path = Path(config_path)

    if not config_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {config_path}")

    with open(config_path, encoding="utf-8") as f:
        config = yaml.safe_load(f) or {}

    config = _convert_numeric_strings(config)

    for section in REQUIRED_SECTIONS:
        if not isinstance(config.get(section), dict):
            config[section] = {}

    return _apply_env_overrides(config)


def save_config(config: dict[str, Any], config_path: str | Path) -> None:
    """
    Save configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Output path
    """
    config_path = Path(config_path)
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config, f, default_flow_style=False, sort_keys=False)


def get_default_config() -> dict[str, Any]:
    """
    Get default configuration dictionary.

    Mirrors ``configs/default_config.yaml`` so the service and CLI can run
    without a config file on disk.
    """
    config = {
        "api": {
            "base_url": "http://localhost:8000",
            "timeout": 30.0,
        },
        "wizard": {
            "search_debounce": 0.3,
            "search_limit": 50,
            "brands_limit": 100,
        },
        "validation": {
            "debounce": 0.5,
        },
        "logging": {
            "level": "INFO",
            "file": None,
        },
    }
    return _apply_env_overrides(config)
